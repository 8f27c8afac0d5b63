"""Operations for gl-ci-sync."""

from gl_ci_sync.operations.base import Operation, get_operation_registry, register_operation

# Import all operations to register them
from gl_ci_sync.operations.remove_env_variables import RemoveEnvVariablesOperation
from gl_ci_sync.operations.remove_pipelines import RemovePipelinesOperation
from gl_ci_sync.operations.set_variables import SetVariablesOperation

__all__ = [
    "Operation",
    "register_operation",
    "get_operation_registry",
    "SetVariablesOperation",
    "RemoveEnvVariablesOperation",
    "RemovePipelinesOperation",
]
