"""Remove every CI/CD variable scoped to one environment."""

from __future__ import annotations

from gl_ci_sync.bulk import settle
from gl_ci_sync.operations.base import Operation, register_operation


@register_operation("remove-env-variables")
class RemoveEnvVariablesOperation(Operation):
    """Delete all CI/CD variables scoped to GITLAB_ENVIRONMENT."""

    item_type = "variable"
    required_settings = ("environment",)

    def run(self) -> None:
        environment = self.settings.environment
        self.logger.info(f"Fetching variables for environment: {environment}...")
        variables = self.client.list_variables(environment)

        if not variables:
            self.logger.info(f"No variables found for environment: {environment}")
            return

        self.logger.info(f"Preparing to delete {len(variables)} variables...")
        self.client.ensure_pool_size(len(variables))
        settle(
            [v["key"] for v in variables],
            self._delete,
            on_settled=lambda outcome: self._record_outcome(outcome, key=outcome.item),
        )

    def _delete(self, key: str) -> str:
        if self.client.dry_run:
            return "would_apply"
        self.client.delete_variable(key, self.settings.environment)
        return "deleted"
