"""Base class and registry for operations."""

from __future__ import annotations

import argparse
import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from gl_ci_sync.logging_utils import is_json_mode
from gl_ci_sync.models import ActionResult, Outcome, RunSummary

if TYPE_CHECKING:
    from gl_ci_sync.client import GitLabClient
    from gl_ci_sync.config import Settings

# ---------------------------------------------------------------------------
# Operation Registry
# ---------------------------------------------------------------------------

_operation_registry: dict[str, type[Operation]] = {}


def register_operation(name: str):
    """Decorator to register an operation class under a CLI command name."""

    def decorator(cls):
        _operation_registry[name] = cls
        cls.operation_name = name
        return cls

    return decorator


def get_operation_registry() -> dict[str, type[Operation]]:
    """Get the operation registry."""
    return _operation_registry


# ---------------------------------------------------------------------------
# Operation Base Class
# ---------------------------------------------------------------------------


class Operation(ABC):
    """Base class for all operations."""

    operation_name: str = ""
    item_type: str = ""
    # Settings fields (beyond token/project) this operation cannot run without
    required_settings: tuple[str, ...] = ()
    # Tuning settings it reads; unused ones are neither parsed nor validated
    uses_settings: tuple[str, ...] = ()

    def __init__(self, client: GitLabClient, settings: Settings, args: argparse.Namespace):
        self.client = client
        self.settings = settings
        self.args = args
        self.logger = logging.getLogger("gl-ci-sync")
        self.results: list[ActionResult] = []
        self.aborted = False

    @staticmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:
        """Add operation-specific CLI arguments."""

    @abstractmethod
    def run(self) -> None:
        """Fetch, mutate and record results. Listing errors propagate."""
        ...

    def summary(self) -> RunSummary:
        return RunSummary.from_results(self.results)

    def _record_outcome(self, outcome: Outcome, key: str) -> ActionResult:
        if outcome.ok:
            result = ActionResult(
                operation=self.operation_name,
                item_type=self.item_type,
                key=key,
                action=outcome.value,
                dry_run=self.client.dry_run,
            )
        else:
            result = ActionResult(
                operation=self.operation_name,
                item_type=self.item_type,
                key=key,
                action="error",
                detail=str(outcome.failure),
            )
        return self._record(result)

    def _record(self, result: ActionResult) -> ActionResult:
        self.results.append(result)
        icon = {
            "created": "+",
            "updated": "✓",
            "deleted": "✓",
            "skipped": "→",
            "error": "✗",
            "would_apply": "○",
        }.get(result.action, "?")
        level = logging.ERROR if result.action == "error" else logging.INFO
        if result.action == "skipped":
            level = logging.WARNING

        if is_json_mode(self.logger):
            record = self.logger.makeRecord("gl-ci-sync", level, "", 0, "", (), None)
            record.action_result = result
            self.logger.handle(record)
        else:
            prefix = "[DRY-RUN] " if result.dry_run else ""
            self.logger.log(
                level,
                f"{prefix}{icon} [{result.item_type}] {result.key}: "
                f"{result.operation} → {result.action}"
                f"{' (' + result.detail + ')' if result.detail else ''}",
            )
        return result
