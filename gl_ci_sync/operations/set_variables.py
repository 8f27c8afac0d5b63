"""Upsert CI/CD variables from a JSON document."""

from __future__ import annotations

import requests

from gl_ci_sync.bulk import settle
from gl_ci_sync.document import load_document, split_entries
from gl_ci_sync.models import ActionResult
from gl_ci_sync.operations.base import Operation, register_operation


@register_operation("set-variables")
class SetVariablesOperation(Operation):
    """Create or update environment-scoped CI/CD variables from ENV_FILE_PATH."""

    item_type = "variable"
    required_settings = ("environment", "env_file_path")

    def run(self) -> None:
        document = load_document(self.settings.env_file_path)
        entries, skipped = split_entries(document)

        for key in skipped:
            self._record(
                ActionResult(
                    operation=self.operation_name,
                    item_type=self.item_type,
                    key=key,
                    action="skipped",
                    detail="non-primitive value",
                )
            )

        self.logger.info(
            f"Setting {len(entries)} CI/CD variables for project {self.settings.project_id} "
            f"(environment: {self.settings.environment}) from {self.settings.env_file_path}"
        )
        self.client.ensure_pool_size(len(entries))
        settle(
            list(entries.items()),
            self._upsert,
            on_settled=lambda outcome: self._record_outcome(outcome, key=outcome.item[0]),
        )

    def _upsert(self, entry: tuple[str, str]) -> str:
        """Update the variable in scope, creating it when GitLab reports 404."""
        key, value = entry
        environment = self.settings.environment
        if self.client.dry_run:
            return "would_apply"
        try:
            self.client.update_variable(key, value, environment)
            return "updated"
        except requests.HTTPError as e:
            if e.response is None or e.response.status_code != 404:
                raise
        self.client.create_variable(key, value, environment)
        return "created"
