"""Remove every pipeline of a project, one at a time."""

from __future__ import annotations

import argparse

from gl_ci_sync.bulk import countdown, run_sequential
from gl_ci_sync.models import CONFIRMATION_DELAY
from gl_ci_sync.operations.base import Operation, register_operation


@register_operation("remove-pipelines")
class RemovePipelinesOperation(Operation):
    """Delete all pipelines of GITLAB_PROJECT_ID, pausing DELAY_MS between deletions."""

    item_type = "pipeline"
    uses_settings = ("batch_size", "delay_ms")

    @staticmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:
        parser.add_argument(
            "--yes",
            "-y",
            action="store_true",
            help=f"Skip the {CONFIRMATION_DELAY:g}s confirmation countdown",
        )

    def run(self) -> None:
        project_id = self.settings.project_id
        if not (getattr(self.args, "yes", False) or self.client.dry_run):
            countdown(CONFIRMATION_DELAY, f"This will delete ALL pipelines for GitLab project: {project_id}")

        self.logger.info(f"Fetching pipelines for project {project_id} ({self.settings.batch_size} per page)...")
        pipelines = self.client.list_pipelines(per_page=self.settings.batch_size)

        if not pipelines:
            self.logger.info("No pipelines found.")
            return

        self.logger.info(f"Deleting {len(pipelines)} pipelines, {self.settings.delay_ms}ms apart...")
        delay = 0 if self.client.dry_run else self.settings.delay_seconds
        outcomes = run_sequential(
            [p["id"] for p in pipelines],
            self._delete,
            delay_seconds=delay,
            on_settled=lambda outcome: self._record_outcome(outcome, key=str(outcome.item)),
        )

        if outcomes and not outcomes[-1].ok:
            self.aborted = True
            self.logger.error(f"Aborted after first failure; {len(pipelines) - len(outcomes)} pipelines not attempted")

    def _delete(self, pipeline_id: int) -> str:
        if self.client.dry_run:
            return "would_apply"
        self.client.delete_pipeline(pipeline_id)
        return "deleted"
