"""CLI entry points for gl-ci-sync."""

from __future__ import annotations

import argparse
import logging
import sys

import requests

# Ensure all operations are registered by importing the operations package
import gl_ci_sync.operations  # noqa: F401
from gl_ci_sync.client import GitLabClient
from gl_ci_sync.config import ConfigError, Settings, load_env_file
from gl_ci_sync.document import InputDocumentError
from gl_ci_sync.logging_utils import setup_logging
from gl_ci_sync.operations import get_operation_registry

EPILOG = """
Environment (a local .env file is loaded if present):
    GITLAB_TOKEN        - GitLab Personal Access Token (required)
    GITLAB_PROJECT_ID   - Project ID or path (required)
    GITLAB_API_URL      - API base URL (default: https://gitlab.com/api/v4)
    GITLAB_ENVIRONMENT  - Environment scope (set-variables, remove-env-variables)
    ENV_FILE_PATH       - JSON file of variables (set-variables)
    BATCH_SIZE          - Pipelines per page, 1-100 (remove-pipelines, default: 20)
    DELAY_MS            - Delay between pipeline deletions (remove-pipelines, default: 1000)

Examples:
    # Upload variables for the uat environment
    GITLAB_ENVIRONMENT=uat ENV_FILE_PATH=uat.env.json gl-set-variables

    # Remove every variable scoped to prd, showing what would happen
    GITLAB_ENVIRONMENT=prd gl-remove-env-variables --dry-run

    # Delete all pipelines without the confirmation countdown
    gl-ci-sync remove-pipelines --yes
"""


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--dry-run", action="store_true", help="Show what would be done without making changes")
    parser.add_argument(
        "--json", action="store_true", dest="json_output", help="Output results as JSON lines (to stderr)"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")


def build_parser(command: str | None = None) -> argparse.ArgumentParser:
    """Build the combined parser, or a single-command parser when ``command`` is given."""
    registry = get_operation_registry()

    if command is not None:
        op_cls = registry[command]
        parser = argparse.ArgumentParser(
            prog=f"gl-{command}",
            description=op_cls.__doc__,
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog=EPILOG,
        )
        _add_common_arguments(parser)
        op_cls.add_arguments(parser)
        parser.set_defaults(operation=command)
        return parser

    parser = argparse.ArgumentParser(
        prog="gl-ci-sync",
        description="Synchronize GitLab CI/CD variables and pipelines with local configuration.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=EPILOG,
    )
    _add_common_arguments(parser)
    subparsers = parser.add_subparsers(dest="operation", required=True, help="Operation to perform")
    for name, op_cls in sorted(registry.items()):
        sub = subparsers.add_parser(name, help=op_cls.__doc__)
        op_cls.add_arguments(sub)
    return parser


def run(args: argparse.Namespace) -> int:
    """Load settings, run the chosen operation and report. Returns the exit code."""
    logger = setup_logging(json_mode=args.json_output, verbose=args.verbose)
    load_env_file()

    op_cls = get_operation_registry()[args.operation]
    try:
        settings = Settings.from_env(required=op_cls.required_settings, uses=op_cls.uses_settings)
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        return 1

    client = GitLabClient(settings.api_url, settings.token, settings.project_id, dry_run=args.dry_run)
    if args.dry_run:
        logger.info("DRY-RUN MODE - no changes will be made")

    operation = op_cls(client=client, settings=settings, args=args)
    try:
        operation.run()
    except InputDocumentError as e:
        logger.error(f"Input document error: {e}")
        return 1
    except requests.RequestException as e:
        logger.error(f"Fatal API error: {e}")
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130

    # Summary
    summary = operation.summary()
    record = logger.makeRecord("gl-ci-sync", logging.INFO, "", 0, "", (), None)
    record.summary = summary
    record.msg = (
        f"Done: {summary.attempted} attempted, "
        f"{summary.succeeded} {'would change' if args.dry_run else 'succeeded'}, "
        f"{summary.failed} failed"
        f"{f', {summary.skipped} skipped' if summary.skipped else ''}"
    )
    logger.handle(record)

    # Exit code: non-zero if any item failed or the batch was cut short
    return 1 if summary.failed > 0 or operation.aborted else 0


def main(argv: list[str] | None = None) -> int:
    return run(build_parser().parse_args(argv))


def set_variables(argv: list[str] | None = None) -> int:
    return run(build_parser("set-variables").parse_args(argv))


def remove_env_variables(argv: list[str] | None = None) -> int:
    return run(build_parser("remove-env-variables").parse_args(argv))


def remove_pipelines(argv: list[str] | None = None) -> int:
    return run(build_parser("remove-pipelines").parse_args(argv))


if __name__ == "__main__":
    sys.exit(main())
