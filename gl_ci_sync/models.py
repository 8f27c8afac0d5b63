"""Data models and constants for gl-ci-sync."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

import requests

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DEFAULT_API_URL = "https://gitlab.com/api/v4"
PER_PAGE = 100
MAX_PER_PAGE = 100

# Bulk / rate limiting
DEFAULT_BATCH_SIZE = 20
DEFAULT_DELAY_MS = 1000
CONFIRMATION_DELAY = 5.0  # seconds
POOL_MAXSIZE = 100

# Actions counted as successful mutations
SUCCESS_ACTIONS = {"created", "updated", "deleted", "would_apply"}


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class FailureKind(Enum):
    NOT_FOUND = "not_found"
    HTTP_ERROR = "http_error"
    CONNECTION_ERROR = "connection_error"
    REQUEST_ERROR = "request_error"


# ---------------------------------------------------------------------------
# Data Classes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Failure:
    """Why a single remote call failed."""

    kind: FailureKind
    cause: str
    status: int | None = None

    @classmethod
    def from_exception(cls, exc: requests.RequestException) -> Failure:
        response = getattr(exc, "response", None)
        if isinstance(exc, requests.HTTPError) and response is not None:
            kind = FailureKind.NOT_FOUND if response.status_code == 404 else FailureKind.HTTP_ERROR
            return cls(kind=kind, status=response.status_code, cause=response.text[:500] or str(exc))
        if isinstance(exc, requests.ConnectionError):
            return cls(kind=FailureKind.CONNECTION_ERROR, cause=str(exc))
        return cls(kind=FailureKind.REQUEST_ERROR, cause=str(exc))

    def __str__(self) -> str:
        if self.status is not None:
            return f"{self.kind.value} {self.status}: {self.cause}"
        return f"{self.kind.value}: {self.cause}"


@dataclass
class Outcome:
    """Settle result of one item in a bulk run."""

    item: Any
    value: Any = None
    failure: Failure | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None


@dataclass
class ActionResult:
    """Result of a single mutation (or skip) against one remote item."""

    operation: str
    item_type: str  # "variable", "pipeline"
    key: str
    action: str  # "created", "updated", "deleted", "would_apply", "skipped", "error"
    detail: str = ""
    dry_run: bool = False

    def to_dict(self) -> dict:
        d = {
            "operation": self.operation,
            "item_type": self.item_type,
            "key": self.key,
            "action": self.action,
            "detail": self.detail,
        }
        if self.dry_run:
            d["dry_run"] = True
        return d


@dataclass
class RunSummary:
    attempted: int = 0
    succeeded: int = 0
    failed: int = 0
    skipped: int = 0

    @classmethod
    def from_results(cls, results: list[ActionResult]) -> RunSummary:
        summary = cls()
        for result in results:
            if result.action == "skipped":
                summary.skipped += 1
                continue
            summary.attempted += 1
            if result.action in SUCCESS_ACTIONS:
                summary.succeeded += 1
            else:
                summary.failed += 1
        return summary

    def to_dict(self) -> dict:
        return {
            "attempted": self.attempted,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "skipped": self.skipped,
        }
