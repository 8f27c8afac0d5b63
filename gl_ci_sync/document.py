"""Input document loading for set-variables."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any


class InputDocumentError(Exception):
    """The variables file is missing, unreadable, or not a JSON object."""


def load_document(path: str | Path) -> dict[str, Any]:
    path = Path(path)
    if not path.is_file():
        raise InputDocumentError(f"File not found: {path}")
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise InputDocumentError(f"Could not read {path}: {e}") from e
    try:
        document = json.loads(content, parse_constant=_reject_constant)
    except ValueError as e:
        raise InputDocumentError(f"Invalid JSON in {path}: {e}") from e
    if not isinstance(document, dict):
        raise InputDocumentError(f"{path} must contain a JSON object, got {type(document).__name__}")
    return document


def _reject_constant(name: str) -> Any:
    # NaN, Infinity and -Infinity are not valid JSON
    raise ValueError(f"non-standard constant {name}")


def is_primitive(value: Any) -> bool:
    return isinstance(value, (str, int, float, bool))


def to_variable_value(value: Any) -> str:
    """Render a primitive JSON value the way it should be stored in GitLab."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def split_entries(document: dict[str, Any]) -> tuple[dict[str, str], list[str]]:
    """Split a document into (primitive entries as strings, skipped keys)."""
    entries: dict[str, str] = {}
    skipped: list[str] = []
    for key, value in document.items():
        if is_primitive(value):
            entries[key] = to_variable_value(value)
        else:
            skipped.append(key)
    return entries, skipped
