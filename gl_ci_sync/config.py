"""Configuration loading for gl-ci-sync.

All settings come from the process environment. A local ``.env`` file is read
first for convenience; variables already set in the environment take precedence.
"""

from __future__ import annotations

import os
import urllib.parse
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from dotenv import find_dotenv, load_dotenv

from gl_ci_sync.models import DEFAULT_API_URL, DEFAULT_BATCH_SIZE, DEFAULT_DELAY_MS, MAX_PER_PAGE

# Settings field -> environment variable
ENV_VARS = {
    "token": "GITLAB_TOKEN",
    "project_id": "GITLAB_PROJECT_ID",
    "api_url": "GITLAB_API_URL",
    "environment": "GITLAB_ENVIRONMENT",
    "env_file_path": "ENV_FILE_PATH",
    "batch_size": "BATCH_SIZE",
    "delay_ms": "DELAY_MS",
}

ALWAYS_REQUIRED = ("token", "project_id")


class ConfigError(Exception):
    """Missing or malformed configuration. Never retried."""


@dataclass(frozen=True)
class Settings:
    """Validated, immutable run configuration."""

    api_url: str
    project_id: str
    token: str
    environment: str | None = None
    env_file_path: str | None = None
    batch_size: int = DEFAULT_BATCH_SIZE
    delay_ms: int = DEFAULT_DELAY_MS

    @property
    def delay_seconds(self) -> float:
        return self.delay_ms / 1000

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        required: Iterable[str] = (),
        uses: Iterable[str] = (),
    ) -> Settings:
        """
        Build settings from environment variables.

        ``required`` names extra fields (e.g. ``environment``) the calling
        operation cannot run without. ``uses`` names the tuning fields
        (``batch_size``, ``delay_ms``) it reads; the rest keep their defaults
        and are not validated. Raises ConfigError on the first problem found.
        """
        uses = set(uses)
        env = os.environ if environ is None else environ

        def read(field: str) -> str | None:
            value = env.get(ENV_VARS[field], "").strip()
            return value or None

        missing = [ENV_VARS[f] for f in (*ALWAYS_REQUIRED, *required) if read(f) is None]
        if missing:
            raise ConfigError(f"Missing required environment variable(s): {', '.join(missing)}")

        api_url = (read("api_url") or DEFAULT_API_URL).rstrip("/")
        parsed = urllib.parse.urlparse(api_url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ConfigError(f"GITLAB_API_URL must be a valid http(s) URL, got: {api_url!r}")

        batch_size = DEFAULT_BATCH_SIZE
        if "batch_size" in uses:
            batch_size = _parse_int("BATCH_SIZE", read("batch_size"), DEFAULT_BATCH_SIZE)
            if not 1 <= batch_size <= MAX_PER_PAGE:
                raise ConfigError(f"BATCH_SIZE must be between 1 and {MAX_PER_PAGE}, got: {batch_size}")

        delay_ms = DEFAULT_DELAY_MS
        if "delay_ms" in uses:
            delay_ms = _parse_int("DELAY_MS", read("delay_ms"), DEFAULT_DELAY_MS)
            if delay_ms < 0:
                raise ConfigError(f"DELAY_MS must be >= 0, got: {delay_ms}")

        return cls(
            api_url=api_url,
            project_id=read("project_id"),
            token=read("token"),
            environment=read("environment"),
            env_file_path=read("env_file_path"),
            batch_size=batch_size,
            delay_ms=delay_ms,
        )


def _parse_int(name: str, raw: str | None, default: int) -> int:
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got: {raw!r}") from None


def load_env_file(path: str | None = None) -> bool:
    """Load a ``.env`` file into the process environment without overriding it."""
    return load_dotenv(dotenv_path=path or find_dotenv(usecwd=True), override=False)
