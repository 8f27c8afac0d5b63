"""Bulk mutation helpers: parallel fan-out/fan-in and rate-limited sequential runs."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any

import requests

from gl_ci_sync.models import Failure, Outcome

OutcomeCallback = Callable[[Outcome], None]


def _attempt(fn: Callable[[Any], Any], item: Any) -> Outcome:
    try:
        return Outcome(item=item, value=fn(item))
    except requests.RequestException as e:
        return Outcome(item=item, failure=Failure.from_exception(e))


def settle(items: Sequence[Any], fn: Callable[[Any], Any], on_settled: OutcomeCallback | None = None) -> list[Outcome]:
    """
    Run ``fn`` for every item concurrently and wait for all of them to settle.

    A failing item never stops the others. ``on_settled`` is called on the calling
    thread as each item completes; the returned outcomes follow input order.
    """
    if not items:
        return []

    outcomes: list[Outcome | None] = [None] * len(items)
    with ThreadPoolExecutor(max_workers=len(items)) as pool:
        futures = {pool.submit(_attempt, fn, item): index for index, item in enumerate(items)}
        for future in as_completed(futures):
            outcome = future.result()
            outcomes[futures[future]] = outcome
            if on_settled:
                on_settled(outcome)
    return outcomes


def run_sequential(
    items: Sequence[Any],
    fn: Callable[[Any], Any],
    delay_seconds: float,
    on_settled: OutcomeCallback | None = None,
) -> list[Outcome]:
    """
    Run ``fn`` for each item in order, pausing ``delay_seconds`` between calls.

    Stops at the first failure; the returned list holds only attempted items.
    """
    outcomes = []
    for index, item in enumerate(items):
        outcome = _attempt(fn, item)
        outcomes.append(outcome)
        if on_settled:
            on_settled(outcome)
        if not outcome.ok:
            break
        if delay_seconds > 0 and index < len(items) - 1:
            time.sleep(delay_seconds)
    return outcomes


def countdown(seconds: float, message: str) -> None:
    """Warn and wait before a destructive batch. Ctrl+C raises KeyboardInterrupt."""
    logger = logging.getLogger("gl-ci-sync")
    logger.warning(message)
    logger.warning(f"Press Ctrl+C to cancel or wait {seconds:g} seconds to continue...")
    time.sleep(seconds)
