# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Per-URL check: retry/backoff state machine + response and content classification.

States are ``Attempting(n)`` for n = 0..max_retries and ``Settled(status)``.
Each attempt opens its own page through the engine; the page is closed
before any backoff pause and before the verdict is returned.

Transitions per attempt:

- network/DNS/TLS/timeout error → retry after backoff, or 5xx once retries run out
- other navigation failure      → Other, no retry
- HTTP 5xx                      → retry after backoff, or 5xx once retries run out
- HTTP 404                      → 404 (content is inspected only to enrich the note)
- HTTP 403                      → ok if the page has substantial content, else Broken
- other HTTP 4xx                → Broken
- anything else                 → quiescence wait, then content classification

``UrlChecker.check`` never raises (except on cancellation): any
unexpected fault settles to ``Status.OTHER`` so one URL can never abort
the batch.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from contextlib import AbstractAsyncContextManager
from typing import Protocol

from . import CheckResult, Status
from .config import CheckerConfig
from .content_classifier import ContentClassifier, has_substantial_content
from .errors import ClassificationFault, NavigationError
from .problem_details import sanitize_detail
from .response_classifier import ResponseClass, classify_response
from .retry import RetryPolicy, RetryState
from .signals import DocumentHandle, collect_signals

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


class Outcome(Protocol):
    status_code: int | None
    document: DocumentHandle | None
    error: NavigationError | None


class Engine(Protocol):
    def attempt(self, url: str, *, timeout_ms: int) -> AbstractAsyncContextManager[Outcome]: ...


class UrlChecker:
    """Runs the full attempt sequence for one URL at a time (safe to share across tasks)."""

    def __init__(
        self,
        engine: Engine,
        *,
        config: CheckerConfig | None = None,
        classifier: ContentClassifier | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._engine = engine
        self._config = config or CheckerConfig()
        self._classifier = classifier or ContentClassifier(self._config.oracle)
        self._policy = RetryPolicy(
            max_retries=self._config.max_retries,
            base_delay_s=self._config.backoff_base_s,
        )
        self._sleep = sleep

    async def check(self, url: str) -> CheckResult:
        try:
            return await self._run(url)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            logger.warning("Unexpected fault checking %s", url, exc_info=True)
            message = sanitize_detail(str(exc) or type(exc).__name__)
            return CheckResult(url, Status.OTHER, f"Error: {message}", error=message)

    async def _run(self, url: str) -> CheckResult:
        state = RetryState(policy=self._policy)
        while True:
            delay: float | None = None
            async with self._engine.attempt(url, timeout_ms=self._config.navigation_timeout_ms) as outcome:
                if outcome.error is not None:
                    if not state.can_retry:
                        return self._exhausted_navigation(url, state, outcome.error)
                    delay = state.record_failure(error=outcome.error)
                    logger.info(
                        "Retry %d/%d for %s after %.0fs (%s)",
                        state.attempt + 1,
                        self._policy.max_retries,
                        url,
                        delay,
                        outcome.error.summary,
                    )
                elif classify_response(outcome.status_code) is ResponseClass.SERVER_ERROR:
                    if not state.can_retry:
                        return CheckResult(
                            url,
                            Status.SERVER_ERROR_5XX,
                            f"HTTP {outcome.status_code} after {state.attempts_made} attempts",
                        )
                    delay = state.record_failure(status=outcome.status_code)
                    logger.info(
                        "Retry %d/%d for %s after %.0fs (HTTP %d)",
                        state.attempt + 1,
                        self._policy.max_retries,
                        url,
                        delay,
                        outcome.status_code,
                    )
                else:
                    return await self._settle(url, outcome)
            # Page is closed here; back off before the next attempt.
            await self._sleep(delay)
            state.advance()

    def _exhausted_navigation(self, url: str, state: RetryState, error: NavigationError) -> CheckResult:
        detail = sanitize_detail(error.summary)
        return CheckResult(
            url,
            Status.SERVER_ERROR_5XX,
            f"Network error/timeout after {state.attempts_made} attempts: {detail}",
            error=sanitize_detail(str(error)),
        )

    async def _settle(self, url: str, outcome: Outcome) -> CheckResult:
        """Classify a loaded page. Faults here map to Status.OTHER."""
        status_code = outcome.status_code
        try:
            response_class = classify_response(status_code)

            if response_class is ResponseClass.CLIENT_ERROR:
                return CheckResult(url, Status.BROKEN, f"HTTP {status_code}")

            document = outcome.document
            if document is None:
                raise ClassificationFault("Navigation succeeded but no document is available")

            if response_class is ResponseClass.NOT_FOUND:
                return await self._settle_not_found(url, document)

            if response_class is ResponseClass.FORBIDDEN:
                signals = await collect_signals(document)
                if has_substantial_content(signals):
                    return CheckResult(
                        url,
                        Status.OK,
                        "HTTP 403 but page has substantial content (possible bot block)",
                    )
                return CheckResult(url, Status.BROKEN, "HTTP 403")

            await document.wait_for_quiescence(self._config.quiescence_timeout_ms)
            signals = await collect_signals(document)
            verdict = await self._classifier.classify(signals, status_code=status_code)
            notes = verdict.notes
            if status_code is None and verdict.status is Status.OK:
                notes = f"{notes} (No HTTP response received)"
            return CheckResult(url, verdict.status, notes)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            cause = exc.__cause__ if isinstance(exc, ClassificationFault) and exc.__cause__ else exc
            logger.warning("Analysis error for %s: %s", url, exc)
            message = sanitize_detail(str(cause) or type(cause).__name__)
            return CheckResult(url, Status.OTHER, f"Analysis error: {message}", error=message)

    async def _settle_not_found(self, url: str, document: DocumentHandle) -> CheckResult:
        """404 is final; a parked page behind it only enriches the note."""
        notes = "HTTP 404"
        try:
            signals = await collect_signals(document)
            verdict = await self._classifier.classify(signals, status_code=404, use_oracle=False)
        except ClassificationFault:
            logger.debug("Could not inspect 404 page for %s", url, exc_info=True)
        else:
            if verdict.status is Status.PARKED:
                notes = "HTTP 404 (parked page content)"
        return CheckResult(url, Status.NOT_FOUND_404, notes)

