# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Bounded worker pool for URL checks.

``width`` workers pull (index, url) items from one queue; each worker
runs a check to completion before taking the next item, so at most
``width`` checks are in flight and a new URL starts as soon as a slot
frees.  Backoff pauses suspend only the worker that is retrying.

Completion order is arbitrary.  Results carry their input index so the
report can restore input order.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass

from . import CheckResult, Status

logger = logging.getLogger(__name__)

DEFAULT_CONCURRENCY = 4

CheckFn = Callable[[str], Awaitable[CheckResult]]
ProgressFn = Callable[[int, CheckResult], None]


@dataclass(frozen=True, slots=True)
class IndexedResult:
    index: int  # position in the input list
    result: CheckResult


async def run_batch(
    urls: Sequence[str],
    check: CheckFn,
    *,
    concurrency: int = DEFAULT_CONCURRENCY,
    on_result: ProgressFn | None = None,
) -> list[IndexedResult]:
    """Check every URL with at most *concurrency* checks in flight.

    Returns results in completion order.  A check that raises despite
    its own fault handling is recorded as ``Status.OTHER``; it never
    stops the other workers.
    """
    if concurrency < 1:
        raise ValueError(f"concurrency must be >= 1, got {concurrency}")

    queue: asyncio.Queue[tuple[int, str]] = asyncio.Queue()
    for item in enumerate(urls):
        queue.put_nowait(item)

    results: list[IndexedResult] = []
    total = len(urls)

    async def _worker(worker_id: int) -> None:
        while True:
            try:
                index, url = queue.get_nowait()
            except asyncio.QueueEmpty:
                return
            logger.info("[%d/%d] Checking: %s", index + 1, total, url)
            try:
                result = await check(url)
            except asyncio.CancelledError:
                raise
            except Exception as exc:
                logger.error("Worker %d: check for %s raised: %s", worker_id, url, exc, exc_info=True)
                result = CheckResult(url, Status.OTHER, f"Error: {exc}", error=str(exc))
            finally:
                queue.task_done()
            results.append(IndexedResult(index, result))
            logger.info(
                "[%d/%d] %s -> %s%s",
                index + 1,
                total,
                url,
                result.status.value,
                f" ({result.notes})" if result.notes else "",
            )
            if on_result is not None:
                on_result(len(results), result)

    width = min(concurrency, total) or 1
    workers = [asyncio.create_task(_worker(i), name=f"urlstatus-worker-{i}") for i in range(width)]
    try:
        await asyncio.gather(*workers)
    finally:
        for task in workers:
            if not task.done():
                task.cancel()
    return results
