# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Progress indicators for CLI output.

Uses ``rich`` on interactive terminals; silent when stderr is piped.
"""

from __future__ import annotations

import contextlib
import sys
from collections.abc import Callable, Generator

from rich.console import Console
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn, TimeElapsedColumn


@contextlib.contextmanager
def batch_progress(total: int, description: str = "Checking URLs") -> Generator[Callable[[], None], None, None]:
    """Yield an ``advance()`` callable backed by a progress bar.

    ``advance()`` is a no-op when stderr is not a TTY.
    """
    if not sys.stderr.isatty():
        yield lambda: None
        return
    progress = Progress(
        TextColumn("{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
        console=Console(stderr=True),
        transient=True,
    )
    with progress:
        task_id = progress.add_task(description, total=total)
        yield lambda: progress.advance(task_id)


def print_step(msg: str) -> None:
    """Print a step message to stderr (only when interactive)."""
    if sys.stderr.isatty():
        print(msg, file=sys.stderr)
