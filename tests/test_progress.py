# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Tests for _progress: rich progress only on interactive terminals."""

from __future__ import annotations

from unittest.mock import patch

from urlstatus._progress import batch_progress, print_step


def test_batch_progress_is_noop_when_piped(capsys):
    with batch_progress(3) as advance:
        for _ in range(3):
            advance()
    assert capsys.readouterr().err == ""


def test_batch_progress_advances_on_tty():
    with patch("urlstatus._progress.sys") as mock_sys, patch("urlstatus._progress.Progress") as progress_cls:
        mock_sys.stderr.isatty.return_value = True
        progress = progress_cls.return_value
        progress.add_task.return_value = 7
        with batch_progress(2) as advance:
            advance()
            advance()
    progress.add_task.assert_called_once_with("Checking URLs", total=2)
    assert progress.advance.call_count == 2
    progress.advance.assert_called_with(7)


def test_print_step_silent_when_piped(capsys):
    print_step("Launching browser...")
    assert capsys.readouterr().err == ""
