# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""URL Status exception hierarchy.

All URL Status errors inherit from UrlStatusError, allowing callers
to catch the base class for any failure or specific subclasses for
targeted handling.

Only SetupError may abort a batch. Every other error is contained
within the check of the URL that raised it.
"""

from __future__ import annotations


class UrlStatusError(Exception):
    """Base exception for all URL Status errors."""


class EmptyInputError(UrlStatusError, ValueError):
    """Raw URL input was empty after trimming."""


class NavigationError(UrlStatusError):
    """Network, DNS, TLS or timeout failure while loading a page (retryable)."""

    def __init__(self, message: str, *, kind: str = "other", summary: str = "") -> None:
        super().__init__(message)
        self.kind = kind  # dns | timeout | connection | tls | other
        self.summary = summary or message


class ClassificationFault(UrlStatusError):
    """Unexpected failure while inspecting a loaded document (not retryable)."""


class SetupError(UrlStatusError):
    """The rendering engine could not be started; fatal to the whole batch."""


class PageLoadError(UrlStatusError):
    """Navigation failed for a reason other than the network (not retryable)."""
