# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""URL Status: browser-based link health auditing for large domain inventories.

Each URL is rendered in Chromium, its HTTP status and rendered content are
inspected, and transient failures are retried with exponential backoff.
Every check settles to exactly one of six statuses:

- 5xx: server errors, or network failures that survived all retries
- 404: confirmed not found
- Parked: placeholder / for-sale / hosting default pages
- Broken: other 4xx, error pages, under construction, structurally empty
- ok: the page loads with no negative signal
- Other: an unexpected fault occurred while analysing the page
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class Status(StrEnum):
    """Final verdict for one URL. Values are the exact report spellings."""

    SERVER_ERROR_5XX = "5xx"
    NOT_FOUND_404 = "404"
    PARKED = "Parked"
    BROKEN = "Broken"
    OK = "ok"
    OTHER = "Other"


@dataclass(frozen=True, slots=True)
class CheckResult:
    """Verdict for a single URL (immutable value object)."""

    url: str  # normalized, schemed
    status: Status
    notes: str = ""
    error: str | None = None  # raw error detail, when a fault was involved
