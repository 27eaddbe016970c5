# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Retry budget and exponential backoff for a single URL check.

With the default policy a URL gets 4 attempts; failed attempt *n*
(0-based) is followed by a ``2**n`` second pause: 1s, 2s, 4s.
"""

from __future__ import annotations

from dataclasses import dataclass, field

DEFAULT_MAX_RETRIES = 3
DEFAULT_BACKOFF_BASE_S = 1.0


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    max_retries: int = DEFAULT_MAX_RETRIES
    base_delay_s: float = DEFAULT_BACKOFF_BASE_S

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1

    def delay_after(self, attempt: int) -> float:
        """Seconds to wait after failed attempt *attempt* (0-based)."""
        return self.base_delay_s * (2**attempt)


@dataclass(slots=True)
class RetryState:
    """Mutable retry bookkeeping, owned by one URL check."""

    policy: RetryPolicy = field(default_factory=RetryPolicy)
    attempt: int = 0
    last_error: Exception | None = None
    last_status: int | None = None

    @property
    def attempts_made(self) -> int:
        return self.attempt + 1

    @property
    def can_retry(self) -> bool:
        return self.attempt < self.policy.max_retries

    def record_failure(self, *, error: Exception | None = None, status: int | None = None) -> float:
        """Record a retryable failure and return the backoff before the next attempt."""
        self.last_error = error
        self.last_status = status
        return self.policy.delay_after(self.attempt)

    def advance(self) -> None:
        self.attempt += 1
