# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Structured error details for URL Status.

Maps internal exceptions and raw Chromium error messages to short,
human-readable problem descriptions.  Used in two places:

- per-URL notes, where a navigation failure is summarised
  (``classify_network_error``);
- the CLI, where a batch-fatal error is printed as an ``Error:`` /
  ``Hint:`` block (``from_exception`` + ``ProblemDetail.to_cli_text``).

Near-leaf module: stdlib + errors.py only.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum

# ── Constants ────────────────────────────────────────────────────────

MAX_DETAIL_LENGTH = 200

# ── ProblemType taxonomy ─────────────────────────────────────────────


class ProblemType(StrEnum):
    """Error taxonomy for URL Status."""

    # Navigation (per URL, retryable)
    DNS_RESOLUTION_FAILED = "dns"
    PAGE_TIMEOUT = "timeout"
    CONNECTION_FAILED = "connection"
    TLS_ERROR = "tls"
    NAVIGATION_FAILED = "other"

    # Batch level
    BROWSER_UNAVAILABLE = "browser-unavailable"
    INVALID_INPUT = "invalid-input"
    OUTPUT_UNWRITABLE = "output-unwritable"
    INTERNAL_ERROR = "internal-error"


# ── Secret sanitization patterns ─────────────────────────────────────

_SECRET_PATTERNS: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"sk-[a-zA-Z0-9_-]{8,}"), "<redacted>"),
    (re.compile(r"Bearer\s+\S+"), "Bearer <redacted>"),
    (
        re.compile(
            r"(?:API_KEY|SECRET|TOKEN|PASSWORD|CREDENTIAL)\s*[=:]\s*\S+",
            re.IGNORECASE,
        ),
        "<redacted>",
    ),
    (re.compile(r"://[^@\s/]+@"), "://<redacted>@"),
]

# ── Chromium net::ERR_* classification ───────────────────────────────

_NET_ERR_RE = re.compile(r"net::ERR_(\w+)")

_DNS_CODES = {"NAME_NOT_RESOLVED", "NAME_RESOLUTION_FAILED"}
_CONNECTION_TIMED_OUT_CODES = {"CONNECTION_TIMED_OUT", "TIMED_OUT"}
_CONNECTION_CODES = {
    "CONNECTION_REFUSED",
    "CONNECTION_CLOSED",
    "CONNECTION_RESET",
    "CONNECTION_FAILED",
    "EMPTY_RESPONSE",
    "ADDRESS_UNREACHABLE",
    "INTERNET_DISCONNECTED",
}

_HOSTNAME_RE = re.compile(r"https?://([^/:\s]+)")


def classify_network_error(exc_message: str) -> tuple[ProblemType, str] | None:
    """Classify a Playwright network error message into a ProblemType + human message.

    Returns ``None`` if *exc_message* does not contain a ``net::ERR_*`` code.
    """
    m = _NET_ERR_RE.search(exc_message)
    if m is None:
        return None
    code = m.group(1)

    hm = _HOSTNAME_RE.search(exc_message)
    hostname = hm.group(1) if hm else ""

    if code in _DNS_CODES:
        host_part = f" '{hostname}'" if hostname else ""
        return ProblemType.DNS_RESOLUTION_FAILED, f"Could not resolve domain name{host_part}"

    if code in _CONNECTION_TIMED_OUT_CODES:
        host_part = f" to '{hostname}'" if hostname else ""
        return ProblemType.PAGE_TIMEOUT, f"Connection timed out{host_part}"

    if code in _CONNECTION_CODES:
        host_part = f" to '{hostname}'" if hostname else ""
        return ProblemType.CONNECTION_FAILED, f"Connection failed{host_part}"

    if "CERT" in code or "SSL" in code:
        host_part = f" for '{hostname}'" if hostname else ""
        return ProblemType.TLS_ERROR, f"SSL/TLS error{host_part}"

    return ProblemType.NAVIGATION_FAILED, f"Navigation failed (net::ERR_{code})"


# ── CLI-specific recovery hints ──────────────────────────────────────

_CLI_HINTS: dict[ProblemType, str] = {
    ProblemType.BROWSER_UNAVAILABLE: "Ensure Chromium is installed: playwright install chromium",
    ProblemType.INVALID_INPUT: "Provide a CSV file with a 'Domain' or 'URL' column.",
    ProblemType.OUTPUT_UNWRITABLE: "Check that the output path is a writable file location.",
    ProblemType.DNS_RESOLUTION_FAILED: "Check the URL spelling and ensure the domain exists.",
    ProblemType.PAGE_TIMEOUT: "The page took too long to load. Try again or check your connection.",
}


def sanitize_detail(text: str) -> str:
    """Scrub secrets from *text* and truncate to ``MAX_DETAIL_LENGTH`` characters."""
    for pattern, replacement in _SECRET_PATTERNS:
        text = pattern.sub(replacement, text)
    text = " ".join(text.split())
    if len(text) > MAX_DETAIL_LENGTH:
        text = text[:MAX_DETAIL_LENGTH] + "..."
    return text


# ── ProblemDetail dataclass ──────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class ProblemDetail:
    """Immutable representation of a structured error."""

    type: ProblemType = ProblemType.INTERNAL_ERROR
    detail: str = ""

    def to_cli_text(self) -> str:
        """Human-friendly CLI error message.

        Format::

            Error: <detail>
            Hint: <hint>
        """
        hint = _CLI_HINTS.get(self.type, "")
        lines = [f"Error: {self.detail}"]
        if hint:
            lines.append(f"Hint: {hint}")
        return "\n".join(lines)


# ── Exception → ProblemType mapping ──────────────────────────────────


def _exception_type_map() -> dict[type, ProblemType]:
    from .errors import ClassificationFault, EmptyInputError, SetupError

    return {
        SetupError: ProblemType.BROWSER_UNAVAILABLE,
        EmptyInputError: ProblemType.INVALID_INPUT,
        ClassificationFault: ProblemType.INTERNAL_ERROR,
    }


def from_exception(exc: Exception) -> ProblemDetail:
    """Build a ProblemDetail from an exception.

    Known URL Status exception types map to a specific ProblemType;
    ``NavigationError`` keeps its classified kind; raw Playwright
    messages are run through ``classify_network_error``.
    """
    from .errors import NavigationError

    if isinstance(exc, NavigationError):
        try:
            problem_type = ProblemType(exc.kind)
        except ValueError:
            problem_type = ProblemType.NAVIGATION_FAILED
        return ProblemDetail(
            type=problem_type,
            detail=sanitize_detail(exc.summary),
        )

    for exc_type, problem_type in _exception_type_map().items():
        if isinstance(exc, exc_type):
            return ProblemDetail(
                type=problem_type,
                detail=sanitize_detail(str(exc)),
            )

    if isinstance(exc, TimeoutError):
        return ProblemDetail(
            type=ProblemType.PAGE_TIMEOUT,
            detail=sanitize_detail(str(exc) or "Operation timed out"),
        )

    net_result = classify_network_error(str(exc))
    if net_result is not None:
        problem_type, human_msg = net_result
        return ProblemDetail(
            type=problem_type,
            detail=sanitize_detail(human_msg),
        )

    return ProblemDetail(
        type=ProblemType.INTERNAL_ERROR,
        detail=sanitize_detail(str(exc) or type(exc).__name__),
    )
