# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""URL normalization and order-preserving deduplication.

No DNS or syntax validation happens here; a malformed host surfaces
later as a navigation error for that URL.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable

from .errors import EmptyInputError

logger = logging.getLogger(__name__)

_SCHEME_RE = re.compile(r"^(https?)://", re.IGNORECASE)
_EDGE_RE = re.compile(r"^[\s/]+|[\s/]+$")
_HOST_END_RE = re.compile(r"[/?#]")


def normalize_url(raw: str) -> str:
    """Turn a raw domain/URL cell into a schemed URL.

    Strips whitespace and leading/trailing slashes, lower-cases an
    existing ``http``/``https`` scheme and prefixes ``https://`` when
    none is present.

    Raises:
        EmptyInputError: *raw* is empty or whitespace/slashes only.
    """
    value = _EDGE_RE.sub("", raw or "")
    if not value:
        raise EmptyInputError("Empty domain")

    m = _SCHEME_RE.match(value)
    if m:
        return f"{m.group(1).lower()}://{value[m.end():]}"
    return f"https://{value}"


def dedupe_key(url: str) -> str:
    """Comparison key for a normalized URL.

    Scheme and host are case-insensitive and trailing slashes are
    ignored; everything after the host keeps its case.
    """
    m = _SCHEME_RE.match(url)
    scheme = m.group(1).lower() if m else "https"
    rest = url[m.end():] if m else url
    end = _HOST_END_RE.search(rest)
    split = end.start() if end else len(rest)
    key = f"{scheme}://{rest[:split].lower()}{rest[split:]}"
    return key.rstrip("/")


def dedupe_urls(raw_values: Iterable[str]) -> list[str]:
    """Normalize *raw_values*, dropping empties and duplicates.

    First-seen order and spelling win. Values that fail normalization
    are skipped with a warning.
    """
    seen: set[str] = set()
    urls: list[str] = []
    for raw in raw_values:
        try:
            url = normalize_url(raw)
        except EmptyInputError:
            if raw and raw.strip():
                logger.warning("Skipping invalid domain: %r", raw)
            continue
        key = dedupe_key(url)
        if key in seen:
            continue
        seen.add(key)
        urls.append(url)
    return urls
