# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""ClassificationSignals: read-only view over a rendered document.

Signals are computed fresh for every attempt and never cached, since a
page can change between retries.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from .errors import ClassificationFault


class DocumentHandle(Protocol):
    """Live, queryable rendered document produced by a navigation."""

    async def body_text(self) -> str: ...

    async def title(self) -> str: ...

    async def element_count(self) -> int: ...

    async def meta_description(self) -> str: ...

    async def wait_for_quiescence(self, timeout_ms: int) -> bool: ...


@dataclass(frozen=True, slots=True)
class ClassificationSignals:
    """What the content classifier sees of a page."""

    title: str  # lower-cased
    body: str  # lower-cased
    body_length: int
    element_count: int
    meta_description: str = ""
    raw_title: str = ""
    raw_body: str = ""

    @classmethod
    def from_parts(
        cls,
        *,
        title: str = "",
        body: str = "",
        element_count: int = 0,
        meta_description: str = "",
    ) -> ClassificationSignals:
        title = title or ""
        body = body or ""
        return cls(
            title=title.lower(),
            body=body.lower(),
            body_length=len(body.strip()),
            element_count=element_count,
            meta_description=meta_description or "",
            raw_title=title,
            raw_body=body,
        )


async def collect_signals(document: DocumentHandle) -> ClassificationSignals:
    """Read title, body text, element count and meta description.

    Raises:
        ClassificationFault: the document could not be inspected.
    """
    try:
        body = await document.body_text()
        title = await document.title()
        count = await document.element_count()
        meta = await document.meta_description()
    except ClassificationFault:
        raise
    except Exception as exc:
        raise ClassificationFault(f"Could not read page content: {exc}") from exc
    return ClassificationSignals.from_parts(
        title=title,
        body=body,
        element_count=count,
        meta_description=meta,
    )
