# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Content classifier: Parked / Broken / ok from rendered page signals.

Evaluation order (first match wins):

  1. Parked   – marketplace/parking phrase, then hosting default phrase
                (optionally overruled by the oracle)
  2. Broken   – construction/error phrase, error regex, or a
                structurally empty page
  3. ok       – no negative signal

The substantial-content test is separate: it only decides whether a
403 response actually served a real page.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from . import Status
from .config import OracleConfig
from .oracle import OracleVerdict, ParkedOracle, build_summary
from .response_classifier import is_success
from .rules import (
    BLOCK_STUB_PHRASES,
    BROKEN_RULES,
    ERROR_PATTERNS,
    HOSTING_RULES,
    PARKED_RULES,
    PhraseRule,
)
from .signals import ClassificationSignals

logger = logging.getLogger(__name__)

# Substantial content (real page vs. bot-block stub)
SUBSTANTIAL_MIN_BODY = 400
SUBSTANTIAL_MIN_ELEMENTS = 15
BLOCK_STUB_MAX_BODY = 800

# Structurally empty page
EMPTY_MAX_ELEMENTS = 10
EMPTY_MAX_BODY = 200


@dataclass(frozen=True, slots=True)
class ContentVerdict:
    """Outcome of content classification."""

    status: Status
    notes: str
    matched: str = ""  # phrase/pattern/rule name that fired


def has_substantial_content(signals: ClassificationSignals) -> bool:
    """True when the page looks richly loaded rather than a block stub."""
    if signals.body_length < SUBSTANTIAL_MIN_BODY:
        return False
    if signals.element_count < SUBSTANTIAL_MIN_ELEMENTS:
        return False
    if signals.body_length < BLOCK_STUB_MAX_BODY and any(p in signals.body for p in BLOCK_STUB_PHRASES):
        return False
    return True


def match_parked(signals: ClassificationSignals) -> PhraseRule | None:
    """Return the first parked or hosting rule found in title/body."""
    for rule in PARKED_RULES:
        if rule.matches(signals.title, signals.body):
            return rule
    for rule in HOSTING_RULES:
        if rule.matches(signals.title, signals.body):
            return rule
    return None


def match_broken(signals: ClassificationSignals) -> str | None:
    """Return a short reason when the page looks broken, else None."""
    for rule in BROKEN_RULES:
        if rule.matches(signals.title, signals.body):
            return rule.phrase
    for pattern in ERROR_PATTERNS:
        if pattern.matches(signals.body, signals.title):
            return pattern.name
    if signals.element_count < EMPTY_MAX_ELEMENTS and signals.body_length < EMPTY_MAX_BODY:
        return "empty page"
    return None


class ContentClassifier:
    """Applies the parked → broken → ok decision to page signals."""

    def __init__(self, config: OracleConfig | None = None, oracle: ParkedOracle | None = None) -> None:
        self._config = config or OracleConfig()
        self._oracle = oracle

    async def classify(
        self,
        signals: ClassificationSignals,
        *,
        status_code: int | None = None,
        use_oracle: bool = True,
    ) -> ContentVerdict:
        parked = match_parked(signals)
        if parked is not None:
            verdict = OracleVerdict.INCONCLUSIVE
            if use_oracle and self._oracle is not None:
                verdict = await self._oracle.classify(build_summary(signals, self._config))
            if verdict is not OracleVerdict.NORMAL:
                return ContentVerdict(
                    Status.PARKED,
                    f"Website loads fine, Parked domain detected ('{parked.phrase}')",
                    matched=parked.phrase,
                )
            logger.info("Oracle overruled parked match %r", parked.phrase)

        broken = match_broken(signals)
        if broken is not None:
            return ContentVerdict(
                Status.BROKEN,
                f"Broken/under construction detected ({broken})",
                matched=broken,
            )

        if is_success(status_code):
            return ContentVerdict(Status.OK, "Website loads fine")
        if status_code is None:
            return ContentVerdict(Status.OK, "Website appears to load")
        return ContentVerdict(Status.OK, f"Website appears to load (HTTP {status_code})")
