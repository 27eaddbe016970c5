# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Ordered phrase and pattern rules for content classification.

Rules are data, not control flow: each table is evaluated in order and
the first match short-circuits.  Phrases are matched as substrings of
lower-cased title/body text.

Bump ``RULESET_VERSION`` whenever a table changes so reports can be
traced back to the rule set that produced them.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum

RULESET_VERSION = "2"


class RuleKind(StrEnum):
    """Which verdict a rule contributes to."""

    PARKED = "parked"  # for-sale / parking / marketplace
    HOSTING = "hosting"  # hosting-provider or web-server default page
    BROKEN = "broken"  # construction / error wording


@dataclass(frozen=True, slots=True)
class PhraseRule:
    """Lower-case substring that contributes *kind* when present."""

    phrase: str
    kind: RuleKind

    def matches(self, *texts: str) -> bool:
        return any(self.phrase in t for t in texts)


@dataclass(frozen=True, slots=True)
class PatternRule:
    """Case-insensitive regex that contributes *kind* when found."""

    name: str
    pattern: re.Pattern[str]
    kind: RuleKind = RuleKind.BROKEN

    def matches(self, *texts: str) -> bool:
        return any(self.pattern.search(t) for t in texts)


def _phrases(kind: RuleKind, *phrases: str) -> tuple[PhraseRule, ...]:
    return tuple(PhraseRule(p, kind) for p in phrases)


# ---------------------------------------------------------------------------
# Parked domains and domain marketplaces
# ---------------------------------------------------------------------------

PARKED_RULES: tuple[PhraseRule, ...] = _phrases(
    RuleKind.PARKED,
    "domain for sale",
    "this domain may be for sale",
    "this domain is for sale",
    "domain is for sale",
    "buy this domain",
    "buy domain",
    "sell this domain",
    "domain parking",
    "this domain is parked",
    "this page is parked",
    "parking page",
    "domain parking service",
    "parked free",
    "parked by",
    "cashparking",
    "domain is available",
    "register this domain",
    "list your domain",
    "make an offer",
    "available for purchase",
    "domain marketplace",
    "premium domain",
    "put a for sale sign",
    "for sale sign on your domain",
    "godaddy",
    "namecheap",
    "sedoparking",
    "sedo.com",
    "dan.com",
    "afternic",
    "hugedomains",
    "flippa",
    "brandbucket",
    "escrow.com",
    "uniregistry",
    "epik.com",
)

# ---------------------------------------------------------------------------
# Hosting-provider and web-server default pages
# ---------------------------------------------------------------------------

HOSTING_RULES: tuple[PhraseRule, ...] = _phrases(
    RuleKind.HOSTING,
    "welcome to nginx",
    "welcome to apache",
    "apache2 ubuntu default page",
    "apache2 debian default page",
    "apache http server test page",
    "it works!",
    "test page for the apache",
    "test page for the nginx",
    "ubuntu default",
    "centos default",
    "powered by cpanel",
    "powered by plesk",
    "default web site page",
    "default website page",
    "web server's default page",
    "no web site is configured",
    "iis windows server",
    "index of /",
)

# ---------------------------------------------------------------------------
# Construction and error wording
# ---------------------------------------------------------------------------

BROKEN_RULES: tuple[PhraseRule, ...] = _phrases(
    RuleKind.BROKEN,
    "under construction",
    "coming soon",
    "site under maintenance",
    "maintenance mode",
    "temporarily unavailable",
    "we are working on",
    "this site is being rebuilt",
    "page not found",
    "error occurred",
    "something went wrong",
    "internal server error",
    "database error",
    "error establishing a database connection",
    "connection error",
    "fatal error",
    "parse error",
    "syntax error",
)

ERROR_PATTERNS: tuple[PatternRule, ...] = (
    PatternRule("error NNN", re.compile(r"error\s+\d{3}", re.IGNORECASE)),
    PatternRule("http error", re.compile(r"http\s+error", re.IGNORECASE)),
    PatternRule("server error", re.compile(r"server\s+error", re.IGNORECASE)),
    PatternRule("application error", re.compile(r"application\s+error", re.IGNORECASE)),
)

# ---------------------------------------------------------------------------
# Bot-block stubs (used by the substantial-content test)
# ---------------------------------------------------------------------------

BLOCK_STUB_PHRASES: tuple[str, ...] = (
    "forbidden",
    "access denied",
)
