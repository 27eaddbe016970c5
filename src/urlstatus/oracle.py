# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Optional LLM second opinion on pages that matched a parked phrase.

Keyword rules over-fire: a real shop may mention "GoDaddy" in its
footer.  When enabled, the oracle sends a short summary of the page to
an OpenAI-compatible chat completions endpoint and gets back one of
three verdicts.  It is advisory only:

- ``NORMAL`` lets classification fall through to the Broken test;
- ``CONFIRMED_PARKED`` and ``INCONCLUSIVE`` keep the Parked verdict.

Disabled configuration, a missing API key, HTTP errors, malformed
replies and timeouts all yield ``INCONCLUSIVE``.
"""

from __future__ import annotations

import asyncio
import logging
from enum import StrEnum
from types import TracebackType

import httpx

from .config import OracleConfig
from .signals import ClassificationSignals

logger = logging.getLogger(__name__)


class OracleVerdict(StrEnum):
    CONFIRMED_PARKED = "confirmed_parked"
    NORMAL = "normal"
    INCONCLUSIVE = "inconclusive"


_SYSTEM_PROMPT = (
    "You review web pages for a link-health audit. Decide whether the page is a parked domain "
    "(placeholder, for-sale notice, registrar or hosting default page) or a normal website. "
    "Answer with exactly one word: PARKED, NORMAL or UNSURE."
)

_ANSWERS: dict[str, OracleVerdict] = {
    "PARKED": OracleVerdict.CONFIRMED_PARKED,
    "NORMAL": OracleVerdict.NORMAL,
    "UNSURE": OracleVerdict.INCONCLUSIVE,
}


def build_summary(signals: ClassificationSignals, config: OracleConfig) -> str:
    """Title + meta description + body excerpt, capped to ``summary_budget`` chars."""
    body = " ".join(signals.raw_body.split())[: config.body_excerpt_chars]
    parts = [
        f"Title: {signals.raw_title.strip()}",
        f"Description: {signals.meta_description.strip()}",
        f"Body: {body}",
    ]
    return "\n".join(parts)[: config.summary_budget]


def parse_verdict(reply: str) -> OracleVerdict:
    """Map a model reply to a verdict; anything unexpected is inconclusive."""
    words = reply.strip().upper().split()
    if not words:
        return OracleVerdict.INCONCLUSIVE
    return _ANSWERS.get(words[0].strip(".,!:;\"'"), OracleVerdict.INCONCLUSIVE)


class ParkedOracle:
    """Async client for the parked-page oracle.

    Use as an async context manager so the HTTP client is closed::

        async with ParkedOracle(config.oracle) as oracle:
            verdict = await oracle.classify(summary)
    """

    def __init__(self, config: OracleConfig, *, client: httpx.AsyncClient | None = None) -> None:
        self._config = config
        self._client = client
        self._owns_client = client is None

    @property
    def active(self) -> bool:
        return self._config.is_active

    async def __aenter__(self) -> ParkedOracle:
        if self._client is None and self.active:
            self._client = httpx.AsyncClient(
                base_url=self._config.base_url,
                timeout=httpx.Timeout(self._config.timeout_s),
            )
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def classify(self, summary: str) -> OracleVerdict:
        if not self.active:
            return OracleVerdict.INCONCLUSIVE
        if self._client is None:
            logger.warning("Oracle used outside its context manager; skipping")
            return OracleVerdict.INCONCLUSIVE
        try:
            async with asyncio.timeout(self._config.timeout_s):
                reply = await self._ask(summary)
        except TimeoutError:
            logger.warning("Oracle timed out after %.0fs", self._config.timeout_s)
            return OracleVerdict.INCONCLUSIVE
        except (httpx.HTTPError, KeyError, IndexError, TypeError, ValueError) as exc:
            logger.warning("Oracle call failed: %s", exc)
            return OracleVerdict.INCONCLUSIVE
        verdict = parse_verdict(reply)
        logger.debug("Oracle verdict=%s reply=%.40r", verdict, reply)
        return verdict

    async def _ask(self, summary: str) -> str:
        response = await self._client.post(
            "/chat/completions",
            headers={"Authorization": f"Bearer {self._config.api_key}"},
            json={
                "model": self._config.model,
                "temperature": 0,
                "max_tokens": 3,
                "messages": [
                    {"role": "system", "content": _SYSTEM_PROMPT},
                    {"role": "user", "content": summary},
                ],
            },
        )
        response.raise_for_status()
        return response.json()["choices"][0]["message"]["content"] or ""
