# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Run configuration, resolved once at startup.

``from_env()`` is the only place that reads the process environment.
The resulting ``CheckerConfig`` is passed by reference to the checker,
content classifier and oracle.

Environment variables:
    URLSTATUS_LLM_ENABLED     enable the parked-page oracle ("1"/"true")
    OPENAI_API_KEY            oracle API key (oracle stays off without it)
    URLSTATUS_LLM_MODEL       chat model name
    URLSTATUS_LLM_BASE_URL    OpenAI-compatible API base URL
    URLSTATUS_LLM_TIMEOUT     oracle timeout in seconds
    URLSTATUS_MAX_RETRIES     retries after the first attempt
    URLSTATUS_NAV_TIMEOUT_MS  per-attempt navigation timeout
    URLSTATUS_HEADLESS        "0"/"false" to show the browser window
"""

from __future__ import annotations

import dataclasses
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


@dataclass(frozen=True, slots=True)
class OracleConfig:
    """Settings for the optional LLM parked-page disambiguation."""

    enabled: bool = False
    api_key: str = field(default="", repr=False)
    model: str = "gpt-4o-mini"
    base_url: str = "https://api.openai.com/v1"
    timeout_s: float = 15.0
    summary_budget: int = 1500  # max chars sent per page
    body_excerpt_chars: int = 1000

    @property
    def is_active(self) -> bool:
        return self.enabled and bool(self.api_key)


@dataclass(frozen=True, slots=True)
class CheckerConfig:
    """Settings for one batch run."""

    max_retries: int = 3
    backoff_base_s: float = 1.0
    navigation_timeout_ms: int = 30000
    quiescence_timeout_ms: int = 5000
    concurrency: int = 4
    headless: bool = True
    oracle: OracleConfig = field(default_factory=OracleConfig)

    def replace(self, **changes) -> CheckerConfig:
        return dataclasses.replace(self, **changes)


def _env_bool(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(name, "").strip().lower()
    if raw in _TRUTHY:
        return True
    if raw in _FALSY:
        return False
    if raw:
        logger.warning("Ignoring %s=%r (expected true/false)", name, raw)
    return default


def _env_number(env: Mapping[str, str], name: str, default, cast):
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        value = cast(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r (not a number)", name, raw)
        return default
    if value < 0:
        logger.warning("Ignoring %s=%r (negative)", name, raw)
        return default
    return value


def from_env(environ: Mapping[str, str] | None = None) -> CheckerConfig:
    """Build a CheckerConfig from environment variables."""
    env = os.environ if environ is None else environ
    defaults = CheckerConfig()
    oracle_defaults = defaults.oracle

    oracle = OracleConfig(
        enabled=_env_bool(env, "URLSTATUS_LLM_ENABLED", oracle_defaults.enabled),
        api_key=env.get("OPENAI_API_KEY", "").strip(),
        model=env.get("URLSTATUS_LLM_MODEL", "").strip() or oracle_defaults.model,
        base_url=(env.get("URLSTATUS_LLM_BASE_URL", "").strip() or oracle_defaults.base_url).rstrip("/"),
        timeout_s=_env_number(env, "URLSTATUS_LLM_TIMEOUT", oracle_defaults.timeout_s, float),
    )
    if oracle.enabled and not oracle.api_key:
        logger.warning("URLSTATUS_LLM_ENABLED is set but OPENAI_API_KEY is missing; oracle disabled")

    return CheckerConfig(
        max_retries=_env_number(env, "URLSTATUS_MAX_RETRIES", defaults.max_retries, int),
        navigation_timeout_ms=_env_number(env, "URLSTATUS_NAV_TIMEOUT_MS", defaults.navigation_timeout_ms, int),
        headless=_env_bool(env, "URLSTATUS_HEADLESS", defaults.headless),
        oracle=oracle,
    )
