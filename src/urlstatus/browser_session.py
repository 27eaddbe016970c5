# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Playwright rendering engine for URL checks.

One Chromium process and one BrowserContext (shared cookie identity)
serve the whole batch.  Every attempt gets its own Page, opened by
``BrowserEngine.attempt()`` and closed when that block exits, on every
path::

    async with BrowserEngine(BrowserConfig()) as engine:
        async with engine.attempt("https://example.com", timeout_ms=30000) as outcome:
            if outcome.error is None:
                title = await outcome.document.title()
"""

from __future__ import annotations

import asyncio
import logging
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager, suppress
from dataclasses import dataclass
from types import TracebackType

from playwright.async_api import (
    Browser,
    BrowserContext,
    Page,
    Playwright,
    async_playwright,
)
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from .errors import NavigationError, PageLoadError, SetupError
from .problem_details import ProblemType, classify_network_error, sanitize_detail

logger = logging.getLogger(__name__)

DEFAULT_LOCALE = "en-US"

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)

_ELEMENT_COUNT_JS = "() => document.querySelectorAll('*').length"
_BODY_TEXT_JS = "() => (document.body ? document.body.textContent : '') || ''"
_META_DESCRIPTION_JS = """() => {
    const el = document.querySelector('meta[name="description" i], meta[property="og:description"]');
    return (el && el.getAttribute('content')) || '';
}"""


@dataclass
class BrowserConfig:
    """Browser launch configuration."""

    headless: bool = True
    locale: str = DEFAULT_LOCALE
    viewport_width: int = 1280
    viewport_height: int = 800
    user_agent: str = DEFAULT_USER_AGENT
    wait_until: str = "domcontentloaded"


@dataclass(frozen=True, slots=True)
class AttemptOutcome:
    """Result of one navigation attempt; valid only inside ``attempt()``."""

    status_code: int | None = None
    document: PlaywrightDocument | None = None
    error: NavigationError | None = None


# ── Chromium auto-install ─────────────────────────────────────────

_chromium_install_attempted = False
_AUTO_INSTALL_TIMEOUT = 300  # seconds, Chromium is a ~140MB download


async def _auto_install_chromium() -> bool:
    """Run ``playwright install chromium`` once per process.

    Returns True if install succeeded, False otherwise.
    """
    global _chromium_install_attempted  # noqa: PLW0603
    if _chromium_install_attempted:
        return False
    _chromium_install_attempted = True

    logger.info("Chromium not found, running 'playwright install chromium' …")
    try:
        proc = await asyncio.create_subprocess_exec(
            sys.executable,
            "-m",
            "playwright",
            "install",
            "chromium",
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        _stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=_AUTO_INSTALL_TIMEOUT)
        if proc.returncode == 0:
            logger.info("Chromium installed successfully")
            return True
        logger.warning(
            "playwright install chromium failed (rc=%d): %s",
            proc.returncode,
            stderr.decode(errors="replace")[:500],
        )
        return False
    except TimeoutError:
        logger.warning("Chromium install timed out after %ds", _AUTO_INSTALL_TIMEOUT)
        return False
    except OSError:
        logger.warning("Chromium auto-install failed", exc_info=True)
        return False


def chromium_launch_args(config: BrowserConfig) -> list[str]:
    """Return hardened Chromium launch arguments."""
    return [
        "--disable-blink-features=AutomationControlled",
        f"--lang={config.locale}",
        "--disable-extensions",
        "--disable-plugins",
        "--disable-dev-shm-usage",
        "--disable-background-networking",
        "--disable-sync",
        "--disable-gpu",
        "--no-first-run",
        "--deny-permission-prompts",
        "--disable-breakpad",
        "--no-pings",
        "--disable-domain-reliability",
        "--disable-component-update",
        "--noerrdialogs",
    ]


def _first_line(exc: Exception) -> str:
    return str(exc).splitlines()[0] if str(exc) else type(exc).__name__


def to_navigation_error(exc: Exception, timeout_ms: int) -> NavigationError | None:
    """Wrap a network-level Playwright navigation failure with a classified summary.

    Returns ``None`` when *exc* is not a timeout and carries no
    ``net::ERR_*`` code (invalid URL, crashed target, ...); such
    failures are not worth retrying.
    """
    if isinstance(exc, PlaywrightTimeoutError):
        return NavigationError(
            str(exc),
            kind=ProblemType.PAGE_TIMEOUT.value,
            summary=f"Navigation timeout of {timeout_ms}ms exceeded",
        )
    classified = classify_network_error(str(exc))
    if classified is not None:
        problem_type, human = classified
        return NavigationError(str(exc), kind=problem_type.value, summary=human)
    if "timeout" in str(exc).lower():
        return NavigationError(
            str(exc),
            kind=ProblemType.PAGE_TIMEOUT.value,
            summary=sanitize_detail(_first_line(exc)),
        )
    return None


class PlaywrightDocument:
    """DocumentHandle backed by a live Playwright Page."""

    def __init__(self, page: Page) -> None:
        self._page = page

    async def body_text(self) -> str:
        return await self._page.evaluate(_BODY_TEXT_JS)

    async def title(self) -> str:
        return await self._page.title() or ""

    async def element_count(self) -> int:
        return int(await self._page.evaluate(_ELEMENT_COUNT_JS))

    async def meta_description(self) -> str:
        return await self._page.evaluate(_META_DESCRIPTION_JS)

    async def wait_for_quiescence(self, timeout_ms: int) -> bool:
        """Best-effort networkidle wait. Returns False when it did not settle."""
        try:
            await self._page.wait_for_load_state("networkidle", timeout=timeout_ms)
            return True
        except PlaywrightError:
            logger.debug("networkidle not reached within %dms, continuing", timeout_ms)
            return False


class BrowserEngine:
    """Shared Chromium with one BrowserContext and a Page per attempt."""

    def __init__(self, config: BrowserConfig | None = None) -> None:
        self.config = config or BrowserConfig()
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None
        self._context: BrowserContext | None = None

    # ── AsyncContextManager ──────────────────────────────────────────

    async def __aenter__(self) -> BrowserEngine:
        await self.start()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.stop()

    async def start(self) -> None:
        """Launch Chromium and create the shared context.

        Raises:
            SetupError: Playwright or Chromium could not be started.
        """
        try:
            self._playwright = await async_playwright().start()
            await self._launch_browser()
            self._context = await self._browser.new_context(
                viewport={
                    "width": self.config.viewport_width,
                    "height": self.config.viewport_height,
                },
                locale=self.config.locale,
                user_agent=self.config.user_agent,
                service_workers="block",
                permissions=[],
                accept_downloads=False,
                extra_http_headers={"Accept-Language": "en-US,en;q=0.9"},
            )
            self._context.on("dialog", _dismiss)
        except SetupError:
            await self.stop()
            raise
        except Exception as exc:
            await self.stop()
            raise SetupError(f"Failed to start browser: {exc}") from exc
        logger.info("Browser engine started (headless=%s)", self.config.headless)

    async def _launch_browser(self) -> None:
        """Launch Chromium, auto-installing on first 'executable not found' error."""
        args = chromium_launch_args(self.config)
        try:
            self._browser = await self._playwright.chromium.launch(headless=self.config.headless, args=args)
        except Exception as exc:
            if "executable doesn't exist" not in str(exc).lower():
                raise
            if not await _auto_install_chromium():
                raise SetupError(
                    "Chromium is not installed and auto-install failed. Please run: playwright install chromium"
                ) from exc
            self._browser = await self._playwright.chromium.launch(headless=self.config.headless, args=args)

    async def stop(self) -> None:
        """Close context, browser and Playwright. Safe to call more than once."""
        if self._context:
            with suppress(Exception):
                await self._context.close()
            self._context = None
        if self._browser:
            with suppress(Exception):
                await self._browser.close()
            self._browser = None
        if self._playwright:
            with suppress(Exception):
                await self._playwright.stop()
            self._playwright = None
        logger.info("Browser engine stopped")

    # ── Attempts ─────────────────────────────────────────────────────

    @asynccontextmanager
    async def attempt(self, url: str, *, timeout_ms: int) -> AsyncIterator[AttemptOutcome]:
        """Open a fresh page, navigate to *url* and yield the outcome.

        Network, DNS, TLS and timeout failures are reported in
        ``outcome.error`` rather than raised.  The page is closed when the
        block exits.

        Raises:
            PageLoadError: Navigation failed for a non-network reason.
        """
        if self._context is None:
            raise RuntimeError("Browser engine not started. Use async with or call start().")
        page = await self._context.new_page()
        try:
            try:
                response = await page.goto(url, wait_until=self.config.wait_until, timeout=timeout_ms)
            except PlaywrightError as exc:
                error = to_navigation_error(exc, timeout_ms)
                if error is None:
                    raise PageLoadError(sanitize_detail(_first_line(exc))) from exc
                outcome = AttemptOutcome(error=error)
            else:
                outcome = AttemptOutcome(
                    status_code=response.status if response is not None else None,
                    document=PlaywrightDocument(page),
                )
            yield outcome
        finally:
            await asyncio.shield(self._close_page(page))

    async def _close_page(self, page: Page) -> None:
        if not page.is_closed():
            with suppress(Exception):
                await page.close()


async def _dismiss(dialog) -> None:
    """JS dialogs would freeze the page; dismiss them all."""
    with suppress(Exception):
        await dialog.dismiss()
