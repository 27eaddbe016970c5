# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Shared test configuration and fixtures."""

try:
    import urlstatus  # noqa: F401
except ImportError:
    raise ImportError("urlstatus is not installed. Run: pip install -e '.[dev]'") from None

import pytest


@pytest.fixture(autouse=True)
def _block_real_browser(request, monkeypatch):
    """Safety net: prevent real Chromium launches in unit tests.

    Tests that need a browser should patch
    ``urlstatus.browser_session.async_playwright`` explicitly (that patch
    takes priority over this fixture) or use a fake engine.  Tests that
    really want Chromium can opt out with::

        @pytest.mark.allow_real_browser
    """
    if "allow_real_browser" in request.keywords:
        return

    def _no_real_playwright():
        raise RuntimeError(
            "Test tried to launch a real browser. Patch 'urlstatus.browser_session.async_playwright' in your test."
        )

    monkeypatch.setattr("urlstatus.browser_session.async_playwright", _no_real_playwright)
