# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Tests for the HTTP status decision table."""

from __future__ import annotations

import pytest

from urlstatus.response_classifier import ResponseClass, classify_response, is_success


@pytest.mark.parametrize(
    ("code", "expected"),
    [
        (None, ResponseClass.CONTENT_CHECK),
        (200, ResponseClass.CONTENT_CHECK),
        (204, ResponseClass.CONTENT_CHECK),
        (101, ResponseClass.CONTENT_CHECK),
        (304, ResponseClass.CONTENT_CHECK),
        (400, ResponseClass.CLIENT_ERROR),
        (403, ResponseClass.FORBIDDEN),
        (404, ResponseClass.NOT_FOUND),
        (410, ResponseClass.CLIENT_ERROR),
        (499, ResponseClass.CLIENT_ERROR),
        (500, ResponseClass.SERVER_ERROR),
        (503, ResponseClass.SERVER_ERROR),
        (599, ResponseClass.SERVER_ERROR),
        (600, ResponseClass.CONTENT_CHECK),
    ],
)
def test_classify_response(code, expected):
    assert classify_response(code) is expected


@pytest.mark.parametrize(("code", "expected"), [(200, True), (299, True), (199, False), (300, False), (None, False)])
def test_is_success(code, expected):
    assert is_success(code) is expected
