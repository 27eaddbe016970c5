# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Coarse HTTP status classification, before any content is inspected.

A missing status code means the navigation succeeded without an HTTP
response object (non-HTTP scheme, same-document navigation).  A response
that never arrived is a NavigationError and never reaches this table.
"""

from __future__ import annotations

from enum import StrEnum


class ResponseClass(StrEnum):
    """First-match outcome of the status decision table."""

    SERVER_ERROR = "server_error"  # 500-599, retried
    NOT_FOUND = "not_found"  # 404, confirmed
    FORBIDDEN = "forbidden"  # 403, deferred to the substantial-content test
    CLIENT_ERROR = "client_error"  # any other 4xx
    CONTENT_CHECK = "content_check"  # 2xx, no code, or anything else


def classify_response(status_code: int | None) -> ResponseClass:
    if status_code is None:
        return ResponseClass.CONTENT_CHECK
    if 500 <= status_code <= 599:
        return ResponseClass.SERVER_ERROR
    if status_code == 404:
        return ResponseClass.NOT_FOUND
    if status_code == 403:
        return ResponseClass.FORBIDDEN
    if 400 <= status_code <= 499:
        return ResponseClass.CLIENT_ERROR
    return ResponseClass.CONTENT_CHECK


def is_success(status_code: int | None) -> bool:
    return status_code is not None and 200 <= status_code <= 299
