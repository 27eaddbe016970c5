# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Tests for problem_details: net::ERR_* classification and CLI error text."""

from __future__ import annotations

import dataclasses

import pytest

from urlstatus.errors import ClassificationFault, EmptyInputError, NavigationError, SetupError
from urlstatus.problem_details import (
    MAX_DETAIL_LENGTH,
    ProblemDetail,
    ProblemType,
    classify_network_error,
    from_exception,
    sanitize_detail,
)


class TestClassifyNetworkError:
    def test_dns_name_not_resolved(self):
        result = classify_network_error("Page.goto: net::ERR_NAME_NOT_RESOLVED at https://no-such-host.test/")
        assert result == (ProblemType.DNS_RESOLUTION_FAILED, "Could not resolve domain name 'no-such-host.test'")

    def test_dns_no_hostname(self):
        ptype, human = classify_network_error("net::ERR_NAME_NOT_RESOLVED")
        assert ptype is ProblemType.DNS_RESOLUTION_FAILED
        assert human == "Could not resolve domain name"

    def test_connection_refused(self):
        ptype, human = classify_network_error("net::ERR_CONNECTION_REFUSED at https://localhost:9999/")
        assert ptype is ProblemType.CONNECTION_FAILED
        assert human == "Connection failed to 'localhost'"

    def test_connection_timed_out(self):
        ptype, _ = classify_network_error("net::ERR_CONNECTION_TIMED_OUT at https://slow.test/")
        assert ptype is ProblemType.PAGE_TIMEOUT

    @pytest.mark.parametrize("code", ["CERT_AUTHORITY_INVALID", "SSL_PROTOCOL_ERROR", "CERT_DATE_INVALID"])
    def test_tls(self, code):
        ptype, human = classify_network_error(f"net::ERR_{code} at https://bad-cert.test/")
        assert ptype is ProblemType.TLS_ERROR
        assert "bad-cert.test" in human

    def test_unknown_code(self):
        ptype, human = classify_network_error("net::ERR_ABORTED at https://x.test/")
        assert ptype is ProblemType.NAVIGATION_FAILED
        assert human == "Navigation failed (net::ERR_ABORTED)"

    def test_not_a_network_error(self):
        assert classify_network_error("Target closed") is None


class TestSanitizeDetail:
    def test_redacts_api_keys(self):
        assert "sk-abcdef123456" not in sanitize_detail("auth failed for sk-abcdef123456")

    def test_redacts_bearer(self):
        assert sanitize_detail("header Bearer abc.def") == "header Bearer <redacted>"

    def test_redacts_url_credentials(self):
        assert sanitize_detail("https://user:pw@host.test/") == "https://<redacted>@host.test/"

    def test_collapses_whitespace(self):
        assert sanitize_detail("line one\n   line two") == "line one line two"

    def test_truncates(self):
        text = sanitize_detail("x" * 500)
        assert len(text) == MAX_DETAIL_LENGTH + 3
        assert text.endswith("...")


class TestFromException:
    def test_setup_error(self):
        problem = from_exception(SetupError("Failed to start browser: executable missing"))
        assert problem.type is ProblemType.BROWSER_UNAVAILABLE
        assert problem.to_cli_text() == (
            "Error: Failed to start browser: executable missing\n"
            "Hint: Ensure Chromium is installed: playwright install chromium"
        )

    def test_empty_input(self):
        assert from_exception(EmptyInputError("Empty domain")).type is ProblemType.INVALID_INPUT

    def test_classification_fault(self):
        assert from_exception(ClassificationFault("x")).type is ProblemType.INTERNAL_ERROR

    def test_navigation_error_keeps_kind(self):
        problem = from_exception(NavigationError("raw", kind="dns", summary="Could not resolve domain name"))
        assert problem.type is ProblemType.DNS_RESOLUTION_FAILED
        assert problem.detail == "Could not resolve domain name"

    def test_navigation_error_unknown_kind(self):
        assert from_exception(NavigationError("raw", kind="weird")).type is ProblemType.NAVIGATION_FAILED

    def test_timeout(self):
        assert from_exception(TimeoutError()).type is ProblemType.PAGE_TIMEOUT

    def test_raw_network_message(self):
        problem = from_exception(RuntimeError("net::ERR_CONNECTION_RESET at https://x.test/"))
        assert problem.type is ProblemType.CONNECTION_FAILED

    def test_generic(self):
        problem = from_exception(KeyError("boom"))
        assert problem.type is ProblemType.INTERNAL_ERROR
        assert problem.to_cli_text() == "Error: 'boom'"


    def test_detail_holds_only_what_the_cli_prints(self):
        assert [f.name for f in dataclasses.fields(ProblemDetail)] == ["type", "detail"]
        assert ProblemDetail(ProblemType.INVALID_INPUT, "no rows").to_cli_text() == (
            "Error: no rows\nHint: Provide a CSV file with a 'Domain' or 'URL' column."
        )
