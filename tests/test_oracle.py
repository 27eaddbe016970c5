# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Tests for the parked-page oracle. HTTP is served by httpx.MockTransport."""

from __future__ import annotations

import json

import httpx
import pytest

from urlstatus.config import OracleConfig
from urlstatus.oracle import OracleVerdict, ParkedOracle, build_summary, parse_verdict
from urlstatus.signals import ClassificationSignals

BASE_URL = "https://llm.test/v1"
ACTIVE = OracleConfig(enabled=True, api_key="sk-test-123456789", base_url=BASE_URL, model="test-model")


def _reply(content: str) -> httpx.Response:
    return httpx.Response(200, json={"choices": [{"message": {"role": "assistant", "content": content}}]})


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url=BASE_URL)


class TestParseVerdict:
    @pytest.mark.parametrize(
        ("reply", "expected"),
        [
            ("PARKED", OracleVerdict.CONFIRMED_PARKED),
            ("parked.", OracleVerdict.CONFIRMED_PARKED),
            ("NORMAL", OracleVerdict.NORMAL),
            ("  Normal - a real shop", OracleVerdict.NORMAL),
            ("UNSURE", OracleVerdict.INCONCLUSIVE),
            ("", OracleVerdict.INCONCLUSIVE),
            ("I think it is parked", OracleVerdict.INCONCLUSIVE),
        ],
    )
    def test_parse(self, reply, expected):
        assert parse_verdict(reply) is expected


class TestBuildSummary:
    def test_contains_title_description_body(self):
        signals = ClassificationSignals.from_parts(
            title="Example", body="Buy   this\n domain", meta_description="For sale"
        )
        summary = build_summary(signals, OracleConfig())
        assert summary == "Title: Example\nDescription: For sale\nBody: Buy this domain"

    def test_respects_budget(self):
        signals = ClassificationSignals.from_parts(title="T", body="word " * 2000)
        config = OracleConfig(summary_budget=300, body_excerpt_chars=1000)
        assert len(build_summary(signals, config)) == 300


class TestParkedOracle:
    async def test_inactive_without_key(self):
        oracle = ParkedOracle(OracleConfig(enabled=True, api_key=""))
        async with oracle:
            assert await oracle.classify("Title: x") is OracleVerdict.INCONCLUSIVE

    async def test_sends_chat_completion(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return _reply("NORMAL")

        async with _client(handler) as client:
            oracle = ParkedOracle(ACTIVE, client=client)
            verdict = await oracle.classify("Title: Bakery")

        assert verdict is OracleVerdict.NORMAL
        request = seen[0]
        assert request.url.path == "/v1/chat/completions"
        assert request.headers["Authorization"] == "Bearer sk-test-123456789"
        payload = json.loads(request.content)
        assert payload["model"] == "test-model"
        assert payload["messages"][-1]["content"] == "Title: Bakery"

    async def test_parked_reply(self):
        async with _client(lambda request: _reply("PARKED")) as client:
            verdict = await ParkedOracle(ACTIVE, client=client).classify("x")
        assert verdict is OracleVerdict.CONFIRMED_PARKED

    async def test_http_error_is_inconclusive(self):
        async with _client(lambda request: httpx.Response(500, json={"error": "down"})) as client:
            verdict = await ParkedOracle(ACTIVE, client=client).classify("x")
        assert verdict is OracleVerdict.INCONCLUSIVE

    async def test_malformed_reply_is_inconclusive(self):
        async with _client(lambda request: httpx.Response(200, json={"choices": []})) as client:
            verdict = await ParkedOracle(ACTIVE, client=client).classify("x")
        assert verdict is OracleVerdict.INCONCLUSIVE

    async def test_transport_error_is_inconclusive(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectTimeout("timed out", request=request)

        async with _client(handler) as client:
            verdict = await ParkedOracle(ACTIVE, client=client).classify("x")
        assert verdict is OracleVerdict.INCONCLUSIVE

    async def test_context_manager_owns_client(self):
        oracle = ParkedOracle(ACTIVE)
        async with oracle:
            assert oracle._client is not None
        assert oracle._client is None

    async def test_injected_client_not_closed(self):
        async with _client(lambda request: _reply("NORMAL")) as client:
            async with ParkedOracle(ACTIVE, client=client):
                pass
            assert not client.is_closed
