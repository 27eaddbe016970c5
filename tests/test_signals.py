# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Tests for ClassificationSignals and collect_signals."""

from __future__ import annotations

import pytest

from urlstatus.errors import ClassificationFault
from urlstatus.signals import ClassificationSignals, collect_signals

from tests._fakes import FakeDocument


def test_from_parts_lowercases_and_measures():
    s = ClassificationSignals.from_parts(title="Hello World", body="  Some Text  ", element_count=3)
    assert s.title == "hello world"
    assert s.body == "  some text  "
    assert s.body_length == len("Some Text")
    assert s.raw_title == "Hello World"


def test_from_parts_tolerates_none():
    s = ClassificationSignals.from_parts(title=None, body=None)
    assert s.title == ""
    assert s.body_length == 0


async def test_collect_signals_reads_document():
    doc = FakeDocument(title="Shop", body="Buy shoes", element_count=42, meta_description="Shoes")
    s = await collect_signals(doc)
    assert (s.title, s.body, s.element_count, s.meta_description) == ("shop", "buy shoes", 42, "Shoes")


async def test_collect_signals_wraps_errors():
    doc = FakeDocument(fail_with=RuntimeError("Target page, context or browser has been closed"))
    with pytest.raises(ClassificationFault, match="Could not read page content") as exc_info:
        await collect_signals(doc)
    assert isinstance(exc_info.value.__cause__, RuntimeError)
