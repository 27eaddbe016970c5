# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Tests for RetryPolicy / RetryState."""

from __future__ import annotations

from urlstatus.retry import RetryPolicy, RetryState


def test_default_policy_gives_four_attempts():
    policy = RetryPolicy()
    assert policy.max_attempts == 4
    assert [policy.delay_after(n) for n in range(3)] == [1.0, 2.0, 4.0]


def test_state_walks_through_budget():
    state = RetryState()
    delays = []
    while state.can_retry:
        delays.append(state.record_failure(status=503))
        state.advance()
    assert delays == [1.0, 2.0, 4.0]
    assert state.attempts_made == 4
    assert state.last_status == 503


def test_record_failure_keeps_last_error():
    state = RetryState(policy=RetryPolicy(max_retries=1, base_delay_s=0.25))
    err = RuntimeError("net::ERR_CONNECTION_RESET")
    assert state.record_failure(error=err) == 0.25
    assert state.last_error is err
    assert state.last_status is None


def test_no_retries():
    state = RetryState(policy=RetryPolicy(max_retries=0))
    assert not state.can_retry
    assert state.attempts_made == 1
