from __future__ import annotations

import pytest

from lib_log_datadog.domain.batching import FLUSH_THRESHOLD, BatchPolicy, Step


def test_default_threshold_is_fifty() -> None:
    assert FLUSH_THRESHOLD == 50
    assert BatchPolicy().threshold == 50


def test_threshold_reached_requests_flush_of_exactly_threshold_records() -> None:
    policy: BatchPolicy[int] = BatchPolicy()
    steps = [policy.on_record(index) for index in range(FLUSH_THRESHOLD)]

    assert steps[:-1] == [Step.CONTINUE] * (FLUSH_THRESHOLD - 1)
    assert steps[-1] is Step.FLUSH
    assert policy.take() == list(range(FLUSH_THRESHOLD))
    assert len(policy) == 0


def test_full_batch_must_be_taken_before_new_records() -> None:
    policy: BatchPolicy[str] = BatchPolicy(threshold=1)
    assert policy.on_record("a") is Step.FLUSH
    with pytest.raises(RuntimeError, match="take"):
        policy.on_record("b")


def test_empty_channel_flushes_partial_batch_before_waiting() -> None:
    policy: BatchPolicy[str] = BatchPolicy()
    policy.on_record("a")

    step = policy.on_empty()

    assert step is Step.FLUSH_THEN_WAIT
    assert step.flushes and step.waits and not step.stops


def test_empty_channel_with_empty_batch_only_waits() -> None:
    step = BatchPolicy().on_empty()
    assert step is Step.WAIT
    assert not step.flushes


def test_closed_channel_flushes_remainder_then_stops() -> None:
    policy: BatchPolicy[str] = BatchPolicy()
    policy.on_record("a")
    assert policy.on_closed() is Step.FLUSH_THEN_STOP
    policy.take()
    assert policy.on_closed() is Step.STOP


def test_take_returns_independent_list() -> None:
    policy: BatchPolicy[str] = BatchPolicy()
    policy.on_record("a")
    batch = policy.take()
    policy.on_record("b")
    assert batch == ["a"]
    assert list(policy) == ["b"]


def test_threshold_must_be_positive() -> None:
    with pytest.raises(ValueError, match="positive"):
        BatchPolicy(threshold=0)
