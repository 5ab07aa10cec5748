from __future__ import annotations

import threading

import pytest

from lib_log_datadog.adapters.blocking import THREAD_NAME, BlockingDispatcher
from lib_log_datadog.adapters.channel import MessageChannel
from lib_log_datadog.domain.record import DataDogLog
from tests.os_markers import OS_AGNOSTIC
from tests.recorders import RecordingClient, make_log

pytestmark = [OS_AGNOSTIC]


def test_dispatcher_drains_everything_before_join_returns() -> None:
    client = RecordingClient()
    channel: MessageChannel[DataDogLog] = MessageChannel()
    dispatcher = BlockingDispatcher(client, channel)
    dispatcher.start()

    for index in range(120):
        channel.try_send(make_log(index))
    channel.close()

    assert dispatcher.join(timeout=5.0) is True
    assert client.messages == [f"message-{index}" for index in range(120)]
    assert all(len(batch) <= 50 for batch in client.batches)


def test_dispatcher_runs_on_named_daemon_thread() -> None:
    gate = threading.Event()
    client = RecordingClient(gate=gate)
    channel: MessageChannel[DataDogLog] = MessageChannel()
    dispatcher = BlockingDispatcher(client, channel)
    dispatcher.start()
    channel.try_send(make_log(0))

    assert client.started.wait(timeout=5.0)
    names = {thread.name: thread.daemon for thread in threading.enumerate()}
    assert names.get(THREAD_NAME) is True
    assert dispatcher.is_alive()

    gate.set()
    channel.close()
    assert dispatcher.join(timeout=5.0)
    assert not dispatcher.is_alive()


def test_join_without_start_reports_finished() -> None:
    dispatcher = BlockingDispatcher(RecordingClient(), MessageChannel())
    assert dispatcher.join() is True


def test_join_times_out_while_a_send_is_stuck() -> None:
    gate = threading.Event()
    client = RecordingClient(gate=gate)
    channel: MessageChannel[DataDogLog] = MessageChannel()
    dispatcher = BlockingDispatcher(client, channel)
    dispatcher.start()
    channel.try_send(make_log(0))
    channel.close()
    assert client.started.wait(timeout=5.0)

    assert dispatcher.join(timeout=0.05) is False

    gate.set()
    assert dispatcher.join(timeout=5.0) is True


def test_failed_batch_is_dropped_and_reported() -> None:
    client = RecordingClient(fail_times=1)
    channel: MessageChannel[DataDogLog] = MessageChannel()
    selflog: MessageChannel[str] = MessageChannel(100)
    dispatcher = BlockingDispatcher(client, channel, selflog, threshold=2)
    dispatcher.start()

    for index in range(4):
        channel.try_send(make_log(index))
    channel.close()
    assert dispatcher.join(timeout=5.0)

    assert client.messages == ["message-2", "message-3"]
    diagnostics = selflog.drain()
    assert diagnostics == ["failed to deliver 2 logs: intake unavailable"]


class _ExplodingReceiver:
    def try_recv(self) -> DataDogLog:
        raise KeyError("broken channel")

    def wait(self, timeout: float | None = None) -> bool:
        return True

    async def wait_async(self) -> None:
        return None


def test_crashing_loop_is_reported_to_selflog(caplog: pytest.LogCaptureFixture) -> None:
    selflog: MessageChannel[str] = MessageChannel(100)
    dispatcher = BlockingDispatcher(RecordingClient(), _ExplodingReceiver(), selflog)  # type: ignore[arg-type]

    with caplog.at_level("ERROR", logger="lib_log_datadog.adapters.blocking"):
        dispatcher.start()
        assert dispatcher.join(timeout=5.0)

    assert selflog.drain() == ["dispatcher stopped: 'broken channel'"]
    assert "Dispatcher thread crashed" in caplog.text
