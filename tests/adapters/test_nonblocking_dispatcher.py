from __future__ import annotations

import asyncio
import concurrent.futures
import threading

import pytest

from lib_log_datadog.adapters.channel import MessageChannel
from lib_log_datadog.adapters.nonblocking import logger_task, schedule
from lib_log_datadog.domain.record import DataDogLog
from tests.os_markers import OS_AGNOSTIC
from tests.recorders import AsyncRecordingClient, make_log

pytestmark = [OS_AGNOSTIC]


def test_logger_task_drains_channel_when_awaited() -> None:
    client = AsyncRecordingClient()
    channel: MessageChannel[DataDogLog] = MessageChannel()
    for index in range(60):
        channel.try_send(make_log(index))
    channel.close()

    asyncio.run(logger_task(client, channel))

    assert [len(batch) for batch in client.batches] == [50, 10]
    assert client.messages[0] == "message-0"
    assert client.messages[-1] == "message-59"


def test_logger_task_flushes_idle_partial_batch() -> None:
    client = AsyncRecordingClient()
    channel: MessageChannel[DataDogLog] = MessageChannel()

    async def scenario() -> None:
        task = schedule(logger_task(client, channel))
        for index in range(3):
            channel.try_send(make_log(index))
        for _ in range(100):
            if client.batches:
                break
            await asyncio.sleep(0.01)
        assert client.batches == [["message-0", "message-1", "message-2"]]
        channel.close()
        await asyncio.wait_for(task, timeout=5.0)

    asyncio.run(scenario())


def test_schedule_without_running_loop_raises() -> None:
    coro = logger_task(AsyncRecordingClient(), MessageChannel())
    try:
        with pytest.raises(RuntimeError):
            schedule(coro)
    finally:
        coro.close()


def test_schedule_on_loop_in_other_thread_returns_future() -> None:
    loop = asyncio.new_event_loop()
    runner = threading.Thread(target=loop.run_forever, daemon=True)
    runner.start()
    try:
        client = AsyncRecordingClient()
        channel: MessageChannel[DataDogLog] = MessageChannel()
        future = schedule(logger_task(client, channel), loop)
        assert isinstance(future, concurrent.futures.Future)

        channel.try_send(make_log(1))
        channel.close()
        future.result(timeout=5.0)

        assert client.messages == ["message-1"]
    finally:
        loop.call_soon_threadsafe(loop.stop)
        runner.join(timeout=5.0)
        loop.close()


def test_failures_reach_selflog_without_stopping_the_task() -> None:
    client = AsyncRecordingClient(fail_times=1)
    channel: MessageChannel[DataDogLog] = MessageChannel()
    selflog: MessageChannel[str] = MessageChannel(100)
    for index in range(4):
        channel.try_send(make_log(index))
    channel.close()

    asyncio.run(logger_task(client, channel, selflog, threshold=2))

    assert client.messages == ["message-2", "message-3"]
    assert selflog.drain() == ["failed to deliver 2 logs: intake unavailable"]
