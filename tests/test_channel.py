from __future__ import annotations

import asyncio

import pytest

from render_monitor.channel import ChannelClosed, EventChannel
from render_monitor.events import Failure, Finished, RenderedFrame, Started, Success


class TestEventChannel:
    @pytest.mark.asyncio
    async def test_receives_in_send_order(self):
        channel = EventChannel()
        sent = [Started(), RenderedFrame(1, 10), RenderedFrame(2, 20), Finished()]
        for event in sent:
            channel.send(event)
        received = [await channel.receive() for _ in sent]
        assert received == sent

    @pytest.mark.asyncio
    async def test_close_after_events_drains_first(self):
        channel = EventChannel()
        channel.send(Started())
        channel.close(Success())
        assert await channel.receive() == Started()
        with pytest.raises(ChannelClosed):
            await channel.receive()

    @pytest.mark.asyncio
    async def test_closed_keeps_raising(self):
        channel = EventChannel()
        channel.close(Success())
        for _ in range(3):
            with pytest.raises(ChannelClosed):
                await channel.receive()

    @pytest.mark.asyncio
    async def test_waiting_consumer_wakes_on_close(self):
        channel = EventChannel()
        waiter = asyncio.create_task(channel.receive())
        await asyncio.sleep(0)
        channel.close(Success())
        with pytest.raises(ChannelClosed):
            await asyncio.wait_for(waiter, timeout=1)

    @pytest.mark.asyncio
    async def test_async_iteration(self):
        channel = EventChannel()
        channel.send(Started())
        channel.send(Finished())
        channel.close(Success())
        assert [event async for event in channel] == [Started(), Finished()]

    @pytest.mark.asyncio
    async def test_concurrent_producer(self):
        channel = EventChannel()

        async def produce():
            for n in range(50):
                channel.send(RenderedFrame(n, n))
                await asyncio.sleep(0)
            channel.close(Success())

        producer = asyncio.create_task(produce())
        received = [event.frame_number async for event in channel]
        await producer
        assert received == list(range(50))

    def test_send_after_close_raises(self):
        channel = EventChannel()
        channel.close(Success())
        with pytest.raises(ChannelClosed):
            channel.send(Started())

    def test_outcome_recorded_once(self):
        channel = EventChannel()
        assert channel.outcome is None
        assert not channel.closed
        channel.close(Failure("boom"))
        channel.close(Success())
        assert channel.closed
        assert channel.outcome == Failure("boom")
