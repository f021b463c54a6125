"""Ordered single-producer/single-consumer conduit for domain events."""

from __future__ import annotations

import asyncio
import logging

from render_monitor.events import DomainEvent, RunOutcome
from render_monitor.log_setup import TRACE

logger = logging.getLogger(__name__)


class ChannelClosed(Exception):
    """Raised by :meth:`EventChannel.receive` once the producer has closed.

    This is the normal end-of-stream signal, not an error.
    """

    pass


class _EndOfStream:
    """Queue marker enqueued by :meth:`EventChannel.close`."""


_END = _EndOfStream()


class EventChannel:
    """Unbounded FIFO of domain events with a deterministic close signal.

    The producer calls :meth:`send` for every event and :meth:`close`
    exactly once when it is done, handing over the run outcome. The
    consumer either awaits :meth:`receive` until it raises
    :class:`ChannelClosed` or iterates with ``async for``.
    """

    def __init__(self) -> None:
        self._queue: asyncio.Queue[DomainEvent | _EndOfStream] = asyncio.Queue()
        self._closed = False
        self._drained = False
        self.outcome: RunOutcome | None = None

    @property
    def closed(self) -> bool:
        return self._closed

    def send(self, event: DomainEvent) -> None:
        """Enqueue an event. Never blocks.

        Raises:
            ChannelClosed: If the channel was already closed.
        """
        if self._closed:
            raise ChannelClosed("send on a closed channel")
        logger.log(TRACE, "Channel send: %r", event)
        self._queue.put_nowait(event)

    def close(self, outcome: RunOutcome) -> None:
        """Release the sending end and record how the run ended.

        Closing twice is a no-op so producers can close from ``finally``.
        """
        if self._closed:
            return
        self._closed = True
        self.outcome = outcome
        self._queue.put_nowait(_END)

    async def receive(self) -> DomainEvent:
        """Wait for the next event in send order.

        Raises:
            ChannelClosed: When every event has been consumed and the
                producer has closed the channel. Repeated calls keep
                raising instead of blocking.
        """
        if self._drained:
            raise ChannelClosed()
        item = await self._queue.get()
        if isinstance(item, _EndOfStream):
            self._drained = True
            raise ChannelClosed()
        return item

    def __aiter__(self) -> EventChannel:
        return self

    async def __anext__(self) -> DomainEvent:
        try:
            return await self.receive()
        except ChannelClosed:
            raise StopAsyncIteration from None
