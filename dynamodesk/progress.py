"""Progress delivery for paginated reads and batch writes.

The executor and the batcher are the only producers of progress events; the
caller (typically the UI bridge) is the only consumer. Sinks only deliver
events, the throttle-and-flush policy lives on the producer side in
ProgressBuffer.
"""

import asyncio
from collections.abc import Callable
from typing import Protocol, TypeAlias

from dynamodesk.keys import Item
from dynamodesk.models import QueryProgress, QueryStarted
from dynamodesk.operations import WriteProgress

ProgressEvent: TypeAlias = QueryStarted | QueryProgress | WriteProgress


class ProgressSink(Protocol):
    def emit(self, event: ProgressEvent) -> None: ...


class NullProgressSink:
    """Discards every event."""

    def emit(self, event: ProgressEvent) -> None:
        return None


class CallbackProgressSink:
    """Forwards every event to a callable.

    Example:
        sink = CallbackProgressSink(lambda event: window.send(event.kind, event))

    """

    def __init__(self, callback: Callable[[ProgressEvent], None]) -> None:
        self._callback = callback

    def emit(self, event: ProgressEvent) -> None:
        self._callback(event)


class ProgressChannel:
    """Unbounded asyncio queue of progress events.

    Emitting never blocks the producer. The consumer awaits receive(), or calls
    drain() to collect whatever has been emitted so far.

    Example:
        channel = ProgressChannel()
        task = asyncio.create_task(executor.execute_scan(description, 1000, channel))
        while not task.done():
            event = await channel.receive()
            render(event)

    """

    def __init__(self) -> None:
        self._queue: asyncio.Queue[ProgressEvent] = asyncio.Queue()

    def emit(self, event: ProgressEvent) -> None:
        self._queue.put_nowait(event)

    async def receive(self) -> ProgressEvent:
        return await self._queue.get()

    def drain(self) -> list[ProgressEvent]:
        events: list[ProgressEvent] = []
        while not self._queue.empty():
            events.append(self._queue.get_nowait())
        return events

    def __len__(self) -> int:
        return self._queue.qsize()


class ProgressBuffer:
    """Throttle-and-flush policy for the items of one paginated read.

    Items are added as pages arrive. take_if_due() hands them out at most once
    per throttle window (the first page is always due), and take() flushes the
    rest for the final event, so every item is reported exactly once.
    """

    def __init__(self, *, throttle_ms: int, clock: Callable[[], float]) -> None:
        self._throttle_s = throttle_ms / 1000
        self._clock = clock
        self._pending: list[Item] = []
        self._last_emitted: float | None = None

    def add(self, items: list[Item]) -> None:
        self._pending.extend(items)

    def take_if_due(self) -> list[Item] | None:
        now = self._clock()
        if self._last_emitted is not None and now - self._last_emitted < self._throttle_s:
            return None
        self._last_emitted = now
        return self.take()

    def take(self) -> list[Item]:
        items, self._pending = self._pending, []
        return items


__all__ = [
    "CallbackProgressSink",
    "NullProgressSink",
    "ProgressBuffer",
    "ProgressChannel",
    "ProgressEvent",
    "ProgressSink",
]
