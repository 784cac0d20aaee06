"""In-process event bus — deliver node events to async listeners.

One input queue; every event is handed to each listener registered for
its name in a task of its own, so a slow dispatch never blocks the next
event.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import TYPE_CHECKING, Any, Protocol

from delegate_notifier.notifications.events import RawEvent

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    Listener = Callable[[RawEvent], Awaitable[None]]

logger = logging.getLogger(__name__)

_INPUT_BUFFER = 100


class EventListenerRegistry(Protocol):
    """The part of an event bus the notifier subscribes through."""

    def listen(self, name: str, handler: Listener) -> None: ...


class EventBus:
    """Asyncio-based event bus.

    Usage::

        bus = EventBus()
        bus.listen("block.forged", handler)
        await bus.start()
        await bus.emit("block.forged", {"id": "abc"})
        await bus.drain()
        await bus.stop()
    """

    def __init__(self, *, buffer: int = _INPUT_BUFFER) -> None:
        self._input: asyncio.Queue[RawEvent] = asyncio.Queue(maxsize=buffer)
        self._listeners: dict[str, list[Listener]] = {}
        self._inflight: set[asyncio.Task[None]] = set()
        self._task: asyncio.Task[None] | None = None
        self._running = False

    @property
    def is_running(self) -> bool:
        """Whether the exchange loop is running."""
        return self._running

    def listen(self, name: str, handler: Listener) -> None:
        """Register *handler* for events called *name*."""
        self._listeners.setdefault(name, []).append(handler)

    async def emit(self, name: str, data: Any = None) -> None:
        """Enqueue an event for delivery to its listeners."""
        try:
            self._input.put_nowait(RawEvent(name=name, data=data))
        except asyncio.QueueFull:
            logger.warning("Event bus input queue full — dropping event %s", name)

    async def start(self) -> None:
        """Start the exchange loop."""
        if self._running:
            return
        self._running = True
        self._task = asyncio.create_task(self._exchange())

    async def stop(self) -> None:
        """Stop the exchange loop and wait for running listeners."""
        if not self._running:
            return
        self._running = False
        if self._task:
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
            self._task = None
        if self._inflight:
            await asyncio.gather(*self._inflight, return_exceptions=True)

    async def drain(self) -> None:
        """Wait until every queued event has been handled."""
        await self._input.join()
        while self._inflight:
            await asyncio.gather(*self._inflight, return_exceptions=True)

    async def _exchange(self) -> None:
        """Read events from input and start one task per listener."""
        while self._running:
            try:
                event = await asyncio.wait_for(self._input.get(), timeout=1.0)
            except TimeoutError:
                continue
            except asyncio.CancelledError:
                raise
            for handler in list(self._listeners.get(event.name, [])):
                task = asyncio.create_task(self._run(handler, event))
                self._inflight.add(task)
                task.add_done_callback(self._inflight.discard)
            self._input.task_done()

    @staticmethod
    async def _run(handler: Listener, event: RawEvent) -> None:
        try:
            await handler(event)
        except Exception:
            logger.exception("Event listener error for %s", event.name)
