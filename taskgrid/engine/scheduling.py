# File: /taskgrid/engine/scheduling.py | Version: 1.0 | Title: Cancellable timer handles on the asyncio loop
from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional, Set

log = logging.getLogger(__name__)

AsyncCallback = Callable[[], Awaitable[None]]


class ScheduledTask:
    """
    Fires `callback` after `delay` seconds (and every `delay` seconds when
    `repeat` is set). Cancelling only drops the pending timer: a callback that
    already started keeps running, and `drain()` waits for it.
    """

    def __init__(
        self,
        delay: float,
        callback: AsyncCallback,
        *,
        repeat: bool = False,
        name: str = "task",
    ) -> None:
        self.delay = delay
        self.callback = callback
        self.repeat = repeat
        self.name = name
        self._handle: Optional[asyncio.TimerHandle] = None
        self._running: Set[asyncio.Task] = set()

    @property
    def pending(self) -> bool:
        return self._handle is not None

    @property
    def in_flight(self) -> int:
        return len(self._running)

    def start(self) -> "ScheduledTask":
        self.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.delay, self._fire)
        return self

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self) -> None:
        self._handle = None
        task = asyncio.ensure_future(self.callback())
        self._running.add(task)
        task.add_done_callback(self._finished)
        if self.repeat:
            self._handle = asyncio.get_running_loop().call_later(self.delay, self._fire)

    def _finished(self, task: asyncio.Task) -> None:
        self._running.discard(task)
        if not task.cancelled() and task.exception() is not None:
            log.error("Scheduled %s failed", self.name, exc_info=task.exception())

    async def drain(self) -> None:
        while self._running:
            await asyncio.gather(*list(self._running), return_exceptions=True)
