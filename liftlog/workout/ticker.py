"""Periodic elapsed-time tick for a live workout session."""

from __future__ import annotations

import asyncio
from typing import Callable, Optional


TickCallback = Callable[[], None]


class ElapsedTicker:
    def __init__(self, interval_sec: float = 1.0) -> None:
        if interval_sec <= 0:
            raise ValueError("Tick interval must be > 0")
        self._interval_sec = interval_sec
        self._task: Optional[asyncio.Task[None]] = None
        self._stop_event = asyncio.Event()
        self.tick_count = 0

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self, on_tick: TickCallback) -> None:
        """Schedule ``on_tick`` every interval on the running event loop."""
        if self.is_running:
            raise RuntimeError("Ticker already running")

        loop = asyncio.get_running_loop()
        self._stop_event = asyncio.Event()
        self.tick_count = 0
        self._task = loop.create_task(self._run(on_tick))

    def cancel(self) -> None:
        if self._task is None:
            return

        self._stop_event.set()
        if not self._task.done():
            self._task.cancel()
        self._task = None

    async def _run(self, on_tick: TickCallback) -> None:
        while not self._stop_event.is_set():
            await asyncio.sleep(self._interval_sec)
            if self._stop_event.is_set():
                return
            self.tick_count += 1
            on_tick()
