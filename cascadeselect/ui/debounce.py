"""
ui/debounce.py - Debounced delivery of value notifications

Collapses a burst of calls into one delivery of the most recent
argument after a quiet period. Built on the running asyncio loop's
call_later, so each wrapper holds at most one pending timer handle.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Callable, Optional, Set

from ..core.constants import DEFAULT_DEBOUNCE_SECONDS

logger = logging.getLogger("cascade.notify")


class DebouncedNotifier:
    """
    Deliver only the last argument seen within the quiet period.

    Intermediate arguments are dropped, never batched. If the sink returns
    an awaitable it is scheduled on the loop.
    """

    def __init__(
        self,
        sink: Callable[[Any], Any],
        wait_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
    ):
        self._sink = sink
        self.wait_seconds = wait_seconds
        self._handle: Optional[asyncio.TimerHandle] = None
        self._pending: Any = None
        self._tasks: Set[asyncio.Future] = set()
        self.delivered_count = 0
        self.dropped_count = 0

    @property
    def pending(self) -> bool:
        return self._handle is not None

    @property
    def in_flight(self) -> int:
        """Number of async sink deliveries still running."""
        return len(self._tasks)

    def __call__(self, arg: Any) -> None:
        """Schedule delivery of arg, replacing any delivery already scheduled."""
        loop = asyncio.get_running_loop()
        if self._handle is not None:
            self._handle.cancel()
            self.dropped_count += 1
        self._pending = arg
        self._handle = loop.call_later(self.wait_seconds, self._deliver)

    def cancel(self) -> bool:
        """Drop the pending delivery, if any."""
        if self._handle is None:
            return False
        self._handle.cancel()
        self._handle = None
        self._pending = None
        self.dropped_count += 1
        return True

    def flush(self) -> bool:
        """Deliver the pending argument now instead of waiting."""
        if self._handle is None:
            return False
        self._handle.cancel()
        self._deliver()
        return True

    def _deliver(self) -> None:
        arg = self._pending
        self._handle = None
        self._pending = None
        self.delivered_count += 1
        logger.debug(f"Debounced delivery after {self.wait_seconds}s quiet period")

        try:
            result = self._sink(arg)
            if inspect.isawaitable(result):
                task = asyncio.ensure_future(result)
                self._tasks.add(task)
                task.add_done_callback(self._on_sink_done)
        except Exception as e:
            logger.error(f"Debounced sink error: {e}")

    def _on_sink_done(self, task: asyncio.Future) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(f"Debounced sink error: {error}")
