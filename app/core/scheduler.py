"""Single-slot deferred task scheduler used for keystroke debouncing."""

import asyncio
import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class DebounceScheduler:
    """
    Holds at most one pending deferred task.

    Scheduling a new task cancels the previous one if it has not fired yet.
    Tasks run on the event loop thread via ``loop.call_later``.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop
        self._handle: Optional[asyncio.TimerHandle] = None

    @property
    def pending(self) -> bool:
        """True while a scheduled task has not fired or been cancelled."""
        return self._handle is not None

    def schedule(self, delay: float, task: Callable[[], object]) -> asyncio.TimerHandle:
        """Run ``task`` after ``delay`` seconds, replacing any pending task."""
        self.cancel_all()
        loop = self._loop or asyncio.get_running_loop()
        self._handle = loop.call_later(delay, self._fire, task)
        return self._handle

    def cancel_all(self) -> None:
        """Drop the pending task, if any."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self, task: Callable[[], object]) -> None:
        self._handle = None
        task()
