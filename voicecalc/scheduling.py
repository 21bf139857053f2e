"""Cancellable timers on a single cooperative event loop."""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class Scheduler(ABC):
    """Schedules callbacks on the event loop that drives the session."""

    @abstractmethod
    def call_later(self, delay: float, callback: Callable[[], None]):
        """Run callback after delay seconds.

        Returns:
            A handle with ``cancel()`` and ``cancelled()`` methods
        """
        pass


class AsyncioScheduler(Scheduler):
    """Scheduler backed by ``asyncio`` timer handles.

    Without an explicit loop it must be created from inside a running loop.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self.loop = loop or asyncio.get_running_loop()

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return self.loop.call_later(delay, callback)


class NamedTimer:
    """A single named, re-armable timer.

    Arming always cancels the previous instance first, so at most one
    pending callback exists per timer.
    """

    def __init__(self, name: str, scheduler: Scheduler):
        self.name = name
        self.scheduler = scheduler
        self._handle = None

    @property
    def active(self) -> bool:
        return self._handle is not None

    def arm(self, delay: float, callback: Callable[[], None]) -> None:
        self.cancel()

        def fire():
            self._handle = None
            logger.debug(f"Timer '{self.name}' fired")
            callback()

        self._handle = self.scheduler.call_later(delay, fire)
        logger.debug(f"Timer '{self.name}' armed for {delay:.3f}s")

    def cancel(self) -> bool:
        """Cancel the pending callback. Returns True if one was pending."""
        if self._handle is None:
            return False
        self._handle.cancel()
        self._handle = None
        logger.debug(f"Timer '{self.name}' cancelled")
        return True
