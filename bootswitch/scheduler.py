#!/usr/bin/env python3
"""
Cooperative Scheduler

Thin abstraction over the event loop's timer primitive. Every periodic or
single-shot callback used by bootswitch is registered through a Scheduler so
that registrations can be counted and removed synchronously.

Callbacks of repeating registrations stay scheduled until they return STOP.
The return value of a single-shot callback is ignored.
"""

import asyncio
import logging
from typing import Callable, Optional, Set

logger = logging.getLogger(__name__)

CONTINUE = True
STOP = False


class Scheduler:
    """Interface of the host scheduling primitive"""

    def schedule_repeating(self, interval: float, callback: Callable[[], bool]):
        """
        Run callback every interval seconds until it returns STOP
        
        Returns:
            Opaque handle accepted by cancel()
        """
        raise NotImplementedError

    def schedule_once(self, interval: float, callback: Callable[[], object]):
        """
        Run callback once after interval seconds
        
        Returns:
            Opaque handle accepted by cancel()
        """
        raise NotImplementedError

    def cancel(self, handle) -> None:
        """Remove a registration. Unknown or finished handles are ignored."""
        raise NotImplementedError


class _ScheduledCall:
    """A single registration on an asyncio loop"""

    def __init__(self, owner: "AsyncioScheduler", interval: float,
                 callback: Callable[[], object], repeating: bool):
        self.owner = owner
        self.interval = interval
        self.callback = callback
        self.repeating = repeating
        self.cancelled = False
        self._timer: Optional[asyncio.TimerHandle] = None

    def arm(self):
        self._timer = self.owner.loop.call_later(self.interval, self._fire)

    def _fire(self):
        self._timer = None
        if self.cancelled:
            return
        try:
            result = self.callback()
        except Exception as e:
            logger.error(f"Scheduled callback {self.callback!r} raised: {e}", exc_info=True)
            result = STOP

        # The callback may have cancelled its own registration
        if self.cancelled:
            return

        if self.repeating and result is not STOP:
            self.arm()
        else:
            self.owner._forget(self)

    def cancel(self):
        self.cancelled = True
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None


class AsyncioScheduler(Scheduler):
    """Scheduler backed by loop.call_later on an asyncio event loop"""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        """
        Initialize the scheduler
        
        Args:
            loop: Event loop to schedule on. Defaults to the running loop at
                  the time of the first registration.
        """
        self._loop = loop
        self._calls: Set[_ScheduledCall] = set()

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    @property
    def active_count(self) -> int:
        """Number of registrations that can still fire"""
        return len(self._calls)

    def _add(self, interval: float, callback, repeating: bool) -> _ScheduledCall:
        if interval < 0:
            raise ValueError(f"Interval must not be negative: {interval}")
        call = _ScheduledCall(self, interval, callback, repeating)
        self._calls.add(call)
        call.arm()
        logger.debug(f"Scheduled {'repeating' if repeating else 'single-shot'} "
                     f"callback every {interval}s ({len(self._calls)} active)")
        return call

    def schedule_repeating(self, interval: float, callback: Callable[[], bool]) -> _ScheduledCall:
        return self._add(interval, callback, True)

    def schedule_once(self, interval: float, callback: Callable[[], object]) -> _ScheduledCall:
        return self._add(interval, callback, False)

    def cancel(self, handle) -> None:
        if handle is None:
            return
        handle.cancel()
        self._forget(handle)

    def _forget(self, call: _ScheduledCall) -> None:
        self._calls.discard(call)

    def cancel_all(self) -> None:
        """Remove every registration made through this scheduler"""
        for call in list(self._calls):
            self.cancel(call)
