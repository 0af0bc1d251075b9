#!/usr/bin/env python3
"""
Host Menu Watcher

Waits for a host component that may not exist yet when bootswitch starts,
then hands off to the caller without blocking startup.
"""

import logging
from typing import Callable, Optional

from .errors import MenuUnavailable, PreconditionViolation
from .scheduler import Scheduler, CONTINUE, STOP
from .timer import TimerHandle

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 0.1


class HostMenuWatcher:
    """Polls a readiness predicate until it holds"""

    def __init__(self, scheduler: Scheduler, poll_interval: float = DEFAULT_POLL_INTERVAL,
                 max_attempts: Optional[int] = None):
        """
        Initialize the watcher
        
        Args:
            scheduler: Scheduler used for polling
            poll_interval: Seconds between two checks of the predicate
            max_attempts: Give up after this many polls. None polls forever
                          and leaves bounding the wait to cancel().
        """
        if poll_interval <= 0:
            raise PreconditionViolation(f"Poll interval must be positive: {poll_interval}")
        if max_attempts is not None and max_attempts < 1:
            raise PreconditionViolation(f"max_attempts must be at least 1: {max_attempts}")
        self.poll_interval = poll_interval
        self.max_attempts = max_attempts
        self.attempts = 0
        self._timer = TimerHandle(scheduler, name="menu watcher")

    @property
    def watching(self) -> bool:
        return self._timer.active

    def watch(self, predicate: Callable[[], bool], on_ready: Callable[[], None],
              on_error: Optional[Callable[[MenuUnavailable], None]] = None) -> bool:
        """
        Call on_ready once predicate() holds
        
        The predicate is checked immediately. If it already holds, on_ready
        runs synchronously and nothing is scheduled. Otherwise the predicate
        is re-checked on every poll tick. A running watch is cancelled first.
        
        Args:
            predicate: Readiness check
            on_ready: Called exactly once when the predicate holds
            on_error: Called with MenuUnavailable when max_attempts runs out
            
        Returns:
            True if on_ready ran synchronously, False if polling started
        """
        self.cancel()
        self.attempts = 0

        if predicate():
            logger.debug("Host menu ready, attaching immediately")
            on_ready()
            return True

        logger.info(f"Host menu not ready yet, polling every {self.poll_interval}s")

        def poll():
            self.attempts += 1
            if predicate():
                logger.debug(f"Host menu ready after {self.attempts} polls")
                self._timer.stop()
                on_ready()
                return STOP
            if self.max_attempts is not None and self.attempts >= self.max_attempts:
                self._timer.stop()
                error = MenuUnavailable(self.attempts)
                logger.error(str(error))
                if on_error is not None:
                    on_error(error)
                return STOP
            return CONTINUE

        self._timer.start(poll, self.poll_interval, repeating=True)
        return False

    def cancel(self):
        """Stop an in-flight watch. on_ready will not be called afterwards."""
        if self._timer.active:
            logger.debug(f"Cancelling menu watch after {self.attempts} polls")
        self._timer.stop()
