#!/usr/bin/env python3
"""
Timer Handle

Wraps a single scheduled callback. A TimerHandle owns at most one live
scheduler registration at a time.
"""

import logging
from typing import Callable, Optional

from .scheduler import Scheduler, CONTINUE, STOP

logger = logging.getLogger(__name__)


class TimerHandle:
    """A restartable periodic or single-shot timer"""

    def __init__(self, scheduler: Scheduler, name: str = "timer"):
        """
        Initialize the timer
        
        Args:
            scheduler: Scheduler used to register the callback
            name: Name used in log messages
        """
        self.scheduler = scheduler
        self.name = name
        self.callback: Optional[Callable[[], object]] = None
        self.interval: Optional[float] = None
        self.repeating = True
        self._handle = None
        self._token = None

    @property
    def active(self) -> bool:
        return self._handle is not None

    def start(self, callback: Callable[[], object], interval: float, repeating: bool = True):
        """
        Schedule callback every interval seconds, or once if not repeating
        
        A repeating callback keeps running until it returns STOP or stop()
        is called. Starting an active timer stops the previous registration
        first.
        
        Args:
            callback: Function to run on the event loop
            interval: Interval in seconds
            repeating: Run periodically instead of once
        """
        self.stop()

        self.callback = callback
        self.interval = interval
        self.repeating = repeating
        token = object()
        self._token = token

        def fire():
            if self._token is not token:
                return STOP
            try:
                result = callback()
            except Exception:
                if self._token is token:
                    self._handle = None
                    self._token = None
                raise
            if self._token is not token:
                # stopped or restarted from inside the callback
                return STOP
            if not repeating or result is STOP:
                self._handle = None
                self._token = None
                return STOP
            return CONTINUE

        if repeating:
            self._handle = self.scheduler.schedule_repeating(interval, fire)
        else:
            self._handle = self.scheduler.schedule_once(interval, fire)
        logger.debug(f"Started {self.name} ({interval}s, repeating={repeating})")

    def stop(self):
        """Remove the registration. Does nothing when the timer is not active."""
        if self._handle is None:
            return
        handle = self._handle
        self._handle = None
        self._token = None
        self.scheduler.cancel(handle)
        logger.debug(f"Stopped {self.name}")
