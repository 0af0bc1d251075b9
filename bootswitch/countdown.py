#!/usr/bin/env python3
"""
Countdown Controller

Drives a cancellable confirmation countdown. Two timers run under one
controller: the tick timer owns the authoritative remaining time, the
optional redraw timer only re-announces the current display value. Both
share state on the single event loop thread, so no locking is needed.

States: idle -> counting -> timed-out | cancelled
"""

import logging
from typing import Callable, Optional

from .errors import PreconditionViolation
from .scheduler import Scheduler, CONTINUE, STOP
from .timer import TimerHandle

logger = logging.getLogger(__name__)

IDLE = "idle"
COUNTING = "counting"
TIMED_OUT = "timed-out"
CANCELLED = "cancelled"


def _require_int(name: str, value, minimum: int):
    if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
        raise PreconditionViolation(f"{name} must be an integer >= {minimum}, got {value!r}")


class CountdownController:
    """Countdown with independent tick and display cadences"""

    def __init__(self, scheduler: Scheduler):
        self._tick_timer = TimerHandle(scheduler, name="countdown tick")
        self._redraw_timer = TimerHandle(scheduler, name="countdown redraw")
        self.state = IDLE
        self.remaining = 0
        self.display_value = 0
        self.tick_granularity = 1
        self.display_granularity = 1
        self._on_tick: Optional[Callable[[int], None]] = None
        self._on_timeout: Optional[Callable[[], None]] = None

    @property
    def running(self) -> bool:
        return self.state == COUNTING

    @property
    def active_timers(self) -> int:
        return int(self._tick_timer.active) + int(self._redraw_timer.active)

    def start(self, total_seconds: int, tick_granularity: int = 1, display_granularity: int = 1,
              on_tick: Optional[Callable[[int], None]] = None,
              on_timeout: Optional[Callable[[], None]] = None,
              redraw_interval: Optional[float] = None):
        """
        Start counting down from total_seconds
        
        on_tick receives the display value right away, then every time the
        display value changes, and additionally every redraw_interval
        seconds if one is given. on_timeout runs once when the remaining
        time reaches zero. A countdown already in progress is cancelled
        first.
        
        Args:
            total_seconds: Length of the countdown
            tick_granularity: Seconds between two decrements
            display_granularity: The display value only takes values that
                                 are multiples of this (and zero)
            on_tick: Display update callback
            on_timeout: Completion callback
            redraw_interval: Optional seconds between forced redraws
        """
        _require_int("total_seconds", total_seconds, 0)
        _require_int("tick_granularity", tick_granularity, 1)
        _require_int("display_granularity", display_granularity, 1)
        if redraw_interval is not None and redraw_interval <= 0:
            raise PreconditionViolation(f"redraw_interval must be positive, got {redraw_interval!r}")

        if self.state == COUNTING:
            logger.debug("Countdown restarted while running, cancelling previous run")
            self.cancel()

        self.remaining = total_seconds
        self.display_value = total_seconds
        self.tick_granularity = tick_granularity
        self.display_granularity = display_granularity
        self._on_tick = on_tick
        self._on_timeout = on_timeout
        self.state = COUNTING
        logger.info(f"Countdown started: {total_seconds}s")

        self._emit()
        if self.state != COUNTING:
            return

        self._tick_timer.start(self._tick, tick_granularity, repeating=True)
        if redraw_interval is not None:
            self._redraw_timer.start(self._redraw, redraw_interval, repeating=True)

    def _emit(self):
        if self._on_tick is None:
            return
        try:
            self._on_tick(self.display_value)
        except Exception as e:
            # the countdown keeps running when the display fails
            logger.error(f"Countdown display update failed: {e}")

    def _tick(self):
        self.remaining = max(0, self.remaining - self.tick_granularity)

        if self.remaining % self.display_granularity == 0 and self.remaining != self.display_value:
            self.display_value = self.remaining
            self._emit()
            if self.state != COUNTING:
                return STOP

        if self.remaining == 0:
            self._time_out()
            return STOP
        return CONTINUE

    def _redraw(self):
        self._emit()
        return CONTINUE

    def _stop_timers(self):
        self._tick_timer.stop()
        self._redraw_timer.stop()

    def _time_out(self):
        self._stop_timers()
        self.state = TIMED_OUT
        logger.info("Countdown timed out")
        if self._on_timeout is not None:
            self._on_timeout()

    def cancel(self):
        """Stop counting without calling on_timeout. Safe in any state."""
        self._stop_timers()
        if self.state == COUNTING:
            self.state = CANCELLED
            logger.info(f"Countdown cancelled with {self.remaining}s remaining")
