#!/usr/bin/env python3
"""
Confirmation Presenter

Shows a modal surface with a live countdown message. The countdown either
times out (confirm), or is ended early by the Cancel or Restart buttons.
"""

import logging
from typing import Callable, List, Optional

from .countdown import CountdownController
from .scheduler import Scheduler

logger = logging.getLogger(__name__)

KEY_ESCAPE = "Escape"
KEY_RETURN = "Return"

DEFAULT_MESSAGE = "The system will restart automatically in {seconds} seconds."


class Button:
    """A modal surface button"""

    def __init__(self, label: str, action: Callable[[], None], key: Optional[str] = None,
                 default: bool = False):
        self.label = label
        self.action = action
        self.key = key
        self.default = default

    def __repr__(self):
        return f"Button({self.label!r}, key={self.key!r}, default={self.default})"


class ModalSurface:
    """Interface of a modal dialog provided by the host"""

    def open(self):
        raise NotImplementedError

    def close(self):
        raise NotImplementedError

    def set_title(self, text: str):
        raise NotImplementedError

    def set_message(self, text: str):
        raise NotImplementedError

    def set_buttons(self, buttons: List[Button]):
        raise NotImplementedError


class ConfirmationPresenter:
    """Owns one modal surface and the countdown shown on it"""

    def __init__(self, scheduler: Scheduler, surface: ModalSurface,
                 seconds: int = 60, tick: int = 1, display: int = 10,
                 redraw_interval: Optional[float] = 0.5,
                 message_template: str = DEFAULT_MESSAGE,
                 cancel_label: str = "Cancel", confirm_label: str = "Restart"):
        """
        Initialize the presenter
        
        Args:
            scheduler: Scheduler for the countdown timers
            surface: Modal surface to render on
            seconds: Countdown length
            tick: Countdown tick granularity in seconds
            display: Display granularity in seconds
            redraw_interval: Seconds between message redraws, None to only
                             redraw when the displayed value changes
            message_template: Message with a {seconds} placeholder
            cancel_label: Label of the cancel button
            confirm_label: Label of the confirm-now button
        """
        self.surface = surface
        self.countdown = CountdownController(scheduler)
        self.seconds = seconds
        self.tick = tick
        self.display = display
        self.redraw_interval = redraw_interval
        self.message_template = message_template
        self.cancel_label = cancel_label
        self.confirm_label = confirm_label
        self._open = False
        self._finished = True
        self._on_confirm: Optional[Callable[[], None]] = None
        self._on_cancel: Optional[Callable[[], None]] = None

    @property
    def is_open(self) -> bool:
        return self._open

    def format_message(self, seconds: int) -> str:
        return self.message_template.format(seconds=seconds)

    def present(self, title: str, on_confirm: Callable[[], None],
                on_cancel: Optional[Callable[[], None]] = None):
        """
        Open the surface and start the countdown
        
        Args:
            title: Dialog title
            on_confirm: Called on timeout or when the confirm button is used
            on_cancel: Called when the cancel button is used
        """
        if self._open:
            self.destroy()

        self._on_confirm = on_confirm
        self._on_cancel = on_cancel
        self._finished = False

        self.surface.set_title(title)
        self.surface.set_buttons([
            Button(self.cancel_label, self._cancel_pressed, key=KEY_ESCAPE, default=False),
            Button(self.confirm_label, self._confirm_pressed, default=False),
        ])
        self.surface.set_message(self.format_message(self.seconds))
        self.surface.open()
        self._open = True
        logger.info(f"Confirmation '{title}' opened")

        self.countdown.start(self.seconds, self.tick, self.display,
                             on_tick=self._render,
                             on_timeout=self._timed_out,
                             redraw_interval=self.redraw_interval)

    def _render(self, seconds: int):
        if self._open:
            self.surface.set_message(self.format_message(seconds))

    def _finish(self, callback: Optional[Callable[[], None]]):
        if self._finished:
            return
        self._finished = True
        self.destroy()
        if callback is not None:
            callback()

    def _timed_out(self):
        logger.info("Confirmation timed out, proceeding")
        self._finish(self._on_confirm)

    def _confirm_pressed(self):
        logger.info("Confirmed by user")
        self._finish(self._on_confirm)

    def _cancel_pressed(self):
        logger.info("Cancelled by user")
        self._finish(self._on_cancel)

    def confirm(self):
        """Confirm now, as if the confirm button was used"""
        self._confirm_pressed()

    def cancel(self):
        """Cancel, as if the cancel button was used"""
        self._cancel_pressed()

    def destroy(self):
        """Stop the countdown and close the surface. Safe to call repeatedly."""
        self._finished = True
        self.countdown.cancel()
        if self._open:
            self._open = False
            self.surface.close()
