#!/usr/bin/env python3
"""
Terminal host

A menu container and a modal surface that render on a terminal, so the
confirmation flow can run without a desktop shell.
"""

import asyncio
import logging
import os
import sys
from typing import Dict, List, Optional, TextIO

from .menu import ActionItem, MenuContainer
from .presenter import Button, ModalSurface, KEY_ESCAPE, KEY_RETURN

logger = logging.getLogger(__name__)

try:
    import termios
    import tty
except ImportError:
    # Not available on Windows, keys are then read line by line
    termios = None
    tty = None

ESCAPE = "\x1b"
NEWLINE = "\n"


class ConsoleMenu(MenuContainer):
    """A list of items printed to a terminal"""

    def __init__(self, stream: Optional[TextIO] = None, ready: bool = True):
        self.stream = stream or sys.stdout
        self.ready = ready
        self.items: List[ActionItem] = []

    def is_ready(self) -> bool:
        return self.ready

    def add_item(self, item: ActionItem, position: Optional[int] = None):
        if position is None or position > len(self.items):
            self.items.append(item)
        else:
            self.items.insert(position, item)
        return item

    def remove_item(self, handle):
        if handle in self.items:
            self.items.remove(handle)

    def find(self, label: str) -> Optional[ActionItem]:
        for item in self.items:
            if item.label == label:
                return item
        return None

    def render(self):
        for index, item in enumerate(self.items, start=1):
            self.stream.write(f"  {index}. {item.label}\n")
        self.stream.flush()


class ConsoleSurface(ModalSurface):
    """
    Modal surface drawn on one terminal line
    
    Buttons are triggered by keys read from the input stream: the button's
    key binding (Escape), the first letter of its label, or Enter for the
    default button (the last button if none is marked default).
    """

    def __init__(self, stream: Optional[TextIO] = None, input_stream: Optional[TextIO] = None,
                 loop: Optional[asyncio.AbstractEventLoop] = None):
        self.stream = stream or sys.stdout
        self.input_stream = input_stream if input_stream is not None else sys.stdin
        self.loop = loop
        self.title = ""
        self.message = ""
        self.buttons: List[Button] = []
        self.is_open = False
        self._fd: Optional[int] = None
        self._saved_attrs = None

    def set_title(self, text: str):
        self.title = text

    def set_buttons(self, buttons: List[Button]):
        self.buttons = list(buttons)

    def set_message(self, text: str):
        self.message = text
        if self.is_open:
            self._draw()

    def _draw(self):
        self.stream.write(f"\r\x1b[K{self.message}")
        self.stream.flush()

    def _shortcuts(self) -> Dict[str, Button]:
        keys = {}
        for button in self.buttons:
            if button.key == KEY_ESCAPE:
                keys[ESCAPE] = button
            elif button.key == KEY_RETURN:
                keys[NEWLINE] = button
            if button.label:
                keys.setdefault(button.label[0].lower(), button)
        if NEWLINE not in keys and self.buttons:
            defaults = [b for b in self.buttons if b.default]
            keys[NEWLINE] = defaults[0] if defaults else self.buttons[-1]
        if NEWLINE in keys:
            keys["\r"] = keys[NEWLINE]
        return keys

    def open(self):
        if self.is_open:
            return
        self.is_open = True
        hints = []
        for button in self.buttons:
            escape = "/Esc" if button.key == KEY_ESCAPE else ""
            hints.append(f"[{button.label[0].lower()}{escape}] {button.label}")
        enter = self._shortcuts().get(NEWLINE)
        if enter is not None:
            hints.append(f"[Enter] {enter.label}")
        self.stream.write(self.title + "\n" + "  ".join(hints) + "\n")
        self._draw()
        self._start_input()

    def close(self):
        if not self.is_open:
            return
        self.is_open = False
        self._stop_input()
        self.stream.write("\n")
        self.stream.flush()

    def _start_input(self):
        try:
            fd = self.input_stream.fileno()
        except (AttributeError, OSError, ValueError):
            logger.debug("Input stream has no file descriptor, keys disabled")
            return
        loop = self.loop or asyncio.get_running_loop()
        if termios is not None and os.isatty(fd):
            self._saved_attrs = termios.tcgetattr(fd)
            tty.setcbreak(fd)
        try:
            loop.add_reader(fd, self._on_input)
        except (NotImplementedError, ValueError, OSError) as e:
            logger.debug(f"Cannot watch input stream: {e}")
            self._restore_terminal(fd)
            return
        self._fd = fd
        self.loop = loop

    def _restore_terminal(self, fd: int):
        if self._saved_attrs is not None:
            termios.tcsetattr(fd, termios.TCSADRAIN, self._saved_attrs)
            self._saved_attrs = None

    def _stop_input(self):
        if self._fd is None:
            return
        fd = self._fd
        self._fd = None
        self.loop.remove_reader(fd)
        self._restore_terminal(fd)

    def _on_input(self):
        data = os.read(self._fd, 64)
        if not data:
            # EOF, keep counting down without keys
            self._stop_input()
            return
        self.handle_keys(data.decode(errors="ignore"))

    def handle_keys(self, text: str):
        """Trigger the button bound to the first recognised key in text"""
        shortcuts = self._shortcuts()
        for char in text:
            button = shortcuts.get(char.lower())
            if button is not None:
                logger.debug(f"Key {char!r} -> {button.label}")
                button.action()
                return
