"""
Pytest configuration and fixtures for bootswitch tests.

This module provides:
- ManualScheduler, a virtual clock that only advances when told to
- Fake host menu and modal surface recording what they were asked to do
"""

import pytest

from bootswitch.menu import MenuContainer
from bootswitch.presenter import ModalSurface
from bootswitch.scheduler import Scheduler, STOP

EPSILON = 1e-9


class _Entry:
    def __init__(self, ident, due, interval, callback, repeating):
        self.ident = ident
        self.due = due
        self.interval = interval
        self.callback = callback
        self.repeating = repeating


class ManualScheduler(Scheduler):
    """Deterministic scheduler driven by advance()"""

    def __init__(self):
        self.now = 0.0
        self._entries = {}
        self._next_ident = 0

    def _add(self, interval, callback, repeating):
        self._next_ident += 1
        entry = _Entry(self._next_ident, self.now + interval, interval, callback, repeating)
        self._entries[entry.ident] = entry
        return entry.ident

    def schedule_repeating(self, interval, callback):
        return self._add(interval, callback, True)

    def schedule_once(self, interval, callback):
        return self._add(interval, callback, False)

    def cancel(self, handle):
        self._entries.pop(handle, None)

    @property
    def active_count(self):
        return len(self._entries)

    def advance(self, seconds):
        """Move the clock forward, firing due callbacks in order"""
        target = self.now + seconds
        while True:
            due = [e for e in self._entries.values() if e.due <= target + EPSILON]
            if not due:
                break
            entry = min(due, key=lambda e: (e.due, e.ident))
            self.now = entry.due
            result = entry.callback()
            if entry.ident not in self._entries:
                continue
            if entry.repeating and result is not STOP:
                entry.due += entry.interval
            else:
                del self._entries[entry.ident]
        self.now = target


class FakeMenu(MenuContainer):
    def __init__(self, ready=True, existing=("Suspend", "Restart...", "Power Off...")):
        self.ready = ready
        self.entries = list(existing)

    def is_ready(self):
        return self.ready

    def add_item(self, item, position=None):
        if position is None:
            self.entries.append(item)
        else:
            self.entries.insert(position, item)
        return item

    def remove_item(self, handle):
        self.entries.remove(handle)

    @property
    def action_items(self):
        return [e for e in self.entries if not isinstance(e, str)]


class FakeSurface(ModalSurface):
    def __init__(self):
        self.title = None
        self.messages = []
        self.buttons = []
        self.open_count = 0
        self.close_count = 0

    @property
    def is_open(self):
        return self.open_count > self.close_count

    def open(self):
        self.open_count += 1

    def close(self):
        self.close_count += 1

    def set_title(self, text):
        self.title = text

    def set_message(self, text):
        self.messages.append(text)

    def set_buttons(self, buttons):
        self.buttons = list(buttons)

    def press(self, label):
        for button in self.buttons:
            if button.label == label:
                button.action()
                return
        raise AssertionError(f"No button {label!r}")


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def menu():
    return FakeMenu()


@pytest.fixture
def surface():
    return FakeSurface()
