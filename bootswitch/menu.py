#!/usr/bin/env python3
"""
Menu items and their attachment to the host menu

Action items are plain values bound to a host menu through a small
container interface, so any widget toolkit can provide the container.
"""

import logging
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)


class ActionItem:
    """A labelled menu entry with an activate handler"""

    def __init__(self, label: str, on_activate: Callable[["ActionItem"], None], target=None):
        self.label = label
        self.target = target
        self._on_activate = on_activate
        self.destroyed = False

    def activate(self):
        """Run the activate handler. Destroyed items ignore activation."""
        if self.destroyed:
            logger.debug(f"Ignoring activation of destroyed item {self.label!r}")
            return
        self._on_activate(self)

    def destroy(self):
        self.destroyed = True

    def __repr__(self):
        return f"ActionItem({self.label!r}, target={self.target!r})"


class MenuContainer:
    """Interface of the host menu the items are inserted into"""

    def is_ready(self) -> bool:
        raise NotImplementedError

    def add_item(self, item: ActionItem, position: Optional[int] = None):
        """Insert item and return a handle for remove_item()"""
        raise NotImplementedError

    def remove_item(self, handle):
        raise NotImplementedError


class MenuAttachment:
    """Tracks the items inserted into one menu container"""

    def __init__(self, container: MenuContainer):
        self.container = container
        self.attached = False
        self.items: List[ActionItem] = []
        self._handles: List[object] = []

    def attach(self, items: List[ActionItem], position: Optional[int] = None):
        """
        Insert items starting at position
        
        Items already attached are removed first.
        """
        self.destroy()
        try:
            for offset, item in enumerate(items):
                pos = None if position is None else position + offset
                self._handles.append(self.container.add_item(item, pos))
                self.items.append(item)
        except Exception:
            logger.error("Failed to insert menu items, rolling back")
            self.destroy()
            raise
        self.attached = bool(self.items)
        logger.info(f"Attached {len(self.items)} menu item(s)")

    def destroy(self):
        """Remove and destroy every inserted item. Safe to call repeatedly."""
        handles, items = self._handles, self.items
        self._handles = []
        self.items = []
        self.attached = False
        for handle, item in zip(handles, items):
            try:
                self.container.remove_item(handle)
            except Exception as e:
                logger.warning(f"Failed to remove menu item {item.label!r}: {e}")
            item.destroy()
        if items:
            logger.info(f"Detached {len(items)} menu item(s)")
