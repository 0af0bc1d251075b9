#!/usr/bin/env python3
"""
Reboot Switch Extension

Ties the pieces together: waits for the host menu, inserts one item per boot
target and, when an item is activated, asks for confirmation before switching
the next boot target and rebooting.
"""

import asyncio
import logging
from typing import Callable, Dict, Optional, Set

from .logind import connect_logind
from .menu import ActionItem, MenuAttachment, MenuContainer
from .presenter import ConfirmationPresenter, ModalSurface
from .reboot import BootTarget, RebootAction
from .scheduler import Scheduler
from .settings import BootSwitchSettings
from .watcher import HostMenuWatcher

logger = logging.getLogger(__name__)


def dialog_title(target: BootTarget) -> str:
    """'Restart to Windows...' -> 'Restart to Windows'"""
    return target.label.rstrip(". ") or target.identifier


class RebootSwitchExtension:
    """Menu integration with enable()/disable() lifecycle"""

    def __init__(self, menu: MenuContainer, scheduler: Scheduler,
                 surface_factory: Callable[[], ModalSurface],
                 settings: Optional[BootSwitchSettings] = None,
                 runner=None, service_factory: Callable[[], object] = connect_logind,
                 on_finished: Optional[Callable[[BootTarget, Optional[Exception]], None]] = None,
                 on_cancelled: Optional[Callable[[BootTarget], None]] = None):
        """
        Initialize the extension
        
        Args:
            menu: Host menu to insert the items into
            scheduler: Scheduler for polling and countdowns
            surface_factory: Creates a modal surface per confirmation
            settings: Runtime settings, defaults if None
            runner: Command runner passed to RebootAction
            service_factory: Returns the system management service or None
            on_finished: Called with the target and the error (None on
                         success) when a reboot action completes
            on_cancelled: Called with the target when a confirmation is cancelled
        """
        self.menu = menu
        self.scheduler = scheduler
        self.surface_factory = surface_factory
        self.settings = settings or BootSwitchSettings()
        self.runner = runner
        self.service_factory = service_factory
        self.on_finished = on_finished
        self.on_cancelled = on_cancelled

        self.enabled = False
        self.service = None
        self.action: Optional[RebootAction] = None
        self.attachment = MenuAttachment(menu)
        self.watcher = HostMenuWatcher(scheduler, self.settings.poll_interval, self.settings.max_attempts)
        self.presenters: Dict[ActionItem, ConfirmationPresenter] = {}
        self._tasks: Set[asyncio.Task] = set()

    def enable(self):
        if self.enabled:
            return
        self.enabled = True
        logger.info("Enabling reboot switch")

        self.service = self.service_factory() if self.settings.logind_enabled else None
        self.action = RebootAction(runner=self.runner, service=self.service,
                                   helper=self.settings.helper, tool=self.settings.tool,
                                   interactive=self.settings.interactive)
        self.watcher.watch(self.menu.is_ready, self._attach, self._menu_unavailable)

    def disable(self):
        """
        Remove everything enable() created
        
        Reboot actions already running are left to finish.
        """
        if not self.enabled:
            return
        logger.info("Disabling reboot switch")
        self.watcher.cancel()
        for presenter in list(self.presenters.values()):
            presenter.destroy()
        self.presenters.clear()
        self.attachment.destroy()
        self.service = None
        self.action = None
        self.enabled = False

    def _attach(self):
        items = [ActionItem(target.label, self._item_activated, target=target)
                 for target in self.settings.targets]
        self.attachment.attach(items, self.settings.menu_position)

    def _menu_unavailable(self, error: Exception):
        logger.error(f"Reboot switch not added to the menu: {error}")

    def _item_activated(self, item: ActionItem):
        previous = self.presenters.pop(item, None)
        if previous is not None:
            logger.debug(f"Closing previous confirmation for {item.label!r}")
            previous.destroy()

        presenter = ConfirmationPresenter(
            self.scheduler, self.surface_factory(),
            seconds=self.settings.seconds, tick=self.settings.tick,
            display=self.settings.display, redraw_interval=self.settings.redraw,
        )
        self.presenters[item] = presenter
        presenter.present(dialog_title(item.target),
                          on_confirm=lambda: self._confirmed(item, presenter),
                          on_cancel=lambda: self._cancelled(item, presenter))

    def _forget(self, item: ActionItem, presenter: ConfirmationPresenter):
        if self.presenters.get(item) is presenter:
            del self.presenters[item]

    def _confirmed(self, item: ActionItem, presenter: ConfirmationPresenter):
        self._forget(item, presenter)
        self.start_reboot(item.target)

    def _cancelled(self, item: ActionItem, presenter: ConfirmationPresenter):
        self._forget(item, presenter)
        logger.info(f"Reboot to {item.target.identifier!r} cancelled")
        if self.on_cancelled is not None:
            self.on_cancelled(item.target)

    def cancel_pending(self):
        """Cancel every open confirmation"""
        for presenter in list(self.presenters.values()):
            presenter.cancel()

    def start_reboot(self, target: BootTarget) -> asyncio.Task:
        """Run the reboot action for target as a task on the running loop"""
        if self.action is None:
            raise RuntimeError("Reboot switch is not enabled")
        task = asyncio.get_running_loop().create_task(self._run(self.action, target))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _run(self, action: RebootAction, target: BootTarget):
        error = None
        try:
            await action.execute(target)
        except Exception as e:
            # already logged by the action
            error = e
        if self.on_finished is not None:
            self.on_finished(target, error)

    async def wait_idle(self):
        """Wait for running reboot actions"""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
