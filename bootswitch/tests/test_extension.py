import asyncio
from unittest.mock import AsyncMock

import pytest

from conftest import FakeMenu, FakeSurface

from bootswitch.errors import CommandFailure
from bootswitch.extension import RebootSwitchExtension, dialog_title
from bootswitch.reboot import BootTarget
from bootswitch.settings import BootSwitchSettings


class Harness:
    def __init__(self, scheduler, menu, settings=None, returncode=0, service=None):
        self.scheduler = scheduler
        self.menu = menu
        self.surfaces = []
        self.commands = []
        self.finished = []
        self.cancelled = []
        self.returncode = returncode
        self.service = service
        self.extension = RebootSwitchExtension(
            menu, scheduler, self.new_surface, settings,
            runner=self.run, service_factory=lambda: self.service,
            on_finished=lambda target, error: self.finished.append((target, error)),
            on_cancelled=self.cancelled.append,
        )

    def new_surface(self):
        surface = FakeSurface()
        self.surfaces.append(surface)
        return surface

    async def run(self, argv):
        self.commands.append(argv)
        if self.returncode:
            raise CommandFailure(argv, self.returncode)


@pytest.fixture
def harness(scheduler, menu):
    return Harness(scheduler, menu)


def test_enable_attaches_item_when_menu_ready(harness, menu):
    harness.extension.enable()

    item = menu.entries[2]
    assert item.label == "Restart to Windows..."
    assert item.target == BootTarget("windows", "Restart to Windows...")


def test_enable_waits_for_late_menu(scheduler):
    menu = FakeMenu(ready=False)
    harness = Harness(scheduler, menu)
    harness.extension.enable()
    scheduler.advance(1)
    assert menu.action_items == []

    menu.ready = True
    scheduler.advance(0.1)

    assert len(menu.action_items) == 1
    assert scheduler.active_count == 0


def test_disable_before_menu_ready(scheduler):
    menu = FakeMenu(ready=False)
    harness = Harness(scheduler, menu)
    harness.extension.enable()
    harness.extension.disable()
    menu.ready = True
    scheduler.advance(10)

    assert menu.action_items == []
    assert scheduler.active_count == 0


def test_activation_opens_confirmation(harness, menu):
    harness.extension.enable()
    menu.action_items[0].activate()

    surface = harness.surfaces[0]
    assert surface.is_open
    assert surface.title == "Restart to Windows"
    assert surface.messages[-1] == "The system will restart automatically in 60 seconds."


def test_reactivation_replaces_open_confirmation(harness, menu, scheduler):
    harness.extension.enable()
    item = menu.action_items[0]
    item.activate()
    scheduler.advance(5)
    item.activate()

    first, second = harness.surfaces
    assert not first.is_open
    assert second.is_open
    assert len(harness.extension.presenters) == 1
    # one tick and one redraw timer
    assert scheduler.active_count == 2


def test_cancel_has_no_side_effect(harness, menu, scheduler):
    harness.extension.enable()
    menu.action_items[0].activate()
    scheduler.advance(3)
    harness.surfaces[0].press("Cancel")
    scheduler.advance(120)

    assert harness.cancelled == [BootTarget("windows", "Restart to Windows...")]
    assert harness.commands == []
    assert harness.extension.presenters == {}
    assert scheduler.active_count == 0


def test_timeout_runs_reboot_action(scheduler, menu):
    service = AsyncMock()
    harness = Harness(scheduler, menu, service=service)

    async def scenario():
        harness.extension.enable()
        menu.action_items[0].activate()
        scheduler.advance(60)
        await harness.extension.wait_idle()

    asyncio.run(scenario())

    assert harness.commands == [["pkexec", "grub-reboot", "windows"]]
    assert harness.finished == [(BootTarget("windows", "Restart to Windows..."), None)]
    service.reboot_async.assert_awaited_once_with(True)
    assert scheduler.active_count == 0


def test_confirm_now_runs_reboot_action(harness, menu, scheduler):
    async def scenario():
        harness.extension.enable()
        menu.action_items[0].activate()
        harness.surfaces[0].press("Restart")
        await harness.extension.wait_idle()

    asyncio.run(scenario())

    assert scheduler.now == 0
    assert len(harness.commands) == 1
    assert scheduler.active_count == 0


def test_command_failure_is_reported_not_raised(scheduler, menu):
    harness = Harness(scheduler, menu, returncode=1)

    async def scenario():
        harness.extension.enable()
        menu.action_items[0].activate()
        harness.surfaces[0].press("Restart")
        await harness.extension.wait_idle()

    asyncio.run(scenario())

    (target, error), = harness.finished
    assert isinstance(error, CommandFailure)
    assert error.returncode == 1


def test_disable_leaves_nothing_behind(harness, menu, scheduler):
    harness.extension.enable()
    menu.action_items[0].activate()
    scheduler.advance(10)

    harness.extension.disable()
    harness.extension.disable()
    scheduler.advance(120)

    assert scheduler.active_count == 0
    assert menu.action_items == []
    assert not harness.surfaces[0].is_open
    assert harness.commands == []
    assert not harness.extension.enabled


def test_items_from_settings(scheduler, menu):
    settings = BootSwitchSettings.from_config({
        "targets": [
            {"identifier": "Windows Boot Manager", "label": "Restart to Windows..."},
            {"identifier": "firmware-setup", "label": "Restart to UEFI Settings..."},
        ],
        "menu": {"position": 0},
    })
    harness = Harness(scheduler, menu, settings=settings)
    harness.extension.enable()

    assert [e.label for e in menu.entries[:2]] == ["Restart to Windows...", "Restart to UEFI Settings..."]


def test_menu_unavailable_is_logged(scheduler, caplog):
    menu = FakeMenu(ready=False)
    settings = BootSwitchSettings.from_config({"watcher": {"max_attempts": 5}})
    harness = Harness(scheduler, menu, settings=settings)
    harness.extension.enable()
    scheduler.advance(10)

    assert menu.action_items == []
    assert scheduler.active_count == 0
    assert "not added to the menu" in caplog.text


def test_logind_disabled_skips_service(scheduler, menu):
    settings = BootSwitchSettings.from_config({"logind": {"enabled": False}})
    harness = Harness(scheduler, menu, settings=settings, service=AsyncMock())
    harness.extension.enable()

    assert harness.extension.service is None


def test_start_reboot_requires_enable(harness):
    async def scenario():
        harness.extension.start_reboot(BootTarget("windows"))

    with pytest.raises(RuntimeError):
        asyncio.run(scenario())


def test_dialog_title():
    assert dialog_title(BootTarget("windows", "Restart to Windows...")) == "Restart to Windows"
    assert dialog_title(BootTarget("windows", "...")) == "windows"
