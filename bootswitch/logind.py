#!/usr/bin/env python3
"""
systemd-logind client

Minimal wrapper around org.freedesktop.login1.Manager on the system bus,
used for the best-effort reboot after the next boot target has been set.
"""

import asyncio
import logging
from typing import Optional

logger = logging.getLogger(__name__)

LOGIN1_SERVICE = "org.freedesktop.login1"
LOGIN1_PATH = "/org/freedesktop/login1"
LOGIN1_MANAGER_IFACE = "org.freedesktop.login1.Manager"


class LogindManager:
    """Proxy for the logind Manager interface"""

    def __init__(self, bus=None):
        """
        Initialize the proxy
        
        Args:
            bus: dbus-python bus connection. The system bus is opened on
                 first use if not given.
        """
        self._bus = bus
        self._manager = None

    def connect(self):
        """Open the bus (if needed) and look up the logind object"""
        if self._manager is None:
            if self._bus is None:
                import dbus
                self._bus = dbus.SystemBus()
            self._manager = self._bus.get_object(LOGIN1_SERVICE, LOGIN1_PATH)
            logger.debug(f"Connected to {LOGIN1_SERVICE}")
        return self._manager

    def reboot(self, interactive: bool = True):
        """Call Manager.Reboot(interactive)"""
        logger.info(f"Calling {LOGIN1_MANAGER_IFACE}.Reboot(interactive={interactive})")
        self.connect().Reboot(bool(interactive), dbus_interface=LOGIN1_MANAGER_IFACE)

    def set_reboot_to_firmware_setup(self, enabled: bool = True):
        """Call Manager.SetRebootToFirmwareSetup(enabled)"""
        logger.info(f"Calling {LOGIN1_MANAGER_IFACE}.SetRebootToFirmwareSetup({enabled})")
        self.connect().SetRebootToFirmwareSetup(bool(enabled), dbus_interface=LOGIN1_MANAGER_IFACE)

    async def reboot_async(self, interactive: bool = True):
        """Run reboot() in the default executor so the event loop keeps running"""
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self.reboot, interactive)

    async def set_reboot_to_firmware_setup_async(self, enabled: bool = True):
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self.set_reboot_to_firmware_setup, enabled)


def connect_logind(bus=None) -> Optional[LogindManager]:
    """
    Connect to logind
    
    Returns:
        LogindManager, or None if dbus-python or the system bus is unavailable
    """
    manager = LogindManager(bus)
    try:
        manager.connect()
    except ImportError:
        logger.warning("dbus-python is not installed, reboot has to be triggered manually")
        return None
    except Exception as e:
        logger.warning(f"Could not connect to {LOGIN1_SERVICE}: {e}")
        return None
    return manager
