#!/usr/bin/env python3
"""
Reboot Action

Selects the next boot target through a privileged helper and then asks the
system management service to reboot.

The argument vector is built directly and never passed through a shell, so
boot entry names with quotes or spaces reach the tool unchanged.
"""

import asyncio
import logging
from typing import Awaitable, Callable, List, Optional

from .errors import BootSwitchError, CommandFailure, FollowUpCallFailure, PreconditionViolation

logger = logging.getLogger(__name__)

DEFAULT_HELPER = "pkexec"
DEFAULT_TOOL = "grub-reboot"

# Boot target that enters the firmware setup instead of a boot-loader entry
FIRMWARE_SETUP = "firmware-setup"

PENDING = "pending"
RUNNING = "running"
SUCCEEDED = "succeeded"
FAILED = "failed"


class BootTarget:
    """A boot-loader entry (or the firmware setup) offered in the menu"""

    __slots__ = ("_identifier", "_label")

    def __init__(self, identifier: str, label: Optional[str] = None):
        self._identifier = identifier
        self._label = label if label is not None else identifier

    @property
    def identifier(self) -> str:
        return self._identifier

    @property
    def label(self) -> str:
        return self._label

    def __eq__(self, other):
        if not isinstance(other, BootTarget):
            return NotImplemented
        return (self._identifier, self._label) == (other._identifier, other._label)

    def __hash__(self):
        return hash((self._identifier, self._label))

    def __repr__(self):
        return f"BootTarget({self._identifier!r}, {self._label!r})"


class RebootRequest:
    """Lifecycle of one execute() call: pending -> running -> succeeded | failed"""

    def __init__(self, target: BootTarget):
        self.target = target
        self.state = PENDING
        self.error: Optional[BaseException] = None

    @property
    def done(self) -> bool:
        return self.state in (SUCCEEDED, FAILED)

    def mark_running(self):
        if self.state != PENDING:
            raise BootSwitchError(f"Request for {self.target!r} already {self.state}")
        self.state = RUNNING

    def mark_succeeded(self):
        if self.state != RUNNING:
            raise BootSwitchError(f"Cannot complete request in state {self.state}")
        self.state = SUCCEEDED

    def mark_failed(self, error: BaseException):
        if self.state != RUNNING:
            raise BootSwitchError(f"Cannot fail request in state {self.state}")
        self.state = FAILED
        self.error = error

    def __repr__(self):
        return f"RebootRequest({self.target!r}, state={self.state!r})"


def validate_target(target: BootTarget):
    """Raise PreconditionViolation unless target has a usable identifier"""
    identifier = getattr(target, "identifier", None)
    if not isinstance(identifier, str) or not identifier.strip():
        raise PreconditionViolation(f"Boot target identifier must be a non-empty string, got {identifier!r}")


async def run_command(argv: List[str]) -> None:
    """
    Spawn argv and wait for it to finish
    
    Raises:
        CommandFailure: if the process cannot be spawned or exits nonzero
    """
    logger.debug(f"Command: {' '.join(argv)}")
    try:
        proc = await asyncio.create_subprocess_exec(
            *argv,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as e:
        raise CommandFailure(argv, message=f"Failed to spawn {argv[0]}: {e}") from e

    stdout, stderr = await proc.communicate()
    logger.debug(f"Return code: {proc.returncode}")
    if stdout:
        logger.debug(f"stdout: {stdout.decode(errors='replace').strip()}")

    if proc.returncode != 0:
        raise CommandFailure(argv, proc.returncode, stderr.decode(errors="replace").strip())


class RebootAction:
    """Switches the next boot target and reboots"""

    def __init__(self, runner: Optional[Callable[[List[str]], Awaitable[None]]] = None,
                 service=None, helper: Optional[str] = DEFAULT_HELPER, tool: str = DEFAULT_TOOL,
                 interactive: bool = True):
        """
        Initialize the action
        
        Args:
            runner: Coroutine function that runs an argument vector and
                    raises CommandFailure on error (defaults to run_command)
            service: Optional system management service with reboot_async()
                     and set_reboot_to_firmware_setup_async()
            helper: Privilege escalation helper, None or "" to run the tool directly
            tool: Tool that sets the next boot-loader entry
            interactive: Passed to the service's reboot call
        """
        self.runner = runner or run_command
        self.service = service
        self.helper = helper
        self.tool = tool
        self.interactive = interactive
        self.last_request: Optional[RebootRequest] = None

    def build_command(self, target: BootTarget) -> List[str]:
        """Argument vector that makes target the next boot entry"""
        validate_target(target)
        argv = [self.tool, target.identifier]
        if self.helper:
            argv.insert(0, self.helper)
        return argv

    async def execute(self, target: BootTarget) -> RebootRequest:
        """
        Switch the next boot target, then request a reboot
        
        The boot target switch is never retried. A failure of the follow-up
        reboot call is logged and does not fail the request.
        
        Returns:
            The succeeded RebootRequest
            
        Raises:
            PreconditionViolation: empty identifier, nothing was spawned
            CommandFailure: the privileged command failed
        """
        try:
            validate_target(target)
        except PreconditionViolation as e:
            logger.error(f"Refusing to reboot: {e}")
            raise

        request = RebootRequest(target)
        self.last_request = request
        request.mark_running()
        logger.info(f"Switching next boot target to {target.identifier!r}")

        try:
            if target.identifier == FIRMWARE_SETUP:
                await self._request_firmware_setup()
            else:
                await self.runner(self.build_command(target))
        except Exception as e:
            request.mark_failed(e)
            logger.error(f"Failed to switch boot target to {target.identifier!r}: {e}")
            raise

        request.mark_succeeded()
        logger.info(f"Next boot target set to {target.identifier!r}")

        await self._follow_up()
        return request

    async def _request_firmware_setup(self):
        if self.service is None:
            raise BootSwitchError("Rebooting into firmware setup requires the system management service")
        try:
            await self.service.set_reboot_to_firmware_setup_async(True)
        except Exception as e:
            raise BootSwitchError(f"Could not request firmware setup: {e}") from e

    async def _follow_up(self):
        if self.service is None:
            logger.info("No system management service available, not rebooting")
            return
        try:
            await self.service.reboot_async(self.interactive)
            logger.info("Reboot requested")
        except Exception as e:
            logger.warning(str(FollowUpCallFailure(e)))
