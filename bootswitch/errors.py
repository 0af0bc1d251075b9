#!/usr/bin/env python3
"""
Error types raised by the reboot switch components
"""

from typing import List, Optional


class BootSwitchError(Exception):
    """Base class for all bootswitch errors"""


class PreconditionViolation(BootSwitchError, ValueError):
    """An argument was rejected before anything was scheduled or spawned"""


class CommandFailure(BootSwitchError):
    """The privileged command could not be spawned or exited nonzero"""

    def __init__(self, argv: List[str], returncode: Optional[int] = None,
                 stderr: str = "", message: Optional[str] = None):
        self.argv = list(argv)
        self.returncode = returncode
        self.stderr = stderr
        if message is None:
            if returncode is None:
                message = f"Failed to run {' '.join(self.argv)}"
            else:
                message = f"{' '.join(self.argv)} exited with status {returncode}"
            if stderr:
                message = f"{message}: {stderr}"
        super().__init__(message)


class MenuUnavailable(BootSwitchError):
    """The host menu never became ready within the allowed attempts"""

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(f"Host menu not available after {attempts} attempts")


class FollowUpCallFailure(BootSwitchError):
    """The system management service rejected the follow-up reboot call"""

    def __init__(self, cause: Exception):
        self.cause = cause
        super().__init__(f"Follow-up reboot call failed: {cause}")
