"""
bootswitch

Confirm-then-reboot into another boot-loader entry from a host menu.
"""

from ._version import __version__
from .countdown import CountdownController
from .errors import BootSwitchError, CommandFailure, FollowUpCallFailure, MenuUnavailable, PreconditionViolation
from .extension import RebootSwitchExtension
from .menu import ActionItem, MenuAttachment, MenuContainer
from .presenter import Button, ConfirmationPresenter, ModalSurface
from .reboot import BootTarget, RebootAction, RebootRequest
from .scheduler import AsyncioScheduler, Scheduler
from .timer import TimerHandle
from .watcher import HostMenuWatcher

__all__ = [
    '__version__',
    'ActionItem', 'AsyncioScheduler', 'BootSwitchError', 'BootTarget', 'Button',
    'CommandFailure', 'ConfirmationPresenter', 'CountdownController', 'FollowUpCallFailure',
    'HostMenuWatcher', 'MenuAttachment', 'MenuContainer', 'MenuUnavailable', 'ModalSurface',
    'PreconditionViolation', 'RebootAction', 'RebootRequest', 'RebootSwitchExtension',
    'Scheduler', 'TimerHandle',
]
