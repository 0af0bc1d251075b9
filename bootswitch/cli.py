#!/usr/bin/env python3
"""
bootswitch command line tool

Lists boot-loader entries and runs the confirm-then-reboot flow on the
terminal.
"""

import sys
import shlex
import signal
import asyncio
import logging
import argparse
from typing import List, Optional

from ._version import __version__
from .config_parser import get_config_parser
from .console import ConsoleMenu, ConsoleSurface
from .errors import PreconditionViolation
from .extension import RebootSwitchExtension
from .grub import GrubConfig, GRUB_CONFIG_PATH
from .logind import connect_logind
from .reboot import BootTarget, validate_target
from .scheduler import AsyncioScheduler
from .settings import BootSwitchSettings

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2


def setup_logging(verbose=False):
    """Configure logging"""
    log_level = logging.DEBUG if verbose else logging.INFO
    
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    
    console_handler = logging.StreamHandler(stream=sys.stderr)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
    root_logger.addHandler(console_handler)


def parse_arguments(argv: Optional[List[str]] = None):
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(prog="bootswitch",
                                     description="Restart into another boot-loader entry after a countdown")
    parser.add_argument('--version', action='version', version=f"%(prog)s {__version__}")
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable verbose logging')
    parser.add_argument('--config', help='Configuration file (default: /etc/bootswitch/bootswitch.json)')
    subparsers = parser.add_subparsers(dest='command')

    list_parser = subparsers.add_parser('list', help='List GRUB menu entries')
    list_parser.add_argument('--grub-config', default=GRUB_CONFIG_PATH,
                             help=f'GRUB configuration (default: {GRUB_CONFIG_PATH})')
    list_parser.add_argument('--keyword', default='windows',
                             help='Entry name prefix to detect (default: windows)')

    reboot_parser = subparsers.add_parser('reboot', help='Confirm, set the next boot entry and reboot')
    reboot_parser.add_argument('target', nargs='?',
                               help='Boot-loader entry, defaults to the first configured target')
    reboot_parser.add_argument('--label', help='Label shown for the target')
    reboot_parser.add_argument('--detect', action='store_true',
                               help='Pick the target from the GRUB configuration')
    reboot_parser.add_argument('--grub-config', default=GRUB_CONFIG_PATH,
                               help='GRUB configuration used with --detect')
    reboot_parser.add_argument('--keyword', default='windows',
                               help='Entry name prefix used with --detect (default: windows)')
    reboot_parser.add_argument('--seconds', type=int, help='Countdown length')
    reboot_parser.add_argument('--yes', action='store_true', help='Skip the countdown')
    reboot_parser.add_argument('--dry-run', action='store_true',
                               help='Print the command instead of running it, do not reboot')

    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        parser.exit(EXIT_USAGE)
    return args


def list_entries(args) -> int:
    try:
        grub = GrubConfig(args.grub_config)
    except OSError as e:
        logger.error(f"Cannot read GRUB config: {e}")
        return EXIT_FAILED

    detected = grub.find_entry(args.keyword)
    for entry in grub.menu_entries():
        marker = "*" if entry == detected else " "
        print(f"{marker} {entry}")
    return EXIT_OK


def resolve_target(args, settings: BootSwitchSettings) -> BootTarget:
    """Target from the command line, the GRUB scan or the configuration"""
    if args.target is not None:
        return BootTarget(args.target, args.label or f"Restart to {args.target}...")
    if args.detect:
        entry = GrubConfig(args.grub_config).find_entry(args.keyword)
        if entry is None:
            raise PreconditionViolation(f"No GRUB entry starting with {args.keyword!r}")
        return BootTarget(entry, args.label or f"Restart to {entry}...")
    target = settings.targets[0]
    if args.label:
        return BootTarget(target.identifier, args.label)
    return target


async def print_command(argv: List[str]) -> None:
    print(f"Would run: {shlex.join(argv)}")


async def run_confirmation(settings: BootSwitchSettings, assume_yes: bool = False,
                           dry_run: bool = False, stream=None, input_stream=None) -> int:
    """
    Run the menu, confirmation and reboot flow on the terminal
    
    Returns:
        Exit code
    """
    loop = asyncio.get_running_loop()
    stream = stream or sys.stdout
    scheduler = AsyncioScheduler(loop)
    menu = ConsoleMenu(stream)
    outcome = loop.create_future()

    def finished(target, error):
        if not outcome.done():
            outcome.set_result(EXIT_FAILED if error else EXIT_OK)

    def cancelled(target):
        if not outcome.done():
            outcome.set_result(EXIT_OK)

    extension = RebootSwitchExtension(
        menu, scheduler,
        surface_factory=lambda: ConsoleSurface(stream, input_stream, loop),
        settings=settings,
        runner=print_command if dry_run else None,
        service_factory=(lambda: None) if dry_run else connect_logind,
        on_finished=finished,
        on_cancelled=cancelled,
    )
    extension.enable()
    interrupt_installed = False
    try:
        try:
            loop.add_signal_handler(signal.SIGINT, extension.cancel_pending)
            interrupt_installed = True
        except (NotImplementedError, RuntimeError):
            logger.debug("Cannot install SIGINT handler")

        menu.render()
        item = menu.find(settings.targets[0].label)
        if assume_yes:
            extension.start_reboot(settings.targets[0])
        elif item is not None:
            item.activate()
        else:
            logger.error("Menu item was not attached")
            return EXIT_FAILED

        code = await outcome
        await extension.wait_idle()
        return code
    finally:
        if interrupt_installed:
            loop.remove_signal_handler(signal.SIGINT)
        extension.disable()
        scheduler.cancel_all()


def reboot(args) -> int:
    config = get_config_parser(args.config).get_config()
    try:
        settings = BootSwitchSettings.from_config(config)
        settings.targets = [resolve_target(args, settings)]
        validate_target(settings.targets[0])
        if args.seconds is not None:
            if args.seconds < 0:
                raise PreconditionViolation("--seconds must not be negative")
            settings.seconds = args.seconds
    except PreconditionViolation as e:
        logger.error(str(e))
        return EXIT_USAGE
    except OSError as e:
        logger.error(f"Cannot read GRUB config: {e}")
        return EXIT_FAILED

    return asyncio.run(run_confirmation(settings, assume_yes=args.yes, dry_run=args.dry_run))


def main(argv: Optional[List[str]] = None) -> int:
    """Main function"""
    args = parse_arguments(argv)
    setup_logging(args.verbose)

    if args.command == 'list':
        return list_entries(args)
    return reboot(args)


if __name__ == "__main__":
    sys.exit(main())
