#!/usr/bin/env python3
"""Entry point for ark-serman."""

import argparse
import logging
import sys

from rcon.exceptions import EmptyResponse, SessionTimeout, WrongPassword
from sdbus.exceptions import SdBusBaseError

from .utils.constants import APP_NAME, APP_TITLE, CONFIG_DIR, LOG_FILE

logger = logging.getLogger(__name__)

RCON_ERRORS = (WrongPassword, EmptyResponse, SessionTimeout, OSError, ValueError)


def setup_logging():
    """Set up application logging."""
    handlers = [logging.StreamHandler()]
    file_error = None
    try:
        CONFIG_DIR.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(LOG_FILE))
    except OSError as e:
        file_error = e

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers
    )
    if file_error:
        logger.warning(f"Logging to stderr only, cannot open {LOG_FILE}: {file_error}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description=f"{APP_TITLE}. Runs the web dashboard, or sends RCON "
                    "commands when commands are given. See rcon commands at "
                    "https://ark.fandom.com/wiki/Console_commands",
    )
    parser.add_argument('-p', '--bind', default=None,
                        help='bind address and port for the dashboard, or the '
                             'rcon host:port when commands are given')
    parser.add_argument('-a', '--admin-password', default=None,
                        help='rcon (admin) password, required with commands')
    parser.add_argument('-q', '--quiet', action='store_true',
                        help="don't print request log lines")
    parser.add_argument('--config', default=None,
                        help='path of the YAML settings file')
    parser.add_argument('--install', action='store_true',
                        help='install ark-serman as a systemd user service')
    parser.add_argument('commands', nargs='*',
                        help='rcon commands to run, in order')
    return parser


def check_args(args) -> str:
    """Validate the flag combination before any I/O.

    Returns:
        Error message, or an empty string when the arguments are valid
    """
    if args.install:
        if args.commands:
            return "--install does not take commands"
        if args.admin_password is not None:
            return "--install does not take an admin password"
        return ""
    if args.commands:
        if not args.admin_password:
            return "An admin password (-a) is required to run commands"
        if not args.bind:
            return "An rcon host:port (-p) is required to run commands"
        return ""
    if args.admin_password is not None:
        return "An admin password is only used with commands"
    return ""


def run_commands(args, config_manager) -> int:
    from .core.admin_client import AdminCommandClient

    try:
        client = AdminCommandClient(
            args.bind,
            args.admin_password,
            timeout=config_manager.get_setting("rcon_timeout"),
        )
        client.run(args.commands)
    except RCON_ERRORS as e:
        logger.error(f"rcon failed: {e}")
        return 1
    return 0


def run_install(config_manager) -> int:
    from .core.unit_installer import UnitInstaller

    if not config_manager.config_file.exists():
        config_manager.save_config()

    installer = UnitInstaller(config_manager.get_setting("manager_unit"))
    try:
        installer.install()
    except (SdBusBaseError, OSError) as e:
        logger.error(f"Install failed: {e}")
        return 1
    return 0


def run_web(args, config_manager) -> int:
    from .web.dashboard import create_app, parse_bind, serve

    bind = args.bind or config_manager.get_setting("bind")
    try:
        parse_bind(bind)
    except ValueError as e:
        logger.error(f"Invalid bind address: {e}")
        return 1
    app = create_app(config_manager)
    serve(app, bind, quiet=args.quiet)
    return 0


def main(argv=None):
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    error = check_args(args)
    if error:
        print(f"{APP_NAME}: {error}", file=sys.stderr)
        return 1

    setup_logging()

    from .core.config_manager import ConfigManager

    config_manager = ConfigManager(args.config)
    config_manager.load_config()

    if args.install:
        return run_install(config_manager)
    if args.commands:
        return run_commands(args, config_manager)
    return run_web(args, config_manager)


if __name__ == "__main__":
    sys.exit(main())
