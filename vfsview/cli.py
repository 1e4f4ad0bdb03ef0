"""Command-line front door for vfsview.

``vfsview tui`` resolves the config directory, sets up logging, and runs the
browser. ``vfsview version`` prints version information.
"""

from __future__ import annotations

import argparse
import json
import logging
import platform
import sys
import termios
from collections.abc import Sequence

from . import __version__
from .config import (
    APP_NAME,
    configure_logging,
    load_app_config,
    resolve_config_directory,
)
from .errors import VfsViewError
from .runtime import run_app

LOGGER = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description="Browse a virtual file store in the terminal.",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    tui = subparsers.add_parser("tui", help="Launch the interactive file browser.")
    tui.add_argument(
        "--config",
        metavar="DIR",
        default=None,
        help="Configuration directory (default: the platform user config directory).",
    )
    tui.add_argument("--demo", action="store_true", help="Mount /demo with sample files and directories.")

    version = subparsers.add_parser("version", help="Show version information.")
    version_format = version.add_mutually_exclusive_group()
    version_format.add_argument("--short", action="store_true", help="Show only the version number.")
    version_format.add_argument("--json", action="store_true", help="Output version information as JSON.")
    return parser


def version_text(short: bool = False, as_json: bool = False) -> str:
    if short:
        return __version__
    info = {
        "version": __version__,
        "python_version": platform.python_version(),
        "platform": f"{sys.platform}/{platform.machine()}",
    }
    if as_json:
        return json.dumps(info, indent=4)
    return (
        "vfsview\n"
        f"Version:        {info['version']}\n"
        f"Python version: {info['python_version']}\n"
        f"Platform:       {info['platform']}"
    )


def run_tui(config_override: str | None, demo: bool) -> int:
    try:
        config_dir = resolve_config_directory(config_override)
        config = load_app_config(config_dir)
        log_path = configure_logging(config_dir, config.log_level)
        LOGGER.info("starting %s %s (config %s, log %s)", APP_NAME, __version__, config_dir, log_path)
        run_app(config_dir, config, demo=demo)
    except (VfsViewError, OSError, termios.error) as exc:
        LOGGER.error("fatal: %s", exc)
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    LOGGER.info("clean shutdown")
    return 0


def main(argv: Sequence[str] | None = None) -> None:
    """Parse CLI arguments and dispatch the selected subcommand."""
    args = build_parser().parse_args(argv)
    if args.command == "version":
        print(version_text(short=args.short, as_json=args.json))
        return
    status = run_tui(args.config, args.demo)
    if status != 0:
        raise SystemExit(status)


if __name__ == "__main__":
    main()
