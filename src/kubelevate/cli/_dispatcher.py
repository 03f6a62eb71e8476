"""
Auto-discovery CLI dispatcher for kubelevate.

Scans ``cli/commands`` for command modules and registers them.
Adding a new command = adding a .py file exposing SUMMARY, register_args
and main.
"""

from __future__ import annotations

import argparse
import importlib
import logging
import sys
from collections.abc import Callable
from functools import lru_cache
from pathlib import Path
from typing import Any

from kubelevate.cli._args import add_config_dir_flag, add_log_level_flag, add_verbose_flag
from kubelevate.cli._utils import get_config_dir
from kubelevate.core.exceptions import KubelevateError

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def discover_commands() -> dict[str, dict[str, Any]]:
    """Discover commands under cli/commands."""
    commands_dir = Path(__file__).parent / "commands"
    commands: dict[str, dict[str, Any]] = {}

    if not commands_dir.exists():
        return commands

    for item in sorted(commands_dir.glob("*.py")):
        if item.name.startswith("_"):
            continue

        cmd_name = item.stem
        try:
            module = importlib.import_module(f"kubelevate.cli.commands.{cmd_name}")
        except ImportError as e:
            print(f"Warning: Could not import command {cmd_name}: {e}", file=sys.stderr)
            continue
        commands[cmd_name] = {
            "module": module,
            "summary": getattr(module, "SUMMARY", cmd_name),
            "register_args": getattr(module, "register_args", None),
            "main": getattr(module, "main", None),
        }

    return commands


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with auto-discovered commands."""
    parser = argparse.ArgumentParser(
        prog="kubelevate",
        description="Run cluster CLIs against a kubeconfig annotated with an elevation reason",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )
    add_log_level_flag(parser)
    add_verbose_flag(parser)
    add_config_dir_flag(parser)

    subparsers = parser.add_subparsers(
        dest="command",
        title="commands",
        metavar="<command>",
    )

    for cmd_name, cmd_info in sorted(discover_commands().items()):
        primary_name = cmd_name.replace("_", "-")
        aliases = [cmd_name] if primary_name != cmd_name else []
        cmd_parser = subparsers.add_parser(
            primary_name,
            aliases=aliases,
            help=cmd_info["summary"],
        )
        if cmd_info["register_args"]:
            cmd_info["register_args"](cmd_parser)
        if cmd_info["main"]:
            cmd_parser.set_defaults(_func=cmd_info["main"])

    return parser


def _get_version() -> str:
    try:
        from kubelevate import __version__
        return __version__
    except ImportError:
        return "unknown"


def _configure_logging(args: argparse.Namespace) -> None:
    """Apply logging settings; CLI flags win over the settings file."""
    from kubelevate.core.audit import configure_stdlib_logging
    from kubelevate.core.config.domains import LoggingConfig

    cfg = LoggingConfig(config_dir=get_config_dir(args))
    level = cfg.level
    if getattr(args, "verbose", False):
        level = "INFO"
    if getattr(args, "log_level", None):
        level = args.log_level
    configure_stdlib_logging(level=level, log_path=cfg.file)


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for the kubelevate CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    if argv is None:
        argv = sys.argv[1:]

    parser = build_parser()
    args = parser.parse_args(argv)

    func: Callable[[argparse.Namespace], int] | None = getattr(args, "_func", None)
    if not args.command or func is None:
        parser.print_help()
        return 0 if not args.command else 1

    try:
        _configure_logging(args)
    except KubelevateError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        return int(func(args))
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return 130
    except Exception as e:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
