"""
kubelevate elevate command.

SUMMARY: Run a command against the current kubeconfig with an elevation reason
"""

from __future__ import annotations

import argparse
import logging
import sys

from kubelevate.cli import OutputFormatter, add_json_flag
from kubelevate.cli._utils import get_config_dir
from kubelevate.core.elevate import run_elevate
from kubelevate.core.exceptions import CommandExecutionError, KubelevateError

SUMMARY = "Run a command against the current kubeconfig with an elevation reason"

logger = logging.getLogger(__name__)


def exit_status(returncode: int) -> int:
    """Map a child returncode to a shell exit status (signal N becomes 128+N)."""
    return 128 + -returncode if returncode < 0 else returncode


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--reason",
        "-r",
        help="Elevation reason (default: from settings). Supports {context}, {user}, {cluster}.",
    )
    add_json_flag(parser)
    parser.add_argument(
        "argv",
        nargs=argparse.REMAINDER,
        help="Command to run (use `--` before the command).",
    )


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    argv = list(getattr(args, "argv", []) or [])
    if argv and argv[0] == "--":
        argv = argv[1:]
    if not argv:
        formatter.error("Usage: kubelevate elevate [--reason TEXT] -- <command> [args...]", error_code="missing_command")
        return 2

    try:
        run_elevate(argv, reason=getattr(args, "reason", None), config_dir=get_config_dir(args))
    except CommandExecutionError as exc:
        if exc.returncode:
            # The command already reported its own failure; relay its status.
            logger.info("%s", exc)
            return exit_status(exc.returncode)
        formatter.error(exc, error_code=exc.__class__.__name__)
        return 1
    except KubelevateError as exc:
        formatter.error(exc, error_code=exc.__class__.__name__)
        return 1
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    sys.exit(main(parser.parse_args()))
