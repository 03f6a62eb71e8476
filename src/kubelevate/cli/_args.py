"""Common CLI argument registration utilities."""
from __future__ import annotations

import argparse

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def add_json_flag(parser: argparse.ArgumentParser) -> None:
    """Add --json flag for JSON output mode."""
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )


def add_verbose_flag(parser: argparse.ArgumentParser) -> None:
    """Add --verbose flag (shorthand for --log-level INFO)."""
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log what kubelevate does to stderr",
    )


def add_log_level_flag(parser: argparse.ArgumentParser) -> None:
    """Add --log-level flag overriding the configured level."""
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        help="Logging level (default: from settings, WARNING)",
    )


def add_config_dir_flag(parser: argparse.ArgumentParser) -> None:
    """Add --config-dir flag for the settings directory override."""
    parser.add_argument(
        "--config-dir",
        type=str,
        help="Override the kubelevate settings directory",
    )
