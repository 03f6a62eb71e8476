"""
kubelevate CLI package.

Commands are auto-discovered from ``cli/commands``: each module exposes
``SUMMARY``, ``register_args(parser)`` and ``main(args) -> int``.
"""
from ._args import add_config_dir_flag, add_json_flag, add_log_level_flag, add_verbose_flag
from ._output import OutputFormatter, print_error
from ._utils import get_config_dir

__all__ = [
    "OutputFormatter",
    "print_error",
    "get_config_dir",
    "add_config_dir_flag",
    "add_json_flag",
    "add_log_level_flag",
    "add_verbose_flag",
]
