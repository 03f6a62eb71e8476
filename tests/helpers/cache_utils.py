"""Cache utilities for test isolation."""
from __future__ import annotations


def reset_kubelevate_caches() -> None:
    """Reset global settings caches and logging handlers between tests."""
    from kubelevate.cli._dispatcher import discover_commands
    from kubelevate.core.audit import reset_stdlib_logging_for_tests
    from kubelevate.core.config import clear_all_caches

    clear_all_caches()
    discover_commands.cache_clear()
    reset_stdlib_logging_for_tests()
