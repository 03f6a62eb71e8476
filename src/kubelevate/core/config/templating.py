"""Small templating helpers shared by config-driven values."""

from __future__ import annotations


class SafeDict(dict):
    """dict that preserves unknown `{placeholders}` instead of raising."""

    def __missing__(self, key: str) -> str:
        return "{" + key + "}"


def render_placeholders(template: str, **values: object) -> str:
    """Fill ``{name}`` placeholders, leaving unknown ones in place.

    Text that is not a valid format string (a stray ``}``, ``{}``, ``{0}``)
    is returned unchanged.
    """
    try:
        return template.format_map(SafeDict({k: "" if v is None else str(v) for k, v in values.items()}))
    except (ValueError, IndexError, AttributeError, KeyError):
        return template


__all__ = ["SafeDict", "render_placeholders"]
