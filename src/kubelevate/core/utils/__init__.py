"""Shared utilities (merging, YAML and file I/O)."""
