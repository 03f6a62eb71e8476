"""JSON Schema validation for kubelevate settings.

Schemas are stored as YAML files under ``kubelevate/data/schemas``.
"""
from __future__ import annotations

from typing import Any, Dict, List

from jsonschema import Draft202012Validator

from kubelevate.core.exceptions import SettingsError
from kubelevate.data import read_yaml


def load_schema(name: str) -> Dict[str, Any]:
    """Load a bundled schema by file name (e.g. ``config.schema.yaml``)."""
    schema = read_yaml("schemas", name)
    if not isinstance(schema, dict):
        raise SettingsError(f"Schema {name} is not a mapping", context={"schema": name})
    return schema


def schema_errors(instance: Any, schema: Dict[str, Any]) -> List[str]:
    """Return human-readable validation errors, sorted by location."""
    validator = Draft202012Validator(schema)
    out: List[str] = []
    for err in sorted(validator.iter_errors(instance), key=lambda e: list(e.path)):
        where = ".".join(str(p) for p in err.path) or "<root>"
        out.append(f"{where}: {err.message}")
    return out


def validate_payload(instance: Any, schema_name: str) -> None:
    """Validate ``instance`` against a bundled schema.

    Raises:
        SettingsError: With every validation message in ``context["errors"]``
    """
    errors = schema_errors(instance, load_schema(schema_name))
    if errors:
        raise SettingsError(
            "Invalid kubelevate settings: " + "; ".join(errors),
            context={"schema": schema_name, "errors": errors},
        )


__all__ = ["load_schema", "schema_errors", "validate_payload"]
