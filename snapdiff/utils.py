"""Utility functions for SnapDiff engine."""

from __future__ import annotations

from typing import Any

from .models import UNDEFINED

SENSITIVE_HEADERS = ("authorization", "cookie", "set-cookie", "x-api-key")
REDACTED = "[REDACTED]"


def get_type_name(value: Any) -> str:
    """
    Get the JSON runtime type of a value.

    Integers and floats are both "number"; booleans are never numbers.
    Arrays and objects are distinct types.
    """
    if value is UNDEFINED:
        return "undefined"
    elif value is None:
        return "null"
    elif isinstance(value, bool):
        return "boolean"
    elif isinstance(value, (int, float)):
        return "number"
    elif isinstance(value, str):
        return "string"
    elif isinstance(value, (list, tuple)):
        return "array"
    elif isinstance(value, dict):
        return "object"
    else:
        return type(value).__name__


def build_path(parent_path: str, key: str | int) -> str:
    """Build a difference path from parent path and key or index."""
    if isinstance(key, int):
        return f"{parent_path}[{key}]"
    if not parent_path:
        return str(key)
    return f"{parent_path}.{key}"


def is_success_status(status: int) -> bool:
    """Check if a status code is in the 2xx range."""
    return 200 <= status < 300


def normalize_headers(headers: dict) -> dict[str, str]:
    """
    Lowercase header names and redact sensitive values.

    List values are joined with ", "; other scalars are stringified and
    null values are dropped.
    """
    normalized = {}
    for key, value in (headers or {}).items():
        if isinstance(value, str):
            normalized[key.lower()] = value
        elif isinstance(value, (list, tuple)):
            normalized[key.lower()] = ", ".join(str(v) for v in value)
        elif value is not None and not isinstance(value, dict):
            normalized[key.lower()] = str(value)

    for header in SENSITIVE_HEADERS:
        if normalized.get(header):
            normalized[header] = REDACTED

    return normalized
