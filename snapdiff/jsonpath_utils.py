"""JSONPath utilities for resolving difference paths against snapshots."""

from __future__ import annotations

from functools import lru_cache
from typing import Any

from jsonpath_ng.jsonpath import Child, Fields, Index, JSONPath, Root

from .models import UNDEFINED

WILDCARD = "*"


def parse_path(path: str) -> list:
    """
    Parse a difference path into segments.

    "response.data.users[2].email" -> ["response", "data", "users", 2, "email"]
    Bracket contents that are not digits are kept as (unquoted) field names.
    """
    if path in ("", "$"):
        return []

    if path.startswith("$."):
        path = path[2:]
    elif path.startswith("$"):
        path = path[1:]

    segments = []
    current = ""
    i = 0

    while i < len(path):
        char = path[i]

        if char == ".":
            if current:
                segments.append(current)
                current = ""
        elif char == "[":
            if current:
                segments.append(current)
                current = ""
            j = path.find("]", i + 1)
            if j == -1:
                j = len(path)
            bracket_content = path[i + 1:j]
            if bracket_content.isdigit():
                segments.append(int(bracket_content))
            elif len(bracket_content) >= 2 and bracket_content[0] == bracket_content[-1] \
                    and bracket_content[0] in ("'", '"'):
                segments.append(bracket_content[1:-1])
            else:
                segments.append(bracket_content)
            i = j
        else:
            current += char

        i += 1

    if current:
        segments.append(current)

    return segments


@lru_cache(maxsize=256)
def to_jsonpath(path: str) -> JSONPath:
    """
    Build a jsonpath-ng expression equivalent to a difference path.

    A "*" segment becomes a jsonpath-ng wildcard; resolve_path handles
    literal "*" keys itself.
    """
    expr: JSONPath = Root()
    for segment in parse_path(path):
        step = Index(segment) if isinstance(segment, int) else Fields(segment)
        expr = Child(expr, step)
    return expr


def _walk(document: Any, segments: list) -> Any:
    current = document
    for segment in segments:
        if isinstance(segment, int):
            if not isinstance(current, list) or segment >= len(current):
                return UNDEFINED
        elif not isinstance(current, dict) or segment not in current:
            return UNDEFINED
        current = current[segment]
    return current


def _find_first(document: Any, path: str) -> Any:
    segments = parse_path(path)
    if WILDCARD in segments:
        # jsonpath-ng reads a "*" field as a wildcard; look literal keys up directly
        return _walk(document, segments)

    try:
        matches = to_jsonpath(path).find(document)
    except (KeyError, IndexError, TypeError, AttributeError):
        # index step applied to an object, or field step to a scalar
        return UNDEFINED
    if not matches:
        return UNDEFINED
    return matches[0].value


def resolve_path(document: Any, path: str) -> Any:
    """
    Resolve a difference path inside a JSON document.

    Args:
        document: Snapshot in dict form (or any JSON-like value)
        path: Difference path, e.g. "response.data.items[0].id"

    Returns:
        The value at the path; for a trailing ".length" on an array the
        array length. UNDEFINED when the path does not resolve.
    """
    value = _find_first(document, path)
    if value is not UNDEFINED:
        return value

    segments = parse_path(path)
    if segments and segments[-1] == "length":
        parent_path = path[:-len(".length")] if path.endswith(".length") else ""
        parent = _find_first(document, parent_path) if parent_path else document
        if isinstance(parent, list):
            return len(parent)

    return UNDEFINED
