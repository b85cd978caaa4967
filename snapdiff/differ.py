"""Value comparison (deep compare) for SnapDiff engine."""

from __future__ import annotations

from typing import Any

from .exceptions import MaxDepthExceededError
from .models import ChangeType, Difference, Severity, UNDEFINED
from .utils import build_path, get_type_name


def determine_primitive_severity(path: str, old: Any, new: Any) -> Severity:
    """
    Classify a change between two scalar values.

    Identifier-looking paths and null transitions are breaking;
    everything else is non-breaking.
    """
    if "id" in path.lower():
        return Severity.BREAKING

    if (old is None) != (new is None):
        return Severity.BREAKING

    return Severity.NON_BREAKING


class Differ:
    """
    Performs recursive comparison of two JSON-like values.

    Handles:
    - Type mismatches (reported once, no recursion)
    - Objects (added / removed / recursed keys)
    - Arrays (length change plus index-by-index comparison)
    - Scalars (severity from path and null transitions)
    """

    def __init__(self, max_depth: int = 100):
        self.max_depth = max_depth

    def compare(self, old: Any, new: Any, path: str = "") -> list[Difference]:
        """
        Compare two values and return the differences in traversal order.

        Args:
            old: The baseline value
            new: The current value
            path: Path of the values being compared

        Returns:
            List of Difference entries

        Raises:
            MaxDepthExceededError: if nesting exceeds max_depth
        """
        diffs: list[Difference] = []
        try:
            self._diff(old, new, path, 0, diffs)
        except RecursionError:
            # max_depth set above what the interpreter stack allows
            raise MaxDepthExceededError(self.max_depth, path) from None
        return diffs

    def _diff(
        self,
        old: Any,
        new: Any,
        path: str,
        depth: int,
        diffs: list[Difference]
    ):
        if depth > self.max_depth:
            raise MaxDepthExceededError(self.max_depth, path)

        old_type = get_type_name(old)
        new_type = get_type_name(new)

        if old_type != new_type:
            diffs.append(Difference(
                path=path,
                type=ChangeType.CHANGED,
                severity=Severity.BREAKING,
                old_value=old,
                new_value=new,
            ))
            return

        # Same type from here on; null and undefined only equal themselves
        if old_type in ("null", "undefined"):
            return

        if old_type == "array":
            self._diff_arrays(old, new, path, depth, diffs)
        elif old_type == "object":
            self._diff_objects(old, new, path, depth, diffs)
        elif old != new:
            diffs.append(Difference(
                path=path,
                type=ChangeType.CHANGED,
                severity=determine_primitive_severity(path, old, new),
                old_value=old,
                new_value=new,
            ))

    def _diff_objects(
        self,
        old: dict,
        new: dict,
        path: str,
        depth: int,
        diffs: list[Difference]
    ):
        """Compare two objects key by key."""
        # dict preserves insertion order: old keys first, then new-only keys
        all_keys = dict.fromkeys([*old.keys(), *new.keys()])

        for key in all_keys:
            child_path = build_path(path, key)

            if key not in old:
                diffs.append(Difference(
                    path=child_path,
                    type=ChangeType.ADDED,
                    severity=Severity.NON_BREAKING,
                    new_value=new[key],
                ))
            elif key not in new:
                diffs.append(Difference(
                    path=child_path,
                    type=ChangeType.REMOVED,
                    severity=Severity.BREAKING,
                    old_value=old[key],
                ))
            else:
                self._diff(old[key], new[key], child_path, depth + 1, diffs)

    def _diff_arrays(
        self,
        old: list,
        new: list,
        path: str,
        depth: int,
        diffs: list[Difference]
    ):
        """Compare arrays index-by-index (order matters)."""
        if len(old) != len(new):
            diffs.append(Difference(
                path=build_path(path, "length"),
                type=ChangeType.CHANGED,
                severity=Severity.NON_BREAKING,
                old_value=len(old),
                new_value=len(new),
            ))

        # Elements past the shorter length are covered by the length entry
        for i in range(min(len(old), len(new))):
            self._diff(old[i], new[i], build_path(path, i), depth + 1, diffs)


def compare_values(
    old: Any,
    new: Any,
    path: str = "",
    max_depth: int = 100
) -> list[Difference]:
    """Convenience function to compare two JSON-like values."""
    return Differ(max_depth).compare(old, new, path)
