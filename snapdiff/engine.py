"""Main comparison engine for SnapDiff."""

from __future__ import annotations

import difflib
import json
import logging
from typing import Any, Iterable, Optional, Union

from .comparators import compare_headers, compare_status, compare_validation
from .differ import Differ
from .models import Comparison, EngineConfig, Snapshot, UNDEFINED
from .rules import RuleLike, apply_rules, merge_rules

logger = logging.getLogger(__name__)

SnapshotLike = Union[Snapshot, dict]


def _as_snapshot(snapshot: SnapshotLike) -> Snapshot:
    if isinstance(snapshot, Snapshot):
        return snapshot
    return Snapshot.from_dict(snapshot)


class SnapDiffEngine:
    """
    Main comparison engine that orchestrates the comparator family:

    1. Status: response status code transition
    2. Body: recursive value comparison of response data
    3. Headers: allow-listed response headers
    4. Validation: schema validation outcomes, when present
    5. Rules: ignore / severity overrides on the concatenated list

    The engine performs no I/O and never mutates its inputs.
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        """
        Initialize the engine.

        Args:
            config: Engine configuration (uses defaults if not provided)
        """
        self.config = config or EngineConfig()

    def compare(
        self,
        baseline: SnapshotLike,
        current: SnapshotLike,
        rules: Optional[Iterable[RuleLike]] = None
    ) -> Comparison:
        """
        Compare a current snapshot against its baseline.

        Args:
            baseline: The known-good snapshot
            current: The freshly captured snapshot
            rules: Caller rules, checked before the default rules

        Returns:
            Comparison with the rule-filtered differences

        Raises:
            ValidationError: if a snapshot dict is malformed
            MaxDepthExceededError: if the response body nests too deeply
        """
        baseline = _as_snapshot(baseline)
        current = _as_snapshot(current)

        differences = []
        differences.extend(compare_status(baseline.response.status, current.response.status))

        differ = Differ(self.config.max_depth)
        differences.extend(differ.compare(
            baseline.response.data,
            current.response.data,
            "response.data"
        ))

        differences.extend(compare_headers(baseline.response.headers, current.response.headers))
        differences.extend(compare_validation(baseline, current))

        effective_rules = merge_rules(rules, self.config.use_default_rules)
        filtered = apply_rules(differences, effective_rules)

        logger.debug(
            "Compared %s: %d raw differences, %d after rules",
            baseline.endpoint.name, len(differences), len(filtered)
        )

        return Comparison(
            endpoint=baseline.endpoint.name,
            baseline=baseline,
            current=current,
            differences=tuple(filtered),
        )

    def generate_text_diff(self, baseline: SnapshotLike, current: SnapshotLike) -> str:
        """
        Produce a line diff of the two response bodies.

        Each line of the pretty-printed JSON is prefixed with "+ ",
        "- " or "  ".
        """
        baseline = _as_snapshot(baseline)
        current = _as_snapshot(current)

        old_lines = _pretty_lines(baseline.response.data)
        new_lines = _pretty_lines(current.response.data)

        output = []
        matcher = difflib.SequenceMatcher(a=old_lines, b=new_lines, autojunk=False)
        for tag, i1, i2, j1, j2 in matcher.get_opcodes():
            if tag == "equal":
                output.extend(f"  {line}" for line in old_lines[i1:i2])
                continue
            if tag in ("replace", "delete"):
                output.extend(f"- {line}" for line in old_lines[i1:i2])
            if tag in ("replace", "insert"):
                output.extend(f"+ {line}" for line in new_lines[j1:j2])

        return "\n".join(output)


def _pretty_lines(data: Any) -> list[str]:
    if data is UNDEFINED:
        return []
    return json.dumps(data, indent=2, default=str).splitlines()


def compare(
    baseline: SnapshotLike,
    current: SnapshotLike,
    rules: Optional[Iterable[RuleLike]] = None,
    config: Optional[EngineConfig] = None
) -> Comparison:
    """
    Convenience function to compare two snapshots.

    Args:
        baseline: The known-good snapshot
        current: The snapshot to check
        rules: Optional caller rules
        config: Optional engine configuration

    Returns:
        Comparison result
    """
    engine = SnapDiffEngine(config)
    return engine.compare(baseline, current, rules)
