"""Rule application (ignore / severity override) for SnapDiff engine."""

from __future__ import annotations

import dataclasses
import logging
from typing import Iterable, Mapping, Optional, Union

from .models import DiffRule, Difference, Severity

logger = logging.getLogger(__name__)

RuleLike = Union[DiffRule, Mapping]

# Both headers change on every request
DEFAULT_RULES: tuple[DiffRule, ...] = (
    DiffRule(path="response.headers.date", ignore=True),
    DiffRule(path="response.headers.x-request-id", ignore=True),
)


def _rule_path(rule: RuleLike) -> Optional[str]:
    if isinstance(rule, DiffRule):
        path = rule.path
    elif isinstance(rule, Mapping):
        path = rule.get("path")
    else:
        return None
    return path if isinstance(path, str) else None


def _rule_ignore(rule: RuleLike) -> bool:
    if isinstance(rule, DiffRule):
        return rule.ignore
    return bool(rule.get("ignore", False))


def _rule_severity(rule: RuleLike) -> Optional[Severity]:
    severity = rule.severity if isinstance(rule, DiffRule) else rule.get("severity")
    if severity is None or isinstance(severity, Severity):
        return severity
    try:
        return Severity(severity)
    except ValueError:
        logger.debug("Skipping unknown severity override %r", severity)
        return None


def find_rule(path: str, rules: Iterable[RuleLike]) -> Optional[RuleLike]:
    """
    Find the first rule whose path is a string prefix of the given path.

    Rules without a usable path never match.
    """
    for rule in rules:
        rule_path = _rule_path(rule)
        if rule_path is not None and path.startswith(rule_path):
            return rule
    return None


def apply_rules(
    differences: Iterable[Difference],
    rules: Iterable[RuleLike]
) -> list[Difference]:
    """
    Filter and re-classify differences using path-prefix rules.

    Args:
        differences: Differences in their original order
        rules: Rules in declaration order; first match wins

    Returns:
        Surviving differences in their original relative order. Entries
        whose severity was overridden are new objects; inputs are left
        untouched.
    """
    rules = list(rules)
    result = []

    for diff in differences:
        rule = find_rule(diff.path, rules)

        if rule is None:
            result.append(diff)
            continue

        if _rule_ignore(rule):
            logger.debug("Ignoring difference at %s (rule %s)", diff.path, _rule_path(rule))
            continue

        severity = _rule_severity(rule)
        if severity is not None and severity != diff.severity:
            diff = dataclasses.replace(diff, severity=severity)
        result.append(diff)

    return result


def merge_rules(
    rules: Optional[Iterable[RuleLike]],
    use_defaults: bool = True
) -> list[RuleLike]:
    """Caller rules first so they take precedence over the defaults."""
    merged = list(rules or [])
    if use_defaults:
        merged.extend(DEFAULT_RULES)
    return merged
