"""Comparison functions for HTTP status, headers and schema validation."""

from __future__ import annotations

from typing import Optional

from .models import (
    ChangeType,
    Difference,
    Severity,
    Snapshot,
    ValidationResult,
    UNDEFINED,
)
from .utils import is_success_status, normalize_headers

COMPARED_HEADERS = ("content-type", "content-length", "cache-control")


def determine_status_severity(old_status: int, new_status: int) -> Severity:
    """
    Classify a status code transition.

    Leaving 2xx is breaking, entering 2xx is non-breaking, anything
    else (e.g. 404 -> 500, 200 -> 201) is informational.
    """
    old_ok = is_success_status(old_status)
    new_ok = is_success_status(new_status)

    if old_ok and not new_ok:
        return Severity.BREAKING
    if not old_ok and new_ok:
        return Severity.NON_BREAKING
    return Severity.INFORMATIONAL


def compare_status(old_status: int, new_status: int) -> list[Difference]:
    """Compare response status codes."""
    if old_status == new_status:
        return []

    return [Difference(
        path="response.status",
        type=ChangeType.CHANGED,
        severity=determine_status_severity(old_status, new_status),
        old_value=old_status,
        new_value=new_status,
    )]


def compare_headers(
    old_headers: dict,
    new_headers: dict,
    names: tuple[str, ...] = COMPARED_HEADERS
) -> list[Difference]:
    """
    Compare a fixed allow-list of response headers.

    Args:
        old_headers: Baseline response headers
        new_headers: Current response headers
        names: Lowercase header names to compare

    Returns:
        One "changed" difference per header whose value differs
    """
    old_headers = normalize_headers(old_headers)
    new_headers = normalize_headers(new_headers)
    diffs = []

    for name in names:
        old_value = old_headers.get(name, UNDEFINED)
        new_value = new_headers.get(name, UNDEFINED)

        if old_value == new_value:
            continue

        diffs.append(Difference(
            path=f"response.headers.{name}",
            type=ChangeType.CHANGED,
            severity=(
                Severity.BREAKING if name == "content-type"
                else Severity.INFORMATIONAL
            ),
            old_value=old_value,
            new_value=new_value,
        ))

    return diffs


def _compare_validity(
    prefix: str,
    old: Optional[ValidationResult],
    new: Optional[ValidationResult]
) -> list[Difference]:
    # A side without a validation result counts as valid
    old_valid = old.is_valid if old is not None else True
    new_valid = new.is_valid if new is not None else True

    if old_valid == new_valid:
        return []

    return [Difference(
        path=f"{prefix}.validation.isValid",
        type=ChangeType.CHANGED,
        severity=Severity.NON_BREAKING if new_valid else Severity.BREAKING,
        old_value=old_valid,
        new_value=new_valid,
    )]


def compare_validation(baseline: Snapshot, current: Snapshot) -> list[Difference]:
    """
    Compare schema validation outcomes of two snapshots.

    Only new response violations are reported; errors already present
    in the baseline are not repeated.
    """
    diffs = []

    old_request = baseline.request_validation
    new_request = current.request_validation
    if old_request is not None or new_request is not None:
        diffs.extend(_compare_validity("request", old_request, new_request))

    old_response = baseline.response.validation
    new_response = current.response.validation
    if old_response is not None or new_response is not None:
        diffs.extend(_compare_validity("response", old_response, new_response))

        if new_response is not None:
            known_paths = old_response.error_paths if old_response is not None else set()
            for error in new_response.errors:
                if error.path in known_paths:
                    continue
                diffs.append(Difference(
                    path=f"response.validation.errors.{error.path}",
                    type=ChangeType.ADDED,
                    severity=Severity.BREAKING,
                    new_value=error.message,
                ))

    return diffs
