"""Bulk comparison of many endpoints with bounded concurrency."""

from __future__ import annotations

import concurrent.futures
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable, Optional

from .engine import SnapDiffEngine, SnapshotLike
from .exceptions import MaxDepthExceededError, ValidationError
from .models import Comparison, EngineConfig
from .rules import RuleLike

logger = logging.getLogger(__name__)


@dataclass
class EndpointResult:
    """Result of comparing one endpoint."""
    name: str
    comparison: Optional[Comparison] = None
    error: Optional[dict] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict:
        result = {"name": self.name, "success": self.succeeded}
        if self.comparison is not None:
            result["comparison"] = self.comparison.to_dict()
        if self.error:
            result["error"] = self.error
        return result


@dataclass
class BatchReport:
    """Aggregate report across all compared endpoints."""
    results: list[EndpointResult] = field(default_factory=list)
    timestamp: str = ""

    def __post_init__(self):
        if not self.timestamp:
            self.timestamp = datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z')

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def failed(self) -> list[EndpointResult]:
        return [r for r in self.results if not r.succeeded]

    @property
    def changed(self) -> list[EndpointResult]:
        return [r for r in self.results if r.succeeded and r.comparison.has_changes]

    @property
    def unchanged(self) -> list[EndpointResult]:
        return [r for r in self.results if r.succeeded and not r.comparison.has_changes]

    @property
    def breaking(self) -> list[EndpointResult]:
        return [r for r in self.changed if r.comparison.has_breaking_changes]

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp,
            "summary": {
                "total_endpoints": self.total,
                "unchanged": len(self.unchanged),
                "changed": len(self.changed),
                "breaking": len(self.breaking),
                "failed": len(self.failed),
            },
            "breakdown": {
                "unchanged": [r.name for r in self.unchanged],
                "with_changes": [r.name for r in self.changed],
                "breaking": [r.name for r in self.breaking],
                "failed": [r.name for r in self.failed],
            },
            "endpoints": [r.to_dict() for r in self.results],
        }

    def print_summary(self):
        print(f"\nCompared {self.total} endpoints")
        print(f"  Unchanged: {len(self.unchanged)}")
        print(f"  With changes: {len(self.changed)} ({len(self.breaking)} breaking)")
        if self.failed:
            print(f"  Failed: {len(self.failed)}")
            for result in self.failed:
                print(f"    {result.name}: {result.error['message']}")


def error_record(error: Exception) -> dict:
    """Map an exception to an error record."""
    if isinstance(error, ValidationError):
        return {"code": "VALIDATION_ERROR", "message": error.message, "details": error.details}
    if isinstance(error, MaxDepthExceededError):
        return {
            "code": "MAX_DEPTH_ERROR",
            "message": str(error),
            "details": {"depth": error.depth, "path": error.path},
        }
    return {
        "code": "PROCESSING_ERROR",
        "message": str(error),
        "details": {"type": type(error).__name__},
    }


def compare_all(
    pairs: Iterable[tuple[str, SnapshotLike, SnapshotLike]],
    rules: Optional[Iterable[RuleLike]] = None,
    config: Optional[EngineConfig] = None
) -> BatchReport:
    """
    Compare many baseline/current pairs concurrently.

    Args:
        pairs: (endpoint name, baseline, current) tuples
        rules: Caller rules applied to every comparison
        config: Engine configuration; max_workers bounds concurrency

    Returns:
        BatchReport with one result per pair, in input order. A failure
        in one comparison is recorded on its result and does not affect
        the others.
    """
    config = config or EngineConfig()
    engine = SnapDiffEngine(config)
    pairs = list(pairs)
    rules = list(rules or [])
    report = BatchReport()

    if not pairs:
        return report

    max_workers = max(1, min(config.max_workers, len(pairs)))
    logger.info("Comparing %d endpoints with %d workers", len(pairs), max_workers)

    with concurrent.futures.ThreadPoolExecutor(max_workers=max_workers) as ex:
        futures = [
            ex.submit(engine.compare, baseline, current, rules)
            for _, baseline, current in pairs
        ]

        for (name, _, _), future in zip(pairs, futures):
            try:
                comparison = future.result()
            except Exception as e:
                logger.warning("Comparison failed for endpoint '%s': %s", name, e)
                report.results.append(EndpointResult(name=name, error=error_record(e)))
                continue

            logger.debug(
                "Endpoint '%s': %d differences", name, len(comparison.differences)
            )
            report.results.append(EndpointResult(name=name, comparison=comparison))

    return report
