"""
SnapDiff - API Snapshot Comparison Engine

Compares a current HTTP API snapshot against a baseline and classifies
every structural difference as breaking, non-breaking or informational.
"""

from .engine import SnapDiffEngine, compare
from .models import (
    EngineConfig,
    Comparison,
    Difference,
    DiffRule,
    ChangeType,
    Severity,
    Snapshot,
    Endpoint,
    Response,
    ValidationResult,
    ValidationIssue,
    UNDEFINED,
)
from .differ import Differ, compare_values
from .rules import DEFAULT_RULES, apply_rules
from .exceptions import (
    SnapDiffError,
    ValidationError,
    MaxDepthExceededError,
    RuleError,
    ConfigError,
)
from .batch import (
    compare_all,
    BatchReport,
    EndpointResult,
)
from .config import DiffConfig, load_config
from .runner import SnapDiffRunner

__version__ = "1.0.0"
__all__ = [
    # Engine
    "SnapDiffEngine",
    "EngineConfig",
    "compare",
    # Models
    "Comparison",
    "Difference",
    "DiffRule",
    "ChangeType",
    "Severity",
    "Snapshot",
    "Endpoint",
    "Response",
    "ValidationResult",
    "ValidationIssue",
    "UNDEFINED",
    # Value comparison
    "Differ",
    "compare_values",
    # Rules
    "DEFAULT_RULES",
    "apply_rules",
    # Errors
    "SnapDiffError",
    "ValidationError",
    "MaxDepthExceededError",
    "RuleError",
    "ConfigError",
    # Batch
    "compare_all",
    "BatchReport",
    "EndpointResult",
    # Config / runner
    "DiffConfig",
    "load_config",
    "SnapDiffRunner",
]
