"""Custom exceptions for SnapDiff engine."""


class SnapDiffError(Exception):
    """Base exception for SnapDiff errors."""
    pass


class ValidationError(SnapDiffError):
    """Raised when a snapshot or difference record is malformed."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class MaxDepthExceededError(SnapDiffError):
    """Raised when maximum recursion depth is exceeded."""
    def __init__(self, depth: int, path: str):
        super().__init__(f"Maximum depth ({depth}) exceeded at path: {path or '<root>'}")
        self.depth = depth
        self.path = path


class RuleError(SnapDiffError):
    """Raised when a diff rule is invalid."""
    def __init__(self, rule: str, message: str):
        super().__init__(f"Invalid rule '{rule}': {message}")
        self.rule = rule
        self.message = message


class ConfigError(SnapDiffError):
    """Raised when a configuration file cannot be used."""
    def __init__(self, message: str, source: str = None):
        super().__init__(f"{source}: {message}" if source else message)
        self.message = message
        self.source = source
