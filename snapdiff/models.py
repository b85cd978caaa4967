"""Data models for SnapDiff engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from .exceptions import ValidationError


class _Undefined:
    """Marker for a value that is absent, as opposed to JSON null."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self):
        return (_Undefined, ())


UNDEFINED = _Undefined()


class ChangeType(Enum):
    ADDED = "added"
    REMOVED = "removed"
    CHANGED = "changed"


class Severity(Enum):
    BREAKING = "breaking"
    NON_BREAKING = "non-breaking"
    INFORMATIONAL = "informational"


class SchemaType(Enum):
    OPENAPI = "openapi"
    JSON_SCHEMA = "json-schema"
    GRAPHQL = "graphql"
    CUSTOM = "custom"


@dataclass
class EngineConfig:
    """Global configuration for the comparison engine."""
    max_depth: int = 100
    max_workers: int = 8
    use_default_rules: bool = True


@dataclass(frozen=True)
class Difference:
    """A single path-addressed change between two snapshots."""
    path: str
    type: ChangeType
    severity: Severity
    old_value: Any = UNDEFINED
    new_value: Any = UNDEFINED

    def __post_init__(self):
        if self.type == ChangeType.ADDED and self.old_value is not UNDEFINED:
            raise ValueError(f"added difference at {self.path} cannot carry an old value")
        if self.type == ChangeType.REMOVED and self.new_value is not UNDEFINED:
            raise ValueError(f"removed difference at {self.path} cannot carry a new value")

    def to_dict(self) -> dict:
        result = {"path": self.path, "type": self.type.value}
        if self.old_value is not UNDEFINED:
            result["oldValue"] = self.old_value
        if self.new_value is not UNDEFINED:
            result["newValue"] = self.new_value
        result["severity"] = self.severity.value
        return result

    @classmethod
    def from_dict(cls, data: dict) -> Difference:
        try:
            return cls(
                path=data["path"],
                type=ChangeType(data["type"]),
                severity=Severity(data["severity"]),
                old_value=data.get("oldValue", UNDEFINED),
                new_value=data.get("newValue", UNDEFINED),
            )
        except (KeyError, ValueError) as e:
            raise ValidationError(f"Invalid difference: {e}", {"difference": data})


@dataclass(frozen=True)
class DiffRule:
    """User-declared override matched against difference paths by prefix."""
    path: Optional[str]
    ignore: bool = False
    severity: Optional[Severity] = None

    def matches(self, difference_path: str) -> bool:
        if not isinstance(self.path, str):
            return False
        return difference_path.startswith(self.path)

    def to_dict(self) -> dict:
        result = {"path": self.path}
        if self.ignore:
            result["ignore"] = True
        if self.severity is not None:
            result["severity"] = self.severity.value
        return result

    @classmethod
    def from_dict(cls, data: dict) -> DiffRule:
        try:
            severity = data.get("severity")
            return cls(
                path=data.get("path"),
                ignore=bool(data.get("ignore", False)),
                severity=Severity(severity) if severity is not None else None,
            )
        except (AttributeError, ValueError) as e:
            raise ValidationError(f"Invalid rule: {e}", {"rule": data})


@dataclass(frozen=True)
class ApiSchema:
    """Reference to the schema an endpoint is validated against."""
    type: SchemaType
    source: str
    version: Optional[str] = None
    operation_id: Optional[str] = None
    request_validation: Optional[bool] = None
    response_validation: Optional[bool] = None

    def to_dict(self) -> dict:
        result = {"type": self.type.value, "source": self.source}
        if self.version is not None:
            result["version"] = self.version
        if self.operation_id is not None:
            result["operationId"] = self.operation_id
        if self.request_validation is not None:
            result["requestValidation"] = self.request_validation
        if self.response_validation is not None:
            result["responseValidation"] = self.response_validation
        return result

    @classmethod
    def from_dict(cls, data: dict) -> ApiSchema:
        try:
            schema_type = SchemaType(data.get("type", "custom"))
        except ValueError:
            raise ValidationError(f"Unknown schema type: {data.get('type')}", {"schema": data})
        return cls(
            type=schema_type,
            source=data.get("source", ""),
            version=data.get("version"),
            operation_id=data.get("operationId"),
            request_validation=data.get("requestValidation"),
            response_validation=data.get("responseValidation"),
        )


@dataclass(frozen=True)
class Endpoint:
    """Static description of an HTTP call."""
    name: str
    url: str
    method: str = "GET"
    headers: Optional[dict] = None
    body: Any = None
    auth: Optional[dict] = None
    timeout: Optional[int] = None
    schema: Optional[ApiSchema] = None

    def to_dict(self) -> dict:
        result = {"name": self.name, "url": self.url, "method": self.method}
        if self.headers is not None:
            result["headers"] = self.headers
        if self.body is not None:
            result["body"] = self.body
        if self.auth is not None:
            result["auth"] = self.auth
        if self.schema is not None:
            result["schema"] = self.schema.to_dict()
        if self.timeout is not None:
            result["timeout"] = self.timeout
        return result

    @classmethod
    def from_dict(cls, data: dict) -> Endpoint:
        if not isinstance(data, dict) or not data.get("name"):
            raise ValidationError("Endpoint must have a name", {"endpoint": data})
        schema = data.get("schema")
        return cls(
            name=data["name"],
            url=data.get("url", ""),
            method=data.get("method", "GET"),
            headers=data.get("headers"),
            body=data.get("body"),
            auth=data.get("auth"),
            timeout=data.get("timeout"),
            schema=ApiSchema.from_dict(schema) if schema else None,
        )


@dataclass(frozen=True)
class ValidationIssue:
    """One schema violation reported by an external validator."""
    path: str
    message: str
    severity: str = "error"
    expected: Any = UNDEFINED
    actual: Any = UNDEFINED

    def to_dict(self) -> dict:
        result = {"path": self.path, "message": self.message}
        if self.expected is not UNDEFINED:
            result["expected"] = self.expected
        if self.actual is not UNDEFINED:
            result["actual"] = self.actual
        result["severity"] = self.severity
        return result

    @classmethod
    def from_dict(cls, data: dict) -> ValidationIssue:
        return cls(
            path=str(data.get("path", "")),
            message=str(data.get("message", "")),
            severity=data.get("severity", "error"),
            expected=data.get("expected", UNDEFINED),
            actual=data.get("actual", UNDEFINED),
        )


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating a request or response against its schema."""
    is_valid: bool
    errors: tuple[ValidationIssue, ...] = ()
    warnings: tuple[ValidationIssue, ...] = ()

    @property
    def error_paths(self) -> set[str]:
        return {e.path for e in self.errors}

    def to_dict(self) -> dict:
        return {
            "isValid": self.is_valid,
            "errors": [e.to_dict() for e in self.errors],
            "warnings": [w.to_dict() for w in self.warnings],
        }

    @classmethod
    def from_dict(cls, data: dict) -> ValidationResult:
        return cls(
            is_valid=bool(data.get("isValid", True)),
            errors=tuple(ValidationIssue.from_dict(e) for e in data.get("errors") or []),
            warnings=tuple(ValidationIssue.from_dict(w) for w in data.get("warnings") or []),
        )


@dataclass(frozen=True)
class Response:
    """Captured HTTP response."""
    status: int
    headers: dict = field(default_factory=dict)
    data: Any = UNDEFINED
    duration: float = 0
    validation: Optional[ValidationResult] = None

    def to_dict(self) -> dict:
        result = {"status": self.status, "headers": self.headers}
        if self.data is not UNDEFINED:
            result["data"] = self.data
        result["duration"] = self.duration
        if self.validation is not None:
            result["validation"] = self.validation.to_dict()
        return result

    @classmethod
    def from_dict(cls, data: dict) -> Response:
        if not isinstance(data, dict) or "status" not in data:
            raise ValidationError("Response must have a status", {"response": data})
        validation = data.get("validation")
        return cls(
            status=data["status"],
            headers=dict(data.get("headers") or {}),
            data=data.get("data", UNDEFINED),
            duration=data.get("duration", 0),
            validation=ValidationResult.from_dict(validation) if validation else None,
        )


@dataclass(frozen=True)
class SnapshotMetadata:
    version: str = "1.0.0"
    environment: Optional[str] = None

    def to_dict(self) -> dict:
        result = {"version": self.version}
        if self.environment is not None:
            result["environment"] = self.environment
        return result

    @classmethod
    def from_dict(cls, data: dict) -> SnapshotMetadata:
        data = data or {}
        return cls(
            version=data.get("version", "1.0.0"),
            environment=data.get("environment"),
        )


@dataclass(frozen=True)
class Snapshot:
    """The result of invoking one endpoint at one point in time."""
    endpoint: Endpoint
    timestamp: str
    response: Response
    request_validation: Optional[ValidationResult] = None
    metadata: SnapshotMetadata = field(default_factory=SnapshotMetadata)

    def to_dict(self) -> dict:
        result = {
            "endpoint": self.endpoint.to_dict(),
            "timestamp": self.timestamp,
        }
        if self.request_validation is not None:
            result["request"] = {"validation": self.request_validation.to_dict()}
        result["response"] = self.response.to_dict()
        result["metadata"] = self.metadata.to_dict()
        return result

    @classmethod
    def from_dict(cls, data: dict) -> Snapshot:
        if not isinstance(data, dict):
            raise ValidationError(
                "Snapshot must be an object",
                {"type": type(data).__name__}
            )
        if "endpoint" not in data:
            raise ValidationError("Snapshot is missing 'endpoint'")
        if "response" not in data:
            raise ValidationError("Snapshot is missing 'response'")

        request_validation = (data.get("request") or {}).get("validation")
        return cls(
            endpoint=Endpoint.from_dict(data["endpoint"]),
            timestamp=data.get("timestamp", ""),
            response=Response.from_dict(data["response"]),
            request_validation=(
                ValidationResult.from_dict(request_validation)
                if request_validation else None
            ),
            metadata=SnapshotMetadata.from_dict(data.get("metadata")),
        )


@dataclass(frozen=True)
class Comparison:
    """Final comparison result for one endpoint."""
    endpoint: str
    baseline: Snapshot
    current: Snapshot
    differences: tuple[Difference, ...] = ()

    @property
    def has_changes(self) -> bool:
        return len(self.differences) > 0

    @property
    def has_breaking_changes(self) -> bool:
        return any(d.severity == Severity.BREAKING for d in self.differences)

    def summary(self) -> dict:
        counts = {s.value: 0 for s in Severity}
        for diff in self.differences:
            counts[diff.severity.value] += 1
        return counts

    def value_at(self, path: str, side: str = "current") -> Any:
        """
        Look up the value a difference path points to.

        Args:
            path: Difference path, e.g. "response.data.users[0].email"
            side: "baseline" or "current"

        Returns:
            The value found, or UNDEFINED if the path does not resolve
        """
        from .jsonpath_utils import resolve_path

        if side not in ("baseline", "current"):
            raise ValueError(f"Unknown side: {side}")
        snapshot = self.baseline if side == "baseline" else self.current
        return resolve_path(snapshot.to_dict(), path)

    def to_dict(self) -> dict:
        return {
            "endpoint": self.endpoint,
            "baseline": self.baseline.to_dict(),
            "current": self.current.to_dict(),
            "hasChanges": self.has_changes,
            "differences": [d.to_dict() for d in self.differences],
        }

    @classmethod
    def from_dict(cls, data: dict) -> Comparison:
        """Rebuild a comparison from its JSON form; hasChanges is derived."""
        if not isinstance(data, dict):
            raise ValidationError(
                "Comparison must be an object",
                {"type": type(data).__name__}
            )
        for key in ("endpoint", "baseline", "current"):
            if key not in data:
                raise ValidationError(f"Comparison is missing '{key}'")

        return cls(
            endpoint=data["endpoint"],
            baseline=Snapshot.from_dict(data["baseline"]),
            current=Snapshot.from_dict(data["current"]),
            differences=tuple(
                Difference.from_dict(d) for d in data.get("differences") or []
            ),
        )
