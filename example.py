"""Example usage of SnapDiff comparison engine."""

import json
from snapdiff import SnapDiffEngine, EngineConfig, DiffRule, Severity

endpoint = {
    "name": "get-user",
    "url": "https://api.example.com/users/{id}",
    "method": "GET",
}

# Baseline captured last week
baseline = {
    "endpoint": endpoint,
    "timestamp": "2025-02-01T10:30:00Z",
    "response": {
        "status": 200,
        "headers": {
            "content-type": "application/json",
            "date": "Sat, 01 Feb 2025 10:30:00 GMT",
            "x-request-id": "a1b2c3",
        },
        "data": {
            "id": 42,
            "name": "Ada",
            "email": "ada@example.com",
            "roles": ["admin", "dev"],
            "profile": {"avatar": None, "bio": "Mathematician"},
            "updatedAt": "2025-02-01T10:00:00Z",
        },
        "duration": 87,
    },
    "metadata": {"version": "1.0.0", "environment": "staging"},
}

# Current capture
current = {
    "endpoint": endpoint,
    "timestamp": "2025-02-08T10:30:00Z",
    "response": {
        "status": 200,
        "headers": {
            "content-type": "application/json; charset=utf-8",  # Breaking
            "date": "Sat, 08 Feb 2025 10:30:00 GMT",  # Always differs
            "x-request-id": "d4e5f6",  # Always differs
        },
        "data": {
            "id": 42,
            "name": "Ada",
            "roles": ["admin", "dev", "ops"],  # Length change
            "profile": {"avatar": "https://cdn/ada.png", "bio": "Mathematician"},  # null -> value
            "updatedAt": "2025-02-08T09:12:00Z",  # Will be ignored
            "lastLogin": "2025-02-08T09:00:00Z",  # Added
        },
        "duration": 91,
    },
    "metadata": {"version": "1.0.0", "environment": "staging"},
}

rules = [
    DiffRule(path="response.data.updatedAt", ignore=True),
    DiffRule(path="response.headers.content-type", severity=Severity.INFORMATIONAL),
]

engine = SnapDiffEngine(EngineConfig(max_depth=50))
comparison = engine.compare(baseline, current, rules)

print("=" * 60)
print("SnapDiff Comparison Result")
print("=" * 60)
print(f"\nEndpoint: {comparison.endpoint}")
print(f"Has changes: {comparison.has_changes}")
print(f"Summary: {comparison.summary()}")

if comparison.differences:
    print(f"\nDifferences ({len(comparison.differences)}):")
    for diff in comparison.differences:
        print(f"  - [{diff.severity.value}] {diff.type.value} {diff.path}")

print("\n" + "=" * 60)
print("Full JSON Report:")
print("=" * 60)
print(json.dumps(comparison.to_dict()["differences"], indent=2))

print("\n" + "=" * 60)
print("Text diff of response bodies:")
print("=" * 60)
print(engine.generate_text_diff(baseline, current))
