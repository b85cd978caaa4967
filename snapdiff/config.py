"""Configuration loading for SnapDiff."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .exceptions import ConfigError, RuleError
from .models import DiffRule, EngineConfig, Severity


@dataclass
class DiffConfig:
    """Engine settings plus the rules applied to every comparison."""
    engine: EngineConfig = field(default_factory=EngineConfig)
    rules: list[DiffRule] = field(default_factory=list)


def parse_rule(data: Any) -> DiffRule:
    """Build a DiffRule from its mapping form, rejecting unknown severities."""
    if not isinstance(data, dict):
        raise RuleError(str(data), "rule must be a mapping")

    severity = data.get("severity")
    if severity is not None and severity not in [s.value for s in Severity]:
        raise RuleError(
            str(data.get("path")),
            f"unknown severity '{severity}' (expected one of "
            f"{', '.join(s.value for s in Severity)})"
        )
    return DiffRule.from_dict(data)


def parse_config(data: Any, source: str = None) -> DiffConfig:
    """Build a DiffConfig from a parsed YAML/JSON document."""
    if data is None:
        return DiffConfig()
    if not isinstance(data, dict):
        raise ConfigError("configuration must be a mapping", source)

    defaults = EngineConfig()
    try:
        engine = EngineConfig(
            max_depth=int(data.get("max_depth", defaults.max_depth)),
            max_workers=int(data.get("max_workers", defaults.max_workers)),
            use_default_rules=bool(data.get("use_default_rules", defaults.use_default_rules)),
        )
    except (TypeError, ValueError) as e:
        raise ConfigError(f"invalid engine setting: {e}", source)

    if engine.max_depth < 1 or engine.max_workers < 1:
        raise ConfigError("max_depth and max_workers must be positive", source)

    raw_rules = data.get("rules") or []
    if not isinstance(raw_rules, list):
        raise ConfigError("'rules' must be a list", source)

    try:
        rules = [parse_rule(r) for r in raw_rules]
    except RuleError as e:
        raise ConfigError(str(e), source)

    return DiffConfig(engine=engine, rules=rules)


def load_config(path: str | Path) -> DiffConfig:
    """
    Load configuration from a YAML or JSON file.

    Args:
        path: Path to the configuration file

    Returns:
        DiffConfig

    Raises:
        FileNotFoundError: if the file does not exist
        ConfigError: if the file cannot be parsed or is invalid
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, 'r') as f:
        content = f.read()

    # YAML also handles JSON since JSON is valid YAML
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse config file: {e}", str(path))

    return parse_config(data, str(path))
