"""Engine configuration and config file loading.

Configuration lives in ``critline_config.yaml`` under an ``engine:`` key::

    engine:
      critical_float_tolerance: 1.0
      float_precision: 1
      default_dependency_type: FS
      default_lag_days: 0
      report_sequence_warnings: true
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from .exceptions import ConfigError
from .models import DependencyType

CONFIG_FILENAME = "critline_config.yaml"


class EngineConfig(BaseModel):
    """Tunable parameters of the critical-path engine."""

    # Tasks whose float is at or below this many days count as critical
    critical_float_tolerance: float = Field(default=1.0, ge=0.0)
    # Decimal places kept when rounding float_days
    float_precision: int = Field(default=1, ge=0)
    # Relationship and lag used for legacy tasks that don't specify their own
    default_dependency_type: DependencyType = DependencyType.FS
    default_lag_days: float = 0.0
    # Warn when a finish-to-start predecessor currently ends after its successor starts
    report_sequence_warnings: bool = True

    @field_validator("default_dependency_type", mode="before")
    @classmethod
    def parse_dependency_type(cls, v: Any) -> DependencyType:
        """Accept any spelling that DependencyType.coerce understands."""
        parsed = DependencyType.coerce(v)
        if parsed is None:
            raise ValueError(
                f"Invalid dependency type '{v}'. "
                f"Valid types are: {', '.join(t.value for t in DependencyType)}"
            )
        return parsed


class CritlineConfig(BaseModel):
    """Top-level structure of a critline config file."""

    engine: EngineConfig = Field(default_factory=EngineConfig)


class _ConfigContext:
    """Holds the config path selected on the command line."""

    def __init__(self) -> None:
        self.config_path: Path | None = None


_context = _ConfigContext()


def get_config_path() -> Path | None:
    """Get the config path set via the CLI, if any."""
    return _context.config_path


def set_config_path(path: Path | None) -> None:
    """Set the config path (the CLI does this for ``--config``)."""
    _context.config_path = path


def load_config(config_path: Path | str) -> CritlineConfig:
    """Load a critline config file.

    Args:
        config_path: Path to the YAML config file

    Returns:
        Parsed configuration

    Raises:
        ConfigError: If the file is missing, not valid YAML, or fails validation
    """
    path = Path(config_path)
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")

    try:
        with path.open(encoding="utf-8") as f:
            data: Any = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse config YAML: {e}") from e

    if data is None:
        return CritlineConfig()
    if not isinstance(data, dict):
        raise ConfigError("Config must contain a dictionary at the root level")

    try:
        return CritlineConfig.model_validate(data)
    except PydanticValidationError as e:
        raise ConfigError(f"Invalid config in {path}: {e}") from e


def discover_config(
    snapshot_path: Path | None = None,
    config_path: Path | None = None,
) -> CritlineConfig:
    """Find and load configuration, falling back to defaults.

    Search order:
    1. Explicit config_path argument
    2. Path set via CLI --config
    3. Snapshot directory / critline_config.yaml
    4. Current directory / critline_config.yaml
    """
    explicit = config_path or get_config_path()
    if explicit is not None:
        # An explicitly requested file must exist
        return load_config(explicit)

    candidates: list[Path] = []
    if snapshot_path is not None:
        candidates.append(Path(snapshot_path).parent / CONFIG_FILENAME)
    candidates.append(Path(CONFIG_FILENAME))

    for candidate in candidates:
        if candidate.exists():
            return load_config(candidate)
    return CritlineConfig()
