"""critline - schedule validation and critical path analysis for project task graphs."""

from .config import EngineConfig
from .engine import EngineResult, ScheduleEngine, validate_and_compute
from .exceptions import (
    CircularDependencyError,
    ConfigError,
    CritlineError,
    ParseError,
    ValidationError,
)
from .models import DependencyType, PredecessorConfig, Task

__version__ = "0.1.0"

__all__ = [
    "DependencyType",
    "PredecessorConfig",
    "Task",
    "EngineConfig",
    "EngineResult",
    "ScheduleEngine",
    "validate_and_compute",
    "CritlineError",
    "ValidationError",
    "CircularDependencyError",
    "ParseError",
    "ConfigError",
]
