"""Data models for critline."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from datetime import date
from enum import Enum

DAYS_PER_WEEK = 7

_CONFIG_PATTERN = re.compile(
    r"^(?P<id>.+?)"
    r"(?:\s*:\s*(?P<type>[A-Za-z_]+))?"
    r"(?:(?:\s*(?P<plus>\+)|\s+(?P<minus>-))\s*(?P<value>[\d.]+)(?P<unit>[dw]))?$"
)


class DependencyType(str, Enum):
    """How a predecessor's timing constrains its successor."""

    FS = "FS"  # successor starts after predecessor finishes
    SS = "SS"  # successor starts after predecessor starts
    FF = "FF"  # successor finishes after predecessor finishes
    SF = "SF"  # successor finishes after predecessor starts

    @classmethod
    def coerce(cls, value: str | DependencyType | None) -> DependencyType | None:
        """Parse a relationship code, returning None if it is not recognized.

        Accepts the two-letter codes in any case as well as the long forms
        (``finish_to_start``, ``start-to-start`` ...).
        """
        if value is None:
            return None
        if isinstance(value, DependencyType):
            return value
        code = str(value).strip().upper().replace("-", "_").replace(" ", "_")
        if code in cls.__members__:
            return cls[code]
        return _LONG_NAMES.get(code)


_LONG_NAMES = {
    "FINISH_TO_START": DependencyType.FS,
    "START_TO_START": DependencyType.SS,
    "FINISH_TO_FINISH": DependencyType.FF,
    "START_TO_FINISH": DependencyType.SF,
}


@dataclass(frozen=True)
class PredecessorConfig:
    """Per-predecessor relationship as supplied by the caller.

    ``type`` is kept as the raw code so that unrecognized values survive
    until the validator can report them.
    """

    predecessor_id: str
    type: str = DependencyType.FS.value
    lag_days: float = 0.0

    @classmethod
    def parse(cls, config_str: str) -> PredecessorConfig:
        """Parse a compact predecessor string.

        Supported formats:
        - "task_a" - finish-to-start, no lag
        - "task_a:SS" - start-to-start, no lag
        - "task_a:FF + 2d" - finish-to-finish with 2 days lag
        - "task_a + 1w" - finish-to-start with 7 days lag
        - "task_a:SS - 3d" - start-to-start with a 3 day lead
        """
        config_str = config_str.strip()
        match = _CONFIG_PATTERN.match(config_str)
        if not match:
            return cls(predecessor_id=config_str)

        lag_days = 0.0
        if match.group("value") is not None:
            lag_days = float(match.group("value"))
            if match.group("unit") == "w":
                lag_days *= DAYS_PER_WEEK
            if match.group("minus"):
                lag_days = -lag_days

        return cls(
            predecessor_id=match.group("id").strip(),
            type=match.group("type") or DependencyType.FS.value,
            lag_days=lag_days,
        )


def _default_str_list() -> list[str]:
    return []


@dataclass
class Task:
    """A task snapshot as supplied by the caller.

    When ``predecessor_configs`` is None or empty, every entry of ``predecessor_ids`` uses
    the task-wide ``dependency_type``/``lag_days`` (or the engine defaults when
    those are None as well).
    """

    id: str
    start_date: date | None = None
    end_date: date | None = None
    duration_days: int | None = None
    predecessor_ids: list[str] = field(default_factory=_default_str_list)
    predecessor_configs: list[PredecessorConfig] | None = None
    dependency_type: str | None = None
    lag_days: float | None = None
    name: str | None = None
    project_id: str | None = None
    baseline_start: date | None = None
    baseline_end: date | None = None

    @property
    def display_name(self) -> str:
        """Name for human-readable messages, falling back to the ID."""
        return self.name or self.id

    @property
    def effective_duration(self) -> int:
        """Duration in calendar days, always at least 1."""
        if self.duration_days is not None:
            return max(1, math.ceil(self.duration_days))
        if self.start_date is not None and self.end_date is not None:
            return max(1, (self.end_date - self.start_date).days)
        return 1
