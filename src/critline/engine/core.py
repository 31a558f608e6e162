"""Core dataclasses and relationship arithmetic for the critical-path engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any

from critline.exceptions import CircularDependencyError
from critline.models import DependencyType


@dataclass(frozen=True)
class ResolvedDependency:
    """A predecessor relationship after legacy/per-predecessor resolution.

    ``type`` is always a usable relationship; ``raw_type`` keeps what the caller
    sent so an unrecognized code can still be reported.
    """

    predecessor_id: str
    type: DependencyType
    lag_days: float
    raw_type: str

    @property
    def type_valid(self) -> bool:
        """True if the caller's relationship code was recognized."""
        return DependencyType.coerce(self.raw_type) is not None


@dataclass
class TaskTiming:
    """Forward/backward pass output for one task, in days from project start."""

    earliest_start: float
    earliest_finish: float
    latest_start: float
    latest_finish: float
    float_days: float
    is_critical: bool


@dataclass
class CycleReport:
    """A loop in the predecessor graph, listed in dependency order."""

    task_ids: list[str]
    message: str


@dataclass
class TaskIssues:
    """All validation messages attributed to one task."""

    task_id: str
    messages: list[str]


@dataclass
class CriticalPathEntry:
    """A zero-float task on the critical path."""

    task_id: str
    start_date: date | None
    end_date: date | None
    float_days: float


@dataclass
class AdjustedTask:
    """New dates for a task the auto-adjuster moved."""

    task_id: str
    start_date: date
    end_date: date
    duration_days: int


class RiskLevel(str, Enum):
    """How much downstream work a bottleneck holds up."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


@dataclass
class Bottleneck:
    """A task many others wait on."""

    task_id: str
    successor_count: int
    is_critical: bool
    risk_level: RiskLevel
    reason: str


@dataclass
class CompressionRisk:
    """A critical task too short to absorb any slip."""

    task_id: str
    duration_days: int
    reason: str


@dataclass
class ScheduleVariance:
    """Current dates against the baseline, in days (positive means late)."""

    task_id: str
    start_variance: int | None
    end_variance: int | None


@dataclass
class ResultSummary:
    """Counts reported alongside an engine result."""

    total_errors: int
    tasks_adjusted: int
    total_tasks: int
    critical_tasks: int
    project_duration: float


def _default_cycles() -> list[CycleReport]:
    return []


def _default_issues() -> list[TaskIssues]:
    return []


def _default_path() -> list[CriticalPathEntry]:
    return []


def _default_timings() -> dict[str, TaskTiming]:
    return {}


def _default_str_list() -> list[str]:
    return []


def _default_bottlenecks() -> list[Bottleneck]:
    return []


def _default_compression_risks() -> list[CompressionRisk]:
    return []


def _default_variances() -> list[ScheduleVariance]:
    return []


def _default_summary() -> ResultSummary:
    return ResultSummary(
        total_errors=0,
        tasks_adjusted=0,
        total_tasks=0,
        critical_tasks=0,
        project_duration=0.0,
    )


@dataclass
class EngineResult:
    """Complete result of one validate-and-compute call."""

    cycles: list[CycleReport] = field(default_factory=_default_cycles)
    date_errors: list[TaskIssues] = field(default_factory=_default_issues)
    dependency_errors: list[TaskIssues] = field(default_factory=_default_issues)
    critical_path: list[CriticalPathEntry] = field(default_factory=_default_path)
    adjusted_tasks: list[AdjustedTask] | None = None
    timings: dict[str, TaskTiming] = field(default_factory=_default_timings)
    bottlenecks: list[Bottleneck] = field(default_factory=_default_bottlenecks)
    compression_risks: list[CompressionRisk] = field(default_factory=_default_compression_risks)
    variances: list[ScheduleVariance] = field(default_factory=_default_variances)
    warnings: list[str] = field(default_factory=_default_str_list)
    summary: ResultSummary = field(default_factory=_default_summary)

    @property
    def has_cycles(self) -> bool:
        return bool(self.cycles)

    @property
    def has_errors(self) -> bool:
        """True if any cycle or per-task error was found."""
        return bool(self.cycles or self.date_errors or self.dependency_errors)

    def raise_for_cycles(self) -> None:
        """Raise CircularDependencyError if the graph was cyclic."""
        if self.cycles:
            message = "; ".join(report.message for report in self.cycles)
            raise CircularDependencyError(
                message, cycles=[list(report.task_ids) for report in self.cycles]
            )

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-ready primitives (dates as ISO strings)."""
        return {
            "cycles": [
                {"task_ids": list(c.task_ids), "message": c.message} for c in self.cycles
            ],
            "date_errors": [
                {"task_id": i.task_id, "messages": list(i.messages)} for i in self.date_errors
            ],
            "dependency_errors": [
                {"task_id": i.task_id, "messages": list(i.messages)}
                for i in self.dependency_errors
            ],
            "critical_path": [
                {
                    "task_id": e.task_id,
                    "start_date": _iso(e.start_date),
                    "end_date": _iso(e.end_date),
                    "float_days": e.float_days,
                }
                for e in self.critical_path
            ],
            "adjusted_tasks": (
                None
                if self.adjusted_tasks is None
                else [
                    {
                        "task_id": a.task_id,
                        "start_date": a.start_date.isoformat(),
                        "end_date": a.end_date.isoformat(),
                        "duration_days": a.duration_days,
                    }
                    for a in self.adjusted_tasks
                ]
            ),
            "timings": {
                task_id: {
                    "earliest_start": t.earliest_start,
                    "earliest_finish": t.earliest_finish,
                    "latest_start": t.latest_start,
                    "latest_finish": t.latest_finish,
                    "float_days": t.float_days,
                    "is_critical": t.is_critical,
                }
                for task_id, t in self.timings.items()
            },
            "bottlenecks": [
                {
                    "task_id": b.task_id,
                    "successor_count": b.successor_count,
                    "is_critical": b.is_critical,
                    "risk_level": b.risk_level.value,
                    "reason": b.reason,
                }
                for b in self.bottlenecks
            ],
            "compression_risks": [
                {"task_id": r.task_id, "duration_days": r.duration_days, "reason": r.reason}
                for r in self.compression_risks
            ],
            "variances": [
                {
                    "task_id": v.task_id,
                    "start_variance": v.start_variance,
                    "end_variance": v.end_variance,
                }
                for v in self.variances
            ],
            "warnings": list(self.warnings),
            "summary": {
                "total_errors": self.summary.total_errors,
                "tasks_adjusted": self.summary.tasks_adjusted,
                "total_tasks": self.summary.total_tasks,
                "critical_tasks": self.summary.critical_tasks,
                "project_duration": self.summary.project_duration,
            },
        }


def _iso(value: date | None) -> str | None:
    return value.isoformat() if value is not None else None


def earliest_start_bound(
    dependency: ResolvedDependency,
    pred_start: float,
    pred_finish: float,
    duration: float,
) -> float:
    """Lower bound a predecessor places on its successor's start.

    Works on any linear day scale: relative offsets in the forward pass,
    date ordinals in the auto-adjuster.

    Args:
        dependency: The resolved relationship
        pred_start: Predecessor start
        pred_finish: Predecessor finish
        duration: Successor duration in days

    Returns:
        Earliest allowed successor start on the same scale
    """
    lag = dependency.lag_days
    if dependency.type == DependencyType.SS:
        return pred_start + lag
    if dependency.type == DependencyType.FF:
        return pred_finish + lag - duration
    if dependency.type == DependencyType.SF:
        return pred_start + lag - duration
    return pred_finish + lag


def latest_finish_bound(
    dependency: ResolvedDependency,
    succ_latest_start: float,
    succ_latest_finish: float,
    duration: float,
) -> float:
    """Upper bound a successor places on its predecessor's finish.

    The mirror image of earliest_start_bound for the backward pass.

    Args:
        dependency: The successor's relationship to the predecessor
        succ_latest_start: Successor latest start
        succ_latest_finish: Successor latest finish
        duration: Predecessor duration in days

    Returns:
        Latest allowed predecessor finish
    """
    lag = dependency.lag_days
    if dependency.type == DependencyType.SS:
        return succ_latest_start - lag + duration
    if dependency.type == DependencyType.FF:
        return succ_latest_finish - lag
    if dependency.type == DependencyType.SF:
        return succ_latest_finish - lag + duration
    return succ_latest_start - lag
