"""Risk analysis on top of the computed critical path."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date

from critline.logger import changes_enabled, get_logger
from critline.models import Task

from .core import Bottleneck, CompressionRisk, RiskLevel, ScheduleVariance, TaskTiming
from .graph import TaskGraph

logger = get_logger()

# Any task with this many distinct successors is a bottleneck
BOTTLENECK_SUCCESSORS = 3
# Critical tasks become bottlenecks sooner
CRITICAL_BOTTLENECK_SUCCESSORS = 2
HIGH_RISK_SUCCESSORS = 5
# Critical tasks shorter than this leave no room to recover
COMPRESSION_THRESHOLD_DAYS = 2


def find_bottlenecks(graph: TaskGraph, timings: dict[str, TaskTiming]) -> list[Bottleneck]:
    """Flag tasks whose delay would hold up many others.

    A task is a bottleneck with at least ``BOTTLENECK_SUCCESSORS`` distinct
    successors, or ``CRITICAL_BOTTLENECK_SUCCESSORS`` if it is critical.
    Results follow input order.
    """
    bottlenecks: list[Bottleneck] = []

    for task_id in graph.tasks:
        successor_count = len({succ_id for succ_id, _dep in graph.outgoing[task_id]})
        is_critical = timings[task_id].is_critical
        if successor_count < BOTTLENECK_SUCCESSORS and not (
            is_critical and successor_count >= CRITICAL_BOTTLENECK_SUCCESSORS
        ):
            continue

        if is_critical:
            reason = (
                f"Critical path task with {successor_count} dependent tasks; "
                "any delay moves project completion"
            )
        else:
            reason = f"High-dependency task; delays affect {successor_count} downstream tasks"

        bottlenecks.append(
            Bottleneck(
                task_id=task_id,
                successor_count=successor_count,
                is_critical=is_critical,
                risk_level=_risk_level(successor_count),
                reason=reason,
            )
        )

    if changes_enabled() and bottlenecks:
        logger.changes(f"Bottlenecks: {', '.join(b.task_id for b in bottlenecks)}")
    return bottlenecks


def _risk_level(successor_count: int) -> RiskLevel:
    if successor_count >= HIGH_RISK_SUCCESSORS:
        return RiskLevel.HIGH
    if successor_count >= BOTTLENECK_SUCCESSORS:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def find_compression_risks(
    graph: TaskGraph, timings: dict[str, TaskTiming]
) -> list[CompressionRisk]:
    """Flag critical tasks with an explicit duration under two days."""
    risks: list[CompressionRisk] = []
    for task_id, task in graph.tasks.items():
        if not timings[task_id].is_critical or task.duration_days is None:
            continue
        if task.duration_days < COMPRESSION_THRESHOLD_DAYS:
            risks.append(
                CompressionRisk(
                    task_id=task_id,
                    duration_days=task.duration_days,
                    reason="Very short duration on critical path",
                )
            )
    return risks


def compute_variances(tasks: Iterable[Task]) -> list[ScheduleVariance]:
    """Compare current dates with the baseline for tasks that have one.

    Only tasks with both ``baseline_start`` and ``baseline_end`` are reported.
    A side whose current date is missing has a variance of None.
    """
    variances: list[ScheduleVariance] = []
    for task in tasks:
        if task.baseline_start is None or task.baseline_end is None:
            continue
        variances.append(
            ScheduleVariance(
                task_id=task.id,
                start_variance=_days_between(task.baseline_start, task.start_date),
                end_variance=_days_between(task.baseline_end, task.end_date),
            )
        )
    return variances


def _days_between(baseline: date, current: date | None) -> int | None:
    if current is None:
        return None
    return (current - baseline).days
