"""Float calculation and critical path extraction."""

from __future__ import annotations

from critline.config import EngineConfig
from critline.logger import changes_enabled, get_logger

from .core import CriticalPathEntry, TaskTiming
from .graph import TaskGraph
from .passes import BackwardPassResult, ForwardPassResult

logger = get_logger()


def compute_timings(
    graph: TaskGraph,
    forward: ForwardPassResult,
    backward: BackwardPassResult,
    config: EngineConfig | None = None,
) -> dict[str, TaskTiming]:
    """Combine both passes into per-task timings with float and criticality.

    Float is ``latest_start - earliest_start`` rounded to
    ``config.float_precision`` places and clamped at zero. Anything at or below
    ``config.critical_float_tolerance`` is critical.
    """
    config = config or EngineConfig()
    timings: dict[str, TaskTiming] = {}

    for task_id in graph.tasks:
        es = forward.earliest_start[task_id]
        ls = backward.latest_start[task_id]
        float_days = round(max(0.0, ls - es), config.float_precision)
        timings[task_id] = TaskTiming(
            earliest_start=es,
            earliest_finish=forward.earliest_finish[task_id],
            latest_start=ls,
            latest_finish=backward.latest_finish[task_id],
            float_days=float_days,
            is_critical=float_days <= config.critical_float_tolerance,
        )

    return timings


def extract_critical_path(
    graph: TaskGraph,
    timings: dict[str, TaskTiming],
) -> list[CriticalPathEntry]:
    """Collect critical tasks ordered by earliest start.

    Tasks starting on the same day keep their input order.
    """
    critical_ids = [task_id for task_id in graph.tasks if timings[task_id].is_critical]
    critical_ids.sort(key=lambda task_id: timings[task_id].earliest_start)

    path: list[CriticalPathEntry] = []
    for task_id in critical_ids:
        task = graph.tasks[task_id]
        path.append(
            CriticalPathEntry(
                task_id=task_id,
                start_date=task.start_date,
                end_date=task.end_date,
                float_days=timings[task_id].float_days,
            )
        )

    if changes_enabled():
        logger.changes(
            f"Critical path: {' -> '.join(critical_ids) if critical_ids else '(none)'}"
        )
    return path
