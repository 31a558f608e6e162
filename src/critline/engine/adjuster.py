"""Forward date auto-adjustment."""

from __future__ import annotations

import math
from dataclasses import replace
from datetime import date, timedelta

from critline.logger import get_logger
from critline.models import Task

from .core import AdjustedTask, earliest_start_bound
from .graph import TaskGraph

logger = get_logger()


class ForwardAdjuster:
    """Rewrites task dates so every predecessor relationship holds.

    Tasks are visited predecessor-first. Each task starts on the later of its
    current start date and the latest date any predecessor allows, and ends
    ``duration_days`` after that. Tasks are only ever pushed later, so feeding
    the output back in produces no further changes.
    """

    def __init__(self, project_start: date | None = None):
        """Initialize the adjuster.

        Args:
            project_start: Start date for tasks that have neither a start date
                nor predecessors. Defaults to the earliest start date in the
                snapshot, or today if no task has one.
        """
        self.project_start = project_start

    def adjust(
        self, graph: TaskGraph, topo_order: list[str]
    ) -> tuple[list[Task], list[AdjustedTask]]:
        """Compute adjusted dates for every task.

        Args:
            graph: Acyclic task graph
            topo_order: Predecessor-before-successor ordering of graph.tasks

        Returns:
            Tuple of (adjusted snapshot, changes)
            - adjusted snapshot: copies of all tasks in input order, new dates applied
            - changes: only the tasks whose start or end date moved, in input order
        """
        anchor = self._resolve_anchor(graph)
        new_dates: dict[str, tuple[date, date]] = {}

        for task_id in topo_order:
            task = graph.tasks[task_id]
            duration = task.effective_duration
            start = task.start_date

            for dep in graph.incoming[task_id]:
                pred_start, pred_end = new_dates[dep.predecessor_id]
                bound = earliest_start_bound(
                    dep, pred_start.toordinal(), pred_end.toordinal(), duration
                )
                # Partial days round up so the relationship still holds
                constraint = date.fromordinal(math.ceil(bound))
                if start is None or constraint > start:
                    start = constraint

            if start is None:
                start = anchor
            new_dates[task_id] = (start, start + timedelta(days=duration))

        adjusted_tasks: list[Task] = []
        changes: list[AdjustedTask] = []
        for task_id, task in graph.tasks.items():
            start, end = new_dates[task_id]
            if start == task.start_date and end == task.end_date:
                adjusted_tasks.append(task)
                continue

            duration = task.effective_duration
            logger.changes(
                f"  {task_id}: {task.start_date} - {task.end_date} -> {start} - {end}"
            )
            adjusted_tasks.append(
                replace(task, start_date=start, end_date=end, duration_days=duration)
            )
            changes.append(
                AdjustedTask(
                    task_id=task_id, start_date=start, end_date=end, duration_days=duration
                )
            )

        return adjusted_tasks, changes

    def _resolve_anchor(self, graph: TaskGraph) -> date:
        if self.project_start is not None:
            return self.project_start
        starts = [task.start_date for task in graph.tasks.values() if task.start_date is not None]
        if starts:
            return min(starts)
        return date.today()  # noqa: DTZ011
