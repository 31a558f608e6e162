"""Per-task field and dependency validation."""

from __future__ import annotations

from dataclasses import dataclass, field

from critline.config import EngineConfig
from critline.logger import checks_enabled, get_logger
from critline.models import DependencyType, Task

from .core import ResolvedDependency, TaskIssues
from .graph import PrunedEdge, TaskGraph

logger = get_logger()

VALID_TYPES = ", ".join(t.value for t in DependencyType)

_PRUNED_MESSAGES = {
    "self": "Task cannot be its own predecessor",
    "missing": "Predecessor task {predecessor_id} not found",
}


def _default_issues() -> list[TaskIssues]:
    return []


def _default_str_list() -> list[str]:
    return []


@dataclass
class ValidationReport:
    """Findings collected across every task."""

    date_errors: list[TaskIssues] = field(default_factory=_default_issues)
    dependency_errors: list[TaskIssues] = field(default_factory=_default_issues)
    warnings: list[str] = field(default_factory=_default_str_list)

    @property
    def error_count(self) -> int:
        """Total number of individual error messages."""
        return sum(len(i.messages) for i in self.date_errors) + sum(
            len(i.messages) for i in self.dependency_errors
        )


class ScheduleValidator:
    """Checks each task's own fields and its predecessor references.

    Nothing here is fatal: every problem is attributed to its task and
    collected so the caller sees the whole picture at once.
    """

    def __init__(self, config: EngineConfig | None = None):
        self.config = config or EngineConfig()

    def validate(self, graph: TaskGraph) -> ValidationReport:
        """Validate all tasks of a graph.

        References the graph left out (unknown or self predecessors) are
        reported from ``graph.pruned``; relationships on the remaining edges
        are checked against the predecessor task.

        Args:
            graph: Graph built from the snapshot, cyclic or not

        Returns:
            ValidationReport with date errors, dependency errors and warnings
        """
        report = ValidationReport()
        pruned_by_task: dict[str, list[PrunedEdge]] = {}
        for edge in graph.pruned:
            pruned_by_task.setdefault(edge.task_id, []).append(edge)

        for task_id, task in graph.tasks.items():
            date_messages = self.check_dates(task)
            if date_messages:
                report.date_errors.append(TaskIssues(task_id, date_messages))

            deps = graph.incoming[task_id]
            dep_messages = [
                _PRUNED_MESSAGES[edge.reason].format(predecessor_id=edge.predecessor_id)
                for edge in pruned_by_task.get(task_id, [])
            ]
            dep_messages.extend(self.check_dependencies(task, deps, graph.tasks))
            if dep_messages:
                report.dependency_errors.append(TaskIssues(task_id, dep_messages))

            if self.config.report_sequence_warnings:
                report.warnings.extend(self.check_sequence(task, deps, graph.tasks))

        return report

    def check_dates(self, task: Task) -> list[str]:
        """Date range and duration checks for a single task."""
        errors: list[str] = []

        if task.start_date is not None and task.end_date is not None:
            if checks_enabled():
                logger.checks(f"  {task.id}: checking {task.start_date} <= {task.end_date}")
            if task.start_date > task.end_date:
                errors.append(
                    f"Start date ({task.start_date.isoformat()}) cannot be after "
                    f"end date ({task.end_date.isoformat()})"
                )

        if task.baseline_start is not None and task.baseline_end is not None:
            if task.baseline_start > task.baseline_end:
                errors.append(
                    f"Baseline start ({task.baseline_start.isoformat()}) cannot be after "
                    f"baseline end ({task.baseline_end.isoformat()})"
                )

        if task.duration_days is not None and task.duration_days < 1:
            errors.append(f"Duration must be at least 1 day (got {task.duration_days})")

        return errors

    def check_dependencies(
        self,
        task: Task,
        dependencies: list[ResolvedDependency],
        task_map: dict[str, Task],
    ) -> list[str]:
        """Relationship-type and project checks for edges kept in the graph."""
        errors: list[str] = []

        for dep in dependencies:
            pred = task_map[dep.predecessor_id]
            if checks_enabled():
                logger.checks(f"  {task.id}: checking predecessor {pred.id} ({dep.raw_type})")

            if not dep.type_valid:
                errors.append(
                    f"Invalid dependency type '{dep.raw_type}' for predecessor {pred.id} "
                    f"(valid types: {VALID_TYPES}); treated as FS"
                )

            # A missing project_id on one side counts as a different project
            if task.project_id != pred.project_id:
                errors.append(f"Predecessor {pred.display_name} is from a different project")

        return errors

    def check_sequence(
        self,
        task: Task,
        dependencies: list[ResolvedDependency],
        task_map: dict[str, Task],
    ) -> list[str]:
        """Warn where a finish-to-start predecessor currently overlaps the task."""
        warnings: list[str] = []
        if task.start_date is None:
            return warnings

        for dep in dependencies:
            if dep.type != DependencyType.FS:
                continue
            pred = task_map[dep.predecessor_id]
            if pred.end_date is not None and pred.end_date > task.start_date:
                warnings.append(
                    f"Predecessor '{pred.display_name}' finishes ({pred.end_date.isoformat()}) "
                    f"after '{task.display_name}' starts ({task.start_date.isoformat()})"
                )

        return warnings
