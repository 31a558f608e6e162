"""High-level validate-and-compute service."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date

from critline.config import EngineConfig
from critline.logger import get_logger
from critline.models import Task

from .adjuster import ForwardAdjuster
from .analysis import compute_variances, find_bottlenecks, find_compression_risks
from .core import (
    AdjustedTask,
    CriticalPathEntry,
    EngineResult,
    ResultSummary,
    TaskTiming,
)
from .critical_path import compute_timings, extract_critical_path
from .cycles import detect_cycles
from .graph import TaskGraph
from .passes import run_backward_pass, run_forward_pass
from .resolver import DependencyResolver
from .validator import ScheduleValidator

logger = get_logger()


class ScheduleEngine:
    """Validates a project's task graph and computes its critical path.

    This service coordinates:
    - DependencyResolver (legacy and per-predecessor relationship models)
    - TaskGraph and detect_cycles (structural validation, fatal on cycles)
    - ScheduleValidator (per-task checks, collected)
    - Forward/backward passes and critical path extraction
    - Bottleneck, compression and baseline variance analysis
    - ForwardAdjuster (optional date rewriting)

    Each call works on a fresh graph; nothing is kept between calls.
    """

    def __init__(self, config: EngineConfig | None = None):
        self.config = config or EngineConfig()
        self.resolver = DependencyResolver(self.config)
        self.validator = ScheduleValidator(self.config)

    def run(
        self,
        tasks: Sequence[Task] | None,
        auto_adjust: bool = False,
        project_start: date | None = None,
    ) -> EngineResult:
        """Validate the snapshot and compute float and the critical path.

        Args:
            tasks: Every task of one project
            auto_adjust: Rewrite dates to satisfy all relationships
            project_start: Anchor for undated tasks when adjusting

        Returns:
            EngineResult; on a cyclic graph only cycles and validation
            findings are filled in
        """
        if not tasks:
            return EngineResult(adjusted_tasks=[] if auto_adjust else None)

        tasks = list(tasks)
        dependencies = self.resolver.resolve_all(tasks)
        graph = TaskGraph(tasks, dependencies)
        logger.debug(f"Built graph: {len(graph)} tasks, {graph.edge_count} edges")

        cycles = detect_cycles(graph)
        report = self.validator.validate(graph)

        result = EngineResult(
            cycles=cycles,
            date_errors=report.date_errors,
            dependency_errors=report.dependency_errors,
            warnings=report.warnings,
            variances=compute_variances(tasks),
        )
        total_errors = len(cycles) + report.error_count

        if cycles:
            logger.error(f"{len(cycles)} dependency cycle(s) found; schedule not computed")
            result.summary = ResultSummary(
                total_errors=total_errors,
                tasks_adjusted=0,
                total_tasks=len(graph),
                critical_tasks=0,
                project_duration=0.0,
            )
            return result

        topo_order = graph.topological_order()
        timings, critical_path, project_end = self._compute(graph, topo_order)

        adjusted: list[AdjustedTask] | None = None
        if auto_adjust:
            adjuster = ForwardAdjuster(project_start)
            adjusted_snapshot, adjusted = adjuster.adjust(graph, topo_order)
            logger.changes(f"Adjusted {len(adjusted)} task(s)")
            if adjusted:
                # Durations and edges are unchanged, so the order still holds
                graph = TaskGraph(adjusted_snapshot, dependencies)
                timings, critical_path, project_end = self._compute(graph, topo_order)

        result.timings = timings
        result.critical_path = critical_path
        result.adjusted_tasks = adjusted
        result.bottlenecks = find_bottlenecks(graph, timings)
        result.compression_risks = find_compression_risks(graph, timings)
        if adjusted:
            result.variances = compute_variances(graph.tasks.values())
        result.summary = ResultSummary(
            total_errors=total_errors,
            tasks_adjusted=len(adjusted) if adjusted is not None else 0,
            total_tasks=len(graph),
            critical_tasks=len(critical_path),
            project_duration=project_end,
        )
        return result

    def _compute(
        self, graph: TaskGraph, topo_order: list[str]
    ) -> tuple[dict[str, TaskTiming], list[CriticalPathEntry], float]:
        forward = run_forward_pass(graph, topo_order)
        backward = run_backward_pass(graph, topo_order, forward.project_end)
        timings = compute_timings(graph, forward, backward, self.config)
        return timings, extract_critical_path(graph, timings), forward.project_end


def validate_and_compute(
    tasks: Sequence[Task] | None,
    auto_adjust: bool = False,
    *,
    config: EngineConfig | None = None,
    project_start: date | None = None,
) -> EngineResult:
    """Validate a task snapshot and compute its critical path.

    Convenience wrapper around ScheduleEngine for one-off calls.
    """
    return ScheduleEngine(config).run(tasks, auto_adjust=auto_adjust, project_start=project_start)
