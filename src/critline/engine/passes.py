"""Forward and backward critical-path passes.

Both passes walk a topological order computed once by the graph, so each
task is evaluated exactly once and no recursion is involved. Values are
relative day offsets from the project start (day 0).
"""

from __future__ import annotations

from dataclasses import dataclass

from critline.logger import debug_enabled, get_logger

from .core import earliest_start_bound, latest_finish_bound
from .graph import TaskGraph

logger = get_logger()


@dataclass
class ForwardPassResult:
    """Earliest start/finish per task."""

    earliest_start: dict[str, float]
    earliest_finish: dict[str, float]

    @property
    def project_end(self) -> float:
        """Latest earliest-finish across all tasks (0 for an empty graph)."""
        return max(self.earliest_finish.values(), default=0.0)


@dataclass
class BackwardPassResult:
    """Latest start/finish per task, anchored at the project end."""

    latest_start: dict[str, float]
    latest_finish: dict[str, float]
    project_end: float


def run_forward_pass(graph: TaskGraph, topo_order: list[str]) -> ForwardPassResult:
    """Compute earliest start and finish for every task.

    A task without predecessors starts at day 0. Otherwise its earliest start
    is the largest bound any predecessor imposes, never earlier than day 0.

    Args:
        graph: Acyclic task graph
        topo_order: Predecessor-before-successor ordering of graph.tasks

    Returns:
        ForwardPassResult keyed by task ID
    """
    es: dict[str, float] = {}
    ef: dict[str, float] = {}

    for task_id in topo_order:
        duration = graph.tasks[task_id].effective_duration
        start = 0.0
        for dep in graph.incoming[task_id]:
            pred_id = dep.predecessor_id
            bound = earliest_start_bound(dep, es[pred_id], ef[pred_id], duration)
            start = max(start, bound)

        es[task_id] = start
        ef[task_id] = start + duration
        if debug_enabled():
            logger.debug(f"    forward {task_id}: ES={start} EF={start + duration}")

    return ForwardPassResult(earliest_start=es, earliest_finish=ef)


def run_backward_pass(
    graph: TaskGraph,
    topo_order: list[str],
    project_end: float,
) -> BackwardPassResult:
    """Compute latest start and finish for every task.

    A task without successors must finish by ``project_end``. Otherwise its
    latest finish is the smallest bound any successor imposes, also capped at
    ``project_end``.

    Args:
        graph: Acyclic task graph
        topo_order: Predecessor-before-successor ordering of graph.tasks
        project_end: Anchor, normally the forward pass project end

    Returns:
        BackwardPassResult keyed by task ID
    """
    ls: dict[str, float] = {}
    lf: dict[str, float] = {}

    for task_id in reversed(topo_order):
        duration = graph.tasks[task_id].effective_duration
        finish = project_end
        for succ_id, dep in graph.outgoing[task_id]:
            bound = latest_finish_bound(dep, ls[succ_id], lf[succ_id], duration)
            finish = min(finish, bound)

        lf[task_id] = finish
        ls[task_id] = finish - duration
        if debug_enabled():
            logger.debug(f"    backward {task_id}: LS={finish - duration} LF={finish}")

    return BackwardPassResult(latest_start=ls, latest_finish=lf, project_end=project_end)
