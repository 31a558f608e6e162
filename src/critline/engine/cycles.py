"""Cycle detection over the predecessor graph."""

from __future__ import annotations

from collections.abc import Iterator

from critline.logger import get_logger

from .core import CycleReport
from .graph import TaskGraph

logger = get_logger()


def detect_cycles(graph: TaskGraph) -> list[CycleReport]:
    """Find loops in the predecessor graph.

    Depth-first search from every unvisited task, following predecessor edges
    with an explicit stack. A back edge to a task still on the stack closes a
    loop; the search keeps going afterwards so independent loops are reported
    too. The same loop reached from a different entry point is reported once.

    Args:
        graph: Graph to check (dangling and self edges are already pruned)

    Returns:
        One report per loop found, empty if the graph is acyclic
    """
    reports: list[CycleReport] = []
    seen_loops: set[tuple[str, ...]] = set()
    done: set[str] = set()

    for root in graph.tasks:
        if root in done:
            continue

        path: list[str] = [root]
        on_stack: dict[str, int] = {root: 0}
        stack: list[Iterator[str]] = [iter(graph.predecessor_ids(root))]

        while stack:
            node = path[-1]
            next_id = next(stack[-1], None)

            if next_id is None:
                stack.pop()
                path.pop()
                del on_stack[node]
                done.add(node)
                continue

            if next_id in on_stack:
                loop = path[on_stack[next_id] :]
                key = _canonical(loop)
                if key not in seen_loops:
                    seen_loops.add(key)
                    reports.append(_make_report(graph, loop))
                continue

            if next_id in done:
                continue

            on_stack[next_id] = len(path)
            path.append(next_id)
            stack.append(iter(graph.predecessor_ids(next_id)))

    return reports


def _canonical(loop: list[str]) -> tuple[str, ...]:
    """Rotate a loop so it starts at its smallest ID."""
    pivot = loop.index(min(loop))
    return tuple(loop[pivot:] + loop[:pivot])


def _make_report(graph: TaskGraph, loop: list[str]) -> CycleReport:
    # The walk followed predecessor edges; flip it to read in execution order
    ordered = list(reversed(loop))
    names = [graph.tasks[task_id].display_name for task_id in ordered]
    message = f"Circular dependency detected: {' -> '.join([*names, names[0]])}"
    logger.checks(f"  {message}")
    return CycleReport(task_ids=ordered, message=message)
