"""In-memory dependency graph built from a task snapshot."""

from __future__ import annotations

from collections import deque
from collections.abc import Sequence
from dataclasses import dataclass

from critline.exceptions import ValidationError
from critline.models import Task

from .core import ResolvedDependency


@dataclass(frozen=True)
class PrunedEdge:
    """A predecessor reference left out of the graph."""

    task_id: str
    predecessor_id: str
    reason: str  # "missing" or "self"


class TaskGraph:
    """Directed graph of tasks, edges running predecessor -> successor.

    Edges that point at unknown tasks or at the task itself are not added;
    they are kept in ``pruned`` so the validator can report them.
    """

    def __init__(
        self,
        tasks: Sequence[Task],
        dependencies: dict[str, list[ResolvedDependency]],
    ):
        self.tasks: dict[str, Task] = {}
        for task in tasks:
            if task.id in self.tasks:
                raise ValidationError(f"Duplicate task id: {task.id}")
            self.tasks[task.id] = task

        self.incoming: dict[str, list[ResolvedDependency]] = {task_id: [] for task_id in self.tasks}
        self.outgoing: dict[str, list[tuple[str, ResolvedDependency]]] = {
            task_id: [] for task_id in self.tasks
        }
        self.pruned: list[PrunedEdge] = []

        for task_id in self.tasks:
            for dep in dependencies.get(task_id, []):
                if dep.predecessor_id == task_id:
                    self.pruned.append(PrunedEdge(task_id, dep.predecessor_id, "self"))
                elif dep.predecessor_id not in self.tasks:
                    self.pruned.append(PrunedEdge(task_id, dep.predecessor_id, "missing"))
                else:
                    self.incoming[task_id].append(dep)
                    self.outgoing[dep.predecessor_id].append((task_id, dep))

    def __len__(self) -> int:
        return len(self.tasks)

    @property
    def edge_count(self) -> int:
        return sum(len(deps) for deps in self.incoming.values())

    def predecessor_ids(self, task_id: str) -> list[str]:
        """Distinct predecessor IDs of a task, in declaration order."""
        return list(dict.fromkeys(dep.predecessor_id for dep in self.incoming[task_id]))

    def topological_order(self) -> list[str]:
        """Compute a predecessor-before-successor ordering.

        Ties are broken by input order so results are deterministic.

        Returns:
            List of task IDs in topological order

        Raises:
            ValueError: If the graph contains a cycle
        """
        in_degree = {task_id: len(deps) for task_id, deps in self.incoming.items()}
        queue: deque[str] = deque(task_id for task_id, degree in in_degree.items() if degree == 0)
        result: list[str] = []

        while queue:
            task_id = queue.popleft()
            result.append(task_id)
            for succ_id, _dep in self.outgoing[task_id]:
                in_degree[succ_id] -= 1
                if in_degree[succ_id] == 0:
                    queue.append(succ_id)

        if len(result) != len(self.tasks):
            raise ValueError("Circular dependency detected in task graph")

        return result
