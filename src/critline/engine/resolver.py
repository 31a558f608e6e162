"""Dependency resolution: one canonical record per predecessor."""

from __future__ import annotations

from collections.abc import Sequence

from critline.config import EngineConfig
from critline.logger import get_logger
from critline.models import DependencyType, Task

from .core import ResolvedDependency

logger = get_logger()


class DependencyResolver:
    """Normalizes both dependency models into ResolvedDependency lists.

    Tasks either carry a non-empty ``predecessor_configs`` list (one
    relationship per predecessor, used verbatim) or the older shape where a single
    ``dependency_type``/``lag_days`` applies to every ID in
    ``predecessor_ids``. Later stages only ever see the resolved form.
    """

    def __init__(self, config: EngineConfig | None = None):
        self.config = config or EngineConfig()

    def resolve(self, task: Task) -> list[ResolvedDependency]:
        """Resolve one task's predecessors, preserving their order."""
        if task.predecessor_configs:
            return [
                self._make(config.predecessor_id, config.type, config.lag_days)
                for config in task.predecessor_configs
            ]

        raw_type = (
            task.dependency_type
            if task.dependency_type is not None
            else self.config.default_dependency_type.value
        )
        lag = task.lag_days if task.lag_days is not None else self.config.default_lag_days
        return [self._make(pred_id, raw_type, lag) for pred_id in task.predecessor_ids]

    def resolve_all(self, tasks: Sequence[Task]) -> dict[str, list[ResolvedDependency]]:
        """Resolve every task, keyed by task ID."""
        return {task.id: self.resolve(task) for task in tasks}

    def _make(self, predecessor_id: str, raw_type: str, lag_days: float) -> ResolvedDependency:
        dep_type = DependencyType.coerce(raw_type)
        if dep_type is None:
            # Unknown codes fall back to finish-to-start
            logger.debug(f"    predecessor {predecessor_id}: unknown type '{raw_type}', using FS")
            dep_type = DependencyType.FS
        return ResolvedDependency(
            predecessor_id=predecessor_id,
            type=dep_type,
            lag_days=float(lag_days or 0.0),
            raw_type=str(raw_type),
        )
