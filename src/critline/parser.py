"""Parser for task snapshot files (YAML or JSON)."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError as PydanticValidationError

from .exceptions import ParseError, ValidationError
from .models import PredecessorConfig, Task
from .schemas import PredecessorConfigSchema, SnapshotSchema, TaskSchema


class SnapshotParser:
    """Turns snapshot files into Task objects.

    A snapshot holds one project's tasks, either as a list::

        tasks:
          - id: detailing
            start_date: 2026-02-10
            duration_days: 20
          - id: fabrication
            predecessors: ["detailing + 2d"]

    or as a mapping keyed by task ID. JSON files use the same structure.
    """

    def parse_file(self, file_path: Path | str) -> list[Task]:
        """Parse a snapshot file into tasks."""
        path = Path(file_path)
        if not path.exists():
            raise ParseError(f"File not found: {file_path}")

        try:
            with path.open(encoding="utf-8") as f:
                data: Any = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ParseError(f"Failed to parse {path}: {e}") from e

        return self.parse_data(data)

    def parse_data(self, data: Any) -> list[Task]:
        """Parse already-loaded snapshot data."""
        if data is None:
            return []
        if isinstance(data, list):
            # A bare list of tasks
            data = {"tasks": data}
        if not isinstance(data, dict):
            raise ParseError("Snapshot must contain a dictionary or list at the root level")

        try:
            schema = SnapshotSchema.model_validate(data)
        except PydanticValidationError as e:
            raise ParseError(f"Invalid snapshot: {e}") from e

        if isinstance(schema.tasks, dict):
            records = [(task_id, record) for task_id, record in schema.tasks.items()]
        else:
            records = []
            for index, record in enumerate(schema.tasks):
                if not record.id:
                    raise ParseError(f"Task at position {index} has no 'id'")
                records.append((record.id, record))

        tasks: list[Task] = []
        seen: set[str] = set()
        for task_id, record in records:
            if task_id in seen:
                raise ValidationError(f"Duplicate task id: {task_id}")
            seen.add(task_id)
            tasks.append(self._to_task(task_id, record))
        return tasks

    def _to_task(self, task_id: str, record: TaskSchema) -> Task:
        configs: list[PredecessorConfig] | None = None
        if record.predecessor_configs is not None:
            configs = [self._to_config(item) for item in record.predecessor_configs]

        return Task(
            id=task_id,
            name=record.name,
            project_id=record.project_id,
            start_date=record.start_date,
            end_date=record.end_date,
            duration_days=record.duration_days,
            baseline_start=record.baseline_start,
            baseline_end=record.baseline_end,
            predecessor_ids=list(record.predecessor_ids),
            predecessor_configs=configs,
            dependency_type=record.dependency_type,
            lag_days=record.lag_days,
        )

    def _to_config(self, item: PredecessorConfigSchema | str) -> PredecessorConfig:
        if isinstance(item, str):
            try:
                return PredecessorConfig.parse(item)
            except ValueError as e:
                raise ParseError(f"Invalid predecessor '{item}': {e}") from e
        return PredecessorConfig(
            predecessor_id=item.predecessor_id,
            type=item.type,
            lag_days=item.lag_days,
        )


def load_snapshot(path: Path | str) -> list[Task]:
    """Load a task snapshot file."""
    return SnapshotParser().parse_file(path)
