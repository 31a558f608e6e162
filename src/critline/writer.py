"""Write adjusted task dates back into a snapshot file."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from ruamel.yaml import YAML

from .engine import AdjustedTask
from .exceptions import ParseError
from .logger import get_logger

logger = get_logger()


def write_adjusted_dates(file_path: Path, adjusted: list[AdjustedTask]) -> int:
    """Persist auto-adjusted dates into a YAML snapshot, preserving formatting.

    Only ``start_date``, ``end_date`` and ``duration_days`` of the listed tasks
    are touched; comments, ordering and every other field stay as they were.

    Args:
        file_path: Snapshot file previously loaded with load_snapshot()
        adjusted: Changes returned by the engine

    Returns:
        Number of task records updated
    """
    if not adjusted:
        return 0

    yaml_rt = YAML()
    yaml_rt.preserve_quotes = True  # type: ignore[assignment]
    yaml_rt.indent(mapping=2, sequence=4, offset=2)

    with file_path.open(encoding="utf-8") as f:
        data: Any = yaml_rt.load(f)  # type: ignore[no-untyped-call]

    records = _task_records(data, file_path)
    changes = {change.task_id: change for change in adjusted}
    updated = 0

    for task_id, record in records:
        change = changes.get(task_id)
        if change is None:
            continue
        record["start_date"] = change.start_date
        record["end_date"] = change.end_date
        record["duration_days"] = change.duration_days
        updated += 1

    missing = set(changes) - {task_id for task_id, _ in records}
    for task_id in sorted(missing):
        logger.warning(f"Task '{task_id}' not found in {file_path}; dates not written")

    with file_path.open("w", encoding="utf-8") as f:
        yaml_rt.dump(data, f)  # type: ignore[no-untyped-call]

    return updated


def _task_records(data: Any, file_path: Path) -> list[tuple[str, Any]]:
    """Locate (task_id, mutable record) pairs in round-trip loaded data."""
    tasks = data.get("tasks") if isinstance(data, dict) else data
    if isinstance(tasks, dict):
        return [
            (str(task_id), record) for task_id, record in tasks.items() if isinstance(record, dict)
        ]
    if isinstance(tasks, list):
        return [
            (str(record["id"]), record)
            for record in tasks
            if isinstance(record, dict) and "id" in record
        ]
    raise ParseError(f"No 'tasks' section found in {file_path}")
