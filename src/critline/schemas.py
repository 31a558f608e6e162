"""Pydantic schemas for task snapshot validation."""

from __future__ import annotations

from datetime import date
from typing import Any

from pydantic import BaseModel, Field, ValidationInfo, field_validator, model_validator


class PredecessorConfigSchema(BaseModel):
    """Schema for one per-predecessor relationship."""

    predecessor_id: str
    type: str = "FS"
    lag_days: float = 0.0

    @field_validator("predecessor_id", "type", mode="before")
    @classmethod
    def coerce_to_string(cls, v: Any) -> str:
        """IDs and codes may come through YAML as numbers."""
        return str(v)

    @field_validator("lag_days", mode="before")
    @classmethod
    def default_missing_lag(cls, v: Any) -> Any:
        return 0.0 if v is None else v


class TaskSchema(BaseModel):
    """Schema for a task record in a snapshot file."""

    id: str | None = None  # Optional when tasks are given as a mapping keyed by ID
    name: str | None = None
    project_id: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    duration_days: int | None = None
    baseline_start: date | None = None
    baseline_end: date | None = None
    predecessor_ids: list[str] = Field(default_factory=list)
    predecessor_configs: list[PredecessorConfigSchema | str] | None = None
    predecessors: list[str] | None = None  # Compact form, e.g. "pour_slab:SS + 2d"
    dependency_type: str | None = None
    lag_days: float | None = None

    @model_validator(mode="after")
    def handle_compact_predecessors(self) -> TaskSchema:
        """Fold the compact 'predecessors' list into predecessor_configs."""
        if self.predecessors is not None:
            if self.predecessor_configs is not None:
                raise ValueError(
                    "Cannot specify both 'predecessors' and 'predecessor_configs'."
                )
            self.predecessor_configs = list(self.predecessors)
            self.predecessors = None
        return self

    @field_validator("id", "name", "project_id", "dependency_type", mode="before")
    @classmethod
    def coerce_optional_string(cls, v: Any) -> str | None:
        if v is None:
            return None
        return str(v)

    @field_validator("predecessor_ids", "predecessors", mode="before")
    @classmethod
    def ensure_list(cls, v: Any, info: ValidationInfo) -> list[str] | None:
        """Accept a single ID as well as a list."""
        if v is None:
            return [] if info.field_name == "predecessor_ids" else None
        if isinstance(v, list):
            return [str(item) for item in v]  # type: ignore[misc]
        return [str(v)]


class SnapshotSchema(BaseModel):
    """Schema for a whole snapshot file."""

    project: str | None = None
    # Either a list of tasks with 'id' fields or a mapping of id -> task
    tasks: list[TaskSchema] | dict[str, TaskSchema] = Field(default_factory=list)

    @field_validator("tasks", mode="before")
    @classmethod
    def default_empty(cls, v: Any) -> Any:
        return [] if v is None else v
