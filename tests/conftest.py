"""Pytest configuration and fixtures for critline tests."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import date

import pytest

from critline.logger import reset_logger
from critline.models import PredecessorConfig, Task


@pytest.fixture(autouse=True)
def clean_logger() -> Iterator[None]:
    """Reset logger state around each test for isolation."""
    reset_logger()
    yield
    reset_logger()


def task(
    task_id: str,
    duration: int | None = None,
    *preds: str,
    start: date | None = None,
    end: date | None = None,
) -> Task:
    """Create a legacy-style task with finish-to-start predecessors.

    Example:
        task("b", 3, "a")  # b takes 3 days and follows a
    """
    return Task(
        id=task_id,
        duration_days=duration,
        predecessor_ids=list(preds),
        start_date=start,
        end_date=end,
    )


def configured(
    task_id: str,
    duration: int,
    *configs: str,
    start: date | None = None,
    end: date | None = None,
) -> Task:
    """Create a task whose predecessors use compact config strings.

    Example:
        configured("c", 4, "a:SS + 2d", "b:FF")
    """
    return Task(
        id=task_id,
        duration_days=duration,
        predecessor_configs=[PredecessorConfig.parse(c) for c in configs],
        start_date=start,
        end_date=end,
    )
