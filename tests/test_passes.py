"""Tests for the forward and backward passes."""

import pytest

from critline.engine import (
    BackwardPassResult,
    DependencyResolver,
    ForwardPassResult,
    TaskGraph,
    run_backward_pass,
    run_forward_pass,
)
from critline.models import Task
from tests.conftest import configured, task


def run(tasks: list[Task]) -> tuple[ForwardPassResult, BackwardPassResult]:
    graph = TaskGraph(tasks, DependencyResolver().resolve_all(tasks))
    order = graph.topological_order()
    forward = run_forward_pass(graph, order)
    return forward, run_backward_pass(graph, order, forward.project_end)


class TestForwardPass:
    """Test earliest start/finish computation."""

    def test_roots_start_at_zero(self) -> None:
        forward, _ = run([task("a", 5), task("b", 2), task("c", 1, "a")])

        assert forward.earliest_start["a"] == 0
        assert forward.earliest_start["b"] == 0
        assert forward.earliest_finish["a"] == 5

    def test_finish_to_start_no_lag(self) -> None:
        forward, _ = run([task("a", 5), task("b", 3, "a")])
        assert forward.earliest_start["b"] == forward.earliest_finish["a"]

    @pytest.mark.parametrize("lag", [1, 2, 10])
    def test_finish_to_start_with_lag(self, lag: int) -> None:
        forward, _ = run([task("a", 5), configured("b", 3, f"a + {lag}d")])
        assert forward.earliest_start["b"] == forward.earliest_finish["a"] + lag

    def test_start_to_start(self) -> None:
        forward, _ = run([task("a", 5), configured("b", 3, "a:SS + 2d")])
        assert forward.earliest_start["b"] == 2
        assert forward.earliest_finish["b"] == 5

    def test_finish_to_finish(self) -> None:
        """The successor may not finish before the predecessor finishes plus lag."""
        forward, _ = run([task("a", 5), configured("b", 3, "a:FF + 1d")])
        assert forward.earliest_start["b"] == 3
        assert forward.earliest_finish["b"] == 6

    def test_start_to_finish(self) -> None:
        forward, _ = run([task("a", 5), configured("b", 3, "a:SF + 4d")])
        assert forward.earliest_start["b"] == 1
        assert forward.earliest_finish["b"] == 4

    def test_never_before_day_zero(self) -> None:
        """A negative bound (short SF/FF or a lead) is floored at the project start."""
        forward, _ = run(
            [task("a", 2), configured("b", 10, "a:FF"), configured("c", 3, "a:SS - 5d")]
        )
        assert forward.earliest_start["b"] == 0
        assert forward.earliest_start["c"] == 0

    def test_latest_predecessor_wins(self) -> None:
        forward, _ = run([task("a", 5), task("b", 8), configured("c", 1, "a + 2d", "b:SS + 1d")])
        assert forward.earliest_start["c"] == 7

    def test_fractional_lag(self) -> None:
        forward, _ = run([task("a", 5), configured("b", 3, "a + 0.5d")])
        assert forward.earliest_start["b"] == 5.5

    def test_project_end(self) -> None:
        forward, _ = run([task("a", 5), task("b", 3, "a"), task("c", 20)])
        assert forward.project_end == 20


class TestBackwardPass:
    """Test latest start/finish computation."""

    def test_sinks_finish_at_project_end(self) -> None:
        _, backward = run([task("a", 5), task("b", 2)])

        assert backward.project_end == 5
        assert backward.latest_finish["a"] == 5
        assert backward.latest_finish["b"] == 5
        assert backward.latest_start["b"] == 3

    def test_finish_to_start(self) -> None:
        _, backward = run([task("a", 5), configured("b", 3, "a + 2d")])

        assert backward.latest_start["b"] == 7
        assert backward.latest_finish["a"] == 5
        assert backward.latest_start["a"] == 0

    def test_start_to_start(self) -> None:
        _, backward = run([task("a", 5), configured("b", 3, "a:SS + 2d")])

        assert backward.latest_start["b"] == 2
        assert backward.latest_start["a"] == 0

    def test_finish_to_finish(self) -> None:
        _, backward = run([task("a", 5), configured("b", 3, "a:FF + 1d")])

        assert backward.latest_finish["b"] == 6
        assert backward.latest_finish["a"] == 5

    def test_start_to_finish(self) -> None:
        _, backward = run([task("a", 5), configured("b", 3, "a:SF + 4d"), task("c", 6)])

        # b must finish by 6; a must then start by 6 - 4 = 2
        assert backward.latest_finish["b"] == 6
        assert backward.latest_start["a"] == 1  # capped: a also has to end by project end

    def test_start_to_start_bound_capped_at_project_end(self) -> None:
        _, backward = run([task("a", 5), configured("b", 1, "a:SS")])

        # b allows a to finish at 4 + 5 = 9, but the project ends at 5
        assert backward.latest_finish["a"] == 5
        assert backward.latest_start["a"] == 0

    def test_tightest_successor_wins(self) -> None:
        _, backward = run([task("a", 2), task("b", 10, "a"), task("c", 1, "a")])

        assert backward.latest_finish["a"] == 2
        assert backward.latest_start["c"] == 11

    def test_latest_never_before_earliest(self) -> None:
        tasks = [
            task("a", 3),
            configured("b", 4, "a:SS + 1d"),
            configured("c", 2, "a:FF + 2d", "b"),
            configured("d", 6, "b:SF + 3d"),
            task("e", 5, "c", "d"),
        ]
        forward, backward = run(tasks)

        for t in tasks:
            assert backward.latest_start[t.id] >= forward.earliest_start[t.id]
