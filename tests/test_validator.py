"""Tests for per-task validation."""

from datetime import date

from critline.config import EngineConfig
from critline.engine import (
    DependencyResolver,
    ScheduleValidator,
    TaskGraph,
    TaskIssues,
    ValidationReport,
)
from critline.models import PredecessorConfig, Task


def validate(tasks: list[Task], config: EngineConfig | None = None) -> ValidationReport:
    graph = TaskGraph(tasks, DependencyResolver(config).resolve_all(tasks))
    return ScheduleValidator(config).validate(graph)


def messages(issues: list[TaskIssues], task_id: str) -> list[str]:
    for issue in issues:
        if issue.task_id == task_id:
            return issue.messages
    return []


class TestDateChecks:
    """Test checks on a task's own dates."""

    def test_valid_dates(self) -> None:
        t = Task(id="a", start_date=date(2026, 1, 1), end_date=date(2026, 1, 5))
        assert validate([t]).date_errors == []

    def test_start_after_end(self) -> None:
        t = Task(id="a", start_date=date(2026, 1, 10), end_date=date(2026, 1, 5))
        report = validate([t])

        assert messages(report.date_errors, "a") == [
            "Start date (2026-01-10) cannot be after end date (2026-01-05)"
        ]

    def test_missing_dates_not_an_error(self) -> None:
        assert validate([Task(id="a"), Task(id="b", start_date=date(2026, 1, 1))]).date_errors == []

    def test_baseline_range(self) -> None:
        t = Task(id="a", baseline_start=date(2026, 2, 1), baseline_end=date(2026, 1, 1))
        assert messages(validate([t]).date_errors, "a") == [
            "Baseline start (2026-02-01) cannot be after baseline end (2026-01-01)"
        ]

    def test_non_positive_duration(self) -> None:
        report = validate([Task(id="a", duration_days=0)])
        assert messages(report.date_errors, "a") == ["Duration must be at least 1 day (got 0)"]

    def test_bad_task_does_not_block_others(self) -> None:
        tasks = [
            Task(id="bad", start_date=date(2026, 1, 10), end_date=date(2026, 1, 5)),
            Task(id="worse", start_date=date(2026, 3, 10), end_date=date(2026, 3, 1)),
            Task(id="good", start_date=date(2026, 1, 1), end_date=date(2026, 1, 2)),
        ]
        report = validate(tasks)

        assert [issue.task_id for issue in report.date_errors] == ["bad", "worse"]


class TestDependencyChecks:
    """Test predecessor reference and relationship checks."""

    def test_dangling_predecessor(self) -> None:
        report = validate([Task(id="a", predecessor_ids=["ghost"])])
        assert messages(report.dependency_errors, "a") == ["Predecessor task ghost not found"]

    def test_self_predecessor(self) -> None:
        report = validate([Task(id="a", predecessor_ids=["a"])])
        assert messages(report.dependency_errors, "a") == ["Task cannot be its own predecessor"]

    def test_invalid_type(self) -> None:
        tasks = [Task(id="a"), Task(id="b", predecessor_configs=[PredecessorConfig("a", "XX")])]
        (message,) = messages(validate(tasks).dependency_errors, "b")

        assert "Invalid dependency type 'XX' for predecessor a" in message
        assert "treated as FS" in message

    def test_invalid_legacy_type(self) -> None:
        tasks = [Task(id="a"), Task(id="b", predecessor_ids=["a"], dependency_type="later")]
        assert len(messages(validate(tasks).dependency_errors, "b")) == 1

    def test_long_form_type_is_valid(self) -> None:
        tasks = [
            Task(id="a"),
            Task(id="b", predecessor_configs=[PredecessorConfig("a", "start_to_start")]),
        ]
        assert validate(tasks).dependency_errors == []

    def test_cross_project_predecessor(self) -> None:
        tasks = [
            Task(id="a", name="Survey", project_id="p1"),
            Task(id="b", project_id="p2", predecessor_ids=["a"]),
        ]
        assert messages(validate(tasks).dependency_errors, "b") == [
            "Predecessor Survey is from a different project"
        ]

    def test_one_sided_project_is_different(self) -> None:
        """A predecessor with no project differs from a task that has one."""
        tasks = [
            Task(id="a", name="Survey"),
            Task(id="b", project_id="p2", predecessor_ids=["a"]),
            Task(id="c", predecessor_ids=["a"]),
        ]
        report = validate(tasks)

        assert messages(report.dependency_errors, "b") == [
            "Predecessor Survey is from a different project"
        ]
        assert messages(report.dependency_errors, "c") == []

    def test_same_project(self) -> None:
        tasks = [
            Task(id="a", project_id="p1"),
            Task(id="b", project_id="p1", predecessor_ids=["a"]),
        ]
        assert validate(tasks).dependency_errors == []

    def test_reports_edges_pruned_from_graph(self) -> None:
        """Every reference the graph dropped is reported, and nothing else."""
        tasks = [
            Task(id="a"),
            Task(id="b", predecessor_ids=["a", "ghost", "b", "phantom"]),
        ]
        graph = TaskGraph(tasks, DependencyResolver().resolve_all(tasks))
        report = ScheduleValidator().validate(graph)

        assert len(graph.pruned) == 3
        assert messages(report.dependency_errors, "b") == [
            "Predecessor task ghost not found",
            "Task cannot be its own predecessor",
            "Predecessor task phantom not found",
        ]
        assert report.error_count == len(graph.pruned)

    def test_all_problems_collected(self) -> None:
        tasks = [
            Task(id="a", predecessor_ids=["a", "ghost"]),
            Task(id="b", predecessor_configs=[PredecessorConfig("a", "??")]),
        ]
        report = validate(tasks)

        assert len(messages(report.dependency_errors, "a")) == 2
        assert len(messages(report.dependency_errors, "b")) == 1
        assert report.error_count == 3


class TestSequenceWarnings:
    """Test warnings for overlapping finish-to-start tasks."""

    def test_overlap_warns(self) -> None:
        tasks = [
            Task(id="a", start_date=date(2026, 1, 1), end_date=date(2026, 1, 15)),
            Task(id="b", start_date=date(2026, 1, 10), predecessor_ids=["a"]),
        ]
        report = validate(tasks)

        assert report.warnings == [
            "Predecessor 'a' finishes (2026-01-15) after 'b' starts (2026-01-10)"
        ]
        assert report.dependency_errors == []

    def test_back_to_back_is_fine(self) -> None:
        tasks = [
            Task(id="a", start_date=date(2026, 1, 1), end_date=date(2026, 1, 10)),
            Task(id="b", start_date=date(2026, 1, 10), predecessor_ids=["a"]),
        ]
        assert validate(tasks).warnings == []

    def test_start_to_start_overlap_allowed(self) -> None:
        tasks = [
            Task(id="a", start_date=date(2026, 1, 1), end_date=date(2026, 1, 15)),
            Task(
                id="b",
                start_date=date(2026, 1, 2),
                predecessor_configs=[PredecessorConfig("a", "SS")],
            ),
        ]
        assert validate(tasks).warnings == []

    def test_warnings_can_be_disabled(self) -> None:
        tasks = [
            Task(id="a", start_date=date(2026, 1, 1), end_date=date(2026, 1, 15)),
            Task(id="b", start_date=date(2026, 1, 10), predecessor_ids=["a"]),
        ]
        assert validate(tasks, EngineConfig(report_sequence_warnings=False)).warnings == []
