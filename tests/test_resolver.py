"""Tests for dependency resolution."""

from critline.config import EngineConfig
from critline.engine import DependencyResolver
from critline.models import DependencyType, PredecessorConfig, Task


class TestDependencyResolver:
    """Test normalization of legacy and per-predecessor dependency models."""

    def test_legacy_defaults_to_finish_to_start(self) -> None:
        resolved = DependencyResolver().resolve(Task(id="c", predecessor_ids=["a", "b"]))

        assert [dep.predecessor_id for dep in resolved] == ["a", "b"]
        assert all(dep.type is DependencyType.FS for dep in resolved)
        assert all(dep.lag_days == 0.0 for dep in resolved)

    def test_legacy_task_wide_type_and_lag(self) -> None:
        """A legacy type and lag apply to every predecessor of the task."""
        t = Task(id="c", predecessor_ids=["a", "b"], dependency_type="SS", lag_days=4)
        resolved = DependencyResolver().resolve(t)

        assert [(d.type, d.lag_days) for d in resolved] == [
            (DependencyType.SS, 4.0),
            (DependencyType.SS, 4.0),
        ]

    def test_configs_used_verbatim(self) -> None:
        """Per-predecessor configs win over the legacy fields."""
        t = Task(
            id="c",
            predecessor_ids=["ignored"],
            dependency_type="SS",
            predecessor_configs=[
                PredecessorConfig("a", "FF", 2.0),
                PredecessorConfig("b", "SF", -1.0),
            ],
        )
        resolved = DependencyResolver().resolve(t)

        assert [(d.predecessor_id, d.type, d.lag_days) for d in resolved] == [
            ("a", DependencyType.FF, 2.0),
            ("b", DependencyType.SF, -1.0),
        ]

    def test_empty_configs_fall_back_to_legacy_ids(self) -> None:
        """An empty config list does not hide the legacy predecessor IDs."""
        t = Task(
            id="c",
            predecessor_ids=["a", "b"],
            predecessor_configs=[],
            dependency_type="SS",
            lag_days=1,
        )
        resolved = DependencyResolver().resolve(t)

        assert [(d.predecessor_id, d.type, d.lag_days) for d in resolved] == [
            ("a", DependencyType.SS, 1.0),
            ("b", DependencyType.SS, 1.0),
        ]

    def test_empty_configs_and_no_ids(self) -> None:
        assert DependencyResolver().resolve(Task(id="c", predecessor_configs=[])) == []

    def test_unknown_type_falls_back_to_fs(self) -> None:
        t = Task(id="c", predecessor_configs=[PredecessorConfig("a", "XY")])
        (dep,) = DependencyResolver().resolve(t)

        assert dep.type is DependencyType.FS
        assert dep.raw_type == "XY"
        assert not dep.type_valid

    def test_config_defaults_for_legacy_tasks(self) -> None:
        config = EngineConfig(default_dependency_type="SS", default_lag_days=1.5)
        (dep,) = DependencyResolver(config).resolve(Task(id="b", predecessor_ids=["a"]))

        assert dep.type is DependencyType.SS
        assert dep.lag_days == 1.5

    def test_resolve_all(self) -> None:
        tasks = [Task(id="a"), Task(id="b", predecessor_ids=["a"])]
        resolved = DependencyResolver().resolve_all(tasks)

        assert resolved["a"] == []
        assert [d.predecessor_id for d in resolved["b"]] == ["a"]
