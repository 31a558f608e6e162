"""Engine package - dependency validation and critical path computation.

Main entry points:
- validate_and_compute: One-shot validation, CPM passes and optional adjustment
- ScheduleEngine: Same, reusable with a fixed EngineConfig

Building blocks:
- DependencyResolver: Normalize legacy and per-predecessor relationships
- TaskGraph: Graph construction and topological ordering
- detect_cycles: Structural validation
- ScheduleValidator: Per-task field and reference checks
- run_forward_pass / run_backward_pass: Earliest and latest dates
- compute_timings / extract_critical_path: Float and critical path
- find_bottlenecks / find_compression_risks / compute_variances: Risk analysis
- ForwardAdjuster: Rewrite dates to satisfy all relationships
"""

from .adjuster import ForwardAdjuster
from .analysis import compute_variances, find_bottlenecks, find_compression_risks
from .core import (
    AdjustedTask,
    Bottleneck,
    CompressionRisk,
    CriticalPathEntry,
    CycleReport,
    EngineResult,
    ResolvedDependency,
    ResultSummary,
    RiskLevel,
    ScheduleVariance,
    TaskIssues,
    TaskTiming,
    earliest_start_bound,
    latest_finish_bound,
)
from .critical_path import compute_timings, extract_critical_path
from .cycles import detect_cycles
from .graph import PrunedEdge, TaskGraph
from .passes import BackwardPassResult, ForwardPassResult, run_backward_pass, run_forward_pass
from .resolver import DependencyResolver
from .service import ScheduleEngine, validate_and_compute
from .validator import ScheduleValidator, ValidationReport

__all__ = [
    # Results
    "AdjustedTask",
    "Bottleneck",
    "CompressionRisk",
    "CriticalPathEntry",
    "CycleReport",
    "EngineResult",
    "ResolvedDependency",
    "ResultSummary",
    "RiskLevel",
    "ScheduleVariance",
    "TaskIssues",
    "TaskTiming",
    # Relationship arithmetic
    "earliest_start_bound",
    "latest_finish_bound",
    # Stages
    "DependencyResolver",
    "TaskGraph",
    "PrunedEdge",
    "detect_cycles",
    "ScheduleValidator",
    "ValidationReport",
    "run_forward_pass",
    "run_backward_pass",
    "ForwardPassResult",
    "BackwardPassResult",
    "compute_timings",
    "extract_critical_path",
    "find_bottlenecks",
    "find_compression_risks",
    "compute_variances",
    "ForwardAdjuster",
    # Service
    "ScheduleEngine",
    "validate_and_compute",
]
