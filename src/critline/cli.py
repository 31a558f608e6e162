"""Command-line interface for critline."""

from __future__ import annotations

import csv
import json
from datetime import date
from pathlib import Path
from typing import Annotated

import typer

from .config import discover_config, set_config_path
from .engine import EngineResult, validate_and_compute
from .exceptions import CritlineError
from .logger import setup_logger
from .models import Task
from .parser import load_snapshot
from .writer import write_adjusted_dates

app = typer.Typer(
    name="critline",
    help="Validate task dependencies and compute the critical path of a project schedule",
    add_completion=False,
)


@app.callback()
def main_callback(
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose",
            "-v",
            help="Verbosity level: 0=silent (default), 1=show changes, 2=show all checks, 3=debug",
            min=0,
            max=3,
        ),
    ] = 0,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to config file (default: critline_config.yaml)",
        ),
    ] = None,
) -> None:
    """Global options for critline commands."""
    setup_logger(verbose)
    set_config_path(config)


@app.command()
def check(  # noqa: PLR0913 - CLI command needs multiple options
    file: Annotated[Path, typer.Argument(help="Path to the task snapshot (YAML or JSON)")] = Path(
        "tasks.yaml"
    ),
    *,
    auto_adjust: Annotated[
        bool,
        typer.Option("--auto-adjust", help="Rewrite dates so every dependency is satisfied"),
    ] = False,
    write: Annotated[
        bool,
        typer.Option("--write", help="Write adjusted dates back to the snapshot file"),
    ] = False,
    project_start: Annotated[
        str | None,
        typer.Option(
            "--project-start",
            help="Start date (YYYY-MM-DD) for undated tasks when adjusting",
        ),
    ] = None,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print the full result as JSON"),
    ] = False,
    output_csv: Annotated[
        Path | None,
        typer.Option("--output-csv", help="Export per-task float and criticality to CSV"),
    ] = None,
) -> None:
    """Validate a task snapshot and report its critical path."""
    if write and not auto_adjust:
        typer.echo("Error: --write requires --auto-adjust", err=True)
        raise typer.Exit(1)

    parsed_start = _parse_date_option(project_start, "project-start")

    try:
        tasks = load_snapshot(file)
        config = discover_config(file)
        result = validate_and_compute(
            tasks, auto_adjust, config=config.engine, project_start=parsed_start
        )
    except CritlineError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None

    if as_json:
        typer.echo(json.dumps(result.to_dict(), indent=2))
    else:
        _display_result(tasks, result)

    if output_csv:
        _export_csv(tasks, result, output_csv)
        typer.echo(f"Timings exported to {output_csv}", err=as_json)

    if write and result.adjusted_tasks:
        updated = write_adjusted_dates(file, result.adjusted_tasks)
        typer.echo(f"Adjusted dates written to {file} ({updated} task(s))", err=as_json)

    if result.warnings and not as_json:
        typer.echo("\nWarnings:", err=True)
        for warning in result.warnings:
            typer.echo(f"  - {warning}", err=True)

    if result.has_cycles:
        raise typer.Exit(1)


def _parse_date_option(date_str: str | None, option_name: str) -> date | None:
    """Parse a YYYY-MM-DD CLI option, exiting with an error if malformed."""
    if date_str is None:
        return None

    try:
        return date.fromisoformat(date_str)
    except ValueError:
        typer.echo(
            f"Error: Invalid {option_name} '{date_str}'. Use YYYY-MM-DD format.",
            err=True,
        )
        raise typer.Exit(1) from None


def _display_result(tasks: list[Task], result: EngineResult) -> None:
    """Display a human-readable report on stdout."""
    names = {task.id: task.display_name for task in tasks}

    if result.cycles:
        typer.echo("Dependency Cycles")
        typer.echo("=" * 80)
        for cycle in result.cycles:
            typer.echo(f"  {cycle.message}")
        typer.echo("")

    for title, issues in (
        ("Date Errors", result.date_errors),
        ("Dependency Errors", result.dependency_errors),
    ):
        if not issues:
            continue
        typer.echo(title)
        typer.echo("=" * 80)
        for issue in issues:
            typer.echo(f"{names.get(issue.task_id, issue.task_id)} ({issue.task_id})")
            for message in issue.messages:
                typer.echo(f"  - {message}")
        typer.echo("")

    if result.has_cycles:
        typer.echo("Schedule not computed: resolve dependency cycles first.")
        return

    typer.echo("Critical Path")
    typer.echo("=" * 80)
    if not result.critical_path:
        typer.echo("  (no tasks)")
    for entry in result.critical_path:
        dates = f"{entry.start_date or '-'} -> {entry.end_date or '-'}"
        typer.echo(
            f"  {names.get(entry.task_id, entry.task_id)} ({entry.task_id})  "
            f"{dates}  float {entry.float_days}d"
        )
    typer.echo("")

    if result.bottlenecks:
        typer.echo("Bottlenecks")
        typer.echo("=" * 80)
        for bottleneck in result.bottlenecks:
            typer.echo(
                f"  [{bottleneck.risk_level.value}] "
                f"{names.get(bottleneck.task_id, bottleneck.task_id)} ({bottleneck.task_id})  "
                f"{bottleneck.reason}"
            )
        typer.echo("")

    if result.compression_risks:
        typer.echo("Compression Risks")
        typer.echo("=" * 80)
        for risk in result.compression_risks:
            typer.echo(
                f"  {names.get(risk.task_id, risk.task_id)} ({risk.task_id})  "
                f"{risk.duration_days}d: {risk.reason}"
            )
        typer.echo("")

    if result.variances:
        typer.echo("Schedule Variance")
        typer.echo("=" * 80)
        for variance in result.variances:
            typer.echo(
                f"  {names.get(variance.task_id, variance.task_id)} ({variance.task_id})  "
                f"start {_format_variance(variance.start_variance)}, "
                f"end {_format_variance(variance.end_variance)}"
            )
        typer.echo("")

    if result.adjusted_tasks is not None:
        typer.echo("Adjusted Tasks")
        typer.echo("=" * 80)
        if not result.adjusted_tasks:
            typer.echo("  (no changes)")
        for adjusted in result.adjusted_tasks:
            typer.echo(
                f"  {names.get(adjusted.task_id, adjusted.task_id)} ({adjusted.task_id})  "
                f"{adjusted.start_date} -> {adjusted.end_date}  ({adjusted.duration_days}d)"
            )
        typer.echo("")

    summary = result.summary
    typer.echo(
        f"{summary.total_tasks} tasks, {summary.critical_tasks} critical, "
        f"project duration {summary.project_duration:g} days, "
        f"{summary.total_errors} error(s), {summary.tasks_adjusted} adjusted"
    )


def _format_variance(days: int | None) -> str:
    if days is None:
        return "n/a"
    return f"{days:+d}d"


def _export_csv(tasks: list[Task], result: EngineResult, output_path: Path) -> None:
    """Export per-task timings to CSV."""
    with output_path.open("w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(
            [
                "task_id",
                "task_name",
                "earliest_start",
                "earliest_finish",
                "latest_start",
                "latest_finish",
                "float_days",
                "is_critical",
            ]
        )
        for task in tasks:
            timing = result.timings.get(task.id)
            if timing is None:
                continue
            writer.writerow(
                [
                    task.id,
                    task.display_name,
                    timing.earliest_start,
                    timing.earliest_finish,
                    timing.latest_start,
                    timing.latest_finish,
                    timing.float_days,
                    timing.is_critical,
                ]
            )


def main() -> int:
    """Main entry point."""
    # Typer handles sys.exit() internally
    app()
    return 0


if __name__ == "__main__":
    main()
