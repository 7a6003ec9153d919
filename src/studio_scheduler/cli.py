"""CLI entry point for the studio scheduler."""

import logging
from enum import Enum
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .exceptions import SchedulerError
from .exporters import JSONExporter, get_exporter
from .loader import load_records, load_schedule
from .scheduler import (
    AssignmentValidator,
    ConfigLoader,
    Day,
    Objective,
    PerformanceIndex,
    ScheduledAssignment,
    ScheduleResult,
    audit_schedule,
    create_builder,
)
from .scheduler.constants import TOP_PERFORMER_THRESHOLD
from .scheduler.utils import make_assignment_id, normalize_time

app = typer.Typer(
    name="studio-scheduler",
    help="Generate and validate weekly studio class schedules",
    add_completion=False,
)
console = Console()


class OutputFormat(str, Enum):
    """Output format options."""

    json = "json"
    csv = "csv"
    excel = "excel"


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _fail(message: str) -> None:
    console.print(f"[bold red]Error:[/bold red] {message}")
    raise typer.Exit(1)


def _parse_day(value: Optional[str]) -> Optional[Day]:
    if value is None:
        return None
    try:
        return Day.from_name(value)
    except ValueError:
        _fail(f"Unknown day: {value}")


@app.command()
def generate(
    records_file: Annotated[
        Path,
        typer.Argument(help="Historical class records (CSV export or JSON)"),
    ],
    output: Annotated[
        Optional[Path],
        typer.Option("-o", "--output", help="Output file or directory path"),
    ] = None,
    format: Annotated[
        OutputFormat,
        typer.Option("-f", "--format", help="Output format"),
    ] = OutputFormat.json,
    objective: Annotated[
        Objective,
        typer.Option("--objective", help="Ranking objective"),
    ] = Objective.BALANCED,
    day: Annotated[
        Optional[str],
        typer.Option("--day", help="Only build this day, e.g. 'monday'"),
    ] = None,
    config_dir: Annotated[
        Optional[Path],
        typer.Option("--config-dir", help="Directory with scheduling configuration files"),
    ] = None,
    seed: Annotated[
        Optional[int],
        typer.Option("--seed", help="Seed for prediction variance"),
    ] = None,
    variance: Annotated[
        float,
        typer.Option("--variance", help="Relative jitter on predicted attendance (0 disables)"),
    ] = 0.0,
    verbose: Annotated[
        bool,
        typer.Option("-v", "--verbose", help="Show detailed output"),
    ] = False,
) -> None:
    """Generate a weekly schedule from historical class records."""
    _configure_logging(verbose)
    target_day = _parse_day(day)

    try:
        with console.status("[bold green]Loading records..."):
            records = load_records(records_file)

        with console.status("[bold green]Building schedule..."):
            builder = create_builder(
                records,
                config_dir=config_dir,
                objective=objective,
                target_day=target_day,
                seed=seed,
                prediction_variance=variance,
            )
            result = builder.build()
    except SchedulerError as e:
        _fail(str(e))

    _show_summary(result, records_file, verbose)

    if output:
        exporter = get_exporter(format.value)

        if format == OutputFormat.csv:
            output_path = output if output.is_dir() else output.parent / output.stem
        else:
            suffix = ".xlsx" if format == OutputFormat.excel else ".json"
            output_path = output if output.suffix else output.with_suffix(suffix)

        with console.status(f"[bold green]Exporting to {format.value}..."):
            exporter.export(result, output_path)

        console.print(f"\n[bold green]✓[/bold green] Exported to: {output_path}")


def _show_summary(result: ScheduleResult, source: Path, verbose: bool) -> None:
    stats = result.statistics
    console.print(f"\n[bold]Schedule Results for:[/bold] {source.name}")
    console.print(f"  Objective: {result.objective.value}")
    console.print(f"  Total classes: {result.total_assigned}")
    console.print(f"  Skipped slots: {result.total_skipped}")
    console.print(f"  Total hours: {stats.total_hours:g}")
    console.print(f"  Predicted participants: {stats.predicted_participants:g}")

    if stats.by_day:
        console.print("\n[bold]Distribution by day:[/bold]")
        for day_name, count in stats.by_day.items():
            console.print(f"  {day_name.capitalize()}: {count}")

    if stats.by_location:
        console.print("\n[bold]Distribution by location:[/bold]")
        for location, count in sorted(stats.by_location.items()):
            console.print(f"  {location}: {count}")

    if verbose and stats.instructor_hours:
        table = Table(title="Instructor Utilization")
        table.add_column("Instructor", style="cyan")
        table.add_column("Hours", style="green")
        table.add_column("Days", style="yellow")
        for name, hours in stats.instructor_hours.items():
            table.add_row(name, f"{hours:g}", str(stats.instructor_days.get(name, 0)))
        console.print(table)

    if verbose and result.skipped:
        console.print(f"\n[bold yellow]Skipped slots ({len(result.skipped)}):[/bold yellow]")
        for skipped in result.skipped[:10]:
            console.print(
                f"  [yellow]- {skipped.day.value} {skipped.time} {skipped.location}: "
                f"{skipped.reason.value}[/yellow]"
            )
        if len(result.skipped) > 10:
            console.print(f"  [yellow]... and {len(result.skipped) - 10} more[/yellow]")


@app.command()
def validate(
    schedule_file: Annotated[
        Path,
        typer.Argument(help="Schedule JSON file"),
    ],
    class_format: Annotated[
        str,
        typer.Option("--format", help="Class format of the proposed class"),
    ],
    location: Annotated[
        str,
        typer.Option("--location", help="Location of the proposed class"),
    ],
    day: Annotated[
        str,
        typer.Option("--day", help="Day of the proposed class"),
    ],
    time: Annotated[
        str,
        typer.Option("--time", help="Start time of the proposed class (HH:MM)"),
    ],
    instructor: Annotated[
        str,
        typer.Option("--instructor", help="Instructor of the proposed class"),
    ],
    private: Annotated[
        bool,
        typer.Option("--private", help="Mark the class as private"),
    ] = False,
    override: Annotated[
        bool,
        typer.Option("--override", help="Accept a labour-rule warning"),
    ] = False,
    records_file: Annotated[
        Optional[Path],
        typer.Option("--records", help="Historical records for attendance prediction"),
    ] = None,
    config_dir: Annotated[
        Optional[Path],
        typer.Option("--config-dir", help="Directory with scheduling configuration files"),
    ] = None,
    output: Annotated[
        Optional[Path],
        typer.Option("-o", "--output", help="Write the updated schedule to this JSON file"),
    ] = None,
) -> None:
    """Check a proposed manual edit against an existing schedule."""
    _configure_logging(False)
    target_day = _parse_day(day)
    try:
        start = normalize_time(time)
    except ValueError as e:
        _fail(str(e))

    try:
        existing = load_schedule(schedule_file)
        config = ConfigLoader(config_dir)
        participants = revenue = 0.0
        if records_file:
            stat = PerformanceIndex(load_records(records_file), config).stats_for(
                class_format, location, target_day, start
            )
            participants, revenue = stat.avg_participants, stat.avg_revenue
    except SchedulerError as e:
        _fail(str(e))

    proposed = ScheduledAssignment(
        class_format=class_format,
        location=location,
        day=target_day,
        time=start,
        duration=config.formats.get_duration(class_format),
        instructor=instructor,
        participants=participants,
        revenue=revenue,
        is_top_performer=participants > TOP_PERFORMER_THRESHOLD,
        is_private=private,
        id=make_assignment_id(location, target_day.value, start, class_format, len(existing)),
    )

    validator = AssignmentValidator(config)
    result = validator.validate(existing, proposed)

    console.print(f"\n[bold]Validation for:[/bold] {class_format} at {location}, "
                  f"{target_day.value.capitalize()} {start} with {instructor}")

    if not result.valid:
        console.print(f"[bold red]✗ Rejected ({result.error_kind.value}):[/bold red] {result.error_message}")
    elif result.warning_kind:
        style = "yellow" if result.overridable else "cyan"
        console.print(f"[bold {style}]! {result.warning_kind.value}:[/bold {style}] {result.warning_message}")
    else:
        console.print("[bold green]✓ Assignment is valid[/bold green]")

    if result.advisories:
        console.print("\n[bold yellow]Advisories:[/bold yellow]")
        for advisory in result.advisories:
            console.print(f"  [yellow]• {advisory.value}[/yellow]")

    if not result.valid:
        raise typer.Exit(1)
    if result.requires_override and not override:
        console.print("\nRe-run with [bold]--override[/bold] to accept the warning")
        raise typer.Exit(2)

    if output:
        updated = validator.apply(existing, proposed, override=override)
        JSONExporter().export(ScheduleResult(assignments=updated), output)
        console.print(f"\n[bold green]✓[/bold green] Updated schedule written to: {output}")


@app.command()
def top(
    records_file: Annotated[
        Path,
        typer.Argument(help="Historical class records (CSV export or JSON)"),
    ],
    min_average: Annotated[
        float,
        typer.Option("--min-average", help="Minimum average participants"),
    ] = TOP_PERFORMER_THRESHOLD,
    limit: Annotated[
        int,
        typer.Option("--limit", help="Number of rows to show"),
    ] = 20,
    config_dir: Annotated[
        Optional[Path],
        typer.Option("--config-dir", help="Directory with scheduling configuration files"),
    ] = None,
) -> None:
    """Show recurring top-performing classes."""
    try:
        with console.status("[bold green]Analyzing records..."):
            index = PerformanceIndex(load_records(records_file), ConfigLoader(config_dir))
            performers = index.top_performers(min_average=min_average)
    except SchedulerError as e:
        _fail(str(e))

    if not performers:
        console.print("[bold yellow]No recurring classes above the threshold[/bold yellow]")
        return

    table = Table(title=f"Top Performing Classes (avg >= {min_average:g})")
    table.add_column("Class", style="cyan", max_width=40)
    table.add_column("Location", style="blue")
    table.add_column("Day", style="magenta")
    table.add_column("Time")
    table.add_column("Instructor", style="green")
    table.add_column("Avg", style="yellow")
    table.add_column("Runs")

    for performer in performers[:limit]:
        table.add_row(
            performer.class_format,
            performer.location,
            performer.day.value.capitalize(),
            performer.time,
            performer.instructor,
            f"{performer.avg_participants:g}",
            str(performer.frequency),
        )

    if len(performers) > limit:
        table.add_row("...", "...", "...", "...", "...", "...", "...")

    console.print(table)


@app.command()
def audit(
    schedule_file: Annotated[
        Path,
        typer.Argument(help="Schedule JSON file"),
    ],
    config_dir: Annotated[
        Optional[Path],
        typer.Option("--config-dir", help="Directory with scheduling configuration files"),
    ] = None,
) -> None:
    """Check a full schedule for capacity, format and labour violations."""
    try:
        assignments = load_schedule(schedule_file)
        problems = audit_schedule(assignments, ConfigLoader(config_dir))
    except SchedulerError as e:
        _fail(str(e))

    console.print(f"\n[bold]Audit for:[/bold] {schedule_file.name} ({len(assignments)} classes)")

    if not problems:
        console.print("[bold green]✓ No violations found[/bold green]")
        return

    console.print(f"\n[bold red]Violations ({len(problems)}):[/bold red]")
    for problem in problems:
        console.print(f"  [red]• {problem}[/red]")
    raise typer.Exit(1)


if __name__ == "__main__":
    app()
