# ABOUTME: Provides the grade-agg CLI for running grade queries against a grades export.
# ABOUTME: Renders learner class averages and pass-rate statistics as tables or JSON.

import json
import math
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from src.common.schemas import MalformedEntryError, PopulationStatistic

from .config import AggregationConfig, load_config
from .queries import GradeQueries
from .sources import FileRecordSource

console = Console()
app = typer.Typer(help="Weighted grade averages and pass-rate statistics.")


def _build_queries(records: Path, config: Optional[Path]) -> GradeQueries:
    try:
        agg_config = load_config(config) if config is not None else AggregationConfig()
    except (FileNotFoundError, ValueError) as exc:
        raise typer.BadParameter(str(exc), param_hint="--config") from exc

    try:
        source = FileRecordSource(records)
    except (FileNotFoundError, ValueError) as exc:
        raise typer.BadParameter(str(exc), param_hint="--records") from exc

    typer.echo(f"[grades] Loaded {len(source)} records from {records}", err=True)
    return GradeQueries(source, agg_config)


def _format_avg(value: float) -> str:
    return "n/a" if math.isnan(value) else f"{value:.2f}"


def _no_data(message: str) -> None:
    console.print(f"[yellow]No data found: {message}[/yellow]")
    raise typer.Exit(code=1)


def _run_query(query, **kwargs):
    try:
        return query(**kwargs)
    except MalformedEntryError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=2)


def _print_statistics(title: str, stats: PopulationStatistic, as_json: bool) -> None:
    if as_json:
        typer.echo(json.dumps(stats.to_dict()))
        return
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("Learners")
    table.add_column(f"Above {stats.threshold:g}")
    table.add_column("Percent")
    table.add_row(str(stats.total), str(stats.above_threshold), f"{stats.percentage:.2f}%")
    console.print(table)


@app.command("learner-averages")
def learner_averages(
    records: Path = typer.Option(..., "--records", help="Grades export (.json, .jsonl, or .parquet)."),
    learner_id: int = typer.Option(..., "--learner-id", help="Learner identifier."),
    config: Optional[Path] = typer.Option(None, "--config", help="Aggregation config YAML."),
    as_json: bool = typer.Option(False, "--json", help="Emit JSON instead of a table."),
) -> None:
    """
    Weighted average of one learner's scores in each of their classes.
    """
    queries = _build_queries(records, config)
    averages = _run_query(queries.learner_class_averages, learner_id=learner_id)
    if not averages:
        _no_data(f"learner {learner_id} has no scores")

    if as_json:
        typer.echo(json.dumps([row.to_dict() for row in averages]))
        return

    table = Table(title=f"Learner {learner_id}", show_header=True, header_style="bold magenta")
    table.add_column("Class")
    table.add_column("Weighted Avg")
    for row in averages:
        table.add_row(row.class_id, _format_avg(row.avg))
    console.print(table)


@app.command()
def stats(
    records: Path = typer.Option(..., "--records", help="Grades export (.json, .jsonl, or .parquet)."),
    config: Optional[Path] = typer.Option(None, "--config", help="Aggregation config YAML."),
    as_json: bool = typer.Option(False, "--json", help="Emit JSON instead of a table."),
) -> None:
    """
    Pass-rate statistics across every learner.
    """
    queries = _build_queries(records, config)
    result = _run_query(queries.global_statistics)
    if result.total == 0:
        _no_data("no learners have scores")
    _print_statistics("All learners", result, as_json)


@app.command("class-stats")
def class_stats(
    records: Path = typer.Option(..., "--records", help="Grades export (.json, .jsonl, or .parquet)."),
    class_id: str = typer.Option(..., "--class-id", help="Class identifier."),
    config: Optional[Path] = typer.Option(None, "--config", help="Aggregation config YAML."),
    as_json: bool = typer.Option(False, "--json", help="Emit JSON instead of a table."),
) -> None:
    """
    Pass-rate statistics for learners in one class.
    """
    queries = _build_queries(records, config)
    result = _run_query(queries.class_statistics, class_id=class_id)
    if result.total == 0:
        _no_data(f"class {class_id} has no scores")
    _print_statistics(f"Class {class_id}", result, as_json)


def main():
    app()


if __name__ == "__main__":
    main()
