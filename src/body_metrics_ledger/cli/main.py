"""
Command-line interface for Body Metrics Ledger.

Provides commands for recording measurements and viewing current values,
trends, statistics, and exports.
"""

import typer

from body_metrics_ledger.domain.catalog import MetricCatalog
from body_metrics_ledger.infrastructure.storage.json_document import JSONDocumentStorage
from body_metrics_ledger.services.history import chart_series, recent_entries
from body_metrics_ledger.services.metric_store import MetricStore
from body_metrics_ledger.services.output import OutputService
from body_metrics_ledger.services.statistics import (
    compute_statistics,
    format_number,
    summarize_overview,
)
from body_metrics_ledger.services.trends import compute_trend
from body_metrics_ledger.utils.exceptions import MetricsLedgerError
from body_metrics_ledger.utils.logging_config import get_logger, setup_logging
from body_metrics_ledger.utils.parameters import ParameterLoader

app = typer.Typer(help="Body Metrics Ledger - Record body measurements and follow trends")

logger = get_logger(__name__)


def init_config(config_path: str = "config/config.yaml") -> ParameterLoader:
    """
    Initialize configuration and logging.

    Args:
        config_path: Path to configuration file.

    Returns:
        Parameter loader instance.
    """
    param_loader = ParameterLoader(config_path)
    setup_logging(param_loader.get_logging_config())
    return param_loader


def build_store(param_loader: ParameterLoader, catalog: MetricCatalog) -> MetricStore:
    """Create a metric store from configuration."""
    storage = JSONDocumentStorage(param_loader.get_storage_config())
    return MetricStore(catalog, storage, param_loader.get_capture_config())


def fail(action: str, error: Exception) -> typer.Exit:
    """Log and report a failed command, returning the exit to raise."""
    logger.error(f"{action} failed: {error}")
    typer.echo(f"Error: {error}", err=True)
    return typer.Exit(code=1)


@app.command()
def catalog() -> None:
    """
    List supported metric types.
    """
    for config in MetricCatalog().list():
        typer.echo(f"{config.icon}  {config.key.value:<12} {config.name} ({config.unit})")


@app.command()
def add(
    key: str = typer.Argument(..., help="Metric type key, e.g. weight"),
    value: str = typer.Argument(..., help="Measured value"),
    config_path: str = typer.Option("config/config.yaml", help="Path to configuration file"),
) -> None:
    """
    Record a new measurement for a metric type.
    """
    try:
        number = float(value.strip())
    except ValueError:
        typer.echo(f"Error: {value!r} is not a valid number", err=True)
        raise typer.Exit(code=1) from None

    try:
        param_loader = init_config(config_path)
        metric_catalog = MetricCatalog()
        store = build_store(param_loader, metric_catalog)

        snapshot = store.append_entry(key, number)

        config = metric_catalog.get(key)
        metric = snapshot[config.key]
        typer.echo(
            f"Recorded {config.name}: {metric.current_value} {config.unit} "
            f"({len(metric.entries)} entries)"
        )

    except MetricsLedgerError as e:
        raise fail("Add", e) from e


@app.command()
def show(
    key: str = typer.Argument(..., help="Metric type key, e.g. weight"),
    config_path: str = typer.Option("config/config.yaml", help="Path to configuration file"),
) -> None:
    """
    Show current value, trend, statistics and recent entries for a metric.
    """
    try:
        param_loader = init_config(config_path)
        display = param_loader.get_display_config()
        metric_catalog = MetricCatalog()
        store = build_store(param_loader, metric_catalog)

        config = metric_catalog.get(key)
        metric = store.load_one(config.key)

        def fmt(number: float | None) -> str:
            return format_number(number, display.decimals, display.placeholder)

        typer.echo(f"{config.icon}  {config.name} ({config.unit})")

        if metric is None or not metric.entries:
            typer.echo(f"  Current value: {display.placeholder}")
            typer.echo("  No entries recorded yet")
            return

        typer.echo(f"  Current value: {metric.current_value} {config.unit}")
        typer.echo(f"  Last updated: {metric.last_updated}")

        trend = compute_trend(metric)
        if trend is not None:
            arrow = "▲" if trend.is_positive else "▼"
            typer.echo(f"  Change: {arrow} {fmt(trend.magnitude)}")

        stats = compute_statistics(metric)
        typer.echo(f"  Entries: {stats.count}")
        typer.echo(f"  Highest: {fmt(stats.maximum)}")
        typer.echo(f"  Lowest: {fmt(stats.minimum)}")
        typer.echo(f"  Average: {fmt(stats.mean)}")

        points = chart_series(metric, display.recent_limit)
        if len(points) > 1:
            typer.echo(f"\nProgress ({points[0].date} to {points[-1].date}):")
            typer.echo("  " + " → ".join(fmt(point.value) for point in points))

        typer.echo(f"\nRecent entries ({len(metric.entries)} total):")
        for entry in recent_entries(metric, display.recent_limit):
            typer.echo(f"  {entry.date} {entry.time}  {entry.value} {entry.unit}")

    except MetricsLedgerError as e:
        raise fail("Show", e) from e


@app.command()
def overview(
    config_path: str = typer.Option("config/config.yaml", help="Path to configuration file"),
) -> None:
    """
    Show every metric's current value with the snapshot-wide summary.
    """
    try:
        param_loader = init_config(config_path)
        display = param_loader.get_display_config()
        metric_catalog = MetricCatalog()
        store = build_store(param_loader, metric_catalog)

        snapshot = store.load_all()
        summary = summarize_overview(snapshot)

        typer.echo(f"Metrics tracked: {summary.tracked_metrics}")
        typer.echo(f"Total entries: {summary.total_entries}")
        typer.echo(f"Improving: {summary.improving_metrics}\n")

        for config in metric_catalog.list():
            metric = snapshot.get(config.key)
            current = metric.current_value if metric else None
            line = (
                f"{config.icon}  {config.name:<14} "
                f"{format_number(current, display.decimals, display.placeholder):>10} {config.unit}"
            )

            trend = compute_trend(metric)
            if trend is not None:
                arrow = "▲" if trend.is_positive else "▼"
                line += f"  {arrow} {format_number(trend.magnitude, display.decimals)}"

            if metric and metric.last_updated:
                line += f"  (last: {metric.last_updated})"

            typer.echo(line)

    except MetricsLedgerError as e:
        raise fail("Overview", e) from e


@app.command()
def export(
    config_path: str = typer.Option("config/config.yaml", help="Path to configuration file"),
) -> None:
    """
    Export every metric history to CSV and a summary to JSON.
    """
    try:
        param_loader = init_config(config_path)
        metric_catalog = MetricCatalog()
        store = build_store(param_loader, metric_catalog)

        snapshot = store.load_all()
        output_service = OutputService(param_loader.get_output_config(), metric_catalog)

        written = 0
        for config in metric_catalog.list():
            if output_service.write_history(config.key, snapshot.get(config.key)):
                written += 1

        summary_path = output_service.write_summary(snapshot)

        typer.echo(f"Exported {written} metric histories")
        typer.echo(f"Summary written to {summary_path}")

    except MetricsLedgerError as e:
        raise fail("Export", e) from e


if __name__ == "__main__":
    app()
