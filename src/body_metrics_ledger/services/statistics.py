"""
Statistics aggregation over metric entries.

All aggregates are computed from unrounded values. Rounding happens only in
the formatting helpers, so repeated display never compounds rounding error.
"""

from collections.abc import Mapping, Sequence

from pydantic import BaseModel, ConfigDict

from body_metrics_ledger.domain.metric import Entry, Metric, MetricTypeKey
from body_metrics_ledger.services.trends import is_improving


class MetricStatistics(BaseModel):
    """Aggregates over all entries of one metric. Every field is None when empty."""

    count: int | None = None
    maximum: float | None = None
    minimum: float | None = None
    mean: float | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def is_empty(self) -> bool:
        """True when there were no entries to aggregate."""
        return self.count is None


class OverviewSummary(BaseModel):
    """Snapshot-wide counts shown on the overview."""

    tracked_metrics: int
    total_entries: int
    improving_metrics: int

    model_config = ConfigDict(frozen=True)


def compute_statistics(source: Metric | Sequence[Entry] | None) -> MetricStatistics:
    """
    Compute count, maximum, minimum and mean of entry values.

    Args:
        source: A metric, its entries, or None for a metric never recorded.

    Returns:
        Statistics; all fields are None if there are no entries.
    """
    if source is None:
        return MetricStatistics()

    if isinstance(source, Metric):
        values = source.values
    else:
        values = [entry.value for entry in source]

    if not values:
        return MetricStatistics()

    return MetricStatistics(
        count=len(values),
        maximum=max(values),
        minimum=min(values),
        mean=sum(values) / len(values),
    )


def summarize_overview(snapshot: Mapping[MetricTypeKey, Metric]) -> OverviewSummary:
    """
    Summarize a snapshot for the overview.

    Args:
        snapshot: Mapping of metric type to metric.

    Returns:
        Number of metrics with data, total entries, and metrics whose newest
        entry is strictly above the previous one.
    """
    metrics = list(snapshot.values())

    return OverviewSummary(
        tracked_metrics=sum(1 for metric in metrics if metric.entries),
        total_entries=sum(len(metric.entries) for metric in metrics),
        improving_metrics=sum(1 for metric in metrics if is_improving(metric)),
    )


def format_number(value: float | None, decimals: int = 1, placeholder: str = "--") -> str:
    """Format a value for display, using ``placeholder`` when absent."""
    if value is None:
        return placeholder
    return f"{value:.{decimals}f}"
