"""History windows over a metric's entries for list and chart views."""

from pydantic import BaseModel, ConfigDict

from body_metrics_ledger.domain.metric import Entry, Metric


class ChartPoint(BaseModel):
    """One point of a chart series."""

    date: str
    value: float

    model_config = ConfigDict(frozen=True)


def recent_entries(metric: Metric | None, limit: int = 10) -> list[Entry]:
    """Return up to ``limit`` entries, newest first."""
    if metric is None:
        return []
    return list(metric.entries[:limit])


def chart_series(metric: Metric | None, limit: int = 10) -> list[ChartPoint]:
    """
    Return up to ``limit`` of the newest entries in insertion order.

    The window is taken from the front of the history and then reversed, so
    the oldest point in the window comes first. Order comes from insertion,
    never from the display date strings.
    """
    return [
        ChartPoint(date=entry.date, value=entry.value)
        for entry in reversed(recent_entries(metric, limit))
    ]
