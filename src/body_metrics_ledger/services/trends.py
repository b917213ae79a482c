"""
Trend derivation over a metric's two most recent entries.

Trends are computed on demand and never stored.
"""

from pydantic import BaseModel, ConfigDict

from body_metrics_ledger.domain.metric import Metric


class Trend(BaseModel):
    """Change between the newest and the previous entry."""

    delta: float
    magnitude: float
    is_positive: bool

    model_config = ConfigDict(frozen=True)


def compute_trend(metric: Metric | None) -> Trend | None:
    """
    Compute the trend of a metric.

    A zero delta is classified as positive: an unchanged reading is reported
    with the upward indicator.

    Args:
        metric: Metric to inspect, or None if never recorded.

    Returns:
        Trend, or None if fewer than two entries exist.
    """
    if metric is None or len(metric.entries) < 2:
        return None

    delta = metric.entries[0].value - metric.entries[1].value
    return Trend(delta=delta, magnitude=abs(delta), is_positive=delta >= 0)


def is_improving(metric: Metric | None) -> bool:
    """
    Check whether the newest entry is strictly greater than the previous one.

    Unlike ``Trend.is_positive``, a tie does not count as improving.
    """
    if metric is None or len(metric.entries) < 2:
        return False
    return metric.entries[0].value > metric.entries[1].value
