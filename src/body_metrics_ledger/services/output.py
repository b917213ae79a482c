"""
Output service for exporting metric histories and summaries.

Writes per-metric history to CSV and a statistics summary to JSON.
"""

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import pandas as pd

from body_metrics_ledger.domain.catalog import MetricCatalog
from body_metrics_ledger.domain.metric import Metric, MetricTypeKey
from body_metrics_ledger.services.statistics import compute_statistics, summarize_overview
from body_metrics_ledger.services.trends import compute_trend
from body_metrics_ledger.utils.parameters import OutputConfig

logger = logging.getLogger(__name__)

HISTORY_COLUMNS = ["position", "value", "unit", "date", "time"]


class OutputService:
    """
    Service for writing metric data to output files.

    History rows keep the stored newest-first order; ``position`` 0 is the
    newest entry.
    """

    def __init__(self, config: OutputConfig, catalog: MetricCatalog) -> None:
        """
        Initialize output service.

        Args:
            config: Output configuration.
            catalog: Metric catalog, used for ordering and labels.
        """
        self.config = config
        self.catalog = catalog
        self.output_dir = Path(config.dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def history_frame(self, metric: Metric | None) -> pd.DataFrame:
        """
        Build a DataFrame of a metric's entries.

        Args:
            metric: Metric to tabulate, or None for a metric never recorded.

        Returns:
            DataFrame with one row per entry, newest first.
        """
        rows = [
            {"position": index, **entry.model_dump()}
            for index, entry in enumerate(metric.entries if metric else ())
        ]
        return pd.DataFrame(rows, columns=HISTORY_COLUMNS)

    def write_history(self, key: MetricTypeKey, metric: Metric | None) -> Path | None:
        """
        Write one metric's history to CSV.

        Args:
            key: Metric type.
            metric: Metric to export.

        Returns:
            Path of the written file, or None if the metric has no entries.
        """
        if metric is None or not metric.entries:
            logger.warning(f"No entries to write for {key.value}")
            return None

        csv_path = self.output_dir / self.config.files.history_csv.format(metric=key.value)

        df = self.history_frame(metric)
        df.to_csv(csv_path, index=False, encoding="utf-8")

        logger.info(f"Wrote {len(df)} {key.value} entries to {csv_path}")
        return csv_path

    def build_summary(self, snapshot: Mapping[MetricTypeKey, Metric]) -> dict[str, Any]:
        """
        Build the summary document for a snapshot.

        Args:
            snapshot: Mapping of metric type to metric.

        Returns:
            Dictionary with the overview and per-metric statistics and trends.
        """
        metrics: list[dict[str, Any]] = []

        for config in self.catalog.list():
            metric = snapshot.get(config.key)
            trend = compute_trend(metric)

            metrics.append(
                {
                    "key": config.key.value,
                    "name": config.name,
                    "unit": config.unit,
                    "current_value": metric.current_value if metric else None,
                    "last_updated": metric.last_updated if metric else None,
                    "statistics": compute_statistics(metric).model_dump(),
                    "trend": trend.model_dump() if trend else None,
                }
            )

        return {
            "overview": summarize_overview(snapshot).model_dump(),
            "metrics": metrics,
        }

    def write_summary(self, snapshot: Mapping[MetricTypeKey, Metric]) -> Path:
        """
        Write the snapshot summary to JSON.

        Args:
            snapshot: Mapping of metric type to metric.

        Returns:
            Path of the written file.
        """
        summary_path = self.output_dir / self.config.files.summary_json

        with open(summary_path, "w", encoding="utf-8") as f:
            json.dump(self.build_summary(snapshot), f, indent=2, ensure_ascii=False)

        logger.info(f"Wrote metrics summary to {summary_path}")
        return summary_path
