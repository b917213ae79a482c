"""
Metric store service.

Owns the authoritative mapping from metric type to metric, persists it as a
single document, and appends entries with derived fields kept in sync.
"""

import logging
import math
import numbers
from collections.abc import Callable
from datetime import datetime
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from body_metrics_ledger.domain.catalog import MetricCatalog
from body_metrics_ledger.domain.metric import Entry, Metric, MetricData, MetricTypeKey
from body_metrics_ledger.infrastructure.storage.json_document import JSONDocumentStorage
from body_metrics_ledger.utils.exceptions import (
    InvalidValueError,
    StorageReadError,
    ValidationError,
)
from body_metrics_ledger.utils.parameters import CaptureConfig
from body_metrics_ledger.utils.timezone_utils import (
    format_capture,
    get_timezone,
    make_timezone_aware,
    now_in_timezone,
)

logger = logging.getLogger(__name__)


class MetricStore:
    """
    Store for per-type metric histories.

    The snapshot is read from storage on first access and kept resident.
    Every append rewrites the complete document. The store does no locking:
    callers must not issue overlapping appends against the same storage.

    Document keys that are not in the catalog are preserved verbatim and
    written back on every save, but never appear in returned snapshots.
    """

    def __init__(
        self,
        catalog: MetricCatalog,
        storage: JSONDocumentStorage,
        capture_config: CaptureConfig | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """
        Initialize metric store.

        Args:
            catalog: Metric catalog used to validate keys and copy units.
            storage: Document storage backend.
            capture_config: Capture timestamp configuration.
            clock: Optional callable returning the capture moment.
        """
        self.catalog = catalog
        self.storage = storage
        self.capture_config = capture_config or CaptureConfig()

        get_timezone(self.capture_config.timezone)
        self._clock = clock or (lambda: now_in_timezone(self.capture_config.timezone))

        self._snapshot: MetricData | None = None
        self._preserved: dict[str, Any] = {}

    def _load(self) -> tuple[MetricData, dict[str, Any]]:
        """
        Read and validate the persisted document.

        Returns:
            Tuple of (snapshot, preserved non-catalog entries).

        Raises:
            StorageReadError: If the document is unreadable or any metric is invalid.
        """
        document = self.storage.read()

        snapshot: MetricData = {}
        preserved: dict[str, Any] = {}

        for raw_key, raw_metric in (document or {}).items():
            try:
                key = self.catalog.resolve(raw_key)
            except ValidationError:
                logger.warning(f"Preserving metric {raw_key!r} that is not in the catalog")
                preserved[raw_key] = raw_metric
                continue

            try:
                snapshot[key] = Metric.model_validate(raw_metric)
            except PydanticValidationError as e:
                raise StorageReadError(f"Invalid data for metric {raw_key!r}: {e}") from e

        logger.info(f"Loaded {len(snapshot)} metrics from storage")
        return snapshot, preserved

    def _to_document(self, snapshot: MetricData) -> dict[str, Any]:
        """Build the persisted document for a snapshot."""
        document: dict[str, Any] = {}

        for key in self.catalog.keys():
            if key in snapshot:
                document[key.value] = snapshot[key].to_dict()

        document.update(self._preserved)
        return document

    def _validate_value(self, value: object) -> float:
        """
        Validate a measurement value.

        Raises:
            InvalidValueError: If the value is not a finite real number.
        """
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            raise InvalidValueError(f"Metric value must be a number, got {value!r}")

        try:
            number = float(value)
        except (OverflowError, TypeError, ValueError) as e:
            raise InvalidValueError(f"Metric value is not representable: {value!r}") from e

        if not math.isfinite(number):
            raise InvalidValueError(f"Metric value must be finite, got {value!r}")

        return number

    def load_all(self) -> MetricData:
        """
        Return the full current snapshot.

        Returns:
            Mapping of metric type to metric; empty on first use.

        Raises:
            StorageReadError: If the persisted document is unreadable or corrupt.
        """
        if self._snapshot is None:
            self._snapshot, self._preserved = self._load()
        return dict(self._snapshot)

    def load_one(self, key: MetricTypeKey | str) -> Metric | None:
        """
        Return the metric for one type, or None if it was never recorded.

        Raises:
            ValidationError: If the key is not in the catalog.
            StorageReadError: If the persisted document is unreadable or corrupt.
        """
        resolved = self.catalog.resolve(key)
        return self.load_all().get(resolved)

    def append_entry(self, key: MetricTypeKey | str, value: float) -> MetricData:
        """
        Record a new entry and persist the updated snapshot.

        The entry is placed at the front of the metric's history and the
        metric's current value and last-updated stamp are taken from it.
        Other metrics are carried over unchanged.

        Args:
            key: Metric type to record.
            value: Measured value, already parsed by the caller.

        Returns:
            Updated snapshot.

        Raises:
            ValidationError: If the key is not in the catalog.
            InvalidValueError: If the value is not a finite number.
            StorageReadError: If the existing document cannot be loaded.
            StorageWriteError: If persisting fails; the resident snapshot is left as it was.
        """
        resolved = self.catalog.resolve(key)
        number = self._validate_value(value)

        current = self.load_all()
        config = self.catalog.get(resolved)

        date_str, time_str = format_capture(
            make_timezone_aware(self._clock(), self.capture_config.timezone),
            self.capture_config.date_format,
            self.capture_config.time_format,
        )
        entry = Entry(value=number, unit=config.unit, date=date_str, time=time_str)

        metric = current.get(resolved, Metric())
        updated = dict(current)
        updated[resolved] = metric.prepend(entry, self.capture_config.last_updated_format)

        self.storage.write(self._to_document(updated))
        self._snapshot = updated

        logger.info(
            f"Recorded {resolved.value}={number} {config.unit} "
            f"({len(updated[resolved].entries)} entries)"
        )
        return dict(updated)
