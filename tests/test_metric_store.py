"""Unit tests for the metric store."""

import json
from collections.abc import Iterator
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any

import pytest
import pytz
from pydantic import ValidationError as PydanticValidationError

from body_metrics_ledger.domain.catalog import MetricCatalog
from body_metrics_ledger.domain.metric import MetricTypeKey
from body_metrics_ledger.infrastructure.storage.json_document import JSONDocumentStorage
from body_metrics_ledger.services.metric_store import MetricStore
from body_metrics_ledger.utils.exceptions import (
    InvalidValueError,
    StorageReadError,
    StorageWriteError,
    ValidationError,
)
from body_metrics_ledger.utils.parameters import CaptureConfig, StorageConfig


class RecordingStorage(JSONDocumentStorage):
    """JSON storage that counts writes."""

    def __init__(self, config: StorageConfig) -> None:
        super().__init__(config)
        self.writes = 0

    def write(self, document: dict[str, Any]) -> None:
        self.writes += 1
        super().write(document)


class FailingStorage(JSONDocumentStorage):
    """JSON storage whose writes always fail."""

    def write(self, document: dict[str, Any]) -> None:
        raise StorageWriteError("disk full")


def make_clock(start: datetime) -> Iterator[datetime]:
    """Yield capture moments one minute apart."""
    current = start
    while True:
        yield current
        current += timedelta(minutes=1)


def make_store(path: Path, storage_cls: type[JSONDocumentStorage] = RecordingStorage) -> MetricStore:
    """Create a store with a deterministic clock."""
    ticks = make_clock(datetime(2024, 1, 15, 10, 30, 0, tzinfo=pytz.UTC))
    return MetricStore(
        MetricCatalog(),
        storage_cls(StorageConfig(path=str(path))),
        CaptureConfig(
            timezone="UTC",
            date_format="%Y-%m-%d",
            time_format="%H:%M",
            last_updated_format="{date} {time}",
        ),
        clock=lambda: next(ticks),
    )


def test_first_use_is_empty(tmp_path: Path) -> None:
    """Test that a store without persisted state returns an empty snapshot."""
    store = make_store(tmp_path / "metrics.json")

    snapshot = store.load_all()

    if snapshot != {}:
        raise AssertionError(f"Expected empty snapshot, got {snapshot}")

    if store.load_one(MetricTypeKey.WEIGHT) is not None:
        raise AssertionError("Expected no weight metric on first use")


def test_append_prepends_and_updates_current_value(tmp_path: Path) -> None:
    """Test newest-first ordering and current value after each append."""
    store = make_store(tmp_path / "metrics.json")
    values = [70.0, 72.5, 68.0, 69.25]

    for value in values:
        snapshot = store.append_entry(MetricTypeKey.WEIGHT, value)
        metric = snapshot[MetricTypeKey.WEIGHT]

        if metric.current_value != metric.entries[0].value:
            raise AssertionError("currentValue must equal the newest entry value")
        if metric.entries[0].value != value:
            raise AssertionError(f"Expected newest entry {value}, got {metric.entries[0].value}")

    metric = store.load_one("weight")

    if metric is None:
        raise AssertionError("Expected weight metric")
    if len(metric.entries) != len(values):
        raise AssertionError(f"Expected {len(values)} entries, got {len(metric.entries)}")
    if metric.values != list(reversed(values)):
        raise AssertionError(f"Expected reverse insertion order, got {metric.values}")
    if metric.entries[-1].value != values[0]:
        raise AssertionError("Expected the first appended entry at the end")


def test_entry_copies_unit_and_capture_time(tmp_path: Path) -> None:
    """Test entry unit, date, time and lastUpdated derivation."""
    store = make_store(tmp_path / "metrics.json")

    store.append_entry(MetricTypeKey.WATER_INTAKE, 1.5)
    snapshot = store.append_entry(MetricTypeKey.WATER_INTAKE, 2)

    metric = snapshot[MetricTypeKey.WATER_INTAKE]
    newest = metric.entries[0]

    if newest.unit != "L":
        raise AssertionError(f"Expected unit 'L', got {newest.unit!r}")
    if newest.value != 2.0:
        raise AssertionError(f"Expected value 2.0, got {newest.value}")
    if (newest.date, newest.time) != ("2024-01-15", "10:31"):
        raise AssertionError(f"Unexpected capture stamp {newest.date} {newest.time}")
    if metric.last_updated != "2024-01-15 10:31":
        raise AssertionError(f"Unexpected lastUpdated {metric.last_updated!r}")


def test_append_isolates_other_metrics(tmp_path: Path) -> None:
    """Test that appending to one metric leaves the others untouched."""
    store = make_store(tmp_path / "metrics.json")

    before = store.append_entry(MetricTypeKey.WAIST, 32.0)
    after = store.append_entry(MetricTypeKey.WEIGHT, 80.0)

    if after[MetricTypeKey.WAIST] is not before[MetricTypeKey.WAIST]:
        raise AssertionError("Expected waist metric to be carried over unchanged")
    if len(after[MetricTypeKey.WAIST].entries) != 1:
        raise AssertionError("Waist entries changed after weight append")


def test_round_trip_through_storage(tmp_path: Path) -> None:
    """Test that a fresh store reads back what another store appended."""
    path = tmp_path / "metrics.json"
    store = make_store(path)
    store.append_entry(MetricTypeKey.STEPS, 8000)
    store.append_entry(MetricTypeKey.STEPS, 10500)

    reloaded = make_store(path).load_one(MetricTypeKey.STEPS)

    if reloaded is None:
        raise AssertionError("Expected steps metric after reload")
    if reloaded.values != [10500.0, 8000.0]:
        raise AssertionError(f"Unexpected reloaded values {reloaded.values}")
    if reloaded.current_value != 10500.0:
        raise AssertionError(f"Unexpected reloaded currentValue {reloaded.current_value}")

    document = json.loads(path.read_text(encoding="utf-8"))
    steps = document["steps"]

    if set(steps) != {"entries", "currentValue", "lastUpdated"}:
        raise AssertionError(f"Unexpected persisted keys {sorted(steps)}")
    if set(steps["entries"][0]) != {"value", "unit", "date", "time"}:
        raise AssertionError(f"Unexpected entry keys {sorted(steps['entries'][0])}")


@pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf"), "72.5", None, True])
def test_invalid_value_leaves_storage_unchanged(tmp_path: Path, value: object) -> None:
    """Test that non-finite or unparsed values are rejected without a write."""
    path = tmp_path / "metrics.json"
    store = make_store(path)
    store.append_entry(MetricTypeKey.WEIGHT, 75.0)
    before = path.read_bytes()

    with pytest.raises(InvalidValueError):
        store.append_entry(MetricTypeKey.WEIGHT, value)  # type: ignore[arg-type]

    if path.read_bytes() != before:
        raise AssertionError("Persisted document changed after invalid value")
    if store.load_one(MetricTypeKey.WEIGHT).values != [75.0]:  # type: ignore[union-attr]
        raise AssertionError("Resident weight metric changed after invalid value")


def test_unknown_key_performs_no_write(tmp_path: Path) -> None:
    """Test that an unknown key is rejected before any persistence."""
    store = make_store(tmp_path / "metrics.json")

    with pytest.raises(ValidationError):
        store.append_entry("neck", 15.0)

    with pytest.raises(ValidationError):
        store.load_one("neck")

    if store.storage.writes != 0:  # type: ignore[attr-defined]
        raise AssertionError(f"Expected no writes, got {store.storage.writes}")  # type: ignore[attr-defined]
    if (tmp_path / "metrics.json").exists():
        raise AssertionError("No document should be created for an unknown key")


def test_write_failure_keeps_prior_snapshot(tmp_path: Path) -> None:
    """Test that a failed write leaves the resident snapshot unchanged."""
    store = make_store(tmp_path / "metrics.json", storage_cls=FailingStorage)

    with pytest.raises(StorageWriteError):
        store.append_entry(MetricTypeKey.HIP, 38.0)

    if store.load_all() != {}:
        raise AssertionError("Snapshot must not include the unsaved entry")


def test_corrupt_document_raises_read_error(tmp_path: Path) -> None:
    """Test that an unparsable document is a read failure."""
    path = tmp_path / "metrics.json"
    path.write_text('{"weight": {"entries": [', encoding="utf-8")

    store = make_store(path)

    with pytest.raises(StorageReadError):
        store.load_all()

    with pytest.raises(StorageReadError):
        store.append_entry(MetricTypeKey.WEIGHT, 70.0)


def test_inconsistent_current_value_raises_read_error(tmp_path: Path) -> None:
    """Test that a currentValue not matching the newest entry is corrupt."""
    path = tmp_path / "metrics.json"
    document = {
        "weight": {
            "entries": [
                {"value": 70.0, "unit": "kg", "date": "2024-01-15", "time": "10:30"},
            ],
            "currentValue": 71.0,
            "lastUpdated": "2024-01-15 10:30",
        }
    }
    path.write_text(json.dumps(document), encoding="utf-8")

    with pytest.raises(StorageReadError):
        make_store(path).load_all()


def test_unknown_document_keys_are_preserved(tmp_path: Path) -> None:
    """Test that metrics no longer in the catalog survive a save."""
    path = tmp_path / "metrics.json"
    legacy = {
        "entries": [{"value": 15.0, "unit": "in", "date": "2023-12-01", "time": "09:00"}],
        "currentValue": 15.0,
        "lastUpdated": "2023-12-01 09:00",
    }
    path.write_text(json.dumps({"neck": legacy}), encoding="utf-8")

    store = make_store(path)
    snapshot = store.load_all()

    if snapshot != {}:
        raise AssertionError(f"Expected non-catalog key to be hidden, got {snapshot}")

    store.append_entry(MetricTypeKey.CHEST, 40.0)
    document = json.loads(path.read_text(encoding="utf-8"))

    if document.get("neck") != legacy:
        raise AssertionError("Expected non-catalog metric to be written back unchanged")
    if "chest" not in document:
        raise AssertionError("Expected chest metric in persisted document")


def test_bad_last_updated_format_never_reaches_store() -> None:
    """Test that the capture config refuses templates the store could not format."""
    with pytest.raises(PydanticValidationError):
        CaptureConfig(last_updated_format="{when}")
