"""
Metric domain models and persisted schema.

This module defines the metric type keys, the immutable entry record, and the
per-type metric aggregate whose entries are kept newest-first.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class MetricTypeKey(str, Enum):
    """Enumeration of supported metric types, in catalog order."""

    WEIGHT = "weight"
    CHEST = "chest"
    SHOULDERS = "shoulders"
    WAIST = "waist"
    THIGH = "thigh"
    HIP = "hip"
    BODY_FAT = "bodyFat"
    BICEP = "bicep"
    WATER_INTAKE = "waterIntake"
    STEPS = "steps"


class Entry(BaseModel):
    """
    One recorded observation for a metric type.

    The unit is copied from the catalog so the entry stays self-describing.
    Date and time are display strings captured at insertion and are not
    meant to be sorted.
    """

    value: float = Field(strict=True, allow_inf_nan=False, description="Measured quantity")
    unit: str = Field(description="Display unit at capture time")
    date: str = Field(description="Capture calendar date (display formatted)")
    time: str = Field(description="Capture clock time (display formatted)")

    model_config = ConfigDict(frozen=True, extra="forbid")


class Metric(BaseModel):
    """
    Per-type aggregate of entries.

    ``entries[0]`` is always the most recently appended entry and
    ``current_value`` mirrors its value. An empty metric has neither a current
    value nor a last-updated stamp.
    """

    entries: tuple[Entry, ...] = Field(default=(), description="Entries, newest first")
    current_value: float | None = Field(None, alias="currentValue")
    last_updated: str | None = Field(None, alias="lastUpdated")

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    @model_validator(mode="after")
    def _check_head(self) -> "Metric":
        if self.entries:
            if self.current_value != self.entries[0].value:
                raise ValueError(
                    f"currentValue {self.current_value!r} does not match newest entry "
                    f"value {self.entries[0].value!r}"
                )
        elif self.current_value is not None or self.last_updated is not None:
            raise ValueError("Metric without entries cannot carry currentValue or lastUpdated")
        return self

    @property
    def values(self) -> list[float]:
        """Entry values, newest first."""
        return [entry.value for entry in self.entries]

    def prepend(self, entry: Entry, last_updated_format: str = "{date} {time}") -> "Metric":
        """
        Return a new metric with ``entry`` inserted at the front.

        Args:
            entry: Newly captured entry.
            last_updated_format: Template combining the entry's ``date`` and ``time``.

        Returns:
            New metric; this instance is left unchanged.
        """
        return Metric(
            entries=(entry, *self.entries),
            current_value=entry.value,
            last_updated=last_updated_format.format(date=entry.date, time=entry.time),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to the persisted document representation."""
        return self.model_dump(by_alias=True, mode="json")


MetricData = dict[MetricTypeKey, Metric]
