"""
Metric catalog: the fixed, ordered table of supported metric types.

The catalog is built once at startup and passed explicitly to the store and
to presentation code.
"""

from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict

from body_metrics_ledger.domain.metric import MetricTypeKey
from body_metrics_ledger.utils.exceptions import ValidationError


class MetricConfig(BaseModel):
    """Immutable display metadata for one metric type."""

    key: MetricTypeKey
    name: str
    unit: str
    icon: str
    color: str

    model_config = ConfigDict(frozen=True)


DEFAULT_METRIC_CONFIGS: tuple[MetricConfig, ...] = (
    MetricConfig(key=MetricTypeKey.WEIGHT, name="Weight", unit="kg", icon="⚖️", color="#3B82F6"),
    MetricConfig(key=MetricTypeKey.CHEST, name="Chest", unit="in", icon="💪", color="#10B981"),
    MetricConfig(
        key=MetricTypeKey.SHOULDERS, name="Shoulders", unit="in", icon="🏋️", color="#F59E0B"
    ),
    MetricConfig(key=MetricTypeKey.WAIST, name="Waist", unit="in", icon="📏", color="#EF4444"),
    MetricConfig(key=MetricTypeKey.THIGH, name="Thigh", unit="in", icon="🦵", color="#8B5CF6"),
    MetricConfig(key=MetricTypeKey.HIP, name="Hip", unit="in", icon="📐", color="#EC4899"),
    MetricConfig(key=MetricTypeKey.BODY_FAT, name="Body Fat", unit="%", icon="📊", color="#06B6D4"),
    MetricConfig(key=MetricTypeKey.BICEP, name="Bicep", unit="in", icon="💪", color="#84CC16"),
    MetricConfig(
        key=MetricTypeKey.WATER_INTAKE, name="Water Intake", unit="L", icon="💧", color="#0EA5E9"
    ),
    MetricConfig(key=MetricTypeKey.STEPS, name="Steps", unit="steps", icon="👣", color="#F97316"),
)


class MetricCatalog:
    """Ordered, read-only lookup over metric configurations."""

    def __init__(self, configs: Iterable[MetricConfig] = DEFAULT_METRIC_CONFIGS) -> None:
        self._configs = tuple(configs)
        self._by_key = {config.key: config for config in self._configs}

        if len(self._by_key) != len(self._configs):
            raise ValueError("Metric catalog contains duplicate keys")

    def list(self) -> tuple[MetricConfig, ...]:
        """Return every metric configuration in display order."""
        return self._configs

    def keys(self) -> tuple[MetricTypeKey, ...]:
        """Return every metric key in display order."""
        return tuple(config.key for config in self._configs)

    def contains(self, key: object) -> bool:
        """Check whether ``key`` names a cataloged metric type."""
        try:
            self.resolve(key)
        except ValidationError:
            return False
        return True

    def resolve(self, key: object) -> MetricTypeKey:
        """
        Resolve a key or its string value to a cataloged ``MetricTypeKey``.

        Raises:
            ValidationError: If the key is not part of the catalog.
        """
        if isinstance(key, MetricTypeKey):
            resolved = key
        elif isinstance(key, str):
            try:
                resolved = MetricTypeKey(key)
            except ValueError as e:
                raise ValidationError(f"Unknown metric type: {key!r}") from e
        else:
            raise ValidationError(f"Unknown metric type: {key!r}")

        if resolved not in self._by_key:
            raise ValidationError(f"Metric type not in catalog: {resolved.value!r}")
        return resolved

    def get(self, key: object) -> MetricConfig:
        """
        Get the configuration for a metric type.

        Raises:
            ValidationError: If the key is not part of the catalog.
        """
        return self._by_key[self.resolve(key)]
