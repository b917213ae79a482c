"""Custom exceptions for the body metrics ledger."""


class MetricsLedgerError(Exception):
    """Base exception for all body metrics ledger errors."""

    pass


class ConfigurationError(MetricsLedgerError):
    """Raised when there is a configuration error."""

    pass


class StorageReadError(MetricsLedgerError):
    """Raised when the persisted metrics document is unreadable or corrupt."""

    pass


class StorageWriteError(MetricsLedgerError):
    """Raised when the metrics document could not be persisted."""

    pass


class ValidationError(MetricsLedgerError):
    """Raised when an unknown metric type key is supplied."""

    pass


class InvalidValueError(MetricsLedgerError):
    """Raised when a measurement value is not a finite number."""

    pass
