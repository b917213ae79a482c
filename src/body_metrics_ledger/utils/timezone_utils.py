"""
Timezone and datetime utilities.

Provides the capture clock and display formatting for entry timestamps.
"""

from datetime import datetime

import pytz

from body_metrics_ledger.utils.exceptions import ConfigurationError


def get_timezone(timezone_str: str) -> pytz.BaseTzInfo:
    """
    Resolve a timezone name.

    Args:
        timezone_str: Timezone string (e.g., "America/Santiago").

    Returns:
        pytz timezone object.

    Raises:
        ConfigurationError: If the timezone name is unknown.
    """
    try:
        return pytz.timezone(timezone_str)
    except pytz.UnknownTimeZoneError as e:
        raise ConfigurationError(f"Unknown timezone: {timezone_str}") from e


def now_in_timezone(timezone_str: str = "UTC") -> datetime:
    """Return the current moment as a timezone-aware datetime."""
    return datetime.now(pytz.utc).astimezone(get_timezone(timezone_str))


def make_timezone_aware(dt: datetime, timezone_str: str = "UTC") -> datetime:
    """
    Make a datetime object timezone-aware.

    Naive datetimes are assumed to already be in ``timezone_str``.

    Args:
        dt: Datetime object (may be naive or aware).
        timezone_str: Timezone string.

    Returns:
        Timezone-aware datetime object.
    """
    tz = get_timezone(timezone_str)

    if dt.tzinfo is None:
        return tz.localize(dt)
    return dt.astimezone(tz)


def format_capture(dt: datetime, date_format: str, time_format: str) -> tuple[str, str]:
    """
    Format a capture moment into display date and time strings.

    Args:
        dt: Capture moment.
        date_format: strftime pattern for the date part.
        time_format: strftime pattern for the time part.

    Returns:
        Tuple of (date_string, time_string).
    """
    return dt.strftime(date_format), dt.strftime(time_format)
