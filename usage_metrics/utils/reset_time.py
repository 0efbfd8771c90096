"""Reset countdown arithmetic."""

import logging
import re
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

logger = logging.getLogger("usage_metrics.reset_time")

# full-date "T" full-time with a mandatory offset
RFC3339_PATTERN = re.compile(
    r"(\d{4}-\d{2}-\d{2})[Tt ](\d{2}:\d{2}:\d{2}(?:\.\d+)?)([Zz]|[+-]\d{2}:\d{2})"
)


class ResetUnit(Enum):
    """Unit of a reset countdown gauge."""

    SECONDS = "seconds"
    MINUTES = "minutes"

    @property
    def otel_unit(self) -> str:
        """UCUM unit string for the gauge."""
        return {
            ResetUnit.SECONDS: "s",
            ResetUnit.MINUTES: "min"
        }[self]

    def from_seconds(self, seconds: float) -> float:
        if self is ResetUnit.MINUTES:
            return seconds / 60.0
        return seconds


def parse_timestamp(value: str) -> datetime:
    """
    Parse an RFC 3339 timestamp.

    Args:
        value: Timestamp such as "2025-01-01T12:00:00.123456+00:00" or "...Z"

    Returns:
        datetime: Timezone-aware datetime

    Raises:
        ValueError: If the string is not a full RFC 3339 date-time with offset
    """
    match = RFC3339_PATTERN.fullmatch(value.strip())
    if match is None:
        raise ValueError(f"Not an RFC 3339 timestamp: {value!r}")

    day, clock, offset = match.groups()
    if offset in ("Z", "z"):
        offset = "+00:00"
    return datetime.fromisoformat(f"{day}T{clock}{offset}")


def time_until(
    reset_at: Optional[str],
    now: datetime,
    unit: ResetUnit = ResetUnit.SECONDS
) -> Optional[float]:
    """
    Compute the remaining time until a reset timestamp.

    Args:
        reset_at: RFC 3339 reset timestamp, or None
        now: Current instant (timezone-aware)
        unit: Unit of the returned countdown

    Returns:
        Optional[float]: Non-negative countdown, or None when reset_at is
            absent or unparsable
    """
    if reset_at is None:
        return None

    try:
        reset = parse_timestamp(reset_at)
    except (TypeError, ValueError):
        logger.debug(f"Ignoring unparsable reset timestamp: {reset_at!r}")
        return None

    remaining = (reset - now).total_seconds()
    return unit.from_seconds(max(remaining, 0.0))


def date_reset_at(reset_date: Optional[str]) -> Optional[str]:
    """Turn a YYYY-MM-DD reset date into a midnight-UTC RFC 3339 timestamp."""
    if not reset_date:
        return None
    try:
        day = datetime.strptime(reset_date.strip(), "%Y-%m-%d")
    except ValueError:
        logger.debug(f"Ignoring unparsable reset date: {reset_date!r}")
        return None
    return day.replace(tzinfo=timezone.utc).isoformat()
