"""Date conversions between front matter text and the Micro.blog wire formats.

Front matter dates are wall-clock values without a timezone. Both wire formats
write those wall-clock fields as if they were already UTC; no timezone
conversion ever happens here.
"""

import datetime
import enum
import logging
import re
from typing import Any, Callable, Optional

from microblog_publisher.core.models import InvalidDateError

logger = logging.getLogger(__name__)

LOCAL_DATE_PATTERN = re.compile(
    r'^(\d{4})-(\d{2})-(\d{2})[ T](\d{2}):(\d{2})(?::(\d{2}))?$'
)


class DateFallback(str, enum.Enum):
    """What to do when a front matter date is missing or unparsable."""
    NOW = "now"
    RAISE = "raise"


class DateCodec:
    """Parses front matter dates and formats them for the wire."""

    def __init__(
        self,
        fallback: DateFallback = DateFallback.NOW,
        clock: Optional[Callable[[], datetime.datetime]] = None,
    ):
        """Initialize DateCodec.

        Args:
            fallback: Policy applied when a date cannot be parsed
            clock: Returns the current local time (default: datetime.now)
        """
        self.fallback = DateFallback(fallback)
        self.clock = clock or datetime.datetime.now

    def parse_local(self, value: Any) -> datetime.datetime:
        """Build a naive datetime from the literal fields of a date string.

        Accepts ``YYYY-MM-DD HH:MM``, optionally with seconds and with ``T``
        as the separator.

        Args:
            value: Raw front matter value (usually a string, may be None)

        Returns:
            Naive datetime carrying the literal wall-clock fields

        Raises:
            InvalidDateError: If the value does not match and the fallback
                policy is RAISE
        """
        text = "" if value is None else str(value).strip()
        match = LOCAL_DATE_PATTERN.match(text)
        if match:
            year, month, day, hour, minute, second = match.groups()
            try:
                return datetime.datetime(
                    int(year), int(month), int(day),
                    int(hour), int(minute), int(second or 0),
                )
            except ValueError as e:
                if self.fallback is DateFallback.RAISE:
                    raise InvalidDateError(f"Invalid date {text!r}: {e}") from e

        if self.fallback is DateFallback.RAISE:
            raise InvalidDateError(f"Unrecognized date {text!r}, expected YYYY-MM-DD HH:MM")

        now = self.clock().replace(microsecond=0)
        logger.warning("Date %r not recognized, using current time %s", text, now)
        return now


def to_utc_iso(value: datetime.datetime) -> str:
    """Format wall-clock fields as ``YYYY-MM-DDTHH:MM:SSZ``."""
    return value.strftime('%Y-%m-%dT%H:%M:%SZ')


def to_legacy_compact(value: datetime.datetime) -> str:
    """Format wall-clock fields as the XML-RPC ``YYYYMMDDTHH:MM:SS`` form."""
    return value.strftime('%Y%m%dT%H:%M:%S')


def to_local_display(value: datetime.datetime) -> str:
    """Format as ``YYYY-MM-DD HH:MM`` for writing back into front matter."""
    return value.strftime('%Y-%m-%d %H:%M')
