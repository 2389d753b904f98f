"""
Date and timezone utilities.

Datapoint dates arrive as ISO-8601 strings, with or without a time part and
with or without an offset. They are normalised to timezone-aware UTC.
"""

from datetime import date, datetime
from typing import Any, Optional

import pytz


class DateUtils:
    """Utilities for date and timezone handling."""

    @staticmethod
    def parse_timestamp(value: Any) -> datetime:
        """
        Parse a datapoint date into a timezone-aware UTC datetime.

        Accepts ``datetime``, ``date`` and ISO-8601 strings such as
        ``2021-03-01``, ``2021-03-01T00:00:00`` or ``2021-03-01T00:00:00Z``.
        Naive values are taken to be UTC.

        Raises:
            ValueError: If the value cannot be parsed
        """
        if isinstance(value, datetime):
            parsed = value
        elif isinstance(value, date):
            parsed = datetime(value.year, value.month, value.day)
        elif isinstance(value, str) and value.strip():
            text = value.strip()
            if text.endswith("Z"):
                text = text[:-1] + "+00:00"
            try:
                parsed = datetime.fromisoformat(text)
            except ValueError:
                raise ValueError(f"Invalid date: {value!r}")
        else:
            raise ValueError(f"Invalid date: {value!r}")

        if parsed.tzinfo is None:
            return pytz.UTC.localize(parsed)
        return parsed.astimezone(pytz.UTC)

    @staticmethod
    def format_date(value: Optional[datetime]) -> Optional[str]:
        """
        Format a datapoint date for tabular output.

        Midnight timestamps become plain ``YYYY-MM-DD`` dates, anything else
        keeps its ISO timestamp.
        """
        if value is None:
            return None
        if (value.hour, value.minute, value.second, value.microsecond) == (0, 0, 0, 0):
            return value.date().isoformat()
        return value.isoformat()
