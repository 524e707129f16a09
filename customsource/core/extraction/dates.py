"""Best-effort parsing of chapter upload dates."""

import re
from datetime import datetime, timedelta, timezone

DEFAULT_FORMATS: tuple[str, ...] = (
    '%Y-%m-%d',
    '%B %d, %Y',
    '%b %d, %Y',
    '%d/%m/%Y',
    '%Y/%m/%d',
)

RELATIVE_PATTERN = re.compile(r'(\d+)\s*(second|minute|min|hour|day|week|month|year)s?\s+ago', re.IGNORECASE)

RELATIVE_UNITS = {
    'second': timedelta(seconds=1),
    'minute': timedelta(minutes=1),
    'min': timedelta(minutes=1),
    'hour': timedelta(hours=1),
    'day': timedelta(days=1),
    'week': timedelta(weeks=1),
    'month': timedelta(days=30),
    'year': timedelta(days=365),
}


class DateParser:
    """Parses date strings into epoch milliseconds.

    Absolute dates are tried against ``formats`` in order and read as UTC.
    Phrases such as ``'3 days ago'`` are resolved against ``now``.
    Anything else yields 0.

    Attributes:
        formats: ``strptime`` formats tried in order

    """

    def __init__(self, formats: tuple[str, ...] | list[str] = DEFAULT_FORMATS):
        """Initialize the parser.

        Args:
            formats: ``strptime`` formats tried in order. Defaults to DEFAULT_FORMATS.

        """
        self.formats = tuple(formats)

    def parse(self, value: str | None, now: datetime | None = None) -> int:
        """Parse a date string.

        Args:
            value: Scraped date text
            now: Reference time for relative phrases. Defaults to the current UTC time.

        Returns:
            Epoch milliseconds, or 0 if the text is absent or not understood

        """
        if value is None or not value.strip():
            return 0
        text = value.strip()

        for fmt in self.formats:
            try:
                parsed = datetime.strptime(text, fmt).replace(tzinfo=timezone.utc)
            except ValueError:
                continue
            return int(parsed.timestamp() * 1000)

        match = RELATIVE_PATTERN.search(text)
        if match:
            amount = int(match.group(1))
            unit = RELATIVE_UNITS[match.group(2).lower()]
            reference = now or datetime.now(timezone.utc)
            return int((reference - amount * unit).timestamp() * 1000)

        return 0
