from datetime import datetime, timezone
from typing import Dict, Optional

from dateutil import parser as dateutil_parser


# Zone abbreviations dateutil does not resolve on its own, in seconds east of UTC
TZINFOS: Dict[str, int] = {
    "UT": 0,
    "UTC": 0,
    "GMT": 0,
    "Z": 0,
    "EST": -5 * 3600,
    "EDT": -4 * 3600,
    "CST": -6 * 3600,
    "CDT": -5 * 3600,
    "MST": -7 * 3600,
    "MDT": -6 * 3600,
    "PST": -8 * 3600,
    "PDT": -7 * 3600,
}


# Missing date parts are filled from here instead of from today's date
DEFAULT_DATE = datetime(1970, 1, 1)


class DateParseError(Exception):
    pass


def parse_date(value: Optional[str]) -> datetime:
    """Parse RFC 822, ISO 8601 and other common date encodings"""
    if value is None or not value.strip():
        raise DateParseError("Empty date")
    try:
        return dateutil_parser.parse(value.strip(), default=DEFAULT_DATE, tzinfos=TZINFOS)
    except (ValueError, OverflowError) as exc:
        raise DateParseError(f"Unparseable date {value!r}: {exc}") from exc


def normalize_date(value: Optional[str], utc: bool = False) -> str:
    """Render a feed date as YYYY-MM-DDTHH:MM:SS+HH:MM.

    With `utc`, the instant is converted to UTC and naive input is read as
    UTC. Otherwise the offset written in the source is kept and naive input
    is read in the local zone.
    """
    dt = parse_date(value)
    try:
        if utc:
            if dt.tzinfo is None:
                dt = dt.replace(tzinfo=timezone.utc)
            else:
                dt = dt.astimezone(timezone.utc)
        elif dt.tzinfo is None:
            dt = dt.astimezone()
        return dt.isoformat(timespec="seconds")
    except (ValueError, OverflowError) as exc:
        # e.g. an offset of a day or more, which datetime cannot represent
        raise DateParseError(f"Unrepresentable date {value!r}: {exc}") from exc
