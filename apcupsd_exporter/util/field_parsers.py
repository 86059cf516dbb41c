"""Convert raw apcupsd status values into numbers, durations and timestamps."""

import re
from datetime import datetime, timedelta, timezone

from apcupsd_exporter.core.errors import FieldParseError
from apcupsd_exporter.protocol.constants import TIMESTAMP_LAYOUT

# Value used for XONBATT / XOFFBATT when the daemon reports none ("N/A").
ZERO_TIMESTAMP = datetime.min.replace(tzinfo=timezone.utc)

DURATION_UNITS = {
    "s": "seconds",
    "m": "minutes",
    "h": "hours",
}

_NUMBER_RE = re.compile(r"^[-+]?(\d+\.?\d*|\.\d+)$")

_TIMESTAMP_RE = re.compile(r"^\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2} [+-]\d{4}$")


def parse_magnitude(raw: str, key: str = "") -> float:
    """Parse values like "13.5 Volts" or "480 Watts", dropping the unit.

    An empty value is 0.0. A non-numeric leading token raises
    FieldParseError naming `key`.
    """
    if raw == "":
        return 0.0
    chunks = raw.split()
    token = chunks[0] if chunks else raw
    if not _NUMBER_RE.match(token):
        raise FieldParseError(key, raw, "not a number")
    return float(token)


def parse_duration(raw: str, key: str = "") -> timedelta:
    """Parse values like "30 seconds" or "1.25 minutes".

    Only the first letter of the unit is significant (s, m or h, any case).
    An empty value is a zero duration.
    """
    if raw == "":
        return timedelta(0)
    chunks = raw.split()
    if len(chunks) < 2:
        raise FieldParseError(key, raw, "missing unit")
    number, unit = chunks[0], chunks[1]
    if not _NUMBER_RE.match(number):
        raise FieldParseError(key, raw, "not a number")
    unit_name = DURATION_UNITS.get(unit[0].lower())
    if unit_name is None:
        raise FieldParseError(key, raw, f"unknown unit {unit!r}")
    try:
        return timedelta(**{unit_name: float(number)})
    except OverflowError as e:
        raise FieldParseError(key, raw, "out of range") from e


def parse_timestamp(raw: str) -> datetime:
    """Parse "YYYY-MM-DD HH:MM:SS +ZZZZ".

    Never fails: anything unparseable yields ZERO_TIMESTAMP. Fields must
    be zero-padded and the offset written as four digits.
    """
    if not isinstance(raw, str) or not _TIMESTAMP_RE.match(raw):
        return ZERO_TIMESTAMP
    try:
        return datetime.strptime(raw, TIMESTAMP_LAYOUT)
    except (ValueError, TypeError):
        return ZERO_TIMESTAMP


def format_timestamp(value: datetime) -> str:
    """Format a timestamp in the layout parse_timestamp accepts.

    The year is always zero-padded to four digits, so ZERO_TIMESTAMP
    renders as "0001-01-01 00:00:00 +0000".
    """
    offset = value.utcoffset() or timedelta(0)
    sign = "-" if offset < timedelta(0) else "+"
    minutes = abs(int(offset.total_seconds())) // 60
    return (f"{value.year:04d}-{value.month:02d}-{value.day:02d} "
            f"{value.hour:02d}:{value.minute:02d}:{value.second:02d} "
            f"{sign}{minutes // 60:02d}{minutes % 60:02d}")
