"""Date and time utility functions."""
import logging
import math
import re
from typing import Any

from dateutil import parser as date_parser
from dateutil import tz

from src.models.date_value import DateValue
from src.utils.exceptions import DateParseError

logger = logging.getLogger(__name__)

# RFC 2822 section 4.3 obsolete zone names, in seconds east of UTC
RFC2822_ZONES = {
    "UT": 0,
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

# "GMT+01", "UTC-0530": the sign means east/west of UTC, not POSIX-inverted
GMT_OFFSET_RE = re.compile(r"\b(?:GMT|UTC|UT)\s*([+-])(\d{1,2})(?::?(\d{2}))?\s*$", re.IGNORECASE)

# Date-only ISO forms: 2016, 2016-01, 2016-01-19, 20160119, 2016-W03, 2016-W03-2
ISO_DATE_ONLY_RE = re.compile(r"^\d{4}(?:-?\d{2}(?:-?\d{2})?|-?W\d{2}(?:-?\d)?)?$")


def _numeric_gmt_offset(value: str) -> str:
    def repl(m):
        return f"{m.group(1)}{int(m.group(2)):02d}{m.group(3) or '00'}"

    return GMT_OFFSET_RE.sub(repl, value.rstrip())


def _parse_failed(value: Any, error: Exception, strict: bool) -> DateValue:
    if strict:
        raise DateParseError(f"Invalid date string: {value!r}") from error
    logger.debug("Rejected date string %r: %s", value, error)
    return DateValue.invalid()


def parse_rfc2822(value: str, strict: bool = False) -> DateValue:
    """
    Parse an RFC 2822 date string (loose variants accepted).

    Args:
        value: Date string (e.g., "Tue, 26 Jan 2016 13:48:02 GMT",
            "December 17, 1995 03:24:00")
        strict: Raise instead of returning the invalid sentinel

    Returns:
        DateValue; DateValue.invalid() if the string cannot be parsed.
        Callers must check is_valid before reading fields.

    Raises:
        DateParseError: If strict and the string cannot be parsed

    Behavior:
        - Strings without a zone are taken as local time
        - Obsolete zone names (UT, EST, PDT, ...) use their RFC 2822 offsets
        - "GMT+01" means one hour east of UTC
        - Missing fields default from the current date
    """
    if not isinstance(value, str):
        return _parse_failed(value, TypeError("expected a string"), strict)

    try:
        parsed = date_parser.parse(_numeric_gmt_offset(value), tzinfos=RFC2822_ZONES)
    except (ValueError, OverflowError) as e:
        return _parse_failed(value, e, strict)

    return DateValue.from_datetime(parsed)


def parse_iso8601(value: str, strict: bool = False) -> DateValue:
    """
    Parse an ISO 8601 date string.

    Args:
        value: Date string (e.g., "2016-01-19T16:07:37+00:00", "2016-01-19T08:07:37Z")
        strict: Raise instead of returning the invalid sentinel

    Returns:
        DateValue; DateValue.invalid() if the string cannot be parsed.

    Raises:
        DateParseError: If strict and the string cannot be parsed

    Behavior:
        - Date-only forms ("2016-01-19") are UTC midnight
        - Date-time forms without an offset are local time
    """
    if not isinstance(value, str):
        return _parse_failed(value, TypeError("expected a string"), strict)

    try:
        parsed = date_parser.isoparse(value)
    except (ValueError, OverflowError) as e:
        return _parse_failed(value, e, strict)

    if parsed.tzinfo is None and ISO_DATE_ONLY_RE.match(value):
        parsed = parsed.replace(tzinfo=tz.UTC)

    return DateValue.from_datetime(parsed)


def is_leap_year(date: DateValue) -> bool:
    """Check whether the local year of date is a Gregorian leap year."""
    year = date.year
    return (year % 4 == 0 and year % 100 != 0) or year % 400 == 0


def _pad(number: int, width: int) -> str:
    # Pads the whole string, sign included: -5 -> "-5" at width 2, "0-5" at width 3
    return str(number).rjust(width, "0")


def format_time_span(start: DateValue, end: DateValue) -> str:
    """
    Format the difference between two dates as "HH:mm:ss.sss".

    Args:
        start: Start date
        end: End date

    Returns:
        Field-wise difference of local hour, minute, second and millisecond
        (e.g., 10:00:00.000 -> 15:20:10.453 gives "05:20:10.453")

    Note:
        Each field is subtracted on its own with no borrow between fields, so
        the result is a real elapsed time only for same-day spans where every
        field of end is >= the one of start.
    """
    hours = end.hour - start.hour
    minutes = end.minute - start.minute
    seconds = end.second - start.second
    millis = end.millisecond - start.millisecond

    return f"{_pad(hours, 2)}:{_pad(minutes, 2)}:{_pad(seconds, 2)}.{_pad(millis, 3)}"


def clock_angle(date: DateValue) -> float:
    """
    Angle in radians between the hands of an analog clock at the UTC time of date.

    Returns:
        Smaller angle between the hands, in [0, pi]
    """
    hour = date.utc_hour % 12
    minute = date.utc_minute
    # Hour hand turns 0.5 deg/min, minute hand 6 deg/min
    diff = abs(0.5 * (60 * hour - 11 * minute))
    if diff > 180:
        diff = 360 - diff
    return diff * math.pi / 180
