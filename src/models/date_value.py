"""DateValue model: an immutable instant with UTC and local field access."""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from email.utils import format_datetime
from typing import Optional

from src.utils.config import get_local_timezone
from src.utils.exceptions import InvalidDateError

INVALID_DATE_TEXT = "Invalid Date"
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass(frozen=True)
class DateValue:
    """
    Instant in time, or the "invalid date" sentinel when moment is None.

    Local fields are computed in the configured local timezone; UTC fields
    in UTC. Equality compares instants, not the offset they were parsed with.
    """

    moment: Optional[datetime] = None

    def __post_init__(self):
        """Validate that a present moment is timezone-aware."""
        if self.moment is not None and self.moment.tzinfo is None:
            raise ValueError("DateValue requires a timezone-aware datetime")

    @classmethod
    def from_datetime(cls, dt: datetime) -> "DateValue":
        """Wrap a datetime; naive values are taken as local time."""
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=get_local_timezone())
        return cls(dt)

    @classmethod
    def local(cls, year: int, month: int, day: int, hour: int = 0, minute: int = 0,
              second: int = 0, millisecond: int = 0) -> "DateValue":
        """Build from local calendar fields (months are 1-based)."""
        return cls(datetime(year, month, day, hour, minute, second, millisecond * 1000,
                            tzinfo=get_local_timezone()))

    @classmethod
    def utc(cls, year: int, month: int, day: int, hour: int = 0, minute: int = 0,
            second: int = 0, millisecond: int = 0) -> "DateValue":
        """Build from UTC calendar fields (months are 1-based)."""
        return cls(datetime(year, month, day, hour, minute, second, millisecond * 1000,
                            tzinfo=timezone.utc))

    @classmethod
    def invalid(cls) -> "DateValue":
        """Return the invalid date sentinel."""
        return cls(None)

    @property
    def is_valid(self) -> bool:
        return self.moment is not None

    def _require(self) -> datetime:
        if self.moment is None:
            raise InvalidDateError("Cannot read fields of an invalid date")
        return self.moment

    def _as_local(self) -> datetime:
        return self._require().astimezone(get_local_timezone())

    def _as_utc(self) -> datetime:
        return self._require().astimezone(timezone.utc)

    # Local calendar fields

    @property
    def year(self) -> int:
        return self._as_local().year

    @property
    def month(self) -> int:
        return self._as_local().month

    @property
    def day(self) -> int:
        return self._as_local().day

    @property
    def weekday(self) -> int:
        """Local day of week, Monday is 0."""
        return self._as_local().weekday()

    @property
    def hour(self) -> int:
        return self._as_local().hour

    @property
    def minute(self) -> int:
        return self._as_local().minute

    @property
    def second(self) -> int:
        return self._as_local().second

    @property
    def millisecond(self) -> int:
        return self._as_local().microsecond // 1000

    # UTC calendar fields

    @property
    def utc_year(self) -> int:
        return self._as_utc().year

    @property
    def utc_month(self) -> int:
        return self._as_utc().month

    @property
    def utc_day(self) -> int:
        return self._as_utc().day

    @property
    def utc_hour(self) -> int:
        return self._as_utc().hour

    @property
    def utc_minute(self) -> int:
        return self._as_utc().minute

    @property
    def utc_second(self) -> int:
        return self._as_utc().second

    @property
    def utc_millisecond(self) -> int:
        return self._as_utc().microsecond // 1000

    @property
    def utc_offset(self) -> timedelta:
        """Offset the instant was created with."""
        return self._require().utcoffset()

    @property
    def timestamp(self) -> int:
        """Milliseconds since the Unix epoch."""
        return (self._as_utc() - EPOCH) // timedelta(milliseconds=1)

    def to_iso8601(self) -> str:
        """
        Format as ISO 8601 in UTC with millisecond precision.

        Returns:
            e.g. "2016-01-19T08:07:37.000Z", or "Invalid Date"
        """
        if not self.is_valid:
            return INVALID_DATE_TEXT
        text = self._as_utc().isoformat(timespec="milliseconds")
        return text.replace("+00:00", "Z")

    def to_rfc2822(self) -> str:
        """
        Format as an RFC 2822 date in GMT.

        Returns:
            e.g. "Tue, 26 Jan 2016 13:48:02 GMT", or "Invalid Date"
        """
        if not self.is_valid:
            return INVALID_DATE_TEXT
        return format_datetime(self._as_utc(), usegmt=True)

    def __str__(self) -> str:
        return self.to_iso8601()
