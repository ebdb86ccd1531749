from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import NamedTuple, Optional

from wktcrs.utils.exceptions import SemanticError

_DATE_TIME_PATTERN = re.compile(
    r"^(?P<year>\d{4})"
    r"(?:-(?:(?P<ordinal>\d{3})|(?P<month>\d{2})(?:-(?P<day>\d{2}))?))?"
    r"(?:T(?P<hour>\d{2})"
    r"(?::(?P<minute>\d{2})(?::(?P<second>\d{2})(?:\.(?P<fraction>\d+))?)?)?"
    r"(?P<zone>Z|[+-]\d{2}(?::\d{2})?)?)?$"
)


class TimeZone(NamedTuple):
    """
    A UTC designator ("Z") or an offset from UTC ("+hh" or "+hh:mm").

    Attributes:
        utc: True for the "Z" designator
        negative: True for offsets west of UTC
        hour: The hours of the offset
        minute: The optional minutes of the offset
    """

    utc: bool = False
    negative: bool = False
    hour: int = 0
    minute: Optional[int] = None

    @classmethod
    def parse(cls, text: str) -> TimeZone:
        if text == "Z":
            return cls(utc=True)
        hour, _, minute = text[1:].partition(":")
        return cls(
            negative=text.startswith("-"),
            hour=int(hour),
            minute=int(minute) if minute else None,
        )

    def offset(self) -> timedelta:
        delta = timedelta(hours=self.hour, minutes=self.minute or 0)
        return -delta if self.negative else delta

    def __str__(self):
        if self.utc:
            return "Z"
        text = f"{'-' if self.negative else '+'}{self.hour:02d}"
        if self.minute is not None:
            text += f":{self.minute:02d}"
        return text


@dataclass(frozen=True)
class DateTime:
    """
    The ISO 8601 subset WKT uses for epochs and extents.

    A date is a year optionally followed by a month and day or by an ordinal
    day of the year. A time of day may follow after "T", optionally with a
    fraction of a second and a time zone. Only the parts that were written
    are set; the rest stay None. The fraction digits are kept as written
    so that they survive a round trip.

    Examples:
        >>> dt = DateTime.parse("2010-03-01T12:30:15.5Z")
        >>> dt.month, dt.second, dt.fraction
        (3, 15, 0.5)
        >>> str(dt)
        '2010-03-01T12:30:15.5Z'
    """

    year: int
    month: Optional[int] = None
    day: Optional[int] = None
    ordinal_day: Optional[int] = None
    hour: Optional[int] = None
    minute: Optional[int] = None
    second: Optional[int] = None
    fraction: Optional[float] = None
    time_zone: Optional[TimeZone] = None
    fraction_digits: Optional[str] = field(default=None, compare=False, repr=False)

    def __post_init__(self):
        if not 0 <= self.year <= 9999:
            raise SemanticError(f"Invalid year {self.year}")
        if self.ordinal_day is not None:
            if self.month is not None or self.day is not None:
                raise SemanticError("An ordinal day cannot be combined with a month or day")
            if not 1 <= self.ordinal_day <= 366:
                raise SemanticError(f"Invalid ordinal day {self.ordinal_day}")
        if self.month is not None and not 1 <= self.month <= 12:
            raise SemanticError(f"Invalid month {self.month}")
        if self.day is not None:
            if self.month is None:
                raise SemanticError("A day requires a month")
            if not 1 <= self.day <= 31:
                raise SemanticError(f"Invalid day {self.day}")

        if self.hour is None:
            if any(
                v is not None for v in (self.minute, self.second, self.fraction, self.time_zone)
            ):
                raise SemanticError("A time of day requires an hour")
        elif not 0 <= self.hour <= 24:
            raise SemanticError(f"Invalid hour {self.hour}")
        if self.minute is not None and not 0 <= self.minute <= 59:
            raise SemanticError(f"Invalid minute {self.minute}")
        if self.second is not None:
            if self.minute is None:
                raise SemanticError("Seconds require minutes")
            if not 0 <= self.second <= 60:
                raise SemanticError(f"Invalid second {self.second}")
        if self.fraction is not None:
            if self.second is None:
                raise SemanticError("A fraction of a second requires seconds")
            if self.fraction_digits is not None and not self.fraction_digits.isdigit():
                raise SemanticError(f"Invalid fraction digits {self.fraction_digits!r}")
            if not 0.0 <= self.fraction < 1.0:
                raise SemanticError(
                    f"Invalid fraction of a second {self.fraction}, must be in [0, 1)"
                )

    @classmethod
    def parse(cls, text: str) -> DateTime:
        """
        Parse date and time text.

        Args:
            text: e.g. "2019", "2019-07", "2019-183", "1980-01-01T00:00:00.0Z"

        Returns:
            The parsed value

        Raises:
            SemanticError: If the text is not a valid date and time
        """
        match = _DATE_TIME_PATTERN.match(text)
        if match is None:
            raise SemanticError(f"Invalid date and time {text!r}", token=text)

        def number(group: str) -> Optional[int]:
            value = match.group(group)
            return int(value) if value is not None else None

        fraction = match.group("fraction")
        zone = match.group("zone")
        return cls(
            year=int(match.group("year")),
            month=number("month"),
            day=number("day"),
            ordinal_day=number("ordinal"),
            hour=number("hour"),
            minute=number("minute"),
            second=number("second"),
            fraction=float("0." + fraction) if fraction is not None else None,
            time_zone=TimeZone.parse(zone) if zone is not None else None,
            fraction_digits=fraction,
        )

    @classmethod
    def try_parse(cls, text: str) -> Optional[DateTime]:
        """Like parse, but None when the text is not a date and time."""
        try:
            return cls.parse(text)
        except SemanticError:
            return None

    def is_ordinal(self) -> bool:
        return self.ordinal_day is not None

    def has_time(self) -> bool:
        return self.hour is not None

    def has_time_zone(self) -> bool:
        return self.time_zone is not None

    def to_datetime(self) -> datetime:
        """
        Convert to a standard library datetime.

        Missing parts default to the start of the period, and a missing time
        zone gives a naive datetime.
        """
        if self.ordinal_day is not None:
            value = datetime(self.year, 1, 1) + timedelta(days=self.ordinal_day - 1)
        else:
            value = datetime(self.year, self.month or 1, self.day or 1)
        value += timedelta(
            hours=self.hour or 0,
            minutes=self.minute or 0,
            seconds=(self.second or 0) + (self.fraction or 0.0),
        )
        if self.time_zone is not None:
            value = value.replace(tzinfo=timezone(self.time_zone.offset()))
        return value

    def __str__(self):
        text = f"{self.year:04d}"
        if self.ordinal_day is not None:
            text += f"-{self.ordinal_day:03d}"
        elif self.month is not None:
            text += f"-{self.month:02d}"
            if self.day is not None:
                text += f"-{self.day:02d}"

        if self.hour is not None:
            text += f"T{self.hour:02d}"
            if self.minute is not None:
                text += f":{self.minute:02d}"
            if self.second is not None:
                text += f":{self.second:02d}"
            if self.fraction_digits is not None:
                text += "." + self.fraction_digits
            elif self.fraction is not None:
                digits = format(self.fraction, ".12f").rstrip("0").partition(".")[2]
                text += "." + (digits or "0")
            if self.time_zone is not None:
                text += str(self.time_zone)
        return text
