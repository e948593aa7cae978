"""Time interval and duration serialization used in reading queries."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

UNBOUNDED = "all"
_SEPARATOR = "_"


@dataclass(frozen=True, slots=True)
class TimeInterval:
    """Span of time to fetch readings for.

    Both ends are ``None`` for an unbounded interval, otherwise both are set
    and ``start`` precedes ``end``.
    """

    start: datetime | None = None
    end: datetime | None = None

    def __post_init__(self) -> None:
        if (self.start is None) != (self.end is None):
            raise ValueError("TimeInterval must be fully bounded or fully unbounded")
        if self.start is not None and self.end is not None and self.start >= self.end:
            raise ValueError(
                f"TimeInterval start {self.start.isoformat()} is not before end "
                f"{self.end.isoformat()}"
            )

    @classmethod
    def unbounded(cls) -> TimeInterval:
        return cls(None, None)

    @classmethod
    def from_string(cls, value: str) -> TimeInterval:
        """Parse the form produced by ``str(interval)``."""

        text = value.strip()
        if text == UNBOUNDED:
            return cls.unbounded()
        parts = text.split(_SEPARATOR)
        if len(parts) != 2:
            raise ValueError(f"Malformed time interval {value!r}")
        try:
            start = datetime.fromisoformat(parts[0])
            end = datetime.fromisoformat(parts[1])
        except ValueError as err:
            raise ValueError(f"Malformed time interval {value!r}") from err
        return cls(start, end)

    @property
    def is_bounded(self) -> bool:
        return self.start is not None

    def duration(self) -> timedelta | None:
        if self.start is None or self.end is None:
            return None
        return self.end - self.start

    def __str__(self) -> str:
        if self.start is None or self.end is None:
            return UNBOUNDED
        return (
            f"{self.start.isoformat()}"
            f"{_SEPARATOR}{self.end.isoformat()}"
        )


def duration_isoformat(value: timedelta) -> str:
    """Format a timedelta as an ISO-8601 duration (``P1D``, ``PT1H30M``)."""

    total_ms = round(value.total_seconds() * 1000)
    if total_ms == 0:
        return "P0D"
    sign = "-" if total_ms < 0 else ""
    total_ms = abs(total_ms)

    days, rem_ms = divmod(total_ms, 86_400_000)
    hours, rem_ms = divmod(rem_ms, 3_600_000)
    minutes, rem_ms = divmod(rem_ms, 60_000)
    seconds, millis = divmod(rem_ms, 1000)

    out = f"{sign}P"
    if days:
        out += f"{days}D"
    if hours or minutes or seconds or millis:
        out += "T"
        if hours:
            out += f"{hours}H"
        if minutes:
            out += f"{minutes}M"
        if seconds or millis:
            if millis:
                frac = f"{millis:03d}".rstrip("0")
                out += f"{seconds}.{frac}S"
            else:
                out += f"{seconds}S"
    return out


def serialize_duration(value: object) -> str:
    """Return the query-string form of a bar duration."""

    if isinstance(value, timedelta):
        return duration_isoformat(value)
    return str(value)
