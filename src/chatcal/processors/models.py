"""Data models shared by the resolver, assembler and exporters."""

from dataclasses import dataclass
from datetime import date, datetime, time, tzinfo
from typing import Optional

from ..core.error_handler import ConfigurationError, EventValidationError
from .timezones import DEFAULT_TIMEZONE, get_zone


@dataclass(frozen=True)
class MatchedSpan:
    """Location of the recognized date/time text inside the message."""
    offset: int
    length: int
    text: str

    @property
    def end(self) -> int:
        return self.offset + self.length


@dataclass(frozen=True)
class TemporalMatch:
    """
    Fully specified point in time picked out of a message.
    A match without an hour is date-only.
    """
    span: MatchedSpan
    year: int
    month: int  # 1-12
    day: int
    hour: Optional[int] = None  # 0-23
    minute: Optional[int] = None
    matcher: str = ""
    defaulted_to_today: bool = False

    def __post_init__(self):
        # minute is present exactly when hour is
        if self.hour is not None and self.minute is None:
            object.__setattr__(self, "minute", 0)
        elif self.hour is None and self.minute is not None:
            object.__setattr__(self, "minute", None)

    @property
    def has_time(self) -> bool:
        return self.hour is not None

    @property
    def date(self) -> date:
        return date(self.year, self.month, self.day)


@dataclass(frozen=True)
class ResolutionContext:
    """
    Per-message inputs for resolution and assembly.

    A naive ``reference_now`` is taken to already be wall-clock time in
    ``timezone``; an aware one is converted into it.
    """
    reference_now: datetime
    timezone: str = DEFAULT_TIMEZONE
    default_duration_minutes: int = 60

    def __post_init__(self):
        if not isinstance(self.reference_now, datetime):
            raise ConfigurationError(f"reference_now must be a datetime, got {type(self.reference_now).__name__}")
        duration = self.default_duration_minutes
        if isinstance(duration, bool) or not isinstance(duration, int) or duration <= 0:
            raise ConfigurationError(f"default_duration_minutes must be a positive integer, got {duration!r}")
        if get_zone(self.timezone) is None:
            raise ConfigurationError(f"Unknown timezone: {self.timezone!r}")

    @property
    def zone(self) -> tzinfo:
        return get_zone(self.timezone)

    @property
    def local_now(self) -> datetime:
        if self.reference_now.tzinfo is None:
            return self.reference_now.replace(tzinfo=self.zone)
        return self.reference_now.astimezone(self.zone)

    @property
    def today(self) -> date:
        return self.local_now.date()


@dataclass(frozen=True)
class Event:
    """Calendar event ready for export."""
    title: str
    start: datetime
    end: Optional[datetime] = None
    all_day: bool = False

    def __post_init__(self):
        if not isinstance(self.title, str) or not self.title.strip():
            raise EventValidationError("Event title must be a non-empty string")
        if not isinstance(self.start, datetime):
            raise EventValidationError("Event start must be a datetime")

        if self.all_day:
            if self.end is not None:
                raise EventValidationError("All-day events do not carry an end")
            if self.start.time() != time(0, 0):
                raise EventValidationError("All-day events start at local midnight")
            return

        if self.end is None:
            raise EventValidationError("Timed events need an end")
        if not isinstance(self.end, datetime):
            raise EventValidationError("Event end must be a datetime")
        if self.end <= self.start:
            raise EventValidationError(f"Event end {self.end.isoformat()} is not after start {self.start.isoformat()}")

    @property
    def start_date(self) -> date:
        return self.start.date()

    def duration_minutes(self) -> Optional[int]:
        """Get event duration in minutes, None for all-day events."""
        if self.end is None:
            return None
        return int((self.end - self.start).total_seconds() / 60)
