"""Pattern Library for Chat Message Date/Time Notation

Each matcher recognizes one date/time notation and turns it into a
``TemporalMatch``. A matcher returns None both when its pattern does not occur
and when the captured values are not a real date or time (day 32, hour 24,
minute 60, an unknown month), which lets the resolver fall through to the next
notation.
"""

import calendar
import re
from abc import ABC, abstractmethod
from datetime import date, timedelta
from typing import Dict, List, Optional, Tuple

from dateutil import tz as dateutil_tz

from .models import MatchedSpan, ResolutionContext, TemporalMatch


def _build_month_names() -> Dict[str, int]:
    """Build month name to number mapping (full names and abbreviations)."""
    months = {}
    for i, name in enumerate(calendar.month_name[1:], 1):
        months[name.lower()] = i
        months[name[:3].lower()] = i
    months["sept"] = 9
    return months


def _build_day_names() -> Dict[str, int]:
    """Build day name to weekday number mapping (0=Monday)."""
    return {name.lower(): i for i, name in enumerate(calendar.day_name)}


MONTH_NAMES = _build_month_names()
DAY_NAMES = _build_day_names()

# Longest first so "september" wins over "sep"
MONTH_ALTERNATION = "|".join(sorted(MONTH_NAMES, key=len, reverse=True))
WEEKDAY_ALTERNATION = "|".join(DAY_NAMES)

ORDINAL = r"(?:st|nd|rd|th)"
MERIDIEM = r"(?:am|pm)"
TIME_12H = rf"\d{{1,2}}(?:[:.]\d{{2}})?\s*{MERIDIEM}"

FLAGS = re.IGNORECASE

TIME_RANGE_PATTERN = re.compile(
    rf"(?<![\w:.-])(?P<start_hour>\d{{1,2}})(?P<start_minute>[:.]\d{{2}})?\s*(?P<start_meridiem>{MERIDIEM})?"
    rf"\s*[-\u2013\u2014]\s*"
    rf"(?P<end_hour>\d{{1,2}})(?:[:.]\d{{2}})?\s*(?P<end_meridiem>{MERIDIEM})\b",
    FLAGS
)
# 15:30-16:30; colons required so "2024-2025" stays a pair of numbers
TIME_RANGE_24H_PATTERN = re.compile(
    r"(?<![\w:.-])(?P<start>\d{1,2}:\d{2})\s*[-\u2013\u2014]\s*(?P<end>\d{1,2}:\d{2})(?![\w:]|[.-]\d)",
    FLAGS
)
TOMORROW_PATTERN = re.compile(r"\b(?:tomorrow|tmrw|tmr)\b", FLAGS)
TODAY_PATTERN = re.compile(r"\btoday\b", FLAGS)
WEEKDAY_PATTERN = re.compile(
    rf"\b(?:(?P<qualifier>next|this)\s+)?(?P<weekday>{WEEKDAY_ALTERNATION})\b", FLAGS
)
EXPLICIT_DAY_PATTERN = re.compile(
    rf"\b\d{{1,2}}{ORDINAL}\b"
    rf"|\b\d{{1,2}}\s+(?:of\s+)?(?:{MONTH_ALTERNATION})\b"
    rf"|\b(?:{MONTH_ALTERNATION})\.?\s+\d{{1,2}}\b",
    FLAGS
)

# Shapes stripped from the message when building the title, applied in order
TITLE_NOISE_PATTERNS: List[re.Pattern] = [
    # 3:30pm-4:30pm
    re.compile(rf"\b\d{{1,2}}(?:[:.]\d{{2}})?\s*{MERIDIEM}?\s*[-\u2013\u2014]\s*{TIME_12H}\b", FLAGS),
    # 15:30-16:30
    TIME_RANGE_24H_PATTERN,
    # 29th 5am
    re.compile(rf"\b\d{{1,2}}{ORDINAL}\s+(?:at\s+)?{TIME_12H}\b", FLAGS),
    # 28 Oct, Oct 28, 29th of October 2025
    re.compile(
        rf"\b\d{{1,2}}{ORDINAL}?\s+(?:of\s+)?(?:{MONTH_ALTERNATION})\b\.?(?:,?\s+\d{{4}}\b)?"
        rf"|\b(?:{MONTH_ALTERNATION})\.?\s+\d{{1,2}}{ORDINAL}?\b(?:,?\s+\d{{4}}\b)?",
        FLAGS
    ),
    # 29th
    re.compile(rf"\b\d{{1,2}}{ORDINAL}\b", FLAGS),
    # next Friday
    re.compile(rf"\b(?:(?:next|this)\s+)?(?:{WEEKDAY_ALTERNATION})\b", FLAGS),
    # today, tomorrow, tmr
    re.compile(r"\b(?:today|tomorrow|tmrw|tmr)\b", FLAGS),
    # 5pm, 3.30pm
    re.compile(rf"\b{TIME_12H}\b", FLAGS),
    # 16:30, 0900
    re.compile(r"(?<![\w:/-])(?<!\d\.)(?:\d{1,2}:\d{2}|\d{4})(?![\w:/]|[.-]\d)", FLAGS),
    # in 30 mins, 2 hours
    re.compile(r"\b(?:in\s+)?(?<![\d.])\d+\s*(?:minutes|minute|mins|min|hours|hour|hrs|hr|h)\b", FLAGS),
]


def to_24_hour(hour: int, meridiem: Optional[str]) -> Optional[int]:
    """
    Convert a captured hour to 0-23.

    With a meridiem the hour must be 1-12: 12am -> 0, 12pm -> 12, 1-11pm -> +12.
    Without one the hour is already on the 24-hour clock.
    """
    if meridiem is None:
        return hour if 0 <= hour <= 23 else None

    if not 1 <= hour <= 12:
        return None
    if meridiem.lower() == "am":
        return 0 if hour == 12 else hour
    return 12 if hour == 12 else hour + 12


def valid_minute(minute: int) -> bool:
    return 0 <= minute <= 59


def day_exists(year: int, month: int, day: int) -> bool:
    if not 1 <= month <= 12 or not 1 <= day <= 31:
        return False
    return day <= calendar.monthrange(year, month)[1]


def next_weekday(today: date, weekday: int) -> date:
    """Next date on or after ``today`` falling on ``weekday`` (0=Monday)."""
    return today + timedelta(days=(weekday - today.weekday()) % 7)


def resolve_day_anchor(text: str, ctx: ResolutionContext) -> Tuple[date, bool]:
    """
    Pick the day a bare time-of-day belongs to.

    Returns:
        (day, defaulted_to_today); the flag is set when nothing in the text
        named the day
    """
    today = ctx.today
    if TOMORROW_PATTERN.search(text):
        return today + timedelta(days=1), False
    if TODAY_PATTERN.search(text):
        return today, False

    weekday = WEEKDAY_PATTERN.search(text)
    if weekday:
        return next_weekday(today, DAY_NAMES[weekday.group("weekday").lower()]), False

    return today, True


def rewrite_time_range(text: str) -> str:
    """
    Replace the first time range ("3:30pm-4:30pm", "15:30-16:30") with its
    start time.

    A start without am/pm borrows the end's marker, flipped to am when that
    makes the range run forwards on the 24-hour clock ("11-1pm" and
    "11-12pm" both start at 11am).
    """
    match = TIME_RANGE_PATTERN.search(text)
    if not match:
        match = TIME_RANGE_24H_PATTERN.search(text)
        if not match:
            return text
        return f"{text[:match.start()]}{match.group('start')}{text[match.end():]}"

    start_meridiem = match.group("start_meridiem")
    if start_meridiem is None:
        start_meridiem = match.group("end_meridiem").lower()
        start_hour = int(match.group("start_hour"))
        end_24 = to_24_hour(int(match.group("end_hour")), start_meridiem)
        start_24 = to_24_hour(start_hour, start_meridiem)
        if (start_meridiem == "pm" and end_24 is not None and start_24 is not None
                and start_24 > end_24 and to_24_hour(start_hour, "am") < end_24):
            start_meridiem = "am"

    start = f"{match.group('start_hour')}{match.group('start_minute') or ''}{start_meridiem}"
    return f"{text[:match.start()]}{start}{text[match.end():]}"


def has_explicit_day(text: str) -> bool:
    """True when the text names a day of the month ("29th", "28 Oct")."""
    return EXPLICIT_DAY_PATTERN.search(text) is not None


class Matcher(ABC):
    """One notation in the resolver's cascade."""

    name: str = "matcher"
    pattern: re.Pattern

    def match(self, text: str, ctx: ResolutionContext) -> Optional[TemporalMatch]:
        """Return the first occurrence in ``text`` that resolves to a valid point in time."""
        for found in self.pattern.finditer(text):
            result = self._resolve(found, text, ctx)
            if result is not None:
                return result
        return None

    @abstractmethod
    def _resolve(self, found: re.Match, text: str, ctx: ResolutionContext) -> Optional[TemporalMatch]:
        """Validate one occurrence and convert it, or return None."""

    def _span(self, found: re.Match) -> MatchedSpan:
        return MatchedSpan(offset=found.start(), length=found.end() - found.start(), text=found.group(0))

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"


class DayOrdinalTimeMatcher(Matcher):
    """'29th 5am', '3rd 10:30pm', '1st at 9.15am' in the current month."""

    name = "day_ordinal_time"
    pattern = re.compile(
        rf"\b(?P<day>\d{{1,2}}){ORDINAL}\s+(?:at\s+)?(?P<hour>\d{{1,2}})(?:[:.](?P<minute>\d{{2}}))?\s*(?P<meridiem>{MERIDIEM})\b",
        FLAGS
    )

    def _resolve(self, found, text, ctx):
        now = ctx.local_now
        day = int(found.group("day"))
        hour = to_24_hour(int(found.group("hour")), found.group("meridiem"))
        minute = int(found.group("minute") or 0)

        if hour is None or not valid_minute(minute) or not day_exists(now.year, now.month, day):
            return None

        return TemporalMatch(
            span=self._span(found), year=now.year, month=now.month, day=day,
            hour=hour, minute=minute, matcher=self.name
        )


class MonthDayMatcher(Matcher):
    """'28 Oct', 'Oct 28 2pm', 'Oct 28 1630', '29th of October 2025 14:00'."""

    name = "month_day"
    pattern = re.compile(
        rf"(?:\b(?P<day_first>\d{{1,2}}){ORDINAL}?\s+(?:of\s+)?(?P<month_last>{MONTH_ALTERNATION})\b\.?"
        rf"|\b(?P<month_first>{MONTH_ALTERNATION})\.?\s+(?P<day_last>\d{{1,2}}){ORDINAL}?\b)"
        rf"(?:,?\s+(?P<year>20\d{{2}})\b)?"
        rf"(?:,?\s+(?:at\s+)?(?:(?P<hour>\d{{1,2}})"
        rf"(?:[:.](?P<minute>\d{{2}})\s*(?P<meridiem>{MERIDIEM})?|\s*(?P<bare_meridiem>{MERIDIEM}))"
        rf"|(?P<hour4>\d{{2}})(?P<minute4>\d{{2}}))\b)?",
        FLAGS
    )

    def _resolve(self, found, text, ctx):
        month_name = (found.group("month_last") or found.group("month_first")).lower()
        month = MONTH_NAMES.get(month_name)
        day = int(found.group("day_first") or found.group("day_last"))
        year = int(found.group("year")) if found.group("year") else ctx.local_now.year

        if month is None or not day_exists(year, month, day):
            return None

        hour = minute = None
        if found.group("hour") is not None:
            meridiem = found.group("meridiem") or found.group("bare_meridiem")
            hour = to_24_hour(int(found.group("hour")), meridiem)
            minute = int(found.group("minute") or 0)
            if hour is None or not valid_minute(minute):
                return None
        elif found.group("hour4") is not None:
            # four digits that are not a clock time ("Oct 28 1999") leave the day all-day
            hour4 = to_24_hour(int(found.group("hour4")), None)
            minute4 = int(found.group("minute4"))
            if hour4 is not None and valid_minute(minute4):
                hour, minute = hour4, minute4

        return TemporalMatch(
            span=self._span(found), year=year, month=month, day=day,
            hour=hour, minute=minute, matcher=self.name
        )


class DayOrdinalMatcher(Matcher):
    """'29th' on its own: a date in the current month."""

    name = "day_ordinal"
    pattern = re.compile(rf"\b(?P<day>\d{{1,2}}){ORDINAL}\b", FLAGS)

    def _resolve(self, found, text, ctx):
        now = ctx.local_now
        day = int(found.group("day"))
        if not day_exists(now.year, now.month, day):
            return None

        return TemporalMatch(
            span=self._span(found), year=now.year, month=now.month, day=day, matcher=self.name
        )


class _AnchoredTimeMatcher(Matcher):
    """Time-of-day without a date, placed on the anchor day."""

    def _anchored(self, found, text, ctx, hour, minute):
        day, defaulted = resolve_day_anchor(text, ctx)
        return TemporalMatch(
            span=self._span(found), year=day.year, month=day.month, day=day.day,
            hour=hour, minute=minute, matcher=self.name, defaulted_to_today=defaulted
        )


class TwentyFourHourMatcher(_AnchoredTimeMatcher):
    """'1630', '16:30', '9:30', '0900': four digits, or hour and minutes around a colon."""

    name = "time_24h"
    pattern = re.compile(
        r"(?<![\w:/-])(?<!\d\.)(?:(?P<hour>\d{1,2}):(?P<minute>\d{2})|(?P<hour4>\d{2})(?P<minute4>\d{2}))"
        rf"(?![\w:/]|[.-]\d)(?!\s*(?:{MERIDIEM}|mins?|minutes?|hours?|hrs?|h)\b)",
        FLAGS
    )

    def _resolve(self, found, text, ctx):
        hour = int(found.group("hour") or found.group("hour4"))
        minute = int(found.group("minute") or found.group("minute4"))
        if hour > 23 or not valid_minute(minute):
            return None
        return self._anchored(found, text, ctx, hour, minute)


class TwelveHourMatcher(_AnchoredTimeMatcher):
    """'3.30pm', '3:30pm', '3pm', '12am'."""

    name = "time_12h"
    pattern = re.compile(
        rf"(?<![\w:.])(?P<hour>\d{{1,2}})(?:[:.](?P<minute>\d{{2}}))?\s*(?P<meridiem>{MERIDIEM})\b",
        FLAGS
    )

    def _resolve(self, found, text, ctx):
        hour = to_24_hour(int(found.group("hour")), found.group("meridiem"))
        minute = int(found.group("minute") or 0)
        if hour is None or not valid_minute(minute):
            return None
        return self._anchored(found, text, ctx, hour, minute)


class RelativeOffsetMatcher(Matcher):
    """'30 min', '2 hours', '50mins': an offset from the reference time."""

    name = "relative_offset"
    pattern = re.compile(r"(?<![\d.])\b(?P<amount>\d{1,4})\s*(?P<unit>[a-z]+)\b", FLAGS)

    # (full word, shortest accepted prefix, minutes per unit, extra spellings)
    UNIT_FAMILIES = (
        ("minutes", 3, 1, ("mins",)),
        ("hours", 1, 60, ("hr", "hrs")),
    )

    @classmethod
    def unit_minutes(cls, word: str) -> Optional[int]:
        word = word.lower()
        for full, min_prefix, minutes, extras in cls.UNIT_FAMILIES:
            if word in extras or (len(word) >= min_prefix and full.startswith(word)):
                return minutes
        return None

    def _resolve(self, found, text, ctx):
        unit = self.unit_minutes(found.group("unit"))
        amount = int(found.group("amount"))
        if unit is None or amount <= 0:
            return None

        # Offset in absolute time, then read the wall clock in the target zone
        target = (ctx.local_now.astimezone(dateutil_tz.UTC) + timedelta(minutes=amount * unit)).astimezone(ctx.zone)
        return TemporalMatch(
            span=self._span(found), year=target.year, month=target.month, day=target.day,
            hour=target.hour, minute=target.minute, matcher=self.name
        )


class WeekdayMatcher(Matcher):
    """'Friday', 'next Monday': the next such day, today included."""

    name = "weekday"
    pattern = WEEKDAY_PATTERN

    def _resolve(self, found, text, ctx):
        day = next_weekday(ctx.today, DAY_NAMES[found.group("weekday").lower()])
        return TemporalMatch(
            span=self._span(found), year=day.year, month=day.month, day=day.day, matcher=self.name
        )


def default_matchers() -> Tuple[Matcher, ...]:
    """The cascade in priority order, highest first."""
    return (
        DayOrdinalTimeMatcher(),
        MonthDayMatcher(),
        DayOrdinalMatcher(),
        TwentyFourHourMatcher(),
        TwelveHourMatcher(),
        RelativeOffsetMatcher(),
        WeekdayMatcher(),
    )
