"""
Unit tests for the pattern library.

Each matcher is exercised on its own, including the inputs it must reject so
that the resolver can fall through to the next notation.
"""

from datetime import date, datetime

import pytest

from chatcal.processors.models import ResolutionContext
from chatcal.processors.patterns import (
    DayOrdinalMatcher,
    DayOrdinalTimeMatcher,
    MonthDayMatcher,
    RelativeOffsetMatcher,
    TwelveHourMatcher,
    TwentyFourHourMatcher,
    WeekdayMatcher,
    default_matchers,
    has_explicit_day,
    next_weekday,
    resolve_day_anchor,
    rewrite_time_range,
    to_24_hour,
)


class TestHelpers:
    """Test suite for the shared conversion helpers"""

    @pytest.mark.parametrize("hour,meridiem,expected", [
        (12, "am", 0),
        (12, "pm", 12),
        (11, "pm", 23),
        (1, "am", 1),
        (5, "PM", 17),
        (0, "am", None),
        (13, "pm", None),
        (16, None, 16),
        (24, None, None),
    ])
    def test_to_24_hour(self, hour, meridiem, expected):
        """Test 12-hour conversion and range checks"""
        assert to_24_hour(hour, meridiem) == expected

    def test_next_weekday_includes_today(self):
        """Test that the current weekday resolves to today"""
        monday = date(2024, 10, 21)
        assert next_weekday(monday, 0) == monday
        assert next_weekday(monday, 4) == date(2024, 10, 25)
        assert next_weekday(date(2024, 10, 25), 0) == date(2024, 10, 28)

    @pytest.mark.parametrize("text,expected", [
        ("3:30pm-4:30pm sync", "3:30pm sync"),
        ("sync 3pm – 5pm", "sync 3pm"),
        ("3.30pm-4pm review", "3.30pm review"),
        ("lunch 11-1pm", "lunch 11am"),
        ("drinks 5-7pm", "drinks 5pm"),
        ("meet 11-12pm", "meet 11am"),
        ("lunch 12-1pm", "lunch 12pm"),
        ("sync 15:30-16:30", "sync 15:30"),
        ("sync 9:00–10:30", "sync 9:00"),
        ("2024-2025 budget", "2024-2025 budget"),
        ("no range here 3pm", "no range here 3pm"),
    ])
    def test_rewrite_time_range(self, text, expected):
        """Test that ranges collapse to their start time"""
        assert rewrite_time_range(text) == expected

    @pytest.mark.parametrize("text,expected", [
        ("32nd 5am", True),
        ("dinner 28 Oct", True),
        ("Oct 28 dinner", True),
        ("dinner tmr 7pm", False),
        ("dinner Friday", False),
    ])
    def test_has_explicit_day(self, text, expected):
        assert has_explicit_day(text) is expected

    def test_day_anchor(self, ctx):
        """Test the day a bare time is placed on"""
        assert resolve_day_anchor("standup tmr 9am", ctx) == (date(2024, 10, 22), False)
        assert resolve_day_anchor("standup tomorrow 9am", ctx) == (date(2024, 10, 22), False)
        assert resolve_day_anchor("standup today 9am", ctx) == (date(2024, 10, 21), False)
        assert resolve_day_anchor("standup Thursday 9am", ctx) == (date(2024, 10, 24), False)
        assert resolve_day_anchor("standup 9am", ctx) == (date(2024, 10, 21), True)


class TestDayOrdinalTimeMatcher:
    """Test suite for '29th 5am'"""

    @pytest.fixture
    def matcher(self):
        return DayOrdinalTimeMatcher()

    def test_ordinal_with_time(self, matcher, ctx):
        result = matcher.match("29th 5am", ctx)

        assert result is not None
        assert (result.year, result.month, result.day) == (2024, 10, 29)
        assert (result.hour, result.minute) == (5, 0)
        assert result.matcher == "day_ordinal_time"
        assert result.span.text == "29th 5am"

    def test_minutes_and_at(self, matcher, ctx):
        result = matcher.match("demo on 3rd at 10:30pm", ctx)
        assert (result.day, result.hour, result.minute) == (3, 22, 30)

        result = matcher.match("1st 9.15am", ctx)
        assert (result.day, result.hour, result.minute) == (1, 9, 15)

    @pytest.mark.parametrize("text", ["32nd 5am", "31st 13pm", "29th 5:60am", "29th 5"])
    def test_rejects_invalid_components(self, matcher, ctx, text):
        assert matcher.match(text, ctx) is None

    def test_rejects_day_missing_from_month(self, matcher):
        november = ResolutionContext(reference_now=datetime(2024, 11, 5, 9, 0))
        assert matcher.match("31st 5am", november) is None


class TestMonthDayMatcher:
    """Test suite for month-name dates"""

    @pytest.fixture
    def matcher(self):
        return MonthDayMatcher()

    @pytest.mark.parametrize("text,expected", [
        ("28 Oct", (2024, 10, 28)),
        ("Oct 28", (2024, 10, 28)),
        ("28 of October", (2024, 10, 28)),
        ("party sept 3", (2024, 9, 3)),
        ("Dec 25, 2025", (2025, 12, 25)),
        ("1st January 2026", (2026, 1, 1)),
    ])
    def test_date_only(self, matcher, ctx, text, expected):
        result = matcher.match(text, ctx)

        assert (result.year, result.month, result.day) == expected
        assert result.has_time is False

    @pytest.mark.parametrize("text,expected", [
        ("29th Oct 5am", (29, 5, 0)),
        ("Oct 28, 2025 2pm", (28, 14, 0)),
        ("28 Oct 14:00", (28, 14, 0)),
        ("Oct 28 at 3.45pm", (28, 15, 45)),
        ("Oct 28 1630", (28, 16, 30)),
        ("Oct 28 2025 0900", (28, 9, 0)),
    ])
    def test_with_time(self, matcher, ctx, text, expected):
        result = matcher.match(text, ctx)
        assert (result.day, result.hour, result.minute) == expected

    def test_bare_number_after_date_is_not_a_time(self, matcher, ctx):
        result = matcher.match("Oct 28 5 people", ctx)

        assert result.day == 28
        assert result.has_time is False

    def test_four_digits_that_are_not_a_time(self, matcher, ctx):
        result = matcher.match("Oct 28 1999", ctx)

        assert (result.year, result.day) == (2024, 28)
        assert result.has_time is False

    @pytest.mark.parametrize("text", ["32 Oct", "Nov 31", "Feb 30", "Oct 28 13pm"])
    def test_rejects_invalid_components(self, matcher, ctx, text):
        assert matcher.match(text, ctx) is None


class TestDayOrdinalMatcher:
    """Test suite for a bare ordinal day"""

    def test_ordinal(self, ctx):
        result = DayOrdinalMatcher().match("Hackathon 30th", ctx)

        assert (result.year, result.month, result.day) == (2024, 10, 30)
        assert result.has_time is False
        assert result.minute is None

    def test_rejects_impossible_day(self, ctx):
        assert DayOrdinalMatcher().match("32nd", ctx) is None


class TestTwentyFourHourMatcher:
    """Test suite for 24-hour times"""

    @pytest.fixture
    def matcher(self):
        return TwentyFourHourMatcher()

    @pytest.mark.parametrize("text,expected", [
        ("review 1630", (16, 30)),
        ("review 16:30", (16, 30)),
        ("breakfast 0900", (9, 0)),
        ("call 9:30", (9, 30)),
    ])
    def test_times(self, matcher, ctx, text, expected):
        result = matcher.match(text, ctx)

        assert (result.hour, result.minute) == expected
        assert result.defaulted_to_today is True

    @pytest.mark.parametrize("text", [
        "review 2430",
        "review 16:60",
        "call 9:30pm",
        "call 1630 mins",
        "order 100 pizzas",
        "room 12345",
        "v1.10:30",
    ])
    def test_rejects(self, matcher, ctx, text):
        assert matcher.match(text, ctx) is None

    def test_tomorrow_anchor(self, matcher, ctx):
        result = matcher.match("review tmrw 1630", ctx)

        assert (result.day, result.hour) == (22, 16)
        assert result.defaulted_to_today is False


class TestTwelveHourMatcher:
    """Test suite for 12-hour times"""

    @pytest.fixture
    def matcher(self):
        return TwelveHourMatcher()

    @pytest.mark.parametrize("text,expected", [
        ("sync 3.30pm", (15, 30)),
        ("sync 3:30pm", (15, 30)),
        ("sync 3pm", (15, 0)),
        ("sync 3 PM", (15, 0)),
        ("midnight snack 12am", (0, 0)),
        ("lunch 12pm", (12, 0)),
        ("late 11pm", (23, 0)),
    ])
    def test_times(self, matcher, ctx, text, expected):
        result = matcher.match(text, ctx)
        assert (result.hour, result.minute) == expected

    @pytest.mark.parametrize("text", ["sync 13pm", "sync 0am", "sync 3:75pm"])
    def test_rejects(self, matcher, ctx, text):
        assert matcher.match(text, ctx) is None


class TestRelativeOffsetMatcher:
    """Test suite for offsets from the reference time"""

    @pytest.fixture
    def matcher(self):
        return RelativeOffsetMatcher()

    @pytest.mark.parametrize("text,expected", [
        ("call in 30 min", (10, 30)),
        ("call in 50mins", (10, 50)),
        ("call in 2 hours", (12, 0)),
        ("call in 1 hr", (11, 0)),
        ("call in 90 minutes", (11, 30)),
    ])
    def test_offsets(self, matcher, ctx, text, expected):
        result = matcher.match(text, ctx)

        assert (result.hour, result.minute) == expected
        assert result.has_time is True

    def test_crosses_midnight(self, matcher):
        late = ResolutionContext(reference_now=datetime(2024, 10, 21, 23, 30))
        result = matcher.match("in 45 mins", late)

        assert (result.day, result.hour, result.minute) == (22, 0, 15)

    @pytest.mark.parametrize("unit,expected", [
        ("min", 1), ("mins", 1), ("minute", 1), ("minutes", 1),
        ("h", 60), ("hr", 60), ("hrs", 60), ("hour", 60), ("hours", 60),
        ("mi", None), ("people", None), ("pm", None),
    ])
    def test_unit_minutes(self, unit, expected):
        assert RelativeOffsetMatcher.unit_minutes(unit) == expected

    def test_rejects_zero_and_unknown_units(self, matcher, ctx):
        assert matcher.match("in 0 mins", ctx) is None
        assert matcher.match("5 people", ctx) is None

    def test_decimal_amount_is_not_an_offset(self, matcher, ctx):
        assert matcher.match("run 1.5 hours", ctx) is None


class TestWeekdayMatcher:
    """Test suite for weekday names"""

    @pytest.mark.parametrize("text,expected_day", [
        ("Meeting Friday", 25),
        ("Meeting next Friday", 25),
        ("Meeting this friday", 25),
        ("Meeting Monday", 21),
        ("Meeting Sunday", 27),
    ])
    def test_weekdays(self, ctx, text, expected_day):
        result = WeekdayMatcher().match(text, ctx)

        assert result.day == expected_day
        assert result.has_time is False

    def test_abbreviations_are_not_weekdays(self, ctx):
        assert WeekdayMatcher().match("Meeting fri", ctx) is None


def test_default_matchers_priority_order():
    """Test that the cascade runs in the documented order"""
    names = [matcher.name for matcher in default_matchers()]

    assert names == [
        "day_ordinal_time",
        "month_day",
        "day_ordinal",
        "time_24h",
        "time_12h",
        "relative_offset",
        "weekday",
    ]
