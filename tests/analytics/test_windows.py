"""
Tests for Time Windows
"""
import logging
import pytest
from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from poetry_console.analytics.temporal import normalize
from poetry_console.analytics.windows import (
    TimeWindow,
    resolve_now,
    sunday_weekday,
    week_bounds,
    window_predicate,
)

UTC = timezone.utc
NOW = datetime(2024, 5, 15, 10, 30, tzinfo=UTC)  # Wednesday


class TestTimeWindowParse:
    """Tests for window name parsing"""

    @pytest.mark.parametrize("name, expected", [
        ("today", TimeWindow.TODAY),
        ("day", TimeWindow.TODAY),
        ("Week", TimeWindow.WEEK),
        (" month ", TimeWindow.MONTH),
        ("year", TimeWindow.YEAR),
        ("all", TimeWindow.ALL),
        (TimeWindow.WEEK, TimeWindow.WEEK),
        (None, TimeWindow.ALL),
    ])
    def test_known_names(self, name, expected):
        assert TimeWindow.parse(name) is expected

    def test_unknown_name_defaults_to_all(self, caplog):
        with caplog.at_level(logging.WARNING):
            assert TimeWindow.parse("fortnight") is TimeWindow.ALL
        assert "fortnight" in caplog.text


class TestWeekBounds:
    """Tests for the Sunday-to-Saturday week"""

    def test_sunday_weekday(self):
        assert sunday_weekday(datetime(2024, 5, 12)) == 0  # Sunday
        assert sunday_weekday(datetime(2024, 5, 15)) == 3  # Wednesday
        assert sunday_weekday(datetime(2024, 5, 18)) == 6  # Saturday

    def test_bounds_of_midweek(self):
        start, end = week_bounds(NOW)
        assert start == datetime(2024, 5, 12, 0, 0, tzinfo=UTC)
        assert end == datetime(2024, 5, 18, 23, 59, 59, 999999, tzinfo=UTC)

    def test_bounds_on_sunday(self):
        start, end = week_bounds(datetime(2024, 5, 12, 0, 0, tzinfo=UTC))
        assert start == datetime(2024, 5, 12, tzinfo=UTC)
        assert end.day == 18

    def test_bounds_across_month(self):
        start, end = week_bounds(datetime(2024, 6, 1, 12, 0, tzinfo=UTC))  # Saturday
        assert start == datetime(2024, 5, 26, tzinfo=UTC)
        assert end.date() == datetime(2024, 6, 1).date()

    def test_bounds_keep_wall_clock_across_dst(self):
        """Spring-forward week: Sunday starts on EST, Saturday ends on EDT"""
        new_york = ZoneInfo("America/New_York")
        start, end = week_bounds(datetime(2024, 3, 13, 12, 0, tzinfo=new_york))

        assert (start.hour, start.minute) == (0, 0)
        assert start.utcoffset() == timedelta(hours=-5)
        assert end.utcoffset() == timedelta(hours=-4)


class TestWindowPredicate:
    """Tests for window membership"""

    def test_today(self):
        inside = window_predicate("today", NOW, tz=UTC)
        assert inside(datetime(2024, 5, 15, 0, 0, tzinfo=UTC))
        assert inside(datetime(2024, 5, 15, 23, 59, tzinfo=UTC))
        assert not inside(datetime(2024, 5, 14, 23, 59, tzinfo=UTC))

    def test_day_alias_matches_today(self):
        moment = datetime(2024, 5, 15, 1, 0, tzinfo=UTC)
        assert window_predicate("day", NOW, tz=UTC)(moment)
        assert not window_predicate("day", NOW, tz=UTC)(moment - timedelta(days=1))

    def test_today_compares_in_engine_zone(self):
        """01:00+02:00 on the 16th is still the 15th in UTC"""
        moment = datetime(2024, 5, 16, 1, 0, tzinfo=timezone(timedelta(hours=2)))
        assert window_predicate(TimeWindow.TODAY, NOW, tz=UTC)(moment)

    def test_week_is_inclusive(self):
        inside = window_predicate("week", NOW, tz=UTC)
        assert inside(datetime(2024, 5, 12, 0, 0, tzinfo=UTC))
        assert inside(datetime(2024, 5, 18, 23, 59, 59, tzinfo=UTC))
        assert not inside(datetime(2024, 5, 11, 23, 59, 59, tzinfo=UTC))
        assert not inside(datetime(2024, 5, 19, 0, 0, tzinfo=UTC))

    def test_week_uses_local_dates_across_dst(self, new_york_host):
        """Host-local zone, now = Wednesday 2024-03-13 12:00 EDT"""
        now = resolve_now(datetime(2024, 3, 13, 16, 0, tzinfo=UTC))
        inside = window_predicate("week", now)

        assert not inside(normalize("2024-03-10T04:30:00Z"))  # Sat 9th 23:30 EST
        assert inside(normalize("2024-03-10T05:30:00Z"))      # Sun 10th 00:30 EST
        assert inside(normalize("2024-03-17T03:30:00Z"))      # Sat 16th 23:30 EDT
        assert not inside(normalize("2024-03-17T04:30:00Z"))  # Sun 17th 00:30 EDT

    def test_week_in_fall_back_zone(self):
        """Configured zone, now = Wednesday 2024-11-06 in New York"""
        new_york = ZoneInfo("America/New_York")
        now = datetime(2024, 11, 6, 12, 0, tzinfo=new_york)
        inside = window_predicate("week", now, tz=new_york)

        assert inside(datetime(2024, 11, 3, 4, 30, tzinfo=UTC))       # Sun 3rd 00:30 EDT
        assert not inside(datetime(2024, 11, 3, 3, 59, tzinfo=UTC))   # Sat 2nd 23:59 EDT
        assert inside(datetime(2024, 11, 10, 4, 59, tzinfo=UTC))      # Sat 9th 23:59 EST

    def test_month(self):
        inside = window_predicate("month", NOW, tz=UTC)
        assert inside(datetime(2024, 5, 1, tzinfo=UTC))
        assert not inside(datetime(2024, 4, 30, tzinfo=UTC))
        assert not inside(datetime(2023, 5, 15, tzinfo=UTC))

    def test_year(self):
        inside = window_predicate("year", NOW, tz=UTC)
        assert inside(datetime(2024, 1, 1, tzinfo=UTC))
        assert not inside(datetime(2023, 12, 31, tzinfo=UTC))

    def test_all_and_unknown(self):
        ancient = datetime(1970, 1, 1, tzinfo=UTC)
        assert window_predicate("all", NOW, tz=UTC)(ancient)
        assert window_predicate("bogus", NOW, tz=UTC)(ancient)


class TestResolveNow:
    """Tests for the reference instant"""

    def test_given_instant_is_localized(self):
        assert resolve_now(NOW, UTC) == NOW

    def test_defaults_to_current_time(self):
        before = datetime.now(UTC)
        now = resolve_now(None, UTC)
        assert now.tzinfo is not None
        assert before <= now <= datetime.now(UTC)
