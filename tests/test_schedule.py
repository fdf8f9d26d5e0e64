"""Tests for payment cycle date generation."""

import pytest
from datetime import date, timedelta

from supertracker.models.tracker import PaymentCycle
from supertracker.schedule import cycle_day_keys, generate_cycle_dates, is_cycle_day


class TestGenerateCycleDates:
    """Tests for generate_cycle_dates."""

    def test_monthly_first_of_each_month(self):
        """Test monthly gives 12 dates, one per month, starting January 1."""
        dates = generate_cycle_dates("monthly", 2024)
        assert dates == [date(2024, month, 1) for month in range(1, 13)]

    def test_weekly_stays_in_year(self):
        """Test weekly dates start January 1 and never leave the year."""
        dates = generate_cycle_dates(PaymentCycle.WEEKLY, 2024)
        assert dates[0] == date(2024, 1, 1)
        assert all(d.year == 2024 for d in dates)
        assert len(dates) == 53
        assert dates[-1] == date(2024, 12, 30)

    @pytest.mark.parametrize("cycle,days", [
        ("weekly", 7),
        ("biweekly", 14),
        ("quadweekly", 28),
    ])
    def test_day_steps(self, cycle, days):
        """Test fixed day steps between consecutive dates."""
        dates = generate_cycle_dates(cycle, 2023)
        gaps = {later - earlier for earlier, later in zip(dates, dates[1:])}
        assert gaps == {timedelta(days=days)}

    @pytest.mark.parametrize("cycle,expected", [
        ("biweekly", 27),
        ("quadweekly", 14),
        ("quarterly", 4),
        ("halfyear", 2),
        ("yearly", 1),
    ])
    def test_counts_2024(self, cycle, expected):
        """Test date counts for a leap year."""
        assert len(generate_cycle_dates(cycle, 2024)) == expected

    def test_quarterly_dates(self):
        """Test quarterly lands on the first of each quarter."""
        assert generate_cycle_dates("quarterly", 2025) == [
            date(2025, 1, 1),
            date(2025, 4, 1),
            date(2025, 7, 1),
            date(2025, 10, 1),
        ]

    def test_yearly_is_january_first_only(self):
        """Test yearly gives just January 1."""
        assert generate_cycle_dates("yearly", 2030) == [date(2030, 1, 1)]

    @pytest.mark.parametrize("cycle,expected", [
        ("weekly", 53),
        ("monthly", 12),
        ("quarterly", 4),
        ("yearly", 1),
    ])
    def test_last_calendar_year(self, cycle, expected):
        """Test year 9999 stops at the end of the calendar instead of overflowing."""
        dates = generate_cycle_dates(cycle, 9999)
        assert len(dates) == expected
        assert all(d.year == 9999 for d in dates)

    @pytest.mark.parametrize("cycle", ["none", "", None, PaymentCycle.NONE, "fortnightly"])
    def test_no_cycle_is_empty(self, cycle):
        """Test none, empty and unknown cycles give no dates."""
        assert generate_cycle_dates(cycle, 2024) == []

    def test_fresh_list_each_call(self):
        """Test results are recomputed and independent."""
        first = generate_cycle_dates("monthly", 2024)
        first.clear()
        assert len(generate_cycle_dates("monthly", 2024)) == 12


class TestCycleDayHelpers:
    """Tests for the day-marking helpers."""

    def test_cycle_day_keys(self):
        """Test dates become DD.MM keys."""
        dates = generate_cycle_dates("quarterly", 2024)
        assert cycle_day_keys(dates) == {"01.01", "01.04", "01.07", "01.10"}

    def test_is_cycle_day_ignores_year(self):
        """Test membership by day and month only."""
        dates = generate_cycle_dates("halfyear", 2024)
        assert is_cycle_day(dates, 1, 7) is True
        assert is_cycle_day(dates, 2, 7) is False
