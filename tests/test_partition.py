"""
Unit Tests for Period Partitioner

Tests verify quarters are contiguous, exhaustive and balanced by day count.
"""

from datetime import date, datetime, timedelta

import pytest

from chazarah_engine.calculators.partition import PeriodPartitioner, partition
from chazarah_engine.models import Year


class TestPartitionYear5785:
    """Year 5785: 2024-09-15 to 2025-09-15."""

    @pytest.fixture
    def quarters(self):
        year = Year(jewish_year=5785, start_date=date(2024, 9, 15), end_date=date(2025, 9, 15))
        return PeriodPartitioner().partition(year)

    def test_four_quarters_in_index_order(self, quarters):
        assert [q.index for q in quarters] == [1, 2, 3, 4]

    def test_first_quarter_starts_two_days_after_year_start(self, quarters):
        """Window opens at S+2, one second past midnight."""
        assert quarters[0].start == datetime(2024, 9, 17, 0, 0, 1)

    def test_quarter_boundaries(self, quarters):
        """364 days → 91 days per quarter, no remainder."""
        assert quarters[0].end == datetime(2024, 12, 16, 23, 59, 59)
        assert quarters[1].start == datetime(2024, 12, 17, 0, 0, 0)
        assert quarters[1].end == datetime(2025, 3, 17, 23, 59, 59)
        assert quarters[2].start == datetime(2025, 3, 18, 0, 0, 0)
        assert quarters[2].end == datetime(2025, 6, 16, 23, 59, 59)
        assert quarters[3].start == datetime(2025, 6, 17, 0, 0, 0)
        assert quarters[3].end == datetime(2025, 9, 15, 23, 59, 59)

    def test_every_quarter_is_91_days(self, quarters):
        assert [q.day_count for q in quarters] == [91, 91, 91, 91]

    def test_rendered_as_civil_timestamps(self, quarters):
        rendered = quarters[0].to_dict()
        assert rendered["quarter_start"] == "2024-09-17 00:00:01"
        assert rendered["quarter_end"] == "2024-12-16 23:59:59"
        assert rendered["day_count"] == 91


class TestRemainderAllocation:
    """Indivisible day counts put the remainder on quarter 4."""

    def test_remainder_goes_to_last_quarter(self):
        """2025-01-03 to 2025-12-31 is 363 days → 90, 90, 90, 93."""
        quarters = partition(Year(5786, date(2025, 1, 1), date(2025, 12, 31)))

        assert [q.day_count for q in quarters] == [90, 90, 90, 93]
        assert quarters[0].end_date == date(2025, 4, 2)
        assert quarters[3].end_date == date(2025, 12, 31)

    def test_smallest_partitionable_window(self):
        """Four days in the window → one day per quarter."""
        quarters = partition(Year(1, date(2025, 1, 1), date(2025, 1, 6)))

        assert [q.start_date for q in quarters] == [
            date(2025, 1, 3),
            date(2025, 1, 4),
            date(2025, 1, 5),
            date(2025, 1, 6),
        ]
        assert all(q.day_count == 1 for q in quarters)


class TestPartitionProperties:
    """Contiguity and balance over a spread of year lengths and start dates."""

    YEARS = [
        Year(5783, date(2022, 9, 26), date(2023, 9, 15)),
        Year(5784, date(2023, 9, 16), date(2024, 10, 2)),
        Year(5785, date(2024, 9, 15), date(2025, 9, 15)),
        Year(5786, date(2025, 9, 23), date(2026, 9, 11)),
        Year(9999, date(2024, 2, 27), date(2024, 3, 30)),
    ]

    @pytest.mark.parametrize("year", YEARS, ids=lambda y: str(y.jewish_year))
    def test_quarters_are_contiguous_and_exhaustive(self, year):
        quarters = partition(year)

        assert quarters[0].start_date == year.start_date + timedelta(days=2)
        assert quarters[-1].end_date == year.end_date
        for previous, current in zip(quarters, quarters[1:]):
            assert current.start_date == previous.end_date + timedelta(days=1)
            assert current.start - previous.end == timedelta(seconds=1)

    @pytest.mark.parametrize("year", YEARS, ids=lambda y: str(y.jewish_year))
    def test_day_counts_balance(self, year):
        quarters = partition(year)
        total_days = (year.end_date - (year.start_date + timedelta(days=2))).days + 1
        base, remainder = divmod(total_days, 4)

        assert [q.day_count for q in quarters] == [base, base, base, base + remainder]
        assert sum(q.day_count for q in quarters) == total_days

    @pytest.mark.parametrize("year", YEARS, ids=lambda y: str(y.jewish_year))
    def test_every_quarter_ends_at_last_second(self, year):
        for quarter in partition(year):
            assert (quarter.end.hour, quarter.end.minute, quarter.end.second) == (23, 59, 59)


class TestMalformedYears:
    """Malformed years produce no quarters and never raise."""

    @pytest.fixture
    def partitioner(self):
        return PeriodPartitioner()

    def test_end_before_start(self, partitioner):
        assert partitioner.partition(Year(1, date(2025, 9, 15), date(2024, 9, 15))) == []

    def test_start_equals_end(self, partitioner):
        assert partitioner.partition(Year(1, date(2025, 1, 1), date(2025, 1, 1))) == []

    def test_end_within_grace_days(self, partitioner):
        """E <= S+2 leaves nothing to partition."""
        assert partitioner.partition(Year(1, date(2025, 1, 1), date(2025, 1, 3))) == []

    def test_window_shorter_than_four_days(self, partitioner):
        assert partitioner.partition(Year(1, date(2025, 1, 1), date(2025, 1, 5))) == []

    def test_unparseable_dates(self, partitioner):
        year = Year.from_dict({"JewishYear": 5785, "StartDate": "not a date", "EndDate": "2025-09-15"})

        assert year.start_date is None
        assert partitioner.partition(year) == []

    def test_missing_dates(self, partitioner):
        assert partitioner.partition(Year(1, None, None)) == []
