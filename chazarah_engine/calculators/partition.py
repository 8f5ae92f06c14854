"""
Period Partitioner

Splits a year's date range into four contiguous quarters.
"""

from datetime import datetime, time, timedelta

from ..models import Quarter, Year


class PeriodPartitioner:
    """Divides a year into quarters with exact day-count balancing."""

    GRACE_DAYS = 2
    QUARTER_COUNT = 4

    FIRST_START_TIME = time(0, 0, 1)
    START_TIME = time(0, 0, 0)
    END_TIME = time(23, 59, 59)

    def partition(self, year: Year) -> list[Quarter]:
        """
        Partition a year into four quarters.

        The window opens GRACE_DAYS after the year's start and closes on its
        end date. With D inclusive days in the window, quarters 1-3 get
        floor(D/4) days each and quarter 4 gets the rest, never past the
        year's end.

        Returns an empty list for a malformed year (missing dates, or an end
        that is not after the adjusted start) and for windows too short to
        hold four one-day quarters.
        """
        if year.start_date is None or year.end_date is None:
            return []

        window_start = year.start_date + timedelta(days=self.GRACE_DAYS)
        window_end = year.end_date
        if window_end <= window_start:
            return []

        total_days = (window_end - window_start).days + 1
        if total_days < self.QUARTER_COUNT:
            # Not enough days to give every quarter at least one
            return []
        base_days, remainder = divmod(total_days, self.QUARTER_COUNT)

        quarters = []
        quarter_start = window_start
        for index in range(1, self.QUARTER_COUNT + 1):
            length = base_days
            if index == self.QUARTER_COUNT:
                length += remainder

            quarter_end = min(quarter_start + timedelta(days=length - 1), window_end)
            start_time = self.FIRST_START_TIME if index == 1 else self.START_TIME

            quarters.append(
                Quarter(
                    index=index,
                    start=datetime.combine(quarter_start, start_time),
                    end=datetime.combine(quarter_end, self.END_TIME),
                )
            )
            quarter_start = quarter_end + timedelta(days=1)

        return quarters


def partition(year: Year) -> list[Quarter]:
    """Convenience wrapper around PeriodPartitioner.partition."""
    return PeriodPartitioner().partition(year)
