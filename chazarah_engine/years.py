"""
Year Lookup Helpers
"""

from datetime import date

from .models import Year


def is_current_year(year: Year | None, today: date) -> bool:
    """True if today falls within the year's start and end dates."""
    if year is None or year.start_date is None or year.end_date is None:
        return False
    return year.start_date <= today <= year.end_date


def find_current_year(years: list[Year], today: date) -> Year | None:
    """Return the first year that contains today, or None."""
    for year in years:
        if is_current_year(year, today):
            return year
    return None
