"""
Obligation Aggregator - Main Orchestrator

Runs the partitioner and the settlement calculator across the quarters of a
year for one user and assembles the ordered report.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict

from .calculators import PeriodPartitioner, SettlementCalculator
from .dates import FixedClock, SystemClock, parse_date
from .models import Obligation, ObligationReport, QuarterSettlement, Session, Year
from .output import OutputBuilder
from .store import InMemoryRecordStore, RecordStore
from .validators import InputValidator
from .years import find_current_year

logger = logging.getLogger(__name__)


class ObligationAggregator:
    """
    Main orchestrator for obligation reports.

    Pipeline:
    1. Fetch the obligation (default to a zero rate if missing)
    2. Partition the year into quarters
    3. Settle every quarter (concurrently, results ordered by index)
    4. Build the report
    """

    def __init__(self, store: RecordStore, clock=None):
        self.store = store
        self.clock = clock or SystemClock()
        self.partitioner = PeriodPartitioner()
        self.settlement_calculator = SettlementCalculator(store, self.clock)
        self.output_builder = OutputBuilder()

    def get_obligation(self, user_id: str, year: Year) -> Obligation:
        """
        Fetch the user's obligation for the year.

        A missing row is not an error: the rate defaults to zero and the
        returned obligation is flagged with is_default so callers can notify.
        """
        obligation = self.store.get_obligation(user_id, year.jewish_year)
        if obligation is None:
            logger.warning(f"No obligation for user {user_id} in year {year.jewish_year}; using 0 minutes/week")
            return Obligation.default(user_id, year.jewish_year)
        return obligation

    def get_user_quarters(self, user_id: str, year: Year) -> list[QuarterSettlement]:
        """
        Settle all quarters of a year for one user.

        Returns settlements ordered by quarter index, or an empty list if the
        year cannot be partitioned. Store failures propagate as QueryError.
        """
        obligation = self.get_obligation(user_id, year)
        return self._settle_all(user_id, year, obligation)

    def build_report(self, user_id: str, year: Year) -> ObligationReport:
        obligation = self.get_obligation(user_id, year)
        settlements = self._settle_all(user_id, year, obligation)
        return ObligationReport(
            user_id=user_id,
            jewish_year=year.jewish_year,
            obligation=obligation,
            settlements=settlements,
        )

    def _settle_all(self, user_id: str, year: Year, obligation: Obligation) -> list[QuarterSettlement]:
        quarters = self.partitioner.partition(year)
        if not quarters:
            logger.info(f"Year {year.jewish_year} could not be partitioned; returning no quarters")
            return []

        # Quarters share no state, so each is settled on its own worker
        with ThreadPoolExecutor(max_workers=len(quarters)) as executor:
            settlements = list(
                executor.map(
                    lambda quarter: self.settlement_calculator.settle(user_id, quarter, obligation),
                    quarters,
                )
            )

        settlements.sort(key=lambda s: s.quarter_index)
        return settlements


# =============================================================================
# DICTIONARY API (used by the HTTP and Lambda adapters)
# =============================================================================


def _year_from_payload(data: Dict[str, Any], today) -> Year:
    """Use the payload's year, or pick the current one from a list of years."""
    if "year" in data:
        return Year.from_dict(data["year"])

    years = [Year.from_dict(y) for y in data.get("years", [])]
    current = find_current_year(years, today)
    if current is None:
        raise ValueError(f"No year in the payload contains {today.isoformat()}")
    return current


def _clock_from_payload(data: Dict[str, Any]):
    if data.get("today") is None:
        return SystemClock()
    today = parse_date(data["today"])
    if today is None:
        raise ValueError(f"Invalid today date: {data['today']}")
    return FixedClock(today)


def process_report_from_dict(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Build an obligation report from a raw request payload.

    Expected keys: user_id, year (or years), optional obligation, sessions,
    payments and today (YYYY-MM-DD).
    """
    if "user_id" not in data:
        raise ValueError("user_id is required")

    clock = _clock_from_payload(data)
    year = _year_from_payload(data, clock.today())
    store = InMemoryRecordStore.from_dict(data, year)

    aggregator = ObligationAggregator(store, clock)
    report = aggregator.build_report(str(data["user_id"]), year)
    return aggregator.output_builder.build_report(report)


def partition_from_dict(data: Dict[str, Any]) -> Dict[str, Any]:
    """Return the quarter boundaries of the payload's year."""
    if "year" not in data:
        raise ValueError("year is required")

    year = Year.from_dict(data["year"])
    quarters = PeriodPartitioner().partition(year)
    return {
        "jewish_year": year.jewish_year,
        "quarters": OutputBuilder().build_quarters(quarters),
    }


def get_user_quarters(store: RecordStore, user_id: str, year: Year, clock=None) -> list[QuarterSettlement]:
    """Convenience wrapper around ObligationAggregator.get_user_quarters."""
    return ObligationAggregator(store, clock).get_user_quarters(user_id, year)


def validate_session_from_dict(data: Dict[str, Any]) -> Dict[str, Any]:
    """Check that a session belongs to the payload's year. Raises on failure."""
    if "year" not in data or "session" not in data:
        raise ValueError("year and session are required")

    year = Year.from_dict(data["year"])
    session = Session.from_dict(data["session"])
    InputValidator().validate_session(session, year)
    return {"valid": True, "jewish_year": year.jewish_year}
