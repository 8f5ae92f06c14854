"""
Quarter Settlement Calculator

Computes minutes owed, minutes logged, amount paid and the final balance for
one user and one quarter. Money and owed minutes use Decimal with
ROUND_HALF_UP rounding.
"""

from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from ..dates import SystemClock, end_of_day, ms_to_minutes, weeks_between
from ..errors import QueryError
from ..models import Obligation, Quarter, QuarterSettlement
from ..store import RecordStore


def quantize_money(value: Decimal) -> Decimal:
    """Round to 2 decimal places using ROUND_HALF_UP."""
    return value.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)


class SettlementCalculator:
    """Settles one quarter against a user's weekly obligation."""

    def __init__(self, store: RecordStore, clock=None):
        self.store = store
        self.clock = clock or SystemClock()

    def settle(self, user_id: str, quarter: Quarter, obligation: Obligation) -> QuarterSettlement:
        """
        Settle a quarter as of today.

        - Future quarter: inactive, all figures zero, no store queries
        - Started quarter: figures cover quarter start through min(today, end)
        - Closed quarter (today after its end): final amount owed is
          minutes owed - minutes chazered - amount paid, and may be negative
        """
        today = self.clock.today()

        if today < quarter.start_date:
            return QuarterSettlement.inactive(quarter)

        effective_end = min(today, quarter.end_date)

        minutes_chazered = self._minutes_chazered(user_id, quarter, effective_end)
        minutes_owed = self._minutes_owed(obligation, quarter.start_date, effective_end)
        amount_paid = self._amount_paid(user_id, quarter.start_date, effective_end)

        is_closed = today > quarter.end_date
        final_amount_owed = Decimal('0')
        if is_closed:
            final_amount_owed = minutes_owed - minutes_chazered - amount_paid

        return QuarterSettlement(
            quarter_index=quarter.index,
            quarter_start=quarter.start,
            quarter_end=quarter.end,
            is_active=True,
            is_closed=is_closed,
            minutes_owed=minutes_owed,
            minutes_chazered=minutes_chazered,
            amount_paid=amount_paid,
            final_amount_owed=final_amount_owed,
        )

    def _minutes_chazered(self, user_id: str, quarter: Quarter, effective_end: date) -> int:
        """
        Whole minutes logged in the range.

        Durations are summed in milliseconds and floored once, so partial
        minutes from separate sessions still add up.
        """
        try:
            sessions = self.store.get_sessions(user_id, quarter.start, end_of_day(effective_end))
        except QueryError:
            raise
        except Exception as e:
            raise QueryError(f"Session lookup failed for user {user_id}: {e}", user_id) from e

        total_ms = sum(session.duration_ms for session in sessions)
        return ms_to_minutes(total_ms)

    def _minutes_owed(self, obligation: Obligation, start: date, end: date) -> Decimal:
        """Weekly rate times the (fractional) number of weeks in the range."""
        return quantize_money(obligation.minutes_per_week * weeks_between(start, end))

    def _amount_paid(self, user_id: str, start: date, end: date) -> Decimal:
        try:
            payments = self.store.get_payments(user_id, start, end)
        except QueryError:
            raise
        except Exception as e:
            raise QueryError(f"Payment lookup failed for user {user_id}: {e}", user_id) from e

        return sum((payment.amount for payment in payments), Decimal('0'))
