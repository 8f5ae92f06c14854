"""
Input Validation for the Chazarah Obligation Engine

Validates records before they are written to a store or fed to the engine.
Raises ValueError (or InvalidSessionAssignment) with clear messages.
"""

from .errors import InvalidSessionAssignment
from .models import Obligation, Payment, Session, Year


class InputValidator:
    """Validates records according to business rules."""

    def validate_session(self, session: Session, year: Year) -> None:
        """
        A session must have a start time inside its year and a non-negative length.

        Raises InvalidSessionAssignment when the session cannot belong to the year.
        """
        if session.start_time is None:
            raise InvalidSessionAssignment("Session start time is required.")

        if year is None or year.start_date is None or year.end_date is None:
            raise InvalidSessionAssignment("Year is missing start/end date.")

        if not year.contains(session.start_time):
            raise InvalidSessionAssignment(
                f"Session start time must fall within Jewish year {year.jewish_year} "
                f"({year.start_date.isoformat()} - {year.end_date.isoformat()}), "
                f"got: {session.start_time.isoformat(sep=' ')}"
            )

        if session.duration_ms < 0:
            raise ValueError(f"duration_ms cannot be negative, got: {session.duration_ms}")

    def validate_payment(self, payment: Payment) -> None:
        if payment.amount < 0:
            raise ValueError(f"amount cannot be negative, got: {payment.amount}")

        if payment.payment_date is None:
            raise ValueError(f"payment_date is required: {payment}")

    def validate_obligation(self, obligation: Obligation) -> None:
        if obligation.minutes_per_week < 0:
            raise ValueError(
                f"minutes_per_week cannot be negative, got: {obligation.minutes_per_week}"
            )
