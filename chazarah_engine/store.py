"""
Record Stores

The engine only reads obligations, sessions and payments. `RecordStore` is the
read interface it depends on; `InMemoryRecordStore` backs the HTTP adapters and
the tests.
"""

from abc import ABC, abstractmethod
from dataclasses import replace
from datetime import date, datetime

from .models import Obligation, Payment, Session, Year
from .validators import InputValidator


class RecordStore(ABC):
    """Read access to one user's obligation, sessions and payments."""

    @abstractmethod
    def get_obligation(self, user_id: str, year_id: int) -> Obligation | None:
        """Return the obligation for (user, year), or None if there is none."""
        raise NotImplementedError

    @abstractmethod
    def get_sessions(self, user_id: str, start: datetime, end: datetime) -> list[Session]:
        """Sessions whose start time is within [start, end], oldest first."""
        raise NotImplementedError

    @abstractmethod
    def get_payments(self, user_id: str, start_date: date, end_date: date) -> list[Payment]:
        """Payments dated within [start_date, end_date], oldest first."""
        raise NotImplementedError


class InMemoryRecordStore(RecordStore):
    """
    Record store kept in local lists (used for request payloads and tests).

    Sessions are validated against their year when added or updated.
    """

    def __init__(self, validator: InputValidator | None = None):
        self.validator = validator or InputValidator()
        self._obligations: dict[tuple[str, int], Obligation] = {}
        self._sessions: list[Session] = []
        self._payments: list[Payment] = []
        self._next_session_id = 1

    # -- writes ---------------------------------------------------------------

    def add_obligation(self, obligation: Obligation) -> Obligation:
        self.validator.validate_obligation(obligation)
        self._obligations[(obligation.user_id, obligation.year_id)] = obligation
        return obligation

    def add_session(self, session: Session, year: Year) -> Session:
        self.validator.validate_session(session, year)
        if session.session_id is None:
            session = replace(session, session_id=self._next_session_id)
        self._next_session_id = max(self._next_session_id, session.session_id) + 1
        if session.year_id is None:
            session = replace(session, year_id=year.jewish_year)
        self._sessions.append(session)
        return session

    def update_session(self, session_id: int, year: Year, **changes) -> Session:
        """Apply changes to a stored session, re-validating it against the year."""
        for position, existing in enumerate(self._sessions):
            if existing.session_id == session_id:
                updated = replace(existing, **changes)
                self.validator.validate_session(updated, year)
                self._sessions[position] = updated
                return updated
        raise KeyError(f"Session not found: {session_id}")

    def delete_session(self, session_id: int) -> bool:
        remaining = [s for s in self._sessions if s.session_id != session_id]
        deleted = len(remaining) != len(self._sessions)
        self._sessions = remaining
        return deleted

    def add_payment(self, payment: Payment) -> Payment:
        self.validator.validate_payment(payment)
        self._payments.append(payment)
        return payment

    # -- reads ----------------------------------------------------------------

    def get_obligation(self, user_id: str, year_id: int) -> Obligation | None:
        return self._obligations.get((user_id, year_id))

    def get_sessions(self, user_id: str, start: datetime, end: datetime) -> list[Session]:
        matches = [
            s for s in self._sessions
            if s.user_id == user_id and start <= s.start_time <= end
        ]
        return sorted(matches, key=lambda s: s.start_time)

    def get_payments(self, user_id: str, start_date: date, end_date: date) -> list[Payment]:
        matches = [
            p for p in self._payments
            if p.user_id == user_id and start_date <= p.payment_date <= end_date
        ]
        return sorted(matches, key=lambda p: p.payment_date)

    @classmethod
    def from_dict(cls, data: dict, year: Year) -> "InMemoryRecordStore":
        """
        Load a store from a request payload.

        Records without a user id are assigned to the payload's user_id.
        """
        store = cls()
        user_id = str(data["user_id"])

        obligation_data = data.get("obligation")
        if obligation_data is not None:
            obligation = Obligation.from_dict(
                {"user_id": user_id, "year_id": year.jewish_year, **obligation_data}
            )
            store.add_obligation(obligation)

        for session_data in data.get("sessions", []):
            store.add_session(Session.from_dict({"user_id": user_id, **session_data}), year)

        for payment_data in data.get("payments", []):
            store.add_payment(Payment.from_dict({"user_id": user_id, **payment_data}))

        return store
