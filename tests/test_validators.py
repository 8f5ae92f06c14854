"""
Unit Tests for Input Validation and the In-Memory Record Store
"""

from datetime import date, datetime
from decimal import Decimal

import pytest

from chazarah_engine.errors import InvalidSessionAssignment
from chazarah_engine.models import Obligation, Payment, Session, Year
from chazarah_engine.store import InMemoryRecordStore
from chazarah_engine.validators import InputValidator

YEAR = Year(jewish_year=5785, start_date=date(2024, 9, 15), end_date=date(2025, 9, 15))


def _session(start, duration_ms=60000, **kwargs):
    return Session(user_id="u1", start_time=start, duration_ms=duration_ms, **kwargs)


class TestSessionValidation:
    """A session's start time must fall within its year."""

    @pytest.fixture
    def validator(self):
        return InputValidator()

    def test_session_inside_year_passes(self, validator):
        validator.validate_session(_session(datetime(2025, 1, 1, 9, 0)), YEAR)

    def test_first_and_last_day_of_year_pass(self, validator):
        validator.validate_session(_session(datetime(2024, 9, 15, 0, 0)), YEAR)
        validator.validate_session(_session(datetime(2025, 9, 15, 23, 0)), YEAR)

    def test_session_before_year_rejected(self, validator):
        with pytest.raises(InvalidSessionAssignment, match="Jewish year 5785"):
            validator.validate_session(_session(datetime(2024, 9, 14, 23, 0)), YEAR)

    def test_session_after_year_rejected(self, validator):
        with pytest.raises(InvalidSessionAssignment):
            validator.validate_session(_session(datetime(2025, 9, 16, 0, 30)), YEAR)

    def test_missing_start_time_rejected(self, validator):
        with pytest.raises(InvalidSessionAssignment, match="start time is required"):
            validator.validate_session(_session(None), YEAR)

    def test_year_without_dates_rejected(self, validator):
        with pytest.raises(InvalidSessionAssignment, match="missing start/end date"):
            validator.validate_session(_session(datetime(2025, 1, 1)), Year(5785, None, None))

    def test_invalid_assignment_is_a_value_error(self, validator):
        with pytest.raises(ValueError):
            validator.validate_session(_session(datetime(2030, 1, 1)), YEAR)

    def test_negative_duration_rejected(self, validator):
        with pytest.raises(ValueError, match="duration_ms cannot be negative"):
            validator.validate_session(_session(datetime(2025, 1, 1), duration_ms=-1), YEAR)


class TestRecordValidation:
    @pytest.fixture
    def validator(self):
        return InputValidator()

    def test_negative_payment_rejected(self, validator):
        payment = Payment(user_id="u1", amount=Decimal("-1"), payment_date=date(2025, 1, 1))

        with pytest.raises(ValueError, match="amount cannot be negative"):
            validator.validate_payment(payment)

    def test_payment_without_date_rejected(self, validator):
        with pytest.raises(ValueError, match="payment_date is required"):
            validator.validate_payment(Payment(user_id="u1", amount=Decimal("1"), payment_date=None))

    def test_negative_rate_rejected(self, validator):
        obligation = Obligation(user_id="u1", year_id=5785, minutes_per_week=Decimal("-5"))

        with pytest.raises(ValueError, match="minutes_per_week cannot be negative"):
            validator.validate_obligation(obligation)


class TestInMemoryRecordStore:
    """Store writes validate; reads filter by user and inclusive range."""

    @pytest.fixture
    def store(self):
        return InMemoryRecordStore()

    def test_add_session_assigns_id_and_year(self, store):
        first = store.add_session(_session(datetime(2025, 1, 1, 9, 0)), YEAR)
        second = store.add_session(_session(datetime(2025, 1, 2, 9, 0)), YEAR)

        assert (first.session_id, second.session_id) == (1, 2)
        assert first.year_id == 5785

    def test_add_session_outside_year_not_stored(self, store):
        with pytest.raises(InvalidSessionAssignment):
            store.add_session(_session(datetime(2026, 1, 1)), YEAR)

        assert store.get_sessions("u1", datetime(2000, 1, 1), datetime(2100, 1, 1)) == []

    def test_update_session_revalidates(self, store):
        session = store.add_session(_session(datetime(2025, 1, 1, 9, 0)), YEAR)

        with pytest.raises(InvalidSessionAssignment):
            store.update_session(session.session_id, YEAR, start_time=datetime(2026, 1, 1))

        stored = store.get_sessions("u1", datetime(2025, 1, 1), datetime(2025, 1, 1, 23, 59, 59))
        assert stored == [session]

    def test_update_session_applies_changes(self, store):
        session = store.add_session(_session(datetime(2025, 1, 1, 9, 0)), YEAR)
        updated = store.update_session(session.session_id, YEAR, duration_ms=120000, note="Shabbos")

        assert updated.duration_ms == 120000
        assert updated.note == "Shabbos"

    def test_update_unknown_session(self, store):
        with pytest.raises(KeyError):
            store.update_session(99, YEAR, duration_ms=1)

    def test_delete_session(self, store):
        session = store.add_session(_session(datetime(2025, 1, 1, 9, 0)), YEAR)

        assert store.delete_session(session.session_id) is True
        assert store.delete_session(session.session_id) is False

    def test_sessions_ordered_by_start(self, store):
        store.add_session(_session(datetime(2025, 1, 3, 9, 0)), YEAR)
        store.add_session(_session(datetime(2025, 1, 1, 9, 0)), YEAR)

        result = store.get_sessions("u1", datetime(2025, 1, 1), datetime(2025, 1, 31))
        assert [s.start_time.day for s in result] == [1, 3]

    def test_payments_inclusive_range(self, store):
        for day in (1, 15, 31):
            store.add_payment(Payment(user_id="u1", amount=Decimal(day), payment_date=date(2025, 1, day)))

        result = store.get_payments("u1", date(2025, 1, 1), date(2025, 1, 15))
        assert [p.amount for p in result] == [Decimal(1), Decimal(15)]

    def test_missing_obligation_is_none(self, store):
        assert store.get_obligation("u1", 5785) is None
