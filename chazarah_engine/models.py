"""
Domain Models for the Chazarah Obligation Engine

These dataclasses provide type-safe representations of the records the engine
reads and the figures it derives. Monetary values and owed minutes use Decimal;
logged minutes are whole integers.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal

from .dates import format_timestamp, inclusive_day_count, parse_date, parse_timestamp

# =============================================================================
# INPUT MODELS
# =============================================================================


def _pick(data: dict, *keys, default=None):
    """Return the first key present in data (snake_case or store column name)."""
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


@dataclass(frozen=True)
class Year:
    """A Jewish year and its inclusive civil date range."""

    jewish_year: int
    start_date: date | None
    end_date: date | None

    @property
    def is_well_formed(self) -> bool:
        return (
            self.start_date is not None
            and self.end_date is not None
            and self.start_date < self.end_date
        )

    def contains(self, moment: datetime) -> bool:
        """True if moment falls on or between the year's start and end dates."""
        if not self.is_well_formed:
            return False
        return self.start_date <= moment.date() <= self.end_date

    @classmethod
    def from_dict(cls, data: dict) -> "Year":
        # Unparseable dates are kept as None; partitioning treats them as malformed
        return cls(
            jewish_year=int(_pick(data, "jewish_year", "JewishYear")),
            start_date=parse_date(_pick(data, "start_date", "StartDate")),
            end_date=parse_date(_pick(data, "end_date", "EndDate")),
        )


@dataclass(frozen=True)
class Obligation:
    """Minutes a user must review per week during one year."""

    user_id: str
    year_id: int
    minutes_per_week: Decimal = Decimal("0")
    is_default: bool = False  # True when no obligation row exists

    @classmethod
    def default(cls, user_id: str, year_id: int) -> "Obligation":
        return cls(user_id=user_id, year_id=year_id, minutes_per_week=Decimal("0"), is_default=True)

    @classmethod
    def from_dict(cls, data: dict) -> "Obligation":
        rate = _pick(data, "minutes_per_week", "ObligationPerWeek", default=0)
        return cls(
            user_id=str(_pick(data, "user_id", "UserId", default="")),
            year_id=int(_pick(data, "year_id", "YearId", default=0)),
            minutes_per_week=Decimal(str(rate)),
        )


@dataclass(frozen=True)
class Session:
    """A logged study session."""

    user_id: str
    start_time: datetime | None
    duration_ms: int
    year_id: int | None = None
    session_id: int | None = None
    note: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "Session":
        session_id = _pick(data, "session_id", "SessionId")
        year_id = _pick(data, "year_id", "YearId")
        return cls(
            user_id=str(_pick(data, "user_id", "UserId", default="")),
            start_time=parse_timestamp(_pick(data, "start_time", "SessionStartTime")),
            duration_ms=int(_pick(data, "duration_ms", "SessionLength", default=0)),
            year_id=int(year_id) if year_id is not None else None,
            session_id=int(session_id) if session_id is not None else None,
            note=_pick(data, "note", "SessionNote"),
        )


@dataclass(frozen=True)
class Payment:
    """A payment made against an obligation."""

    user_id: str
    amount: Decimal
    payment_date: date | None
    year_id: int | None = None
    payment_id: int | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "Payment":
        payment_id = _pick(data, "payment_id", "PaymentId")
        year_id = _pick(data, "year_id", "YearId")
        return cls(
            user_id=str(_pick(data, "user_id", "UserId", default="")),
            # A missing amount counts as nothing paid
            amount=Decimal(str(_pick(data, "amount", "PaymentAmount", default=0))),
            payment_date=parse_date(_pick(data, "payment_date", "PaymentDate")),
            year_id=int(year_id) if year_id is not None else None,
            payment_id=int(payment_id) if payment_id is not None else None,
        )


# =============================================================================
# DERIVED MODELS
# =============================================================================


@dataclass(frozen=True)
class Quarter:
    """One of the four contiguous reconciliation periods of a year."""

    index: int
    start: datetime
    end: datetime

    @property
    def start_date(self) -> date:
        return self.start.date()

    @property
    def end_date(self) -> date:
        return self.end.date()

    @property
    def day_count(self) -> int:
        return inclusive_day_count(self.start_date, self.end_date)

    def to_dict(self) -> dict:
        return {
            "quarter_index": self.index,
            "quarter_start": format_timestamp(self.start),
            "quarter_end": format_timestamp(self.end),
            "day_count": self.day_count,
        }


@dataclass(frozen=True)
class QuarterSettlement:
    """Owed, logged and paid figures for one user and one quarter."""

    quarter_index: int
    quarter_start: datetime
    quarter_end: datetime
    is_active: bool
    is_closed: bool = False
    minutes_owed: Decimal = Decimal("0")
    minutes_chazered: int = 0
    amount_paid: Decimal = Decimal("0")
    final_amount_owed: Decimal = Decimal("0")

    @classmethod
    def inactive(cls, quarter: Quarter) -> "QuarterSettlement":
        """Settlement for a quarter that has not started yet."""
        return cls(
            quarter_index=quarter.index,
            quarter_start=quarter.start,
            quarter_end=quarter.end,
            is_active=False,
        )


@dataclass
class ObligationReport:
    """All quarter settlements of one user for one year."""

    user_id: str
    jewish_year: int
    obligation: Obligation
    settlements: list[QuarterSettlement] = field(default_factory=list)

    @property
    def obligation_missing(self) -> bool:
        return self.obligation.is_default

    @property
    def current_quarter(self) -> QuarterSettlement | None:
        """The last quarter that has started, if any."""
        active = [s for s in self.settlements if s.is_active]
        return active[-1] if active else None

    @property
    def current_quarter_minutes_owed(self) -> int:
        """Minutes still owed in the current quarter, rounded to a whole minute."""
        current = self.current_quarter
        if current is None:
            return 0
        remaining = current.minutes_owed - current.minutes_chazered
        return int(remaining.to_integral_value(rounding=ROUND_HALF_UP))
