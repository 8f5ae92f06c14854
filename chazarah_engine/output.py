"""
Output Builder

Constructs JSON-ready responses from quarters, settlements and reports.
"""

from decimal import Decimal

from .dates import format_date, format_timestamp
from .models import ObligationReport, Quarter, QuarterSettlement


def to_money(value: Decimal) -> float:
    """Convert Decimal to float with 2 decimal places."""
    return round(float(value), 2)


def _fmt(value) -> str:
    """Format a number as currency string for descriptions."""
    return f"${value:,.2f}"


class OutputBuilder:
    """Builds the final output response."""

    def build_quarters(self, quarters: list[Quarter]) -> list[dict]:
        return [quarter.to_dict() for quarter in quarters]

    def build_settlement(self, settlement: QuarterSettlement) -> dict:
        """Render one settlement, with a description of its final balance."""
        return {
            "quarter_index": settlement.quarter_index,
            "quarter_start": format_timestamp(settlement.quarter_start),
            "quarter_end": format_timestamp(settlement.quarter_end),
            "is_active": settlement.is_active,
            "is_closed": settlement.is_closed,
            "minutes_owed": to_money(settlement.minutes_owed),
            "minutes_chazered": settlement.minutes_chazered,
            "amount_paid": to_money(settlement.amount_paid),
            "final_amount_owed": to_money(settlement.final_amount_owed),
            "description": self._describe(settlement),
        }

    def build_report(self, report: ObligationReport) -> dict:
        obligation = report.obligation
        return {
            "user_id": report.user_id,
            "jewish_year": report.jewish_year,
            "obligation": {
                "minutes_per_week": to_money(obligation.minutes_per_week),
                "is_default": obligation.is_default,
            },
            "obligation_missing": report.obligation_missing,
            "current_quarter_minutes_owed": report.current_quarter_minutes_owed,
            "quarters": [self.build_settlement(s) for s in report.settlements],
        }

    def _describe(self, settlement: QuarterSettlement) -> str:
        if not settlement.is_active:
            return (
                f"Quarter {settlement.quarter_index} starts on "
                f"{format_date(settlement.quarter_start.date())}"
            )

        owed = to_money(settlement.minutes_owed)
        chazered = settlement.minutes_chazered
        paid = to_money(settlement.amount_paid)

        if not settlement.is_closed:
            return (
                f"In progress: owed ({owed}) - chazered ({chazered}) - paid ({_fmt(paid)}) so far"
            )

        final = to_money(settlement.final_amount_owed)
        return f"Closed: owed ({owed}) - chazered ({chazered}) - paid ({_fmt(paid)}) = {_fmt(final)}"

