"""Quarterly estimated tax scheduler.

Projects the current-year liability, computes the IRC Section 6654(d) safe
harbors, and lays out the four Form 1040-ES installments against payments
already made. ``current_date`` is always supplied by the caller.
"""

import logging
from collections import defaultdict
from collections.abc import Sequence
from datetime import date
from decimal import Decimal

from taxcore.engines.brackets import (
    SAFE_HARBOR_CURRENT_YEAR_RATE,
    SAFE_HARBOR_HIGH_INCOME_AGI,
    SAFE_HARBOR_HIGH_INCOME_PRIOR_YEAR_RATE,
    SAFE_HARBOR_PRIOR_YEAR_RATE,
)
from taxcore.engines.estimator import TaxEstimator
from taxcore.engines.money import (
    ZERO,
    add,
    apply_rate,
    clamp_min,
    round_to_whole_dollar,
    subtract,
    sum_all,
    to_decimal,
)
from taxcore.models.enums import FilingStatus, QuarterStatus, UnderpaymentRisk, parse_filing_status
from taxcore.models.income import IncomeSummary, QuarterlyPaymentMade
from taxcore.models.reports import QuarterlyEstimateResult, QuarterPayment

logger = logging.getLogger(__name__)


def quarter_due_dates(tax_year: int) -> tuple[date, date, date, date]:
    """Form 1040-ES due dates: Apr 15, Jun 15, Sep 15, and Jan 15 of the next year."""
    return (
        date(tax_year, 4, 15),
        date(tax_year, 6, 15),
        date(tax_year, 9, 15),
        date(tax_year + 1, 1, 15),
    )


def split_into_quarters(required: Decimal) -> list[Decimal]:
    """Split an annual amount into four whole-dollar installments summing exactly.

    Installments are differences of the rounded running totals, so they can
    differ by a dollar: 10,002 splits as 2,501 / 2,500 / 2,501 / 2,500.
    """
    cumulative = [round_to_whole_dollar(required * q / 4) for q in range(5)]
    return [cumulative[q] - cumulative[q - 1] for q in range(1, 5)]


def quarter_status(
    due_date: date, amount_due: Decimal, amount_paid: Decimal, current_date: date
) -> QuarterStatus:
    if amount_paid >= amount_due:
        return QuarterStatus.PAID
    if current_date > due_date:
        return QuarterStatus.OVERDUE
    return QuarterStatus.UPCOMING


class QuarterlyEstimator:
    """Builds the quarterly estimated payment schedule."""

    def __init__(self, estimator: TaxEstimator | None = None) -> None:
        self.estimator = estimator or TaxEstimator()

    def calculate(
        self,
        tax_year: int,
        filing_status: FilingStatus | str,
        projected_income: IncomeSummary,
        prior_year_tax: Decimal | int | str,
        payments_made: Sequence[QuarterlyPaymentMade],
        current_date: date,
        state: str | None = None,
    ) -> QuarterlyEstimateResult:
        filing_status, _ = parse_filing_status(filing_status)
        liability = self.estimator.estimate(tax_year, filing_status, projected_income, state)
        projected_tax = liability.total_tax
        withholding = projected_income.total_withholding

        # --- Safe harbors ---
        high_income = liability.adjusted_gross_income > SAFE_HARBOR_HIGH_INCOME_AGI[filing_status]
        prior_rate = (
            SAFE_HARBOR_HIGH_INCOME_PRIOR_YEAR_RATE if high_income else SAFE_HARBOR_PRIOR_YEAR_RATE
        )
        prior_safe_harbor = round_to_whole_dollar(apply_rate(to_decimal(prior_year_tax), prior_rate))
        current_safe_harbor = round_to_whole_dollar(
            apply_rate(projected_tax, SAFE_HARBOR_CURRENT_YEAR_RATE)
        )
        required = round_to_whole_dollar(
            clamp_min(subtract(min(prior_safe_harbor, current_safe_harbor), withholding), ZERO)
        )

        # --- Schedule ---
        paid_by_quarter: dict[int, Decimal] = defaultdict(lambda: ZERO)
        for payment in payments_made:
            paid_by_quarter[payment.quarter] = add(paid_by_quarter[payment.quarter], payment.amount)

        quarters: list[QuarterPayment] = []
        for quarter, (due_date, amount_due) in enumerate(
            zip(quarter_due_dates(tax_year), split_into_quarters(required)), start=1
        ):
            amount_paid = paid_by_quarter[quarter]
            quarters.append(
                QuarterPayment(
                    quarter=quarter,
                    due_date=due_date,
                    amount_due=amount_due,
                    amount_paid=amount_paid,
                    status=quarter_status(due_date, amount_due, amount_paid, current_date),
                )
            )

        total_paid = sum_all(q.amount_paid for q in quarters)
        total_remaining = clamp_min(subtract(required, total_paid), ZERO)
        paid_and_withheld = add(total_paid, withholding)
        safe_harbor_met = (
            paid_and_withheld >= prior_safe_harbor or paid_and_withheld >= current_safe_harbor
        )

        overdue = sum(1 for q in quarters if q.status == QuarterStatus.OVERDUE)
        if overdue == 0:
            risk = UnderpaymentRisk.LOW
        elif overdue == 1:
            risk = UnderpaymentRisk.MEDIUM
        else:
            risk = UnderpaymentRisk.HIGH

        unpaid = [q for q in quarters if q.status != QuarterStatus.PAID]
        next_due_date = unpaid[0].due_date if unpaid else quarters[-1].due_date
        suggested = round_to_whole_dollar(total_remaining / len(unpaid)) if unpaid else ZERO

        logger.debug(
            "Quarterly %d: projected=%s prior_sh=%s current_sh=%s required=%s paid=%s overdue=%d",
            tax_year, projected_tax, prior_safe_harbor, current_safe_harbor,
            required, total_paid, overdue,
        )

        return QuarterlyEstimateResult(
            tax_year=tax_year,
            filing_status=filing_status,
            quarters=tuple(quarters),
            projected_tax=projected_tax,
            prior_year_safe_harbor=prior_safe_harbor,
            current_year_safe_harbor=current_safe_harbor,
            total_estimated_tax=required,
            total_paid=total_paid,
            total_remaining=total_remaining,
            safe_harbor_met=safe_harbor_met,
            underpayment_risk=risk,
            next_due_date=next_due_date,
            suggested_next_payment=suggested,
        )
