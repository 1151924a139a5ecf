"""Computation input records.

Values here are assembled by the caller from parsed forms and positions.
Engines treat them as read-only.
"""

from datetime import date
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from taxcore.models.enums import FilingStatus


class IncomeSummary(BaseModel):
    """Annual income, withholding and deduction totals for one return."""

    model_config = ConfigDict(frozen=True)

    wages: Decimal = Decimal("0")
    ordinary_dividends: Decimal = Field(
        default=Decimal("0"),
        description="Total ordinary dividends (1099-DIV Box 1a), qualified included",
    )
    qualified_dividends: Decimal = Field(
        default=Decimal("0"),
        description="Qualified portion of ordinary dividends (1099-DIV Box 1b)",
    )
    interest_income: Decimal = Decimal("0")
    tax_exempt_interest: Decimal = Decimal("0")
    short_term_gains: Decimal = Decimal("0")
    long_term_gains: Decimal = Decimal("0")
    business_income: Decimal = Field(
        default=Decimal("0"),
        description="Net self-employment profit (Schedule C)",
    )
    rental_income: Decimal = Decimal("0")
    other_income: Decimal = Decimal("0")
    total_withholding: Decimal = Decimal("0")
    estimated_payments: Decimal = Decimal("0")
    deductions: Decimal = Field(
        default=Decimal("0"),
        description="Total itemized deductions; the standard deduction is used when larger",
    )
    foreign_tax_credit: Decimal = Decimal("0")


class CapitalLossCarryover(BaseModel):
    """Capital loss carryover by character. Losses are negative or zero."""

    model_config = ConfigDict(frozen=True)

    short_term: Decimal = Decimal("0")
    long_term: Decimal = Decimal("0")


class ScheduleDInput(BaseModel):
    model_config = ConfigDict(frozen=True)

    short_term_gain_loss: Decimal = Decimal("0")
    long_term_gain_loss: Decimal = Decimal("0")
    capital_loss_carryover: CapitalLossCarryover = CapitalLossCarryover()
    capital_gain_distributions: Decimal = Decimal("0")


class AmtInput(BaseModel):
    """Form 6251 inputs: regular taxable income plus AMT add-backs."""

    model_config = ConfigDict(frozen=True)

    taxable_income: Decimal
    filing_status: FilingStatus
    state_and_local_tax_deduction: Decimal = Decimal("0")
    tax_exempt_interest_from_pabs: Decimal = Decimal("0")
    incentive_stock_option_bargain_element: Decimal = Decimal("0")
    other_adjustments: Decimal = Decimal("0")
    regular_tax: Decimal = Decimal("0")
    tax_year: int = 2025


class QuarterlyPaymentMade(BaseModel):
    model_config = ConfigDict(frozen=True)

    quarter: Literal[1, 2, 3, 4]
    amount: Decimal = Field(ge=0)
    date_paid: date
