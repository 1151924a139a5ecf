"""Computation output models."""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict

from taxcore.models.brackets import TaxBracket
from taxcore.models.enums import (
    DeductionType,
    FilingStatus,
    QuarterStatus,
    StateTaxRegime,
    UnderpaymentRisk,
)
from taxcore.models.income import CapitalLossCarryover


class StateTaxResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    state_code: str
    regime: StateTaxRegime
    taxable_income: Decimal
    state_tax: Decimal
    effective_rate: Decimal
    marginal_rate: Decimal
    brackets: tuple[TaxBracket, ...] = ()
    notes: tuple[str, ...] = ()


class TaxLiabilityResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    tax_year: int
    filing_status: FilingStatus
    # Income
    gross_income: Decimal
    self_employment_deduction: Decimal
    adjusted_gross_income: Decimal
    # Deductions
    standard_deduction: Decimal
    deduction_used: Decimal
    deduction_type: DeductionType
    taxable_ordinary_income: Decimal
    preferential_income: Decimal
    # Federal
    ordinary_tax: Decimal
    qualified_dividend_tax: Decimal
    long_term_capital_gains_tax: Decimal
    net_investment_income_tax: Decimal
    self_employment_tax: Decimal
    total_federal_tax: Decimal
    # State
    state_tax: Decimal
    state_result: StateTaxResult | None = None
    # Total
    foreign_tax_credit: Decimal
    total_tax: Decimal
    total_withholding: Decimal
    estimated_payments: Decimal
    balance_due: Decimal
    effective_rate: Decimal
    marginal_rate: Decimal
    assumptions: tuple[str, ...] = ()


class AmtResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    amti: Decimal
    exemption_amount: Decimal
    exemption_phaseout_start: Decimal
    reduced_exemption: Decimal
    amt_base: Decimal
    tentative_minimum_tax: Decimal
    alternative_minimum_tax: Decimal
    is_subject_to_amt: bool


class ScheduleDResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    net_short_term_gain_loss: Decimal
    net_long_term_gain_loss: Decimal
    net_capital_gain_loss: Decimal
    capital_loss_deduction: Decimal
    carryover_to_next_year: CapitalLossCarryover
    qualifies_for_preferential_rates: bool


class QuarterPayment(BaseModel):
    model_config = ConfigDict(frozen=True)

    quarter: int
    due_date: date
    amount_due: Decimal
    amount_paid: Decimal
    status: QuarterStatus


class QuarterlyEstimateResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    tax_year: int
    filing_status: FilingStatus
    quarters: tuple[QuarterPayment, ...]
    projected_tax: Decimal
    prior_year_safe_harbor: Decimal
    current_year_safe_harbor: Decimal
    total_estimated_tax: Decimal
    total_paid: Decimal
    total_remaining: Decimal
    safe_harbor_met: bool
    underpayment_risk: UnderpaymentRisk
    next_due_date: date
    suggested_next_payment: Decimal
