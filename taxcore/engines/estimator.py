"""Federal tax liability estimator.

Computes a full-year liability from an income summary:
  - Progressive ordinary income tax
  - LTCG/qualified dividend stacking per IRS Qualified Dividends and Capital Gain Tax Worksheet
  - Net Investment Income Tax (NIIT) per IRC Section 1411
  - Self-employment tax per Schedule SE, including Additional Medicare Tax
  - Optional state income tax via ``StateTaxEngine``

Capital loss netting (Schedule D) should be done BEFORE calling ``estimate``;
the gains passed in are taken as already limited.
"""

import logging
from decimal import Decimal

from taxcore.engines.brackets import (
    ADDITIONAL_MEDICARE_TAX_RATE,
    ADDITIONAL_MEDICARE_TAX_THRESHOLD,
    NIIT_RATE,
    NIIT_THRESHOLD,
    SE_MEDICARE_RATE,
    SE_NET_EARNINGS_FACTOR,
    SE_SOCIAL_SECURITY_RATE,
    SE_TAX_RATE,
    get_ltcg_brackets,
    get_ordinary_brackets,
    get_social_security_wage_base,
    get_standard_deduction,
    resolve_tax_year,
)
from taxcore.engines.money import (
    ZERO,
    add,
    apply_rate,
    clamp_min,
    round_to_whole_dollar,
    subtract,
    sum_all,
)
from taxcore.engines.progressive import apply_brackets, marginal_rate
from taxcore.engines.state_tax import StateTaxEngine
from taxcore.models.enums import DeductionType, FilingStatus, parse_filing_status
from taxcore.models.income import IncomeSummary
from taxcore.models.reports import StateTaxResult, TaxLiabilityResult

logger = logging.getLogger(__name__)

RATE_PRECISION = Decimal("0.0001")


class TaxEstimator:
    """Estimates federal (and optionally state) tax liability."""

    def __init__(self, state_engine: StateTaxEngine | None = None) -> None:
        self.state_engine = state_engine or StateTaxEngine()

    def estimate(
        self,
        tax_year: int,
        filing_status: FilingStatus | str,
        income: IncomeSummary,
        state: str | None = None,
    ) -> TaxLiabilityResult:
        """Compute full tax estimate.

        Unrecognized filing statuses fall back to single and unsupported tax
        years fall back to the nearest published tables; both substitutions
        are reported in ``assumptions``.
        """
        assumptions: list[str] = []
        filing_status, status_note = parse_filing_status(filing_status)
        if status_note:
            assumptions.append(status_note)

        table_year = resolve_tax_year(tax_year)
        if table_year != tax_year:
            logger.info("No tables for tax year %d; using %d", tax_year, table_year)
            assumptions.append(
                f"No published tables for tax year {tax_year}; {table_year} tables used"
            )

        # --- Income aggregation ---
        gross_income = sum_all([
            income.wages,
            income.ordinary_dividends,
            income.interest_income,
            income.short_term_gains,
            income.long_term_gains,
            income.business_income,
            income.rental_income,
            income.other_income,
        ])

        # --- Above-the-line: deductible half of SE tax ---
        se_deduction = ZERO
        if income.business_income > ZERO:
            se_deduction = round_to_whole_dollar(
                apply_rate(
                    income.business_income * SE_NET_EARNINGS_FACTOR,
                    SE_TAX_RATE / 2,
                )
            )
        agi = subtract(gross_income, se_deduction)

        # --- Deductions ---
        std_ded = get_standard_deduction(table_year, filing_status)
        if income.deductions > std_ded:
            deduction_used = income.deductions
            deduction_type = DeductionType.ITEMIZED
            assumptions.append("Using itemized deductions")
        else:
            deduction_used = std_ded
            deduction_type = DeductionType.STANDARD
            assumptions.append("Using standard deduction")

        # --- Split ordinary vs. preferential income ---
        # A net long-term loss stays in ordinary income; only gains get preferential rates.
        long_term_gain = clamp_min(income.long_term_gains, ZERO)
        ordinary_income = subtract(
            subtract(gross_income, income.qualified_dividends), long_term_gain
        )
        taxable_ordinary = clamp_min(subtract(ordinary_income, deduction_used), ZERO)
        preferential_income = add(income.qualified_dividends, long_term_gain)

        ordinary_tax = self.compute_ordinary_tax(taxable_ordinary, filing_status, table_year)
        qd_tax, ltcg_tax = self.compute_preferential_tax(
            taxable_ordinary,
            preferential_income,
            income.qualified_dividends,
            filing_status,
            table_year,
        )
        assumptions.append(f"Tax year {table_year} brackets applied")

        # --- NIIT ---
        investment_income = sum_all([
            income.ordinary_dividends,
            income.interest_income,
            income.short_term_gains,
            income.long_term_gains,
            income.rental_income,
        ])
        niit = self.compute_niit(investment_income, agi, filing_status)

        se_tax = self.compute_self_employment_tax(
            income.business_income, filing_status, table_year
        )

        total_federal = sum_all([ordinary_tax, qd_tax, ltcg_tax, niit, se_tax])

        # --- State ---
        state_tax = ZERO
        state_result: StateTaxResult | None = None
        if state:
            state_taxable = clamp_min(subtract(agi, deduction_used), ZERO)
            state_result = self.state_engine.compute(
                state, state_taxable, filing_status, table_year
            )
            state_tax = round_to_whole_dollar(state_result.state_tax)
            assumptions.extend(state_result.notes)

        # --- Totals ---
        total_tax = clamp_min(
            subtract(add(total_federal, state_tax), income.foreign_tax_credit), ZERO
        )
        balance_due = subtract(
            total_tax, add(income.total_withholding, income.estimated_payments)
        )
        effective_rate = (
            (total_tax / gross_income).quantize(RATE_PRECISION)
            if gross_income > ZERO
            else ZERO
        )

        logger.debug(
            "Estimate %d %s: AGI=%s ordinary=%s pref=%s federal=%s state=%s",
            tax_year, filing_status, agi, taxable_ordinary, preferential_income,
            total_federal, state_tax,
        )

        return TaxLiabilityResult(
            tax_year=tax_year,
            filing_status=filing_status,
            gross_income=round_to_whole_dollar(gross_income),
            self_employment_deduction=se_deduction,
            adjusted_gross_income=round_to_whole_dollar(agi),
            standard_deduction=std_ded,
            deduction_used=deduction_used,
            deduction_type=deduction_type,
            taxable_ordinary_income=round_to_whole_dollar(taxable_ordinary),
            preferential_income=preferential_income,
            ordinary_tax=ordinary_tax,
            qualified_dividend_tax=qd_tax,
            long_term_capital_gains_tax=ltcg_tax,
            net_investment_income_tax=niit,
            self_employment_tax=se_tax,
            total_federal_tax=total_federal,
            state_tax=state_tax,
            state_result=state_result,
            foreign_tax_credit=income.foreign_tax_credit,
            total_tax=total_tax,
            total_withholding=income.total_withholding,
            estimated_payments=income.estimated_payments,
            balance_due=round_to_whole_dollar(balance_due),
            effective_rate=effective_rate,
            marginal_rate=marginal_rate(
                taxable_ordinary, get_ordinary_brackets(table_year, filing_status)
            ),
            assumptions=tuple(assumptions),
        )

    # ------------------------------------------------------------------
    # Components
    # ------------------------------------------------------------------

    def compute_ordinary_tax(
        self, taxable_ordinary: Decimal, filing_status: FilingStatus, tax_year: int
    ) -> Decimal:
        return apply_brackets(taxable_ordinary, get_ordinary_brackets(tax_year, filing_status))

    def compute_preferential_tax(
        self,
        taxable_ordinary: Decimal,
        preferential_income: Decimal,
        qualified_dividends: Decimal,
        filing_status: FilingStatus,
        tax_year: int,
    ) -> tuple[Decimal, Decimal]:
        """Compute LTCG/qualified dividend tax by stacking on top of ordinary income.

        LTCG brackets apply to total taxable income, so preferential income is
        taxed as the difference between the stacked and unstacked bracket tax,
        then split by the qualified dividend share.

        Returns:
            (qualified_dividend_tax, long_term_capital_gains_tax)
        """
        if preferential_income <= ZERO:
            return ZERO, ZERO

        ltcg_brackets = get_ltcg_brackets(tax_year, filing_status)
        preferential_tax = subtract(
            apply_brackets(add(taxable_ordinary, preferential_income), ltcg_brackets),
            apply_brackets(taxable_ordinary, ltcg_brackets),
        )
        qd_share = clamp_min(qualified_dividends, ZERO) / preferential_income
        qd_tax = round_to_whole_dollar(apply_rate(preferential_tax, qd_share))
        ltcg_tax = clamp_min(subtract(round_to_whole_dollar(preferential_tax), qd_tax), ZERO)
        return qd_tax, ltcg_tax

    def compute_niit(
        self,
        investment_income: Decimal,
        agi: Decimal,
        filing_status: FilingStatus,
    ) -> Decimal:
        """Compute Net Investment Income Tax per IRC Section 1411.

        NIIT = 3.8% x min(NII, AGI - threshold)
        """
        threshold = NIIT_THRESHOLD[filing_status]
        if agi <= threshold:
            return ZERO
        niit_base = clamp_min(min(investment_income, subtract(agi, threshold)), ZERO)
        return round_to_whole_dollar(apply_rate(niit_base, NIIT_RATE))

    def compute_self_employment_tax(
        self,
        business_income: Decimal,
        filing_status: FilingStatus,
        tax_year: int,
    ) -> Decimal:
        """Compute SE tax per Schedule SE.

        12.4% Social Security on net earnings up to the wage base, 2.9% Medicare
        on all net earnings, and 0.9% Additional Medicare Tax above the
        filing-status threshold. Net earnings are 92.35% of business income.
        """
        if business_income <= ZERO:
            return ZERO

        net_earnings = apply_rate(business_income, SE_NET_EARNINGS_FACTOR)
        wage_base = get_social_security_wage_base(tax_year)
        social_security = apply_rate(min(net_earnings, wage_base), SE_SOCIAL_SECURITY_RATE)
        medicare = apply_rate(net_earnings, SE_MEDICARE_RATE)

        additional_threshold = ADDITIONAL_MEDICARE_TAX_THRESHOLD[filing_status]
        additional_medicare = ZERO
        if net_earnings > additional_threshold:
            additional_medicare = apply_rate(
                subtract(net_earnings, additional_threshold), ADDITIONAL_MEDICARE_TAX_RATE
            )

        return round_to_whole_dollar(sum_all([social_security, medicare, additional_medicare]))
