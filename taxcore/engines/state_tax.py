"""State income tax engine.

Dispatches on the jurisdiction's regime from ``state_brackets``. Unsupported
codes and non-positive income return a zero result instead of raising, so a
federal estimate never fails because of the state leg.
"""

import logging
from decimal import Decimal

from taxcore.engines.brackets import BracketTable
from taxcore.engines.money import ZERO, add, apply_rate, subtract, to_decimal
from taxcore.engines.progressive import bracket_tax, marginal_rate
from taxcore.engines.state_brackets import (
    FlatSurtaxTax,
    FlatTax,
    NoIncomeTax,
    ProgressiveTax,
    StateRegime,
    get_state_regime,
)
from taxcore.models.brackets import TaxBracket
from taxcore.models.enums import FilingStatus, StateTaxRegime
from taxcore.models.reports import StateTaxResult

logger = logging.getLogger(__name__)

RATE_PRECISION = Decimal("0.0001")


class StateTaxEngine:
    """Computes state income tax for the supported jurisdictions."""

    def compute(
        self,
        state_code: str,
        taxable_income: Decimal | int | str,
        filing_status: FilingStatus,
        tax_year: int = 2025,
    ) -> StateTaxResult:
        """Compute state tax on state taxable income.

        Args:
            state_code: Two-letter jurisdiction code, any case.
            taxable_income: State taxable income (AGI less deduction).
            filing_status: Selects the joint table for progressive states.
            tax_year: Informational only; state tables carry 2025 rates.
        """
        code = state_code.strip().upper()
        income = to_decimal(taxable_income)
        regime = get_state_regime(code)

        if income <= ZERO:
            return StateTaxResult(
                state_code=code,
                regime=StateTaxRegime(regime.kind) if regime is not None else StateTaxRegime.UNSUPPORTED,
                taxable_income=income,
                state_tax=ZERO,
                effective_rate=ZERO,
                marginal_rate=ZERO,
                brackets=self._bracket_table(regime, income, filing_status) if regime is not None else (),
            )

        if regime is None:
            logger.info("State %s is not supported; state tax set to 0", code)
            return StateTaxResult(
                state_code=code,
                regime=StateTaxRegime.UNSUPPORTED,
                taxable_income=income,
                state_tax=ZERO,
                effective_rate=ZERO,
                marginal_rate=ZERO,
                notes=("State not supported",),
            )

        logger.debug(
            "State %s (%s) on %s for %s, tax year %d",
            code, regime.kind, income, filing_status, tax_year,
        )

        if isinstance(regime, NoIncomeTax):
            return StateTaxResult(
                state_code=code,
                regime=StateTaxRegime.NO_TAX,
                taxable_income=income,
                state_tax=ZERO,
                effective_rate=ZERO,
                marginal_rate=ZERO,
                notes=(f"{code} has no state income tax",),
            )

        brackets = self._bracket_table(regime, income, filing_status)
        notes: list[str] = []
        if isinstance(regime, FlatTax):
            tax = apply_rate(income, regime.rate)
            rate = regime.rate
        elif isinstance(regime, FlatSurtaxTax):
            tax = apply_rate(income, regime.base_rate)
            rate = regime.base_rate
            if income > regime.surtax_threshold:
                excess = subtract(income, regime.surtax_threshold)
                tax = add(tax, apply_rate(excess, regime.surtax_rate))
                rate = regime.base_rate + regime.surtax_rate
                notes.append(regime.surtax_note)
        else:
            tax = bracket_tax(income, brackets)
            rate = marginal_rate(income, brackets)
            if regime.top_addon_note and income > brackets[-1].min:
                notes.append(regime.top_addon_note)

        return StateTaxResult(
            state_code=code,
            regime=StateTaxRegime(regime.kind),
            taxable_income=income,
            state_tax=tax,
            effective_rate=(tax / income).quantize(RATE_PRECISION),
            marginal_rate=rate,
            brackets=brackets,
            notes=tuple(notes),
        )

    def _bracket_table(
        self, regime: StateRegime, income: Decimal, filing_status: FilingStatus
    ) -> BracketTable:
        """Bracket view of a regime for reporting."""
        if isinstance(regime, ProgressiveTax):
            return regime.table_for(filing_status)
        if isinstance(regime, FlatTax):
            return (TaxBracket(min=ZERO, max=None, rate=regime.rate),)
        if isinstance(regime, FlatSurtaxTax):
            base = TaxBracket(min=ZERO, max=None, rate=regime.base_rate)
            if income > regime.surtax_threshold:
                surtax = TaxBracket(
                    min=regime.surtax_threshold, max=None, rate=regime.surtax_rate
                )
                return (base, surtax)
            return (base,)
        return ()
