"""Alternative Minimum Tax engine.

Implements AMTI, exemption phase-out and the two-tier 26%/28% rate structure
per Form 6251, plus the ISO bargain element that feeds Line 2i.
"""

import logging
from decimal import Decimal

from taxcore.engines.brackets import (
    AMT_HIGH_RATE,
    AMT_LOW_RATE,
    AMT_PHASEOUT_RATE,
    get_amt_parameters,
)
from taxcore.engines.money import ZERO, add, apply_rate, clamp_min, subtract, sum_all
from taxcore.models.income import AmtInput
from taxcore.models.reports import AmtResult

logger = logging.getLogger(__name__)


def compute_iso_bargain_element(
    shares: Decimal, exercise_price: Decimal, fmv_at_exercise: Decimal
) -> Decimal:
    """AMT preference for an ISO exercise held past year end.

    Per Form 6251 Line 2i: (FMV at exercise - exercise price) x shares.
    Underwater exercises contribute nothing.
    """
    spread = subtract(fmv_at_exercise, exercise_price)
    return clamp_min(apply_rate(spread, shares), ZERO)


class AMTEngine:
    """Computes AMT liability per Form 6251."""

    def compute(self, amt_input: AmtInput) -> AmtResult:
        exemption, phaseout_start, threshold = get_amt_parameters(
            amt_input.tax_year, amt_input.filing_status
        )

        # Step 1: AMTI
        amti = sum_all([
            amt_input.taxable_income,
            amt_input.state_and_local_tax_deduction,
            amt_input.tax_exempt_interest_from_pabs,
            amt_input.incentive_stock_option_bargain_element,
            amt_input.other_adjustments,
        ])

        # Step 2: Exemption with phase-out
        reduced_exemption = self.compute_reduced_exemption(amti, exemption, phaseout_start)

        # Step 3: AMT base
        amt_base = clamp_min(subtract(amti, reduced_exemption), ZERO)

        # Step 4: Tentative minimum tax
        tmt = self.compute_tentative_minimum_tax(amt_base, threshold)

        # Step 5: AMT = excess of TMT over regular tax
        amt = clamp_min(subtract(tmt, amt_input.regular_tax), ZERO)

        logger.debug(
            "AMT: AMTI=%s exemption=%s base=%s TMT=%s regular=%s AMT=%s",
            amti, reduced_exemption, amt_base, tmt, amt_input.regular_tax, amt,
        )

        return AmtResult(
            amti=amti,
            exemption_amount=exemption,
            exemption_phaseout_start=phaseout_start,
            reduced_exemption=reduced_exemption,
            amt_base=amt_base,
            tentative_minimum_tax=tmt,
            alternative_minimum_tax=amt,
            is_subject_to_amt=amt > ZERO,
        )

    def compute_reduced_exemption(
        self, amti: Decimal, exemption: Decimal, phaseout_start: Decimal
    ) -> Decimal:
        """Exemption reduced by 25% of AMTI over the phase-out start, floored at 0."""
        if amti <= phaseout_start:
            return exemption
        reduction = apply_rate(subtract(amti, phaseout_start), AMT_PHASEOUT_RATE)
        return clamp_min(subtract(exemption, reduction), ZERO)

    def compute_tentative_minimum_tax(self, amt_base: Decimal, threshold: Decimal) -> Decimal:
        """26% up to the threshold, 28% above it."""
        if amt_base <= threshold:
            return apply_rate(amt_base, AMT_LOW_RATE)
        return add(
            apply_rate(threshold, AMT_LOW_RATE),
            apply_rate(subtract(amt_base, threshold), AMT_HIGH_RATE),
        )
