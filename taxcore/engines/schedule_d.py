"""Schedule D capital gain/loss netting.

Nets short- and long-term results (including carryover-in and capital gain
distributions), applies the IRC Section 1211(b) loss deduction cap, and
computes the character-preserving carryover per the Capital Loss Carryover
Worksheet.
"""

import logging
from decimal import Decimal

from taxcore.engines.brackets import get_capital_loss_limit
from taxcore.engines.money import ZERO, add, subtract
from taxcore.models.enums import FilingStatus
from taxcore.models.income import CapitalLossCarryover, ScheduleDInput
from taxcore.models.reports import ScheduleDResult

logger = logging.getLogger(__name__)


class ScheduleDEngine:
    """Computes Schedule D totals and next year's capital loss carryover."""

    def compute(
        self,
        schedule_input: ScheduleDInput,
        filing_status: FilingStatus | None = None,
    ) -> ScheduleDResult:
        carryover_in = schedule_input.capital_loss_carryover
        net_st = add(schedule_input.short_term_gain_loss, carryover_in.short_term)
        net_lt = add(
            add(schedule_input.long_term_gain_loss, carryover_in.long_term),
            schedule_input.capital_gain_distributions,
        )
        net_total = add(net_st, net_lt)

        cap = get_capital_loss_limit(filing_status)
        deduction = ZERO if net_total >= ZERO else min(abs(net_total), cap)
        carryover = self.compute_carryover(net_st, net_lt, deduction)

        logger.debug(
            "Schedule D: ST=%s LT=%s total=%s deduction=%s carryover=%s/%s",
            net_st, net_lt, net_total, deduction,
            carryover.short_term, carryover.long_term,
        )

        return ScheduleDResult(
            net_short_term_gain_loss=net_st,
            net_long_term_gain_loss=net_lt,
            net_capital_gain_loss=net_total,
            capital_loss_deduction=deduction,
            carryover_to_next_year=carryover,
            qualifies_for_preferential_rates=net_lt > ZERO,
        )

    def compute_carryover(
        self, net_st: Decimal, net_lt: Decimal, deduction: Decimal
    ) -> CapitalLossCarryover:
        """Allocate the deduction short-term first, then long-term.

        A side with a net gain first absorbs the other side's loss, so only
        the side still negative after netting can carry forward.
        """
        net_total = add(net_st, net_lt)
        if net_total >= ZERO or add(net_total, deduction) >= ZERO:
            return CapitalLossCarryover()

        # Cross-character netting: the net total is a loss, so at most one side is a gain.
        if net_st > ZERO:
            net_st, net_lt = ZERO, net_total
        elif net_lt > ZERO:
            net_st, net_lt = net_total, ZERO

        # Step 1: deduction absorbs the short-term loss.
        remaining = deduction
        st_carry = net_st
        if net_st < ZERO:
            absorbed = min(abs(net_st), remaining)
            st_carry = add(net_st, absorbed)
            remaining = subtract(remaining, absorbed)

        # Step 2: what is left absorbs the long-term loss.
        lt_carry = net_lt
        if net_lt < ZERO and remaining > ZERO:
            absorbed = min(abs(net_lt), remaining)
            lt_carry = add(net_lt, absorbed)

        return CapitalLossCarryover(
            short_term=min(st_carry, ZERO),
            long_term=min(lt_carry, ZERO),
        )
