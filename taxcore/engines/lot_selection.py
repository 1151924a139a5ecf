"""Lot selection engine: FIFO, LIFO and specific identification."""

import logging
from collections.abc import Iterable, Sequence
from datetime import date
from decimal import Decimal

from taxcore.engines.money import (
    ZERO,
    add,
    apply_rate,
    clamp_min,
    round_to_cents,
    subtract,
    sum_all,
    to_decimal,
)
from taxcore.models.enums import HoldingPeriod, LotSelectionMethod
from taxcore.models.lots import LotSelectionResult, SelectedLot, TaxLot

logger = logging.getLogger(__name__)

LONG_TERM_HOLDING_DAYS = 365


def classify_holding_period(date_acquired: date, date_sold: date) -> HoldingPeriod:
    """Long-term only when held more than 365 days."""
    held = (date_sold - date_acquired).days
    return HoldingPeriod.LONG_TERM if held > LONG_TERM_HOLDING_DAYS else HoldingPeriod.SHORT_TERM


class LotSelector:
    """Chooses which lots a proposed sale disposes of, and the resulting gain."""

    def select_lots(
        self,
        lots: Sequence[TaxLot],
        quantity: Decimal | int | str,
        price: Decimal | int | str,
        method: LotSelectionMethod,
        as_of: date,
        specific_lot_ids: Sequence[str] | None = None,
    ) -> LotSelectionResult:
        """Allocate ``quantity`` shares across lots in the order ``method`` dictates.

        Args:
            lots: Open lots for one security.
            quantity: Shares to sell.
            price: Sale price per share.
            method: FIFO, LIFO or SPECIFIC_ID.
            as_of: Sale date; drives the holding period of each lot.
            specific_lot_ids: Lot ids in the order to consume them (SPECIFIC_ID only).

        Returns:
            LotSelectionResult. Requests beyond available shares sell everything
            available and carry a note rather than raising.
        """
        quantity = to_decimal(quantity)
        price = to_decimal(price)
        notes: list[str] = []

        ordered = self._order_lots(lots, method, specific_lot_ids, notes)
        remaining = clamp_min(quantity, ZERO)
        selected: list[SelectedLot] = []

        for lot in ordered:
            if remaining <= ZERO:
                break
            if lot.quantity <= ZERO:
                continue
            qty = min(remaining, lot.quantity)
            total_basis = apply_rate(lot.adjusted_basis, qty / lot.quantity)
            proceeds = apply_rate(price, qty)
            selected.append(
                SelectedLot(
                    lot_id=lot.id,
                    date_acquired=lot.date_acquired,
                    quantity_sold=qty,
                    cost_basis_per_share=round_to_cents(lot.adjusted_basis / lot.quantity),
                    total_basis=total_basis,
                    proceeds=proceeds,
                    gain_loss=subtract(proceeds, total_basis),
                    holding_period=classify_holding_period(lot.date_acquired, as_of),
                )
            )
            remaining -= qty

        quantity_sold = sum((lot.quantity_sold for lot in selected), ZERO)
        if remaining > ZERO:
            notes.append(
                f"Requested {quantity} shares but only {quantity_sold} available; "
                f"sold all available shares"
            )

        total_proceeds = sum_all(lot.proceeds for lot in selected)
        total_basis = sum_all(lot.total_basis for lot in selected)

        logger.debug(
            "%s selected %d lots for %s shares: %s",
            method, len(selected), quantity_sold, [lot.lot_id for lot in selected],
        )

        return LotSelectionResult(
            method=method,
            selected_lots=tuple(selected),
            quantity_requested=quantity,
            quantity_sold=quantity_sold,
            total_proceeds=total_proceeds,
            total_basis=total_basis,
            total_gain_loss=subtract(total_proceeds, total_basis),
            short_term_gain_loss=self._sum_gains(selected, HoldingPeriod.SHORT_TERM),
            long_term_gain_loss=self._sum_gains(selected, HoldingPeriod.LONG_TERM),
            notes=tuple(notes),
        )

    def compare_strategies(
        self,
        lots: Sequence[TaxLot],
        quantity: Decimal | int | str,
        price: Decimal | int | str,
        as_of: date,
        marginal_rate: Decimal | str,
        long_term_rate: Decimal | str,
        methods: Iterable[LotSelectionMethod] = (
            LotSelectionMethod.FIFO,
            LotSelectionMethod.LIFO,
        ),
        specific_lot_ids: Sequence[str] | None = None,
    ) -> list[LotSelectionResult]:
        """Run each method and attach its estimated tax impact.

        Impact is tax on net gains less savings from net losses, with
        short-term amounts at ``marginal_rate`` and long-term at ``long_term_rate``.
        """
        results: list[LotSelectionResult] = []
        for method in methods:
            result = self.select_lots(lots, quantity, price, method, as_of, specific_lot_ids)
            impact = self.estimate_tax_impact(
                result.short_term_gain_loss,
                result.long_term_gain_loss,
                to_decimal(marginal_rate),
                to_decimal(long_term_rate),
            )
            results.append(result.model_copy(update={"estimated_tax_impact": impact}))
        return results

    @staticmethod
    def estimate_tax_impact(
        short_term: Decimal,
        long_term: Decimal,
        marginal_rate: Decimal,
        long_term_rate: Decimal,
    ) -> Decimal:
        st_tax = apply_rate(clamp_min(short_term, ZERO), marginal_rate)
        lt_tax = apply_rate(clamp_min(long_term, ZERO), long_term_rate)
        st_savings = apply_rate(abs(min(short_term, ZERO)), marginal_rate)
        lt_savings = apply_rate(abs(min(long_term, ZERO)), long_term_rate)
        return subtract(add(st_tax, lt_tax), add(st_savings, lt_savings))

    def _order_lots(
        self,
        lots: Sequence[TaxLot],
        method: LotSelectionMethod,
        specific_lot_ids: Sequence[str] | None,
        notes: list[str],
    ) -> list[TaxLot]:
        if method == LotSelectionMethod.SPECIFIC_ID:
            by_id = {lot.id: lot for lot in lots}
            ordered: list[TaxLot] = []
            seen: set[str] = set()
            for lot_id in specific_lot_ids or ():
                if lot_id in seen:
                    continue
                seen.add(lot_id)
                lot = by_id.get(lot_id)
                if lot is None:
                    notes.append(f"Lot {lot_id} not found; skipped")
                    continue
                ordered.append(lot)
            if not specific_lot_ids:
                notes.append("No lot ids given for specific identification")
            return ordered
        # sorted() is stable, so same-day lots keep their input order
        return sorted(
            lots,
            key=lambda lot: lot.date_acquired,
            reverse=method == LotSelectionMethod.LIFO,
        )

    @staticmethod
    def _sum_gains(selected: list[SelectedLot], period: HoldingPeriod) -> Decimal:
        return sum_all(lot.gain_loss for lot in selected if lot.holding_period == period)
