"""Wash sale detection per IRC Section 1091.

61-day window: 30 days before the sale, the sale date, and 30 days after.
Each replacement purchase can disallow at most one loss sale.
"""

import logging
from collections.abc import Iterable, Sequence
from datetime import date, timedelta
from decimal import Decimal

from taxcore.engines.money import ZERO, round_to_cents, sum_all
from taxcore.models.lots import (
    PurchaseRecord,
    SaleRecord,
    WashSaleCheckResult,
    WashSaleViolation,
)

logger = logging.getLogger(__name__)

WASH_SALE_WINDOW_DAYS = 30


def is_within_wash_window(sale_date: date, purchase_date: date) -> bool:
    """True when the purchase falls in the closed window around the sale date."""
    window = timedelta(days=WASH_SALE_WINDOW_DAYS)
    return sale_date - window <= purchase_date <= sale_date + window


class WashSaleChecker:
    """Matches loss sales to replacement purchases of the same security."""

    def check(
        self,
        sales: Sequence[SaleRecord],
        purchases: Sequence[PurchaseRecord],
    ) -> WashSaleCheckResult:
        """Find wash sales among ``sales`` given ``purchases``.

        Loss sales are processed in input order; each takes the earliest
        unconsumed purchase of the same symbol inside its window.
        """
        violations: list[WashSaleViolation] = []
        consumed: set[str] = set()

        for sale in sales:
            if sale.loss >= ZERO:
                continue

            candidates = [
                purchase
                for purchase in purchases
                if purchase.symbol.upper() == sale.symbol.upper()
                and purchase.lot_id != sale.lot_id
                and purchase.lot_id not in consumed
                and is_within_wash_window(sale.sale_date, purchase.purchase_date)
            ]
            if not candidates:
                continue

            # min() returns the first of equal dates, keeping input order on ties
            replacement = min(candidates, key=lambda purchase: purchase.purchase_date)
            consumed.add(replacement.lot_id)

            disallowed = self.disallowed_loss(sale, replacement)
            logger.debug(
                "Wash sale: lot %s (%s) replaced by %s on %s, disallowed %s",
                sale.lot_id, sale.sale_date, replacement.lot_id,
                replacement.purchase_date, disallowed,
            )
            violations.append(
                WashSaleViolation(
                    sold_lot_id=sale.lot_id,
                    replacement_lot_id=replacement.lot_id,
                    symbol=sale.symbol,
                    sale_date=sale.sale_date,
                    replacement_date=replacement.purchase_date,
                    disallowed_loss=disallowed,
                    # Disallowed loss is added to the replacement lot's basis
                    basis_adjustment=disallowed,
                )
            )

        return WashSaleCheckResult(
            violations=tuple(violations),
            total_disallowed_loss=sum_all(v.disallowed_loss for v in violations),
            compliant=not violations,
        )

    @staticmethod
    def disallowed_loss(sale: SaleRecord, replacement: PurchaseRecord) -> Decimal:
        """Full loss, pro-rated when the replacement covers fewer shares than were sold."""
        loss = abs(sale.loss)
        if (
            sale.quantity
            and replacement.quantity > ZERO
            and replacement.quantity < sale.quantity
        ):
            loss = loss * replacement.quantity / sale.quantity
        return round_to_cents(loss)

    def would_trigger(
        self,
        symbol: str,
        proposed_date: date,
        recent_purchases: Iterable[PurchaseRecord],
    ) -> bool:
        """True if selling ``symbol`` at a loss on ``proposed_date`` would be a wash sale."""
        return any(
            purchase.symbol.upper() == symbol.upper()
            and is_within_wash_window(proposed_date, purchase.purchase_date)
            for purchase in recent_purchases
        )

    @staticmethod
    def earliest_safe_repurchase_date(sale_date: date) -> date:
        return sale_date + timedelta(days=WASH_SALE_WINDOW_DAYS + 1)
