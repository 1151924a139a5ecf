"""Tax-loss harvesting candidate finder."""

import logging
from collections.abc import Iterable, Sequence
from datetime import date
from decimal import Decimal

from taxcore.engines.lot_selection import classify_holding_period
from taxcore.engines.money import ZERO, apply_rate, subtract, to_decimal
from taxcore.engines.wash_sale import WashSaleChecker
from taxcore.models.enums import HoldingPeriod
from taxcore.models.lots import Position, PurchaseRecord, TlhCandidate

logger = logging.getLogger(__name__)


class TaxLossHarvester:
    """Ranks open lots with unrealized losses by estimated tax savings."""

    def __init__(self, wash_sale_checker: WashSaleChecker | None = None) -> None:
        self.wash_sale_checker = wash_sale_checker or WashSaleChecker()

    def find_candidates(
        self,
        positions: Sequence[Position],
        as_of: date,
        min_loss: Decimal | int | str = Decimal("100"),
        marginal_rate: Decimal | str = Decimal("0.32"),
        long_term_rate: Decimal | str = Decimal("0.15"),
        recent_purchases: Iterable[PurchaseRecord] = (),
    ) -> list[TlhCandidate]:
        """Find lots whose unrealized loss is at least ``min_loss``.

        Short-term losses are valued at ``marginal_rate`` and long-term losses
        at ``long_term_rate``. A lot is flagged for wash sale risk when a
        purchase of the same symbol falls within 30 days of ``as_of``.

        Returns:
            Candidates sorted by estimated tax savings, largest first.
        """
        min_loss = to_decimal(min_loss)
        marginal_rate = to_decimal(marginal_rate)
        long_term_rate = to_decimal(long_term_rate)
        recent_purchases = list(recent_purchases)
        candidates: list[TlhCandidate] = []

        for position in positions:
            for lot in position.lots:
                if lot.quantity <= ZERO:
                    continue
                market_value = apply_rate(position.current_price, lot.quantity)
                unrealized = subtract(market_value, lot.adjusted_basis)
                if unrealized >= ZERO or abs(unrealized) < min_loss:
                    continue

                holding_period = classify_holding_period(lot.date_acquired, as_of)
                rate = (
                    marginal_rate if holding_period == HoldingPeriod.SHORT_TERM else long_term_rate
                )
                wash_sale_risk = self.wash_sale_checker.would_trigger(
                    lot.symbol, as_of, recent_purchases
                )
                candidates.append(
                    TlhCandidate(
                        symbol=lot.symbol,
                        lot_id=lot.id,
                        current_price=position.current_price,
                        cost_basis=lot.adjusted_basis,
                        unrealized_loss=unrealized,
                        quantity=lot.quantity,
                        holding_period=holding_period,
                        wash_sale_risk=wash_sale_risk,
                        estimated_tax_savings=apply_rate(abs(unrealized), rate),
                        rationale=build_rationale(
                            lot.symbol, unrealized, holding_period, wash_sale_risk
                        ),
                    )
                )

        logger.debug("Found %d harvesting candidates as of %s", len(candidates), as_of)
        return sorted(candidates, key=lambda c: c.estimated_tax_savings, reverse=True)


def build_rationale(
    symbol: str, loss: Decimal, holding_period: HoldingPeriod, wash_sale_risk: bool
) -> str:
    term = "short-term" if holding_period == HoldingPeriod.SHORT_TERM else "long-term"
    parts = [f"{symbol} has ${abs(loss):,.2f} unrealized {term} loss."]
    if holding_period == HoldingPeriod.SHORT_TERM:
        parts.append("Short-term loss offsets ordinary income at the marginal rate.")
    else:
        parts.append("Long-term loss offsets capital gains at preferential rates.")
    if wash_sale_risk:
        parts.append("CAUTION: recent purchase of this security; selling now risks a wash sale.")
    return " ".join(parts)
