"""Tests for LotSelector: FIFO, LIFO, specific identification and comparison."""

from datetime import date
from decimal import Decimal

import pytest

from taxcore.engines.lot_selection import LotSelector, classify_holding_period
from taxcore.models import HoldingPeriod, LotSelectionMethod

SALE_DATE = date(2025, 6, 1)
PRICE = Decimal("120")


@pytest.fixture
def selector():
    return LotSelector()


class TestHoldingPeriod:
    def test_more_than_a_year_is_long_term(self):
        assert classify_holding_period(date(2024, 1, 1), date(2025, 1, 1)) == HoldingPeriod.LONG_TERM

    def test_exactly_365_days_is_short_term(self):
        assert classify_holding_period(date(2024, 6, 1), date(2025, 6, 1)) == HoldingPeriod.SHORT_TERM

    def test_same_day(self):
        assert classify_holding_period(date(2025, 6, 1), date(2025, 6, 1)) == HoldingPeriod.SHORT_TERM


class TestFifo:
    def test_oldest_lots_first(self, selector, acme_lots):
        r = selector.select_lots(acme_lots, "15", PRICE, LotSelectionMethod.FIFO, SALE_DATE)
        assert [lot.lot_id for lot in r.selected_lots] == ["lot-2023", "lot-2024"]
        assert [lot.quantity_sold for lot in r.selected_lots] == [Decimal("10"), Decimal("5")]

    def test_gains_by_character(self, selector, acme_lots):
        r = selector.select_lots(acme_lots, "15", PRICE, LotSelectionMethod.FIFO, SALE_DATE)
        first, second = r.selected_lots
        assert first.holding_period == HoldingPeriod.LONG_TERM
        assert first.gain_loss == Decimal("200.00")
        # Held exactly 365 days
        assert second.holding_period == HoldingPeriod.SHORT_TERM
        assert second.total_basis == Decimal("750.00")
        assert second.gain_loss == Decimal("-150.00")
        assert r.long_term_gain_loss == Decimal("200.00")
        assert r.short_term_gain_loss == Decimal("-150.00")

    def test_totals(self, selector, acme_lots):
        r = selector.select_lots(acme_lots, "15", PRICE, LotSelectionMethod.FIFO, SALE_DATE)
        assert r.quantity_requested == Decimal("15")
        assert r.quantity_sold == Decimal("15")
        assert r.total_proceeds == Decimal("1800.00")
        assert r.total_basis == Decimal("1750.00")
        assert r.total_gain_loss == Decimal("50.00")
        assert r.notes == ()

    def test_input_order_does_not_matter(self, selector, acme_lots):
        shuffled = [acme_lots[2], acme_lots[0], acme_lots[1]]
        r = selector.select_lots(shuffled, "10", PRICE, LotSelectionMethod.FIFO, SALE_DATE)
        assert [lot.lot_id for lot in r.selected_lots] == ["lot-2023"]

    def test_same_day_lots_keep_input_order(self, selector, lot_factory):
        lots = [
            lot_factory("a", date(2025, 1, 2), "5", "10"),
            lot_factory("b", date(2025, 1, 2), "5", "20"),
        ]
        r = selector.select_lots(lots, "5", "15", LotSelectionMethod.FIFO, SALE_DATE)
        assert r.selected_lots[0].lot_id == "a"


class TestLifo:
    def test_newest_lots_first(self, selector, acme_lots):
        r = selector.select_lots(acme_lots, "15", PRICE, LotSelectionMethod.LIFO, SALE_DATE)
        assert [lot.lot_id for lot in r.selected_lots] == ["lot-2025", "lot-2024"]
        assert r.total_gain_loss == Decimal("-950.00")
        assert r.short_term_gain_loss == Decimal("-950.00")
        assert r.long_term_gain_loss == Decimal("0")


class TestSpecificId:
    def test_follows_given_order(self, selector, acme_lots):
        r = selector.select_lots(
            acme_lots, "15", PRICE, LotSelectionMethod.SPECIFIC_ID, SALE_DATE,
            specific_lot_ids=["lot-2025", "lot-2023"],
        )
        assert [lot.lot_id for lot in r.selected_lots] == ["lot-2025", "lot-2023"]
        assert r.selected_lots[1].quantity_sold == Decimal("5")

    def test_unknown_and_duplicate_ids(self, selector, acme_lots):
        r = selector.select_lots(
            acme_lots, "5", PRICE, LotSelectionMethod.SPECIFIC_ID, SALE_DATE,
            specific_lot_ids=["lot-2024", "missing", "lot-2024"],
        )
        assert [lot.lot_id for lot in r.selected_lots] == ["lot-2024"]
        assert "Lot missing not found; skipped" in r.notes

    def test_no_ids(self, selector, acme_lots):
        r = selector.select_lots(acme_lots, "5", PRICE, LotSelectionMethod.SPECIFIC_ID, SALE_DATE)
        assert r.selected_lots == ()
        assert r.quantity_sold == Decimal("0")
        assert "No lot ids given for specific identification" in r.notes


class TestEdges:
    def test_oversell_sells_everything(self, selector, acme_lots):
        r = selector.select_lots(acme_lots, "40", PRICE, LotSelectionMethod.FIFO, SALE_DATE)
        assert r.quantity_sold == Decimal("30")
        assert r.notes == (
            "Requested 40 shares but only 30 available; sold all available shares",
        )

    def test_empty_lot_skipped(self, selector, lot_factory):
        lots = [
            lot_factory("empty", date(2023, 1, 1), "0", "10"),
            lot_factory("full", date(2024, 1, 1), "5", "10"),
        ]
        r = selector.select_lots(lots, "5", "12", LotSelectionMethod.FIFO, SALE_DATE)
        assert [lot.lot_id for lot in r.selected_lots] == ["full"]

    def test_zero_quantity(self, selector, acme_lots):
        r = selector.select_lots(acme_lots, "0", PRICE, LotSelectionMethod.FIFO, SALE_DATE)
        assert r.selected_lots == ()
        assert r.total_gain_loss == Decimal("0")

    def test_partial_basis_uses_adjusted_basis(self, selector, lot_factory):
        lot = lot_factory("w", date(2024, 1, 1), "3", "10").model_copy(
            update={"adjusted_basis": Decimal("40")}
        )
        r = selector.select_lots([lot], "1", "20", LotSelectionMethod.FIFO, SALE_DATE)
        assert r.selected_lots[0].total_basis == Decimal("13.33")
        assert r.selected_lots[0].cost_basis_per_share == Decimal("13.33")


class TestCompareStrategies:
    def test_impact_per_method(self, selector, acme_lots):
        results = selector.compare_strategies(
            acme_lots, "15", PRICE, SALE_DATE,
            marginal_rate=Decimal("0.32"), long_term_rate=Decimal("0.15"),
        )
        by_method = {r.method: r for r in results}
        # 15% of 200 LT gain less 32% of 150 ST loss
        assert by_method[LotSelectionMethod.FIFO].estimated_tax_impact == Decimal("-18.00")
        assert by_method[LotSelectionMethod.LIFO].estimated_tax_impact == Decimal("-304.00")

    def test_includes_specific_id_when_requested(self, selector, acme_lots):
        results = selector.compare_strategies(
            acme_lots, "10", PRICE, SALE_DATE,
            marginal_rate="0.32", long_term_rate="0.15",
            methods=[LotSelectionMethod.FIFO, LotSelectionMethod.SPECIFIC_ID],
            specific_lot_ids=["lot-2024"],
        )
        assert [r.method for r in results] == [
            LotSelectionMethod.FIFO,
            LotSelectionMethod.SPECIFIC_ID,
        ]
        assert results[1].estimated_tax_impact == Decimal("-96.00")

    def test_estimate_tax_impact_gains(self):
        impact = LotSelector.estimate_tax_impact(
            Decimal("1000"), Decimal("2000"), Decimal("0.32"), Decimal("0.15")
        )
        assert impact == Decimal("620.00")
