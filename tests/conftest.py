"""Shared test fixtures for taxcore."""

from datetime import date
from decimal import Decimal

import pytest

from taxcore.models import IncomeSummary, Position, PurchaseRecord, SaleRecord, TaxLot


def make_lot(
    lot_id: str,
    acquired: date,
    quantity: str,
    basis_per_share: str,
    symbol: str = "ACME",
) -> TaxLot:
    qty = Decimal(quantity)
    per_share = Decimal(basis_per_share)
    return TaxLot(
        id=lot_id,
        symbol=symbol,
        date_acquired=acquired,
        quantity=qty,
        cost_basis_per_share=per_share,
        total_cost_basis=qty * per_share,
        adjusted_basis=qty * per_share,
        account_id="acct-1",
    )


@pytest.fixture
def acme_lots() -> list[TaxLot]:
    """Three ACME lots, oldest first: $100, $150 and $200 basis per share."""
    return [
        make_lot("lot-2023", date(2023, 1, 10), "10", "100"),
        make_lot("lot-2024", date(2024, 6, 1), "10", "150"),
        make_lot("lot-2025", date(2025, 3, 1), "10", "200"),
    ]


@pytest.fixture
def acme_position(acme_lots: list[TaxLot]) -> Position:
    return Position(
        symbol="ACME",
        total_quantity=Decimal("30"),
        lots=tuple(acme_lots),
        current_price=Decimal("120"),
        account_id="acct-1",
    )


@pytest.fixture
def wage_earner() -> IncomeSummary:
    return IncomeSummary(wages=Decimal("100000"), total_withholding=Decimal("12000"))


@pytest.fixture
def loss_sale() -> SaleRecord:
    return SaleRecord(
        lot_id="lot-sold",
        symbol="ACME",
        sale_date=date(2025, 6, 1),
        loss=Decimal("-500"),
    )


@pytest.fixture
def replacement_purchase() -> PurchaseRecord:
    return PurchaseRecord(
        lot_id="lot-new",
        symbol="ACME",
        purchase_date=date(2025, 6, 15),
        quantity=Decimal("10"),
        cost_basis=Decimal("1000"),
    )


@pytest.fixture
def lot_factory():
    return make_lot
