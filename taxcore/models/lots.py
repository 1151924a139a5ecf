"""Tax lot, position, and disposal models."""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from taxcore.models.enums import HoldingPeriod, LotSelectionMethod


class TaxLot(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    symbol: str
    date_acquired: date
    quantity: Decimal = Field(ge=0)
    cost_basis_per_share: Decimal
    total_cost_basis: Decimal
    adjusted_basis: Decimal = Field(description="Total basis after wash sale adjustments")
    wash_sale_adjustment: Decimal = Decimal("0")
    account_id: str = ""


class Position(BaseModel):
    model_config = ConfigDict(frozen=True)

    symbol: str
    total_quantity: Decimal = Field(ge=0)
    lots: tuple[TaxLot, ...] = ()
    current_price: Decimal
    account_id: str = ""


class SelectedLot(BaseModel):
    """One lot's share of a proposed sale."""

    model_config = ConfigDict(frozen=True)

    lot_id: str
    date_acquired: date
    quantity_sold: Decimal
    cost_basis_per_share: Decimal
    total_basis: Decimal
    proceeds: Decimal
    gain_loss: Decimal
    holding_period: HoldingPeriod


class LotSelectionResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    method: LotSelectionMethod
    selected_lots: tuple[SelectedLot, ...] = ()
    quantity_requested: Decimal
    quantity_sold: Decimal
    total_proceeds: Decimal
    total_basis: Decimal
    total_gain_loss: Decimal
    short_term_gain_loss: Decimal
    long_term_gain_loss: Decimal
    estimated_tax_impact: Decimal = Decimal("0")
    notes: tuple[str, ...] = ()


class SaleRecord(BaseModel):
    """A realized sale. ``loss`` is negative for a loss."""

    model_config = ConfigDict(frozen=True)

    lot_id: str
    symbol: str
    sale_date: date
    loss: Decimal
    quantity: Decimal | None = Field(default=None, ge=0)


class PurchaseRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    lot_id: str
    symbol: str
    purchase_date: date
    quantity: Decimal = Field(default=Decimal("0"), ge=0)
    cost_basis: Decimal = Decimal("0")


class WashSaleViolation(BaseModel):
    model_config = ConfigDict(frozen=True)

    sold_lot_id: str
    replacement_lot_id: str
    symbol: str
    sale_date: date
    replacement_date: date
    disallowed_loss: Decimal
    basis_adjustment: Decimal


class WashSaleCheckResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    violations: tuple[WashSaleViolation, ...] = ()
    total_disallowed_loss: Decimal = Decimal("0")
    compliant: bool = True


class TlhCandidate(BaseModel):
    """A lot with an unrealized loss worth harvesting."""

    model_config = ConfigDict(frozen=True)

    symbol: str
    lot_id: str
    current_price: Decimal
    cost_basis: Decimal
    unrealized_loss: Decimal
    quantity: Decimal
    holding_period: HoldingPeriod
    wash_sale_risk: bool
    estimated_tax_savings: Decimal
    rationale: str
