"""Data models for taxcore."""

from taxcore.models.brackets import TaxBracket
from taxcore.models.enums import (
    DeductionType,
    FilingStatus,
    HoldingPeriod,
    LotSelectionMethod,
    QuarterStatus,
    StateTaxRegime,
    UnderpaymentRisk,
    parse_filing_status,
)
from taxcore.models.income import (
    AmtInput,
    CapitalLossCarryover,
    IncomeSummary,
    QuarterlyPaymentMade,
    ScheduleDInput,
)
from taxcore.models.lots import (
    LotSelectionResult,
    Position,
    PurchaseRecord,
    SaleRecord,
    SelectedLot,
    TaxLot,
    TlhCandidate,
    WashSaleCheckResult,
    WashSaleViolation,
)
from taxcore.models.reports import (
    AmtResult,
    QuarterlyEstimateResult,
    QuarterPayment,
    ScheduleDResult,
    StateTaxResult,
    TaxLiabilityResult,
)

__all__ = [
    "AmtInput",
    "AmtResult",
    "CapitalLossCarryover",
    "DeductionType",
    "FilingStatus",
    "HoldingPeriod",
    "IncomeSummary",
    "LotSelectionMethod",
    "LotSelectionResult",
    "Position",
    "PurchaseRecord",
    "QuarterlyEstimateResult",
    "QuarterlyPaymentMade",
    "QuarterPayment",
    "QuarterStatus",
    "SaleRecord",
    "ScheduleDInput",
    "ScheduleDResult",
    "SelectedLot",
    "StateTaxRegime",
    "StateTaxResult",
    "TaxBracket",
    "TaxLiabilityResult",
    "TaxLot",
    "TlhCandidate",
    "UnderpaymentRisk",
    "WashSaleCheckResult",
    "WashSaleViolation",
    "parse_filing_status",
]
