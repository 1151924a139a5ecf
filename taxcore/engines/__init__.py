"""Tax computation engines."""

from taxcore.engines.amt import AMTEngine, compute_iso_bargain_element
from taxcore.engines.estimator import TaxEstimator
from taxcore.engines.harvesting import TaxLossHarvester
from taxcore.engines.lot_selection import LotSelector, classify_holding_period
from taxcore.engines.quarterly import QuarterlyEstimator
from taxcore.engines.schedule_d import ScheduleDEngine
from taxcore.engines.state_tax import StateTaxEngine
from taxcore.engines.wash_sale import WashSaleChecker

__all__ = [
    "AMTEngine",
    "LotSelector",
    "QuarterlyEstimator",
    "ScheduleDEngine",
    "StateTaxEngine",
    "TaxEstimator",
    "TaxLossHarvester",
    "WashSaleChecker",
    "classify_holding_period",
    "compute_iso_bargain_element",
]
