"""Report generation for taxcore."""

from taxcore.reports.amt_worksheet import AMTWorksheetGenerator
from taxcore.reports.lot_comparison import LotComparisonGenerator
from taxcore.reports.quarterly_schedule import QuarterlyScheduleGenerator
from taxcore.reports.tax_summary import TaxSummaryGenerator

__all__ = [
    "AMTWorksheetGenerator",
    "LotComparisonGenerator",
    "QuarterlyScheduleGenerator",
    "TaxSummaryGenerator",
]
