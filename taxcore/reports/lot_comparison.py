"""Lot selection strategy comparison report generator."""

from taxcore.models.lots import LotSelectionResult
from taxcore.reports.formatting import build_environment


class LotComparisonGenerator:
    """Generates a side-by-side report of lot selection methods."""

    def __init__(self) -> None:
        self.env = build_environment()

    def render(self, results: list[LotSelectionResult]) -> str:
        """Render lot comparison report, flagging the lowest tax impact."""
        template = self.env.get_template("lot_comparison.txt")
        best = min(results, key=lambda r: r.estimated_tax_impact) if results else None
        return template.render(results=results, best=best)
