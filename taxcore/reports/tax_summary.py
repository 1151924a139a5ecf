"""Tax liability summary report generator."""

from taxcore.models.reports import TaxLiabilityResult
from taxcore.reports.formatting import build_environment


class TaxSummaryGenerator:
    """Generates a human-readable tax liability summary report."""

    def __init__(self) -> None:
        self.env = build_environment()

    def render(self, estimate: TaxLiabilityResult) -> str:
        """Render tax liability summary report."""
        template = self.env.get_template("tax_summary.txt")
        return template.render(est=estimate)
