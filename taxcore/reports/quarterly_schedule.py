"""Quarterly estimated payment schedule report generator."""

from taxcore.models.reports import QuarterlyEstimateResult
from taxcore.reports.formatting import build_environment


class QuarterlyScheduleGenerator:
    """Generates the Form 1040-ES payment schedule report."""

    def __init__(self) -> None:
        self.env = build_environment()

    def render(self, result: QuarterlyEstimateResult) -> str:
        template = self.env.get_template("quarterly_schedule.txt")
        return template.render(result=result)
