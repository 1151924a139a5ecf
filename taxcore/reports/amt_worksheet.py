"""AMT worksheet generator."""

from taxcore.models.income import AmtInput
from taxcore.models.reports import AmtResult
from taxcore.reports.formatting import build_environment


class AMTWorksheetGenerator:
    """Generates a Form 6251 style AMT worksheet."""

    def __init__(self) -> None:
        self.env = build_environment()

    def render(self, amt_input: AmtInput, result: AmtResult) -> str:
        """Render AMT worksheet."""
        template = self.env.get_template("amt_worksheet.txt")
        return template.render(inp=amt_input, result=result)
