"""Worksheet summary report generator."""

from decimal import Decimal
from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from estax.models.enums import FilingStatus
from estax.models.estimate import EstimateCalculation
from estax.models.worksheets import EstimatedTaxWorksheetResult, SeWorksheetResult

TEMPLATE_DIR = Path(__file__).parent / "templates"


def money(value: Decimal | None) -> str:
    if value is None:
        return "-"
    return f"${value:,.2f}"


class WorksheetSummaryGenerator:
    """Renders SE and estimated-tax worksheet results as plain text."""

    def __init__(self) -> None:
        self.env = Environment(
            loader=FileSystemLoader(str(TEMPLATE_DIR)),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters["money"] = money

    def render(
        self,
        worksheet: EstimatedTaxWorksheetResult | None = None,
        se: SeWorksheetResult | None = None,
        tax_year: int | None = None,
        filing_status: FilingStatus | None = None,
        warnings: list[str] | None = None,
    ) -> str:
        template = self.env.get_template("worksheet_summary.txt")
        return template.render(
            ws=worksheet,
            se=se,
            tax_year=tax_year,
            filing_status=filing_status,
            warnings=warnings or [],
        )

    def render_calculation(self, calculation: EstimateCalculation) -> str:
        """Render the full result of a saved-estimate calculation."""
        estimate = calculation.estimate
        return self.render(
            worksheet=calculation.worksheet_result,
            se=calculation.se_result,
            tax_year=estimate.tax_year,
            filing_status=FilingStatus.from_id(estimate.filing_status_id),
            warnings=calculation.warnings,
        )
