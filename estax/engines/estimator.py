"""Estimate workflow: runs the SE worksheet, then the Estimated Tax Worksheet.

Loads year-specific reference data from the repository, feeds the SE tax
into line 9 of the estimated tax worksheet, and stores the calculated totals
back on the saved estimate.
"""

from decimal import Decimal

from estax.db.repository import TaxRepository
from estax.engines.estimated_tax import EstimatedTaxWorksheet
from estax.engines.self_employment import SeWorksheet
from estax.models.estimate import EstimateCalculation, NewTaxEstimate, TaxEstimate
from estax.models.reference import TaxYearConfig
from estax.models.worksheets import (
    EstimatedTaxWorksheetInput,
    SeWorksheetConfig,
    SeWorksheetResult,
)

ZERO = Decimal("0")


class TaxEstimator:
    """Computes both 1040-ES worksheets for saved estimates."""

    def __init__(self, repo: TaxRepository) -> None:
        self.repo = repo
        self.warnings: list[str] = []

    def calculate(
        self,
        estimate: TaxEstimate | NewTaxEstimate,
        is_farmer_or_fisher: bool = False,
    ) -> EstimateCalculation:
        """Run both worksheets for an estimate without saving anything."""
        self.warnings = []

        config = self.repo.get_tax_year_config(estimate.tax_year)
        brackets = self.repo.get_tax_brackets(estimate.tax_year, estimate.filing_status_id)
        standard = self.repo.get_standard_deduction(
            estimate.tax_year, estimate.filing_status_id
        ).amount

        se_result = self.compute_se(estimate, config)
        se_tax = se_result.self_employment_tax if se_result is not None else ZERO

        worksheet_input = self.build_worksheet_input(
            estimate, config, standard, se_tax, is_farmer_or_fisher
        )
        worksheet = EstimatedTaxWorksheet(brackets)
        worksheet_result = worksheet.calculate(worksheet_input)
        if estimate.prior_year_tax is None:
            # Line 12b unknown: take it equal to line 11c so line 12a governs
            self.warnings.append(
                "No prior-year tax given; required payment is based on "
                "current-year tax only."
            )
            worksheet_input = worksheet_input.model_copy(
                update={"prior_year_tax": worksheet_result.total_estimated_tax}
            )
            worksheet_result = worksheet.calculate(worksheet_input)

        return EstimateCalculation(
            estimate=estimate,
            se_result=se_result,
            worksheet_input=worksheet_input,
            worksheet_result=worksheet_result,
            warnings=list(self.warnings),
        )

    def calculate_and_save(
        self,
        estimate_id: int,
        is_farmer_or_fisher: bool = False,
    ) -> EstimateCalculation:
        """Calculate a stored estimate and persist the calculated totals."""
        estimate = self.repo.get_estimate(estimate_id)
        calculation = self.calculate(estimate, is_farmer_or_fisher)

        updated = estimate.model_copy(
            update={
                "calculated_se_tax": (
                    calculation.se_result.self_employment_tax
                    if calculation.se_result is not None
                    else None
                ),
                "calculated_total_tax": calculation.worksheet_result.total_estimated_tax,
                "calculated_required_payment": (
                    calculation.worksheet_result.required_annual_payment
                ),
            }
        )
        saved = self.repo.update_estimate(updated)
        return calculation.model_copy(update={"estimate": saved})

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def compute_se(
        self,
        estimate: TaxEstimate | NewTaxEstimate,
        config: TaxYearConfig,
    ) -> SeWorksheetResult | None:
        """SE worksheet, or None when the estimate has no SE or CRP income."""
        if estimate.se_income is None and estimate.expected_crp_payments is None:
            return None
        worksheet = SeWorksheet(SeWorksheetConfig.from_tax_year_config(config))
        result = worksheet.calculate(
            se_income=estimate.se_income or ZERO,
            crp_payments=estimate.expected_crp_payments or ZERO,
            wages=estimate.expected_wages or ZERO,
        )
        if result.below_threshold:
            self.warnings.append(
                f"SE income of ${result.combined_se_income:,.2f} is at or below "
                f"${config.min_se_threshold:,.2f}; no SE tax is due."
            )
        return result

    def build_worksheet_input(
        self,
        estimate: TaxEstimate | NewTaxEstimate,
        config: TaxYearConfig,
        standard_deduction: Decimal,
        se_tax: Decimal,
        is_farmer_or_fisher: bool,
    ) -> EstimatedTaxWorksheetInput:
        """Map a saved estimate onto the worksheet lines.

        The saved estimate holds one expected deduction. It is treated as
        itemized only when it exceeds the standard deduction for the year and
        filing status; otherwise the standard deduction is used.
        """
        itemized = ZERO
        if estimate.expected_deduction > standard_deduction:
            itemized = estimate.expected_deduction
        elif ZERO < estimate.expected_deduction < standard_deduction:
            self.warnings.append(
                f"Expected deduction ${estimate.expected_deduction:,.2f} is below the "
                f"standard deduction ${standard_deduction:,.2f}; using the standard deduction."
            )

        return EstimatedTaxWorksheetInput(
            adjusted_gross_income=estimate.expected_agi,
            itemized_deduction=itemized,
            standard_deduction=standard_deduction,
            qbi_deduction=estimate.expected_qbi_deduction or ZERO,
            alternative_minimum_tax=estimate.expected_amt or ZERO,
            credits=estimate.expected_credits or ZERO,
            self_employment_tax=se_tax,
            other_taxes=estimate.expected_other_taxes or ZERO,
            prior_year_tax=estimate.prior_year_tax or ZERO,
            withholding=estimate.expected_withholding or ZERO,
            is_farmer_or_fisher=is_farmer_or_fisher,
            required_payment_threshold=config.required_payment_threshold,
        )
