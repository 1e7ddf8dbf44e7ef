"""Saved estimate models (what the repository persists)."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel

from estax.models.worksheets import (
    EstimatedTaxWorksheetInput,
    EstimatedTaxWorksheetResult,
    SeWorksheetResult,
)


class NewTaxEstimate(BaseModel):
    """User-provided worksheet inputs for a new saved estimate."""

    tax_year: int
    filing_status_id: int
    # Estimated Tax Worksheet inputs
    expected_agi: Decimal
    expected_deduction: Decimal
    expected_qbi_deduction: Decimal | None = None
    expected_amt: Decimal | None = None
    expected_credits: Decimal | None = None
    expected_other_taxes: Decimal | None = None
    expected_withholding: Decimal | None = None
    prior_year_tax: Decimal | None = None
    # SE Worksheet inputs
    se_income: Decimal | None = None
    expected_crp_payments: Decimal | None = None
    expected_wages: Decimal | None = None


class TaxEstimate(NewTaxEstimate):
    id: int
    # Calculated values
    calculated_se_tax: Decimal | None = None
    calculated_total_tax: Decimal | None = None
    calculated_required_payment: Decimal | None = None
    created_at: datetime
    updated_at: datetime


class EstimateCalculation(BaseModel):
    """Both worksheets' results for one saved estimate."""

    estimate: TaxEstimate | NewTaxEstimate
    se_result: SeWorksheetResult | None = None
    worksheet_input: EstimatedTaxWorksheetInput
    worksheet_result: EstimatedTaxWorksheetResult
    warnings: list[str] = []
