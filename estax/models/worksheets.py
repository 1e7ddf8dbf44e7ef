"""Form 1040-ES worksheet input, configuration and result models."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict

from estax.exceptions import (
    InvalidDeductionFactorError,
    InvalidMedicareRateError,
    InvalidMinSeThresholdError,
    InvalidNetEarningsFactorError,
    InvalidSocialSecurityRateError,
    InvalidSsWageMaxError,
)
from estax.models.reference import TaxYearConfig

ZERO = Decimal("0")
ONE = Decimal("1")


class SeWorksheetConfig(BaseModel):
    """Rates and limits for the SE Tax and Deduction Worksheet.

    One instance per tax year. Field ranges are checked by `check_ranges()`,
    which the calculator calls before every computation.
    """

    model_config = ConfigDict(frozen=True)

    ss_wage_max: Decimal  # Line 5
    ss_tax_rate: Decimal  # Line 9 multiplier, employer + employee (12.4%)
    medicare_tax_rate: Decimal  # Line 4 multiplier (2.9%)
    net_earnings_factor: Decimal  # Line 3 multiplier (92.35%)
    deduction_factor: Decimal  # Line 11 multiplier (50%)
    min_se_threshold: Decimal  # $400 floor

    @classmethod
    def from_tax_year_config(cls, config: TaxYearConfig) -> "SeWorksheetConfig":
        return cls(
            ss_wage_max=config.ss_wage_max,
            ss_tax_rate=config.ss_tax_rate,
            medicare_tax_rate=config.medicare_tax_rate,
            net_earnings_factor=config.se_tax_deductible_percentage,
            deduction_factor=config.se_deduction_factor,
            min_se_threshold=config.min_se_threshold,
        )

    def check_ranges(self) -> None:
        """Raise the SeWorksheetError subclass for the first out-of-range field."""
        if not ZERO < self.net_earnings_factor <= ONE:
            raise InvalidNetEarningsFactorError(self.net_earnings_factor)
        if not ZERO <= self.ss_tax_rate <= ONE:
            raise InvalidSocialSecurityRateError(self.ss_tax_rate)
        if not ZERO <= self.medicare_tax_rate <= ONE:
            raise InvalidMedicareRateError(self.medicare_tax_rate)
        if not ZERO <= self.deduction_factor <= ONE:
            raise InvalidDeductionFactorError(self.deduction_factor)
        if self.ss_wage_max <= ZERO:
            raise InvalidSsWageMaxError(self.ss_wage_max)
        if self.min_se_threshold < ZERO:
            raise InvalidMinSeThresholdError(self.min_se_threshold)


class SeWorksheetResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    combined_se_income: Decimal  # Lines 1a + 1b + 2
    net_earnings: Decimal  # Line 3
    medicare_tax: Decimal  # Line 4
    ss_taxable_earnings: Decimal  # Line 8
    social_security_tax: Decimal  # Line 9
    self_employment_tax: Decimal  # Line 10
    se_tax_deduction: Decimal  # Line 11
    below_threshold: bool = False

    @classmethod
    def zero(cls, combined_se_income: Decimal) -> "SeWorksheetResult":
        """Result for income at or below the SE threshold: no SE tax is due."""
        cents = Decimal("0.00")
        return cls(
            combined_se_income=combined_se_income,
            net_earnings=cents,
            medicare_tax=cents,
            ss_taxable_earnings=cents,
            social_security_tax=cents,
            self_employment_tax=cents,
            se_tax_deduction=cents,
            below_threshold=True,
        )


class EstimatedTaxWorksheetInput(BaseModel):
    model_config = ConfigDict(frozen=True)

    adjusted_gross_income: Decimal  # Line 1
    itemized_deduction: Decimal = ZERO  # used instead of standard when > 0
    standard_deduction: Decimal = ZERO
    qbi_deduction: Decimal = ZERO  # Line 2b
    alternative_minimum_tax: Decimal = ZERO  # Line 5
    credits: Decimal = ZERO  # Line 7, excluding withholding
    self_employment_tax: Decimal = ZERO  # Line 9, from the SE worksheet
    other_taxes: Decimal = ZERO  # Line 10
    refundable_credits: Decimal = ZERO  # Line 11b
    prior_year_tax: Decimal = ZERO  # Line 12b, already 100% or 110%
    withholding: Decimal = ZERO  # Line 13
    is_farmer_or_fisher: bool = False
    required_payment_threshold: Decimal = Decimal("1000")


class EstimatedTaxWorksheetResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    taxable_income: Decimal  # Line 3
    calculated_tax: Decimal  # Line 4
    total_estimated_tax: Decimal  # Line 11c
    required_annual_payment: Decimal  # Line 12c
    underpayment: Decimal  # Line 14a
    used_itemized_deduction: bool
    estimated_payments_required: bool
