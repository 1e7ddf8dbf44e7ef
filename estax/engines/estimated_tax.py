"""Estimated Tax Worksheet (Form 1040-ES).

Worksheet lines:
  1      Adjusted gross income
  2a-2c  Deduction (itemized if > 0, else standard) plus QBI deduction
  3      Taxable income (line 1 - line 2c, not below zero)
  4      Tax from the rate schedules
  5-6    AMT; total tax before credits
  7-8    Credits; tax after credits (not below zero)
  9-11a  SE tax and other taxes; total tax
  11b-c  Refundable credits; total estimated tax (not below zero)
  12a-c  90% (66 2/3% for farmers and fishers) of line 11c vs. prior-year
         tax; the smaller is the required annual payment
  13     Withholding
  14a-b  Underpayment and the $1,000 de minimis test

Rate schedule lookup is lower-exclusive / upper-inclusive: income exactly on
a bracket's `max_income` stays in that bracket.
"""

import logging
from collections.abc import Sequence
from decimal import Decimal

from estax.engines.rounding import max_decimal, round_half_up
from estax.exceptions import BracketTableError, NoMatchingBracketError, NoTaxBracketsError
from estax.models.reference import TaxBracket
from estax.models.worksheets import EstimatedTaxWorksheetInput, EstimatedTaxWorksheetResult

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
STANDARD_FACTOR = Decimal("0.90")
FARMER_FISHER_FACTOR = Decimal(2) / Decimal(3)


class EstimatedTaxWorksheet:
    """Computes estimated tax and required payments from a rate schedule.

    Brackets must be supplied in ascending `min_income` order; they are not
    sorted or modified here.
    """

    def __init__(self, tax_brackets: Sequence[TaxBracket]) -> None:
        self.tax_brackets = tax_brackets

    def calculate(self, data: EstimatedTaxWorksheetInput) -> EstimatedTaxWorksheetResult:
        if not self.tax_brackets:
            raise NoTaxBracketsError()

        # Lines 2a-2c
        if data.itemized_deduction > ZERO:
            deduction, used_itemized = round_half_up(data.itemized_deduction), True
        else:
            deduction, used_itemized = round_half_up(data.standard_deduction), False
        total_deductions = round_half_up(deduction + data.qbi_deduction)

        # Lines 3-4
        taxable_income = max_decimal(
            round_half_up(data.adjusted_gross_income - total_deductions), ZERO
        )
        calculated_tax = self.calculate_tax(taxable_income)

        # Lines 5-11c
        total_tax_before_credits = round_half_up(calculated_tax + data.alternative_minimum_tax)
        tax_after_credits = max_decimal(
            round_half_up(total_tax_before_credits - data.credits), ZERO
        )
        total_tax = round_half_up(
            tax_after_credits + data.self_employment_tax + data.other_taxes
        )
        total_estimated_tax = max_decimal(
            round_half_up(total_tax - data.refundable_credits), ZERO
        )

        # Lines 12a-12c
        factor = FARMER_FISHER_FACTOR if data.is_farmer_or_fisher else STANDARD_FACTOR
        current_year_factor = round_half_up(total_estimated_tax * factor)
        required_annual_payment = min(current_year_factor, data.prior_year_tax)

        # Lines 13-14b
        underpayment = max_decimal(
            round_half_up(required_annual_payment - data.withholding), ZERO
        )
        threshold_amount = max_decimal(
            round_half_up(total_estimated_tax - data.withholding), ZERO
        )
        estimated_payments_required = (
            underpayment > ZERO and threshold_amount >= data.required_payment_threshold
        )

        return EstimatedTaxWorksheetResult(
            taxable_income=taxable_income,
            calculated_tax=calculated_tax,
            total_estimated_tax=total_estimated_tax,
            required_annual_payment=required_annual_payment,
            underpayment=underpayment,
            used_itemized_deduction=used_itemized,
            estimated_payments_required=estimated_payments_required,
        )

    def find_bracket(self, taxable_income: Decimal) -> TaxBracket:
        """Return the first bracket with min < income <= max (max None = unbounded)."""
        for bracket in self.tax_brackets:
            if taxable_income > bracket.min_income and (
                bracket.max_income is None or taxable_income <= bracket.max_income
            ):
                return bracket
        raise NoMatchingBracketError(taxable_income)

    def calculate_tax(self, taxable_income: Decimal) -> Decimal:
        """Line 4: base tax plus the marginal rate on income above the bracket floor."""
        if taxable_income <= ZERO:
            return ZERO
        bracket = self.find_bracket(taxable_income)
        logger.debug(
            "Taxable income %s falls in bracket (%s, %s] at rate %s",
            taxable_income,
            bracket.min_income,
            bracket.max_income if bracket.max_income is not None else "inf",
            bracket.tax_rate,
        )
        return round_half_up(
            bracket.base_tax + (taxable_income - bracket.min_income) * bracket.tax_rate
        )


def validate_bracket_table(brackets: Sequence[TaxBracket]) -> None:
    """Check that brackets partition [0, inf) contiguously in ascending order.

    The worksheet does not call this; a table with gaps there surfaces as
    NoMatchingBracketError. Loaders call it to reject bad data up front.
    """
    if not brackets:
        raise BracketTableError("no brackets")
    if brackets[0].min_income != ZERO:
        raise BracketTableError(
            f"first bracket starts at {brackets[0].min_income}, expected 0"
        )
    for current, following in zip(brackets, brackets[1:]):
        if current.max_income is None:
            raise BracketTableError(
                f"unbounded bracket at {current.min_income} is not the last one"
            )
        if current.max_income <= current.min_income:
            raise BracketTableError(
                f"bracket at {current.min_income} has max_income {current.max_income}"
            )
        if following.min_income != current.max_income:
            raise BracketTableError(
                f"gap or overlap between {current.max_income} and {following.min_income}"
            )
    if brackets[-1].max_income is not None:
        raise BracketTableError("top bracket must have no max_income")
