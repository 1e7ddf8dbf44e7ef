"""Tests for the saved-estimate workflow (SE worksheet feeding line 9)."""

from decimal import Decimal

import pytest

from estax.engines.estimator import TaxEstimator
from estax.exceptions import NoTaxBracketsError, RecordNotFoundError
from estax.models.enums import FilingStatus
from estax.models.estimate import NewTaxEstimate


def single_2025(**overrides) -> NewTaxEstimate:
    values = {
        "tax_year": 2025,
        "filing_status_id": FilingStatus.SINGLE.id,
        "expected_agi": Decimal("100000"),
        "expected_deduction": Decimal("0"),
        "prior_year_tax": Decimal("12000"),
    }
    values.update(overrides)
    return NewTaxEstimate(**values)


@pytest.fixture
def estimator(repo):
    return TaxEstimator(repo)


class TestCalculate:
    def test_without_se_income(self, estimator):
        calc = estimator.calculate(single_2025())
        assert calc.se_result is None
        assert calc.worksheet_input.standard_deduction == Decimal("15000")
        assert calc.worksheet_input.self_employment_tax == Decimal("0")
        assert calc.worksheet_result.calculated_tax == Decimal("13614.00")
        assert calc.worksheet_result.required_annual_payment == Decimal("12000")
        assert calc.worksheet_result.estimated_payments_required is True
        assert calc.warnings == []

    def test_se_tax_carried_to_worksheet(self, estimator):
        calc = estimator.calculate(
            single_2025(se_income=Decimal("100000"), expected_wages=Decimal("50000"))
        )
        assert calc.se_result.self_employment_tax == Decimal("14129.55")
        assert calc.worksheet_input.self_employment_tax == Decimal("14129.55")
        assert calc.worksheet_result.total_estimated_tax == Decimal("27743.55")

    def test_se_below_threshold_warns(self, estimator):
        calc = estimator.calculate(single_2025(se_income=Decimal("300")))
        assert calc.se_result.below_threshold is True
        assert calc.worksheet_input.self_employment_tax == Decimal("0.00")
        assert any("no SE tax is due" in w for w in calc.warnings)

    def test_larger_expected_deduction_is_itemized(self, estimator):
        calc = estimator.calculate(single_2025(expected_deduction=Decimal("20000")))
        assert calc.worksheet_result.used_itemized_deduction is True
        assert calc.worksheet_result.taxable_income == Decimal("80000.00")

    def test_smaller_expected_deduction_uses_standard(self, estimator):
        calc = estimator.calculate(single_2025(expected_deduction=Decimal("10000")))
        assert calc.worksheet_result.used_itemized_deduction is False
        assert calc.worksheet_result.taxable_income == Decimal("85000.00")
        assert any("standard deduction" in w for w in calc.warnings)

    def test_missing_prior_year_tax(self, estimator):
        calc = estimator.calculate(single_2025(prior_year_tax=None))
        assert calc.worksheet_input.prior_year_tax == Decimal("13614.00")
        assert calc.worksheet_result.required_annual_payment == Decimal("12252.60")
        assert any("prior-year" in w for w in calc.warnings)

    def test_zero_prior_year_tax_is_respected(self, estimator):
        calc = estimator.calculate(single_2025(prior_year_tax=Decimal("0")))
        assert calc.worksheet_result.required_annual_payment == Decimal("0")
        assert calc.worksheet_result.estimated_payments_required is False

    def test_farmer_or_fisher(self, estimator):
        calc = estimator.calculate(
            single_2025(prior_year_tax=Decimal("20000")), is_farmer_or_fisher=True
        )
        assert calc.worksheet_result.required_annual_payment == Decimal("9076.00")

    def test_unknown_tax_year(self, estimator):
        with pytest.raises(RecordNotFoundError):
            estimator.calculate(single_2025(tax_year=2030))

    def test_brackets_missing(self, estimator, repo):
        repo.delete_tax_brackets(2025, FilingStatus.SINGLE.id)
        with pytest.raises(NoTaxBracketsError):
            estimator.calculate(single_2025())


class TestCalculateAndSave:
    def test_stores_totals(self, estimator, repo):
        saved = repo.create_estimate(
            single_2025(se_income=Decimal("100000"), expected_wages=Decimal("50000"))
        )
        calc = estimator.calculate_and_save(saved.id)

        stored = repo.get_estimate(saved.id)
        assert stored.calculated_se_tax == Decimal("14129.55")
        assert stored.calculated_total_tax == Decimal("27743.55")
        assert stored.calculated_required_payment == Decimal("12000")
        assert calc.estimate.id == saved.id
        assert calc.estimate.calculated_total_tax == Decimal("27743.55")

    def test_no_se_income_stores_none(self, estimator, repo):
        saved = repo.create_estimate(single_2025())
        estimator.calculate_and_save(saved.id)
        stored = repo.get_estimate(saved.id)
        assert stored.calculated_se_tax is None
        assert stored.calculated_total_tax == Decimal("13614.00")

    def test_missing_estimate(self, estimator):
        with pytest.raises(RecordNotFoundError):
            estimator.calculate_and_save(999)
