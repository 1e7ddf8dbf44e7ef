"""Year-specific reference data models.

These rows come from the reference tables in `estax.engines.brackets` or from
the database; the worksheet calculators only ever read them.
"""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict

from estax.models.enums import FilingStatus


class TaxBracket(BaseModel):
    """One segment of a progressive rate schedule.

    `min_income` is exclusive and `max_income` inclusive for lookup purposes;
    `max_income=None` marks the unbounded top bracket. `base_tax` is the
    cumulative tax owed at `min_income`.
    """

    model_config = ConfigDict(frozen=True)

    tax_year: int
    filing_status_id: int
    min_income: Decimal
    max_income: Decimal | None = None
    tax_rate: Decimal
    base_tax: Decimal


class TaxYearConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    tax_year: int
    ss_wage_max: Decimal
    ss_tax_rate: Decimal
    medicare_tax_rate: Decimal
    se_tax_deductible_percentage: Decimal  # 92.35% net earnings factor
    se_deduction_factor: Decimal
    required_payment_threshold: Decimal
    min_se_threshold: Decimal


class FilingStatusRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    status_code: FilingStatus
    status_name: str


class StandardDeduction(BaseModel):
    model_config = ConfigDict(frozen=True)

    tax_year: int
    filing_status_id: int
    amount: Decimal
