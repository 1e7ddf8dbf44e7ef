"""Shared test fixtures for estax."""

from decimal import Decimal

import pytest

from estax.db.factory import DbConfig, SqliteRepositoryFactory
from estax.engines.brackets import build_tax_brackets, get_tax_year_config
from estax.models.enums import FilingStatus
from estax.models.reference import TaxBracket
from estax.models.worksheets import SeWorksheetConfig


@pytest.fixture
def repo():
    repo = SqliteRepositoryFactory().create(DbConfig(backend="sqlite", connection_string=":memory:"))
    yield repo
    repo.close()


@pytest.fixture
def se_config_2025() -> SeWorksheetConfig:
    return SeWorksheetConfig.from_tax_year_config(get_tax_year_config(2025))


@pytest.fixture
def brackets_2025_single() -> list[TaxBracket]:
    return build_tax_brackets(2025, FilingStatus.SINGLE)


@pytest.fixture
def two_bracket_table() -> list[TaxBracket]:
    """10% up to 10,000, 20% above."""
    return [
        TaxBracket(
            tax_year=2025,
            filing_status_id=1,
            min_income=Decimal("0"),
            max_income=Decimal("10000"),
            tax_rate=Decimal("0.10"),
            base_tax=Decimal("0"),
        ),
        TaxBracket(
            tax_year=2025,
            filing_status_id=1,
            min_income=Decimal("10000"),
            max_income=None,
            tax_rate=Decimal("0.20"),
            base_tax=Decimal("1000"),
        ),
    ]
