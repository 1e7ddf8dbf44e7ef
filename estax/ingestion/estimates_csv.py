"""Saved-estimate CSV adapter.

Required columns: tax_year, filing_status, expected_agi, expected_deduction.
Any of the optional worksheet inputs may also appear; empty cells are None.
`filing_status` is a status code (S, MFJ, MFS, HOH, QSS), case-insensitive.
"""

import logging

from estax.db.repository import TaxRepository
from estax.exceptions import InvalidFilingStatusError
from estax.ingestion.base import (
    BaseCsvAdapter,
    parse_decimal,
    parse_int,
    parse_optional_decimal,
)
from estax.models.enums import FilingStatus
from estax.models.estimate import NewTaxEstimate, TaxEstimate

logger = logging.getLogger(__name__)

OPTIONAL_DECIMAL_COLUMNS = (
    "expected_qbi_deduction",
    "expected_amt",
    "expected_credits",
    "expected_other_taxes",
    "expected_withholding",
    "prior_year_tax",
    "se_income",
    "expected_crp_payments",
    "expected_wages",
)

# Income-like inputs that may legitimately be negative (a business loss)
_SIGNED_COLUMNS = {"expected_agi", "se_income", "expected_crp_payments"}


class EstimateCsvAdapter(BaseCsvAdapter):
    required_columns = ("tax_year", "filing_status", "expected_agi", "expected_deduction")

    def convert_row(self, row: dict[str, str], row_number: int) -> NewTaxEstimate:
        code = row["filing_status"].upper()
        try:
            status = FilingStatus(code)
        except ValueError:
            raise InvalidFilingStatusError(row["filing_status"], row_number) from None

        optional = {
            column: parse_optional_decimal(row, column, row_number)
            for column in OPTIONAL_DECIMAL_COLUMNS
        }
        return NewTaxEstimate(
            tax_year=parse_int(row, "tax_year", row_number),
            filing_status_id=status.id,
            expected_agi=parse_decimal(row, "expected_agi", row_number),
            expected_deduction=parse_decimal(row, "expected_deduction", row_number),
            **optional,
        )

    def validate(self, records: list[NewTaxEstimate]) -> list[str]:
        errors = []
        for i, record in enumerate(records, start=1):
            for column, value in record.model_dump().items():
                if column in _SIGNED_COLUMNS or column in ("tax_year", "filing_status_id"):
                    continue
                if value is not None and value < 0:
                    errors.append(f"Row {i}: {column} must not be negative, got {value}")
        return errors

    def load(self, repo: TaxRepository, records: list[NewTaxEstimate]) -> list[TaxEstimate]:
        """Store every record as a new saved estimate."""
        saved = [repo.create_estimate(record) for record in records]
        logger.info("Imported %d estimate(s)", len(saved))
        return saved
