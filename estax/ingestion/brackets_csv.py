"""Tax bracket CSV adapter.

CSV layout (IRS schedule designations):

    tax_year,schedule,min_income,max_income,base_tax,rate
    2025,X,0,11925,0,0.10
    2025,X,11925,48475,1192.50,0.12
    ...
    2025,X,626350,,188769.75,0.37

An empty `max_income` marks the unbounded top bracket. Schedules map to
filing statuses: X -> S, Y-1 -> MFJ and QSS, Y-2 -> MFS, Z -> HOH.
"""

import logging
import sqlite3
from collections import defaultdict
from decimal import Decimal

from pydantic import BaseModel

from estax.db.repository import TaxRepository
from estax.engines.estimated_tax import validate_bracket_table
from estax.exceptions import (
    BracketTableError,
    FilingStatusNotFoundError,
    InvalidScheduleError,
    RecordNotFoundError,
    TaxYearNotFoundError,
)
from estax.ingestion.base import (
    BaseCsvAdapter,
    parse_decimal,
    parse_int,
    parse_optional_decimal,
)
from estax.models.enums import Schedule
from estax.models.reference import TaxBracket

logger = logging.getLogger(__name__)


class TaxBracketRecord(BaseModel):
    tax_year: int
    schedule: Schedule
    min_income: Decimal
    max_income: Decimal | None = None
    base_tax: Decimal
    rate: Decimal

    def to_bracket(self, filing_status_id: int) -> TaxBracket:
        return TaxBracket(
            tax_year=self.tax_year,
            filing_status_id=filing_status_id,
            min_income=self.min_income,
            max_income=self.max_income,
            tax_rate=self.rate,
            base_tax=self.base_tax,
        )


class TaxBracketCsvAdapter(BaseCsvAdapter):
    """Parses rate schedule CSVs and loads them into the repository."""

    required_columns = ("tax_year", "schedule", "min_income", "max_income", "base_tax", "rate")

    def convert_row(self, row: dict[str, str], row_number: int) -> TaxBracketRecord:
        try:
            schedule = Schedule(row["schedule"])
        except ValueError:
            raise InvalidScheduleError(row["schedule"]) from None
        return TaxBracketRecord(
            tax_year=parse_int(row, "tax_year", row_number),
            schedule=schedule,
            min_income=parse_decimal(row, "min_income", row_number),
            max_income=parse_optional_decimal(row, "max_income", row_number),
            base_tax=parse_decimal(row, "base_tax", row_number),
            rate=parse_decimal(row, "rate", row_number),
        )

    def validate(self, records: list[TaxBracketRecord]) -> list[str]:
        """Each (year, schedule) group must partition [0, inf) contiguously."""
        errors = []
        for (tax_year, schedule), group in sorted(_group(records).items()):
            brackets = sorted(
                (record.to_bracket(0) for record in group), key=lambda b: b.min_income
            )
            try:
                validate_bracket_table(brackets)
            except BracketTableError as e:
                errors.append(f"{tax_year} schedule {schedule.value}: {e}")
            for bracket in brackets:
                if not Decimal("0") <= bracket.tax_rate <= Decimal("1"):
                    errors.append(
                        f"{tax_year} schedule {schedule.value}: rate {bracket.tax_rate} "
                        f"at {bracket.min_income} is not between 0 and 1"
                    )
        return errors

    def load(self, repo: TaxRepository, records: list[TaxBracketRecord]) -> int:
        """Replace brackets for every (year, filing status) the records cover.

        Existing brackets for each mapped filing status are deleted first, so
        loading the same file twice gives the same result. The whole file is
        one transaction: if any group fails, no bracket is changed. Returns the
        number of rows inserted (Y-1 rows count twice: MFJ and QSS).
        """
        inserted = 0
        with repo.transaction():
            for (tax_year, schedule), group in _group(records).items():
                for status in schedule.filing_statuses:
                    try:
                        status_id = repo.get_filing_status_by_code(status.value).id
                    except RecordNotFoundError:
                        raise FilingStatusNotFoundError(status.value) from None

                    repo.delete_tax_brackets(tax_year, status_id)
                    for record in group:
                        try:
                            repo.insert_tax_bracket(record.to_bracket(status_id))
                        except sqlite3.IntegrityError as e:
                            if "FOREIGN KEY" in str(e):
                                raise TaxYearNotFoundError(tax_year) from e
                            raise
                        inserted += 1
        logger.info("Loaded %d tax bracket rows from %d record(s)", inserted, len(records))
        return inserted


def _group(records: list[TaxBracketRecord]) -> dict[tuple[int, Schedule], list[TaxBracketRecord]]:
    groups: dict[tuple[int, Schedule], list[TaxBracketRecord]] = defaultdict(list)
    for record in records:
        groups[(record.tax_year, record.schedule)].append(record)
    return groups
