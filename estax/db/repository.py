"""Data access layer for estax."""

import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from decimal import Decimal

from estax.exceptions import RecordNotFoundError
from estax.models.estimate import NewTaxEstimate, TaxEstimate
from estax.models.reference import (
    FilingStatusRecord,
    StandardDeduction,
    TaxBracket,
    TaxYearConfig,
)

_ESTIMATE_INPUT_COLUMNS = (
    "tax_year",
    "filing_status_id",
    "expected_agi",
    "expected_deduction",
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
_ESTIMATE_CALCULATED_COLUMNS = (
    "calculated_se_tax",
    "calculated_total_tax",
    "calculated_required_payment",
)


def _to_text(value: object) -> object:
    """Decimals are stored as TEXT to keep them exact."""
    return str(value) if isinstance(value, Decimal) else value


def _now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


class TaxRepository:
    """CRUD operations for reference data and saved estimates."""

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn
        self._in_transaction = False

    def close(self) -> None:
        self.conn.close()

    def _commit(self) -> None:
        if not self._in_transaction:
            self.conn.commit()

    @contextmanager
    def transaction(self) -> Iterator["TaxRepository"]:
        """Group writes so they commit together or roll back together."""
        self._in_transaction = True
        try:
            yield self
        except BaseException:
            self.conn.rollback()
            raise
        else:
            self.conn.commit()
        finally:
            self._in_transaction = False

    def _fetch_all(self, sql: str, params: tuple = ()) -> list[dict]:
        cursor = self.conn.execute(sql, params)
        columns = [desc[0] for desc in cursor.description]
        return [dict(zip(columns, row)) for row in cursor.fetchall()]

    def _fetch_one(self, sql: str, params: tuple, entity: str, key: object) -> dict:
        rows = self._fetch_all(sql, params)
        if not rows:
            raise RecordNotFoundError(entity, key)
        return rows[0]

    # --- Tax year config ---

    def get_tax_year_config(self, tax_year: int) -> TaxYearConfig:
        row = self._fetch_one(
            "SELECT * FROM tax_year_config WHERE tax_year = ?",
            (tax_year,),
            "Tax year config",
            tax_year,
        )
        return TaxYearConfig(**row)

    def list_tax_years(self) -> list[int]:
        rows = self._fetch_all("SELECT tax_year FROM tax_year_config ORDER BY tax_year")
        return [row["tax_year"] for row in rows]

    # --- Filing status ---

    def get_filing_status(self, status_id: int) -> FilingStatusRecord:
        row = self._fetch_one(
            "SELECT * FROM filing_status WHERE id = ?",
            (status_id,),
            "Filing status",
            status_id,
        )
        return FilingStatusRecord(**row)

    def get_filing_status_by_code(self, code: str) -> FilingStatusRecord:
        row = self._fetch_one(
            "SELECT * FROM filing_status WHERE status_code = ?",
            (code,),
            "Filing status",
            code,
        )
        return FilingStatusRecord(**row)

    def list_filing_statuses(self) -> list[FilingStatusRecord]:
        rows = self._fetch_all("SELECT * FROM filing_status ORDER BY id")
        return [FilingStatusRecord(**row) for row in rows]

    # --- Standard deductions ---

    def get_standard_deduction(self, tax_year: int, filing_status_id: int) -> StandardDeduction:
        row = self._fetch_one(
            "SELECT * FROM standard_deductions WHERE tax_year = ? AND filing_status_id = ?",
            (tax_year, filing_status_id),
            "Standard deduction",
            (tax_year, filing_status_id),
        )
        return StandardDeduction(**row)

    # --- Tax brackets ---

    def get_tax_brackets(self, tax_year: int, filing_status_id: int) -> list[TaxBracket]:
        """Brackets for a year and filing status, ascending by min_income.

        Returns an empty list when none are loaded; the worksheet reports that.
        """
        rows = self._fetch_all(
            "SELECT * FROM tax_brackets WHERE tax_year = ? AND filing_status_id = ?",
            (tax_year, filing_status_id),
        )
        brackets = [TaxBracket(**row) for row in rows]
        # min_income is TEXT, so order numerically here rather than in SQL
        return sorted(brackets, key=lambda b: b.min_income)

    def insert_tax_bracket(self, bracket: TaxBracket) -> None:
        self.conn.execute(
            """INSERT INTO tax_brackets
               (tax_year, filing_status_id, min_income, max_income, tax_rate, base_tax)
               VALUES (?, ?, ?, ?, ?, ?)""",
            (
                bracket.tax_year,
                bracket.filing_status_id,
                str(bracket.min_income),
                str(bracket.max_income) if bracket.max_income is not None else None,
                str(bracket.tax_rate),
                str(bracket.base_tax),
            ),
        )
        self._commit()

    def delete_tax_brackets(self, tax_year: int, filing_status_id: int) -> int:
        """Delete all brackets for a year and filing status. Returns rows deleted."""
        cursor = self.conn.execute(
            "DELETE FROM tax_brackets WHERE tax_year = ? AND filing_status_id = ?",
            (tax_year, filing_status_id),
        )
        self._commit()
        return cursor.rowcount

    # --- Saved estimates ---

    def create_estimate(self, estimate: NewTaxEstimate) -> TaxEstimate:
        """Insert a new estimate. Returns the stored record with id and timestamps."""
        timestamp = _now()
        values = [_to_text(getattr(estimate, col)) for col in _ESTIMATE_INPUT_COLUMNS]
        placeholders = ", ".join("?" for _ in range(len(values) + 2))
        cursor = self.conn.execute(
            f"""INSERT INTO tax_estimates
               ({", ".join(_ESTIMATE_INPUT_COLUMNS)}, created_at, updated_at)
               VALUES ({placeholders})""",
            (*values, timestamp, timestamp),
        )
        self._commit()
        return self.get_estimate(cursor.lastrowid)

    def get_estimate(self, estimate_id: int) -> TaxEstimate:
        row = self._fetch_one(
            "SELECT * FROM tax_estimates WHERE id = ?",
            (estimate_id,),
            "Estimate",
            estimate_id,
        )
        return TaxEstimate(**row)

    def update_estimate(self, estimate: TaxEstimate) -> TaxEstimate:
        """Overwrite inputs and calculated values of an existing estimate."""
        columns = _ESTIMATE_INPUT_COLUMNS + _ESTIMATE_CALCULATED_COLUMNS
        assignments = ", ".join(f"{col} = ?" for col in columns)
        values = [_to_text(getattr(estimate, col)) for col in columns]
        cursor = self.conn.execute(
            f"UPDATE tax_estimates SET {assignments}, updated_at = ? WHERE id = ?",
            (*values, _now(), estimate.id),
        )
        self._commit()
        if cursor.rowcount == 0:
            raise RecordNotFoundError("Estimate", estimate.id)
        return self.get_estimate(estimate.id)

    def delete_estimate(self, estimate_id: int) -> None:
        cursor = self.conn.execute("DELETE FROM tax_estimates WHERE id = ?", (estimate_id,))
        self._commit()
        if cursor.rowcount == 0:
            raise RecordNotFoundError("Estimate", estimate_id)

    def list_estimates(self, tax_year: int | None = None) -> list[TaxEstimate]:
        """Saved estimates, newest first, optionally filtered by tax year."""
        if tax_year:
            rows = self._fetch_all(
                "SELECT * FROM tax_estimates WHERE tax_year = ? ORDER BY id DESC",
                (tax_year,),
            )
        else:
            rows = self._fetch_all("SELECT * FROM tax_estimates ORDER BY id DESC")
        return [TaxEstimate(**row) for row in rows]
