"""Reference data seeding: filing statuses and the built-in tax year tables."""

import logging
import sqlite3

from estax.engines.brackets import (
    FEDERAL_STANDARD_DEDUCTION,
    SUPPORTED_TAX_YEARS,
    build_tax_brackets,
    get_tax_year_config,
)
from estax.engines.estimated_tax import validate_bracket_table
from estax.models.enums import FilingStatus

logger = logging.getLogger(__name__)


def seed_reference_data(conn: sqlite3.Connection) -> None:
    """Insert filing statuses, tax year config, standard deductions and brackets.

    Idempotent: existing rows are left untouched (INSERT OR IGNORE), and a
    (year, filing status) that already has brackets, built-in or loaded from
    CSV, gets none added.
    """
    for status in FilingStatus:
        conn.execute(
            "INSERT OR IGNORE INTO filing_status (id, status_code, status_name) VALUES (?, ?, ?)",
            (status.id, status.value, status.display_name),
        )

    for tax_year in SUPPORTED_TAX_YEARS:
        config = get_tax_year_config(tax_year)
        conn.execute(
            """INSERT OR IGNORE INTO tax_year_config
               (tax_year, ss_wage_max, ss_tax_rate, medicare_tax_rate,
                se_tax_deductible_percentage, se_deduction_factor,
                required_payment_threshold, min_se_threshold)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?)""",
            (
                config.tax_year,
                str(config.ss_wage_max),
                str(config.ss_tax_rate),
                str(config.medicare_tax_rate),
                str(config.se_tax_deductible_percentage),
                str(config.se_deduction_factor),
                str(config.required_payment_threshold),
                str(config.min_se_threshold),
            ),
        )
        for status, amount in FEDERAL_STANDARD_DEDUCTION[tax_year].items():
            conn.execute(
                """INSERT OR IGNORE INTO standard_deductions
                   (tax_year, filing_status_id, amount) VALUES (?, ?, ?)""",
                (tax_year, status.id, str(amount)),
            )
        for status in FilingStatus:
            if _has_brackets(conn, tax_year, status.id):
                continue
            brackets = build_tax_brackets(tax_year, status)
            validate_bracket_table(brackets)
            for bracket in brackets:
                conn.execute(
                    """INSERT OR IGNORE INTO tax_brackets
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
    conn.commit()
    logger.info("Seeded reference data for tax years %s", SUPPORTED_TAX_YEARS)


def _has_brackets(conn: sqlite3.Connection, tax_year: int, filing_status_id: int) -> bool:
    row = conn.execute(
        "SELECT 1 FROM tax_brackets WHERE tax_year = ? AND filing_status_id = ? LIMIT 1",
        (tax_year, filing_status_id),
    ).fetchone()
    return row is not None
