"""SQLite database schema definition."""

import sqlite3
from pathlib import Path

SCHEMA_VERSION = 1

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER PRIMARY KEY,
    applied_at TEXT NOT NULL DEFAULT (datetime('now'))
);

CREATE TABLE IF NOT EXISTS tax_year_config (
    tax_year INTEGER PRIMARY KEY,
    ss_wage_max TEXT NOT NULL,
    ss_tax_rate TEXT NOT NULL,
    medicare_tax_rate TEXT NOT NULL,
    se_tax_deductible_percentage TEXT NOT NULL,
    se_deduction_factor TEXT NOT NULL,
    required_payment_threshold TEXT NOT NULL,
    min_se_threshold TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS filing_status (
    id INTEGER PRIMARY KEY,
    status_code TEXT NOT NULL UNIQUE,
    status_name TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS standard_deductions (
    tax_year INTEGER NOT NULL REFERENCES tax_year_config(tax_year),
    filing_status_id INTEGER NOT NULL REFERENCES filing_status(id),
    amount TEXT NOT NULL,
    PRIMARY KEY (tax_year, filing_status_id)
);

CREATE TABLE IF NOT EXISTS tax_brackets (
    tax_year INTEGER NOT NULL REFERENCES tax_year_config(tax_year),
    filing_status_id INTEGER NOT NULL REFERENCES filing_status(id),
    min_income TEXT NOT NULL,
    max_income TEXT,
    tax_rate TEXT NOT NULL,
    base_tax TEXT NOT NULL,
    PRIMARY KEY (tax_year, filing_status_id, min_income)
);

CREATE TABLE IF NOT EXISTS tax_estimates (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    tax_year INTEGER NOT NULL REFERENCES tax_year_config(tax_year),
    filing_status_id INTEGER NOT NULL REFERENCES filing_status(id),
    expected_agi TEXT NOT NULL DEFAULT '0',
    expected_deduction TEXT NOT NULL DEFAULT '0',
    expected_qbi_deduction TEXT,
    expected_amt TEXT,
    expected_credits TEXT,
    expected_other_taxes TEXT,
    expected_withholding TEXT,
    prior_year_tax TEXT,
    se_income TEXT,
    expected_crp_payments TEXT,
    expected_wages TEXT,
    calculated_se_tax TEXT,
    calculated_total_tax TEXT,
    calculated_required_payment TEXT,
    created_at TEXT NOT NULL DEFAULT (datetime('now')),
    updated_at TEXT NOT NULL DEFAULT (datetime('now'))
);
"""


def create_schema(db_path: Path | str) -> sqlite3.Connection:
    """Create the database schema. Returns the connection."""
    conn = sqlite3.connect(str(db_path))
    if str(db_path) != ":memory:":
        conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA foreign_keys=ON")
    conn.executescript(SCHEMA_SQL)
    conn.execute(
        "INSERT OR IGNORE INTO schema_version (version) VALUES (?)",
        (SCHEMA_VERSION,),
    )
    conn.commit()
    return conn
