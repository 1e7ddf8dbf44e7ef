"""Custom exceptions for estax."""

from decimal import Decimal


class EstaxError(Exception):
    """Base exception for all estax errors."""


# --- Estimated Tax Worksheet ---


class EstimatedTaxWorksheetError(EstaxError):
    """Base exception for Estimated Tax Worksheet failures."""


class NoTaxBracketsError(EstimatedTaxWorksheetError):
    """Raised when the worksheet is given an empty bracket table."""

    def __init__(self) -> None:
        super().__init__("no tax brackets provided")


class NoMatchingBracketError(EstimatedTaxWorksheetError):
    """Raised when positive taxable income falls outside every bracket."""

    def __init__(self, taxable_income: Decimal):
        self.taxable_income = taxable_income
        super().__init__(f"no tax bracket found for taxable income {taxable_income}")


# --- SE Worksheet configuration ---


class SeWorksheetError(EstaxError):
    """Raised when an SE worksheet configuration field is out of range."""

    field: str = ""
    expectation: str = ""

    def __init__(self, value: Decimal):
        self.value = value
        super().__init__(f"{self.field.replace('_', ' ')} {self.expectation}, got {value}")


class InvalidNetEarningsFactorError(SeWorksheetError):
    field = "net_earnings_factor"
    expectation = "must be greater than 0 and at most 1"


class InvalidSocialSecurityRateError(SeWorksheetError):
    field = "ss_tax_rate"
    expectation = "must be between 0 and 1"


class InvalidMedicareRateError(SeWorksheetError):
    field = "medicare_tax_rate"
    expectation = "must be between 0 and 1"


class InvalidDeductionFactorError(SeWorksheetError):
    field = "deduction_factor"
    expectation = "must be between 0 and 1"


class InvalidSsWageMaxError(SeWorksheetError):
    field = "ss_wage_max"
    expectation = "must be positive"


class InvalidMinSeThresholdError(SeWorksheetError):
    field = "min_se_threshold"
    expectation = "must be non-negative"


# --- Bracket tables ---


class BracketTableError(EstaxError):
    """Raised when a bracket table is not a contiguous ascending partition."""

    def __init__(self, message: str):
        super().__init__(f"Malformed bracket table: {message}")


# --- Persistence ---


class RepositoryError(EstaxError):
    """Base exception for data access failures."""


class RecordNotFoundError(RepositoryError):
    """Raised when a lookup by key finds no row."""

    def __init__(self, entity: str, key: object):
        self.entity = entity
        self.key = key
        super().__init__(f"{entity} not found: {key}")


class UnknownBackendError(RepositoryError):
    """Raised when no repository factory is registered for a backend name."""

    def __init__(self, backend: str, available: list[str]):
        self.backend = backend
        self.available = available
        super().__init__(
            f"Unknown database backend '{backend}'. "
            f"Available: {', '.join(available) or 'none'}"
        )


# --- CSV ingestion ---


class DataImportError(EstaxError):
    """Base exception for CSV import failures."""


class CsvParseError(DataImportError):
    """Raised when a CSV file is structurally invalid or a cell cannot be parsed."""

    def __init__(self, row: int, message: str):
        self.row = row
        super().__init__(f"CSV parse error on row {row}: {message}")


class InvalidScheduleError(DataImportError):
    """Raised when a bracket row names an unknown IRS schedule."""

    def __init__(self, schedule: str):
        self.schedule = schedule
        super().__init__(f"Invalid schedule: {schedule}")


class FilingStatusNotFoundError(DataImportError):
    """Raised when a schedule maps to a filing status missing from the database."""

    def __init__(self, code: str):
        self.code = code
        super().__init__(
            f"Filing status '{code}' not found in database (have you run `estax init`?)"
        )


class TaxYearNotFoundError(DataImportError):
    """Raised when brackets reference a tax year with no configuration row."""

    def __init__(self, tax_year: int):
        self.tax_year = tax_year
        super().__init__(
            f"Tax year {tax_year} not found in database (have you run `estax init`?)"
        )


class InvalidFilingStatusError(DataImportError):
    """Raised when an estimate row carries an unrecognised filing status code."""

    def __init__(self, status: str, row: int):
        self.status = status
        self.row = row
        super().__init__(f"Unrecognised filing status '{status}' on row {row}")
