"""Base adapter interface for CSV ingestion."""

import csv
import io
from abc import ABC, abstractmethod
from decimal import Decimal, InvalidOperation
from pathlib import Path

from estax.exceptions import CsvParseError


class BaseCsvAdapter(ABC):
    """Reads a headed CSV file into typed records.

    Columns are matched by header name, so their order does not matter.
    Surrounding whitespace is stripped from headers and cells. Row numbers in
    errors are 1-based data rows (the header is row 0).
    """

    required_columns: tuple[str, ...] = ()

    def parse(self, file_path: Path) -> list:
        """Read a CSV file and return typed records."""
        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")
        return self.parse_text(file_path.read_text())

    def parse_text(self, text: str) -> list:
        return [
            self.convert_row(row, row_number)
            for row_number, row in enumerate(self.read_rows(text), start=1)
        ]

    def read_rows(self, text: str) -> list[dict[str, str]]:
        reader = csv.DictReader(io.StringIO(text))
        headers = [h.strip() for h in (reader.fieldnames or [])]
        missing = [col for col in self.required_columns if col not in headers]
        if missing:
            raise CsvParseError(0, f"missing required column(s): {', '.join(missing)}")

        rows = []
        for row in reader:
            cleaned = {
                key.strip(): (value or "").strip()
                for key, value in row.items()
                if key is not None
            }
            if not any(cleaned.values()):
                continue
            rows.append(cleaned)
        return rows

    @abstractmethod
    def convert_row(self, row: dict[str, str], row_number: int):
        """Convert one cleaned CSV row into a typed record."""
        ...

    @abstractmethod
    def validate(self, records: list) -> list[str]:
        """Validate parsed records. Returns a list of validation error messages."""
        ...


def parse_decimal(row: dict[str, str], column: str, row_number: int) -> Decimal:
    raw = row.get(column, "")
    if raw == "":
        raise CsvParseError(row_number, f"'{column}' is required")
    try:
        return Decimal(raw)
    except InvalidOperation:
        raise CsvParseError(row_number, f"'{column}' is not a number: {raw!r}") from None


def parse_optional_decimal(row: dict[str, str], column: str, row_number: int) -> Decimal | None:
    """Empty (or absent) cells mean None."""
    if row.get(column, "") == "":
        return None
    return parse_decimal(row, column, row_number)


def parse_int(row: dict[str, str], column: str, row_number: int) -> int:
    raw = row.get(column, "")
    try:
        return int(raw)
    except ValueError:
        raise CsvParseError(row_number, f"'{column}' is not an integer: {raw!r}") from None
