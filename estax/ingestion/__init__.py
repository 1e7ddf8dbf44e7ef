"""CSV adapters for loading rate schedules and saved estimates."""

from estax.ingestion.base import BaseCsvAdapter
from estax.ingestion.brackets_csv import TaxBracketCsvAdapter, TaxBracketRecord
from estax.ingestion.estimates_csv import EstimateCsvAdapter

__all__ = [
    "BaseCsvAdapter",
    "EstimateCsvAdapter",
    "TaxBracketCsvAdapter",
    "TaxBracketRecord",
]
