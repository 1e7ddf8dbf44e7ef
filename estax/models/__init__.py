"""Data models for estax."""

from estax.models.enums import FilingStatus, Schedule
from estax.models.estimate import EstimateCalculation, NewTaxEstimate, TaxEstimate
from estax.models.reference import (
    FilingStatusRecord,
    StandardDeduction,
    TaxBracket,
    TaxYearConfig,
)
from estax.models.worksheets import (
    EstimatedTaxWorksheetInput,
    EstimatedTaxWorksheetResult,
    SeWorksheetConfig,
    SeWorksheetResult,
)

__all__ = [
    "EstimateCalculation",
    "EstimatedTaxWorksheetInput",
    "EstimatedTaxWorksheetResult",
    "FilingStatus",
    "FilingStatusRecord",
    "NewTaxEstimate",
    "Schedule",
    "SeWorksheetConfig",
    "SeWorksheetResult",
    "StandardDeduction",
    "TaxBracket",
    "TaxEstimate",
    "TaxYearConfig",
]
