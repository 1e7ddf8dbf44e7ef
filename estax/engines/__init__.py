"""Form 1040-ES worksheet engines."""

from estax.engines.estimated_tax import EstimatedTaxWorksheet, validate_bracket_table
from estax.engines.estimator import TaxEstimator
from estax.engines.rounding import max_decimal, round_half_up
from estax.engines.self_employment import SeWorksheet

__all__ = [
    "EstimatedTaxWorksheet",
    "SeWorksheet",
    "TaxEstimator",
    "max_decimal",
    "round_half_up",
    "validate_bracket_table",
]
