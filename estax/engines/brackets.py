"""Tax year reference tables.

Federal rate schedules, standard deductions and SE/estimated-tax constants,
keyed by tax year and filing status. Never hardcode brackets in computation
functions; the worksheets receive them as `TaxBracket` rows.

Sources:
  - 2024: IRS Rev. Proc. 2023-34, SSA 2024 contribution and benefit base
  - 2025: IRS Rev. Proc. 2024-40, 2025 Form 1040-ES instructions
"""

from decimal import Decimal

from estax.models.enums import FilingStatus
from estax.models.reference import StandardDeduction, TaxBracket, TaxYearConfig

# ---------------------------------------------------------------------------
# Federal ordinary income brackets: {year: {filing_status: [(upper_bound, rate), ...]}}
# Upper bound is Decimal or None for the top bracket. Base tax per bracket is
# derived by build_tax_brackets().
# ---------------------------------------------------------------------------
_SINGLE_2024 = [
    (Decimal("11600"), Decimal("0.10")),
    (Decimal("47150"), Decimal("0.12")),
    (Decimal("100525"), Decimal("0.22")),
    (Decimal("191950"), Decimal("0.24")),
    (Decimal("243725"), Decimal("0.32")),
    (Decimal("609350"), Decimal("0.35")),
    (None, Decimal("0.37")),
]
_MFJ_2024 = [
    (Decimal("23200"), Decimal("0.10")),
    (Decimal("94300"), Decimal("0.12")),
    (Decimal("201050"), Decimal("0.22")),
    (Decimal("383900"), Decimal("0.24")),
    (Decimal("487450"), Decimal("0.32")),
    (Decimal("731200"), Decimal("0.35")),
    (None, Decimal("0.37")),
]
_SINGLE_2025 = [
    (Decimal("11925"), Decimal("0.10")),
    (Decimal("48475"), Decimal("0.12")),
    (Decimal("103350"), Decimal("0.22")),
    (Decimal("197300"), Decimal("0.24")),
    (Decimal("250525"), Decimal("0.32")),
    (Decimal("626350"), Decimal("0.35")),
    (None, Decimal("0.37")),
]
_MFJ_2025 = [
    (Decimal("23850"), Decimal("0.10")),
    (Decimal("96950"), Decimal("0.12")),
    (Decimal("206700"), Decimal("0.22")),
    (Decimal("394600"), Decimal("0.24")),
    (Decimal("501050"), Decimal("0.32")),
    (Decimal("751600"), Decimal("0.35")),
    (None, Decimal("0.37")),
]

FEDERAL_BRACKETS: dict[int, dict[FilingStatus, list[tuple[Decimal | None, Decimal]]]] = {
    2024: {
        FilingStatus.SINGLE: _SINGLE_2024,
        FilingStatus.MFJ: _MFJ_2024,
        FilingStatus.MFS: [
            (Decimal("11600"), Decimal("0.10")),
            (Decimal("47150"), Decimal("0.12")),
            (Decimal("100525"), Decimal("0.22")),
            (Decimal("191950"), Decimal("0.24")),
            (Decimal("243725"), Decimal("0.32")),
            (Decimal("365600"), Decimal("0.35")),
            (None, Decimal("0.37")),
        ],
        FilingStatus.HOH: [
            (Decimal("16550"), Decimal("0.10")),
            (Decimal("63100"), Decimal("0.12")),
            (Decimal("100500"), Decimal("0.22")),
            (Decimal("191950"), Decimal("0.24")),
            (Decimal("243700"), Decimal("0.32")),
            (Decimal("609350"), Decimal("0.35")),
            (None, Decimal("0.37")),
        ],
        FilingStatus.QSS: _MFJ_2024,  # Schedule Y-1
    },
    2025: {
        FilingStatus.SINGLE: _SINGLE_2025,
        FilingStatus.MFJ: _MFJ_2025,
        FilingStatus.MFS: [
            (Decimal("11925"), Decimal("0.10")),
            (Decimal("48475"), Decimal("0.12")),
            (Decimal("103350"), Decimal("0.22")),
            (Decimal("197300"), Decimal("0.24")),
            (Decimal("250525"), Decimal("0.32")),
            (Decimal("375800"), Decimal("0.35")),
            (None, Decimal("0.37")),
        ],
        FilingStatus.HOH: [
            (Decimal("17000"), Decimal("0.10")),
            (Decimal("64850"), Decimal("0.12")),
            (Decimal("103350"), Decimal("0.22")),
            (Decimal("197300"), Decimal("0.24")),
            (Decimal("250500"), Decimal("0.32")),
            (Decimal("626350"), Decimal("0.35")),
            (None, Decimal("0.37")),
        ],
        FilingStatus.QSS: _MFJ_2025,  # Schedule Y-1
    },
}

# ---------------------------------------------------------------------------
# Federal standard deduction
# ---------------------------------------------------------------------------
FEDERAL_STANDARD_DEDUCTION: dict[int, dict[FilingStatus, Decimal]] = {
    2024: {
        FilingStatus.SINGLE: Decimal("14600"),
        FilingStatus.MFJ: Decimal("29200"),
        FilingStatus.MFS: Decimal("14600"),
        FilingStatus.HOH: Decimal("21900"),
        FilingStatus.QSS: Decimal("29200"),
    },
    2025: {
        FilingStatus.SINGLE: Decimal("15000"),
        FilingStatus.MFJ: Decimal("30000"),
        FilingStatus.MFS: Decimal("15000"),
        FilingStatus.HOH: Decimal("22500"),
        FilingStatus.QSS: Decimal("30000"),
    },
}

# ---------------------------------------------------------------------------
# SE Tax Worksheet and Estimated Tax Worksheet constants
# ---------------------------------------------------------------------------
SS_WAGE_MAX: dict[int, Decimal] = {
    2024: Decimal("168600.00"),
    2025: Decimal("176100.00"),
}
SE_SS_TAX_RATE = Decimal("0.124")  # 12.4% (6.2% x 2)
SE_MEDICARE_TAX_RATE = Decimal("0.029")  # 2.9% (1.45% x 2)
SE_NET_EARNINGS_FACTOR = Decimal("0.9235")
SE_DEDUCTION_FACTOR = Decimal("0.50")
MIN_SE_THRESHOLD = Decimal("400.00")
REQUIRED_PAYMENT_THRESHOLD = Decimal("1000.00")

SUPPORTED_TAX_YEARS = sorted(FEDERAL_BRACKETS)


def get_tax_year_config(tax_year: int) -> TaxYearConfig:
    """Return the SE/estimated-tax constants for a tax year."""
    if tax_year not in SS_WAGE_MAX:
        raise ValueError(f"No reference tables for tax year {tax_year}")
    return TaxYearConfig(
        tax_year=tax_year,
        ss_wage_max=SS_WAGE_MAX[tax_year],
        ss_tax_rate=SE_SS_TAX_RATE,
        medicare_tax_rate=SE_MEDICARE_TAX_RATE,
        se_tax_deductible_percentage=SE_NET_EARNINGS_FACTOR,
        se_deduction_factor=SE_DEDUCTION_FACTOR,
        required_payment_threshold=REQUIRED_PAYMENT_THRESHOLD,
        min_se_threshold=MIN_SE_THRESHOLD,
    )


def get_standard_deduction(tax_year: int, filing_status: FilingStatus) -> StandardDeduction:
    try:
        amount = FEDERAL_STANDARD_DEDUCTION[tax_year][filing_status]
    except KeyError:
        raise ValueError(
            f"No standard deduction for tax year {tax_year} ({filing_status.value})"
        ) from None
    return StandardDeduction(
        tax_year=tax_year, filing_status_id=filing_status.id, amount=amount
    )


def build_tax_brackets(tax_year: int, filing_status: FilingStatus) -> list[TaxBracket]:
    """Expand a (upper_bound, rate) schedule into ordered TaxBracket rows.

    Each bracket's base tax is the tax owed on all income below its lower
    bound, so the worksheet can compute tax as base + (income - min) * rate.
    """
    try:
        schedule = FEDERAL_BRACKETS[tax_year][filing_status]
    except KeyError:
        raise ValueError(
            f"No tax brackets for tax year {tax_year} ({filing_status.value})"
        ) from None

    brackets: list[TaxBracket] = []
    lower = Decimal("0")
    base_tax = Decimal("0")
    for upper, rate in schedule:
        brackets.append(
            TaxBracket(
                tax_year=tax_year,
                filing_status_id=filing_status.id,
                min_income=lower,
                max_income=upper,
                tax_rate=rate,
                base_tax=base_tax,
            )
        )
        if upper is not None:
            base_tax += (upper - lower) * rate
            lower = upper
    return brackets
