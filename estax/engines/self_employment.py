"""Self-Employment Tax and Deduction Worksheet (Form 1040-ES).

Worksheet lines:
  1a/1b/2  Net farm profit, CRP payments and net SE profit, combined
  3        Combined income x 92.35% (net earnings factor)
  4        Medicare tax: line 3 x 2.9% (no wage cap)
  5-7      Social Security wage base minus wages already taxed
  8        Smaller of line 3 or line 7
  9        Social Security tax: line 8 x 12.4%
  10       Self-employment tax: line 4 + line 9
  11       Deductible part of SE tax: line 10 x 50%

If combined SE income is $400 or less (configurable), no SE tax is due.
Every line is rounded to the cent before it feeds the next one.
"""

import logging
from decimal import Decimal

from estax.engines.rounding import round_half_up
from estax.models.worksheets import SeWorksheetConfig, SeWorksheetResult

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


class SeWorksheet:
    """Computes self-employment tax for one tax year's configuration."""

    def __init__(self, config: SeWorksheetConfig) -> None:
        self.config = config

    def calculate(
        self,
        se_income: Decimal,
        crp_payments: Decimal = ZERO,
        wages: Decimal = ZERO,
    ) -> SeWorksheetResult:
        """Run the full worksheet.

        Raises a SeWorksheetError subclass if the configuration is out of
        range; nothing is computed in that case.
        """
        self.config.check_ranges()

        combined_income = self.combined_se_income(se_income, crp_payments)

        if combined_income <= self.config.min_se_threshold:
            logger.warning(
                "SE income %s at or below minimum threshold %s; no SE tax due",
                combined_income,
                self.config.min_se_threshold,
            )
            return SeWorksheetResult.zero(combined_income)

        net_earnings = self.net_earnings(combined_income)
        medicare_tax = self.medicare_tax(net_earnings)
        remaining_ss_base = self.remaining_ss_wage_base(wages)
        ss_taxable_earnings = self.ss_taxable_earnings(net_earnings, remaining_ss_base)
        social_security_tax = self.social_security_tax(ss_taxable_earnings)
        self_employment_tax = round_half_up(medicare_tax + social_security_tax)
        se_tax_deduction = round_half_up(self_employment_tax * self.config.deduction_factor)

        return SeWorksheetResult(
            combined_se_income=combined_income,
            net_earnings=net_earnings,
            medicare_tax=medicare_tax,
            ss_taxable_earnings=ss_taxable_earnings,
            social_security_tax=social_security_tax,
            self_employment_tax=self_employment_tax,
            se_tax_deduction=se_tax_deduction,
            below_threshold=False,
        )

    # ------------------------------------------------------------------
    # Individual worksheet lines
    # ------------------------------------------------------------------

    def combined_se_income(self, se_income: Decimal, crp_payments: Decimal) -> Decimal:
        """Lines 1a + 1b + 2."""
        combined = se_income + crp_payments
        if combined < ZERO:
            logger.warning(
                "Combined SE income is negative (se_income=%s, crp_payments=%s); "
                "SE tax will be zero",
                se_income,
                crp_payments,
            )
        return round_half_up(combined)

    def net_earnings(self, combined_income: Decimal) -> Decimal:
        """Line 3."""
        net = round_half_up(combined_income * self.config.net_earnings_factor)
        if net < ZERO:
            logger.warning("Net earnings from self-employment is negative: %s", net)
        return net

    def medicare_tax(self, net_earnings: Decimal) -> Decimal:
        """Line 4. Medicare has no wage base cap."""
        if net_earnings <= ZERO:
            logger.warning(
                "Net earnings %s are zero or negative; no Medicare tax applies",
                net_earnings,
            )
            return ZERO
        return round_half_up(net_earnings * self.config.medicare_tax_rate)

    def remaining_ss_wage_base(self, wages: Decimal) -> Decimal:
        """Line 7: wage base left after wages already subject to SS tax."""
        remaining = self.config.ss_wage_max - wages
        if remaining <= ZERO:
            logger.warning(
                "Wages %s meet or exceed SS wage maximum %s; no SS tax on SE income",
                wages,
                self.config.ss_wage_max,
            )
            return ZERO
        return round_half_up(remaining)

    def ss_taxable_earnings(self, net_earnings: Decimal, remaining_ss_base: Decimal) -> Decimal:
        """Line 8: smaller of line 3 or line 7."""
        if net_earnings <= ZERO:
            return ZERO
        if net_earnings > remaining_ss_base:
            logger.info(
                "Net earnings %s capped at remaining SS wage base %s",
                net_earnings,
                remaining_ss_base,
            )
        return round_half_up(min(net_earnings, remaining_ss_base))

    def social_security_tax(self, ss_taxable_earnings: Decimal) -> Decimal:
        """Line 9."""
        return round_half_up(ss_taxable_earnings * self.config.ss_tax_rate)
