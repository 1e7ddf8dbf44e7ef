"""Tests for the cent rounding helpers."""

from decimal import Decimal

from estax.engines.rounding import max_decimal, round_half_up


class TestRoundHalfUp:
    def test_positive_tie_rounds_up(self):
        assert round_half_up(Decimal("123.455")) == Decimal("123.46")

    def test_negative_tie_rounds_away_from_zero(self):
        assert round_half_up(Decimal("-123.455")) == Decimal("-123.46")

    def test_below_tie_rounds_down(self):
        assert round_half_up(Decimal("123.454999")) == Decimal("123.45")

    def test_always_two_places(self):
        assert str(round_half_up(Decimal("5"))) == "5.00"
        assert str(round_half_up(Decimal("0"))) == "0.00"

    def test_idempotent(self):
        for raw in ("0.005", "1.994", "-7.125", "92350", "7064.775"):
            once = round_half_up(Decimal(raw))
            assert round_half_up(once) == once


class TestMaxDecimal:
    def test_returns_larger(self):
        assert max_decimal(Decimal("1.50"), Decimal("0")) == Decimal("1.50")
        assert max_decimal(Decimal("-3"), Decimal("0")) == Decimal("0")

    def test_equal_values(self):
        assert max_decimal(Decimal("2.00"), Decimal("2")) == Decimal("2")


class TestRoundHalfUpLargeValues:
    def test_values_beyond_default_precision(self):
        assert round_half_up(Decimal("1E+27")) == Decimal("1E+27")
        assert str(round_half_up(Decimal("1E+27"))).endswith(".00")
        assert round_half_up(Decimal("79228162514264337593543950335.005")) == Decimal(
            "79228162514264337593543950335.01"
        )
        assert round_half_up(Decimal("-1234567890123456789012345678901.235")) == Decimal(
            "-1234567890123456789012345678901.24"
        )
