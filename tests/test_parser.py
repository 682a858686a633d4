"""Tests for the default free-text parser and Money.parse()."""

import pytest

from money_value import InvalidAmount, Money, MoneyConfig, MoneyParser

pytestmark = pytest.mark.usefixtures("fresh_config")


class TestMoneyParser:

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("12", "12.00"),
            ("12.5", "12.50"),
            ("$1,234.56", "1234.56"),
            ("1.234,56 €", "1234.56"),
            ("1,5", "1.50"),
            ("1,50", "1.50"),
            ("1,234", "1234.00"),
            ("1.234.567", "1234567.00"),
            ("1,234,567.89", "1234567.89"),
            ("1.234,567", "1234.57"),
            ("1 234,56", "1234.56"),
            ("1'234.50", "1234.50"),
            ("0.125", "0.13"),
            (".50", "0.50"),
            ("USD 12", "12.00"),
            ("12.50 EUR", "12.50"),
            ("12.", "12.00"),
            ("Pre-tax total: $5.00", "5.00"),
            ("(approx) 5.00 (est)", "5.00"),
            ("Total: 5.00 (incl. fees)", "5.00"),
        ],
    )
    def test_parses_common_formats(self, text, expected):
        assert MoneyParser().parse(text) == Money(expected)

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("-5", "-5.00"),
            ("-$5.25", "-5.25"),
            ("$-5.25", "-5.25"),
            ("(12.00)", "-12.00"),
            ("($1,000.00)", "-1000.00"),
            ("Refund: -$5.25", "-5.25"),
            ("(USD 5.00)", "-5.00"),
        ],
    )
    def test_parses_negative_amounts(self, text, expected):
        assert MoneyParser().parse(text) == Money(expected)

    @pytest.mark.parametrize("text", [None, "", "   "])
    def test_blank_is_zero(self, text):
        assert MoneyParser().parse(text) == Money.empty()

    @pytest.mark.parametrize("text", ["abc", "$", "-", "n/a"])
    def test_text_without_digits_raises(self, text):
        with pytest.raises(InvalidAmount, match="No amount found"):
            MoneyParser().parse(text)

    def test_takes_first_amount(self):
        assert MoneyParser().parse("Total: $20.00 (was $25.00)") == Money("20.00")


class TestMoneyParse:

    def test_uses_default_parser(self):
        assert Money.parse("$1,234.56") == Money("1234.56")

    def test_explicit_config(self):
        class Fixed:
            def parse(self, text):
                return Money("9.99")

        assert Money.parse("anything", config=MoneyConfig(Fixed())) == Money("9.99")
