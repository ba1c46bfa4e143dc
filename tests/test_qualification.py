"""Tests for down payment qualification and mortgage default insurance."""
from decimal import Decimal

import pytest

from mortgage_calc.qualification import (
    insurance_premium_rate,
    insurance_sales_tax,
    minimum_down_payment,
    qualify,
    resolve_down_payment,
)


class TestMinimumDownPayment:
    """Minimum down payment tiers."""

    def test_under_500k_is_five_percent(self):
        assert minimum_down_payment(Decimal("400000")) == Decimal("20000")

    def test_between_500k_and_1m_is_tiered(self):
        # 5 % of the first 500k plus 10 % of the remaining 100k
        assert minimum_down_payment(Decimal("600000")) == Decimal("35000")

    def test_above_1m_is_twenty_percent_of_price(self):
        assert minimum_down_payment(Decimal("1200000")) == Decimal("240000")

    def test_foreign_buyer_pays_35_percent(self):
        assert minimum_down_payment(Decimal("500000"), foreign_buyer=True) == Decimal("175000")


class TestQualify:
    """Resolution of the actual down payment and principal."""

    def test_underfunded_down_payment_is_raised_to_minimum(self):
        result = qualify(Decimal("600000"), Decimal("10000"))
        assert result.requested_down_payment == Decimal("10000")
        assert result.actual_down_payment == Decimal("35000")
        assert result.mortgage_amount == Decimal("565000")

    def test_twenty_percent_down_needs_no_insurance(self):
        result = qualify(Decimal("500000"), Decimal("100000"))
        assert result.mortgage_insurance == Decimal("0")
        assert result.insurance_premium_rate == Decimal("0")
        assert result.total_mortgage_principal == Decimal("400000")

    def test_ten_percent_down_pays_3_1_percent(self):
        result = qualify(Decimal("500000"), Decimal("50000"))
        assert result.insurance_premium_rate == Decimal("3.1")
        assert result.mortgage_insurance == Decimal("13950")
        assert result.total_mortgage_principal == Decimal("463950")

    def test_percent_mode(self):
        result = qualify(Decimal("500000"), Decimal("5"), down_payment_mode="percent")
        assert result.actual_down_payment == Decimal("25000")
        assert result.actual_down_payment_percent == Decimal("5")
        assert result.mortgage_insurance == Decimal("19000")

    def test_zero_price_does_not_divide_by_zero(self):
        result = qualify(Decimal("0"), Decimal("0"))
        assert result.actual_down_payment_percent == Decimal("0")
        assert result.mortgage_insurance == Decimal("0")
        assert result.total_mortgage_principal == Decimal("0")

    def test_invalid_down_payment_counts_as_zero(self):
        result = qualify("400000", "not a number")
        assert result.requested_down_payment == Decimal("0")
        assert result.actual_down_payment == Decimal("20000")

    def test_resolve_amount_mode_is_unchanged(self):
        assert resolve_down_payment(Decimal("500000"), Decimal("75000"), "amount") == Decimal("75000")


class TestInsurancePremiums:
    @pytest.mark.parametrize("ltv,rate", [
        (Decimal("96"), Decimal("4.0")),
        (Decimal("95"), Decimal("4.0")),
        (Decimal("92"), Decimal("3.1")),
        (Decimal("87"), Decimal("2.8")),
        (Decimal("81"), Decimal("2.4")),
        (Decimal("80"), Decimal("2.4")),
        (Decimal("75"), Decimal("0")),
    ])
    def test_premium_brackets(self, ltv, rate):
        assert insurance_premium_rate(ltv) == rate

    def test_sales_tax_on_premium(self):
        assert insurance_sales_tax(Decimal("10000"), "ON") == Decimal("800")
        assert insurance_sales_tax(Decimal("10000"), "QC") == Decimal("997.5")

    def test_no_sales_tax_elsewhere(self):
        assert insurance_sales_tax(Decimal("10000"), "AB") == Decimal("0")
