"""Tests for land transfer tax, foreign buyer tax and closing costs."""
from decimal import Decimal

import pytest

from mortgage_calc.closing_costs import (
    compute_closing_costs,
    foreign_buyer_tax,
    land_transfer_tax,
    list_municipalities,
    municipal_transfer_tax,
    provincial_transfer_tax,
)
from mortgage_calc.data_models import ClosingCostInputs


class TestOntario:
    def test_bracket_boundary(self):
        assert provincial_transfer_tax(Decimal("250000"), "ON").amount == Decimal("2225")

    def test_first_time_buyer_rebate_covers_small_tax(self):
        assert provincial_transfer_tax(Decimal("250000"), "ON", first_time_buyer=True).amount == Decimal("0")

    def test_first_time_buyer_rebate_is_capped(self):
        assert provincial_transfer_tax(Decimal("500000"), "ON").amount == Decimal("6475")
        assert provincial_transfer_tax(Decimal("500000"), "ON", first_time_buyer=True).amount == Decimal("2475")

    def test_toronto_adds_municipal_tax(self):
        ltt = land_transfer_tax(Decimal("500000"), "ON", "toronto")
        assert ltt.provincial.amount == Decimal("6475")
        assert ltt.municipal.amount == Decimal("6475")
        assert ltt.municipal.name == "Toronto Municipal Land Transfer Tax"
        assert ltt.total == Decimal("12950")

    def test_toronto_rebate_is_larger(self):
        ltt = land_transfer_tax(Decimal("500000"), "ON", "toronto", first_time_buyer=True)
        assert ltt.municipal.amount == Decimal("2000")
        assert ltt.total == Decimal("4475")

    def test_other_ontario_cities_pay_no_municipal_tax(self):
        municipal = municipal_transfer_tax(Decimal("500000"), "ON", "ottawa")
        assert municipal.amount == Decimal("0")
        assert municipal.name == ""


class TestBritishColumbia:
    def test_brackets(self):
        assert provincial_transfer_tax(Decimal("400000"), "BC").amount == Decimal("6000")
        assert provincial_transfer_tax(Decimal("2500000"), "BC").amount == Decimal("53000")

    def test_first_time_buyer_fully_exempt(self):
        assert provincial_transfer_tax(Decimal("400000"), "BC", first_time_buyer=True).amount == Decimal("0")

    def test_first_time_buyer_exemption_phases_out(self):
        # Halfway through the phase-out band half the tax is rebated.
        assert provincial_transfer_tax(Decimal("512500"), "BC", first_time_buyer=True).amount == Decimal("4125")

    def test_no_exemption_above_band(self):
        assert provincial_transfer_tax(Decimal("600000"), "BC", first_time_buyer=True).amount == Decimal("10000")


class TestOtherProvinces:
    def test_quebec_has_no_rebate(self):
        assert provincial_transfer_tax(Decimal("300000"), "QC").amount == Decimal("3000")
        assert provincial_transfer_tax(Decimal("300000"), "QC", first_time_buyer=True).amount == Decimal("3000")

    def test_montreal(self):
        ltt = land_transfer_tax(Decimal("600000"), "QC", "montreal")
        assert ltt.provincial.amount == Decimal("7500")
        assert ltt.municipal.amount == Decimal("8000")

    def test_alberta_has_no_transfer_tax(self):
        tax = provincial_transfer_tax(Decimal("800000"), "AB")
        assert tax.amount == Decimal("0")
        assert tax.name == "Alberta Transfer Fee"

    def test_nova_scotia_and_halifax_flat_rates(self):
        ltt = land_transfer_tax(Decimal("400000"), "NS", "halifax")
        assert ltt.provincial.amount == Decimal("6000")
        assert ltt.municipal.amount == Decimal("6000")

    @pytest.mark.parametrize("province", ["MB", "YT", "XX"])
    def test_unlisted_provinces_use_default_rate(self, province):
        tax = provincial_transfer_tax(Decimal("400000"), province)
        assert tax.amount == Decimal("6000")
        assert tax.name == "Provincial Transfer Tax"

    def test_unknown_municipality_is_zero(self):
        assert land_transfer_tax(Decimal("400000"), "QC", "laval").municipal.amount == Decimal("0")


class TestForeignBuyerTax:
    @pytest.mark.parametrize("province,expected", [
        ("BC", Decimal("200000")),
        ("ON", Decimal("250000")),
        ("AB", Decimal("0")),
    ])
    def test_rates(self, province, expected):
        assert foreign_buyer_tax(Decimal("1000000"), province, True) == expected

    def test_only_applies_to_foreign_buyers(self):
        assert foreign_buyer_tax(Decimal("1000000"), "BC", False) == Decimal("0")


class TestComputeClosingCosts:
    def test_total_includes_taxes_fees_and_insurance_sales_tax(self):
        fees = ClosingCostInputs(legal_fees=Decimal("1500"), home_inspection=Decimal("500"))
        costs = compute_closing_costs(
            Decimal("500000"), "ON", "toronto", False, False, fees, insurance_sales_tax=Decimal("1116")
        )
        assert costs.total == Decimal("12950") + Decimal("2000") + Decimal("1116")
        assert costs.insurance_sales_tax == Decimal("1116")

    def test_foreign_buyer_tax_stacks_on_land_transfer_tax(self):
        costs = compute_closing_costs(Decimal("1000000"), "BC", "none", False, True, ClosingCostInputs())
        assert costs.foreign_buyer_tax == Decimal("200000")
        assert costs.total == costs.land_transfer_tax.total + Decimal("200000")

    def test_invalid_fees_count_as_zero(self):
        fees = ClosingCostInputs(legal_fees="abc", moving_costs=None)
        costs = compute_closing_costs(Decimal("0"), "AB", "none", False, False, fees)
        assert costs.total == Decimal("0")

    def test_list_municipalities(self):
        assert ("toronto", "Toronto") in list_municipalities("ON")
        assert list_municipalities("MB") == (("none", "All Municipalities"),)
