"""Shared fixtures for the mortgage calculator tests."""
from decimal import Decimal

import pytest

from mortgage_calc.data_models import ClosingCostInputs, MortgageInputs, PrepaymentOptions, RecurringExpenses
from mortgage_calc.payments import ordinary_monthly_payment


@pytest.fixture
def standard_loan():
    """A $100,000 loan at 5 % over 25 years, paid monthly."""
    principal = Decimal("100000")
    rate = Decimal("5")
    return {
        "principal": principal,
        "annual_rate": rate,
        "amortization_years": 25,
        "payment_amount": ordinary_monthly_payment(principal, rate, 25),
        "payments_per_year": 12,
        "term_years": 5,
    }


@pytest.fixture
def toronto_purchase():
    """A $500,000 Toronto purchase with 10 % down and some closing fees."""
    return MortgageInputs(
        purchase_price=Decimal("500000"),
        down_payment=Decimal("50000"),
        province="ON",
        municipality="toronto",
        interest_rate=Decimal("5"),
        amortization_years=25,
        term_years=5,
        expenses=RecurringExpenses(
            property_taxes_annual=Decimal("6000"),
            condo_fees_monthly=Decimal("300"),
            home_insurance_annual=Decimal("1200"),
            utilities_monthly=Decimal("200"),
            maintenance_percent_annual=Decimal("1"),
        ),
        prepayment=PrepaymentOptions(),
        closing=ClosingCostInputs(legal_fees=Decimal("1500")),
    )
