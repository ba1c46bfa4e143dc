"""Periodic payment calculation.

Regular frequencies amortize the principal at their own number of payments
per year. Accelerated frequencies instead take the ordinary monthly payment
and divide it (by 2 for bi-weekly, by 4 for weekly), which pays the
equivalent of one extra monthly payment per year.
"""

from __future__ import annotations

from decimal import Decimal

from .data_models import PaymentResult
from .tables import DEFAULT_TABLES, PaymentFrequency, RegionalTables
from .utils import HUNDRED, ZERO, to_decimal, to_int

MONTHS_PER_YEAR = 12


def annuity_payment(principal: Decimal, rate_per_period: Decimal, periods: int) -> Decimal:
    """Return the level payment that retires ``principal`` in ``periods`` payments.

    The formula is:

        payment = P * (i * (1 + i)^n) / ((1 + i)^n - 1)

    where ``P`` is the principal, ``i`` is the interest rate per payment and
    ``n`` is the number of payments. When the interest rate is zero, the
    payment simplifies to ``P / n``. A non-positive ``n`` yields zero.
    """
    if periods <= 0:
        return ZERO
    if rate_per_period == 0:
        return principal / Decimal(periods)
    factor = (1 + rate_per_period) ** periods
    return principal * (rate_per_period * factor) / (factor - 1)


def ordinary_monthly_payment(principal: Decimal, annual_rate: Decimal, amortization_years: int) -> Decimal:
    rate_per_month = annual_rate / HUNDRED / MONTHS_PER_YEAR
    return annuity_payment(principal, rate_per_month, amortization_years * MONTHS_PER_YEAR)


def periodic_payment(
    principal: Decimal,
    annual_rate: Decimal,
    amortization_years: int,
    frequency: PaymentFrequency,
) -> Decimal:
    """Return the payment due each period for ``frequency``."""
    if frequency.accelerated:
        monthly = ordinary_monthly_payment(principal, annual_rate, amortization_years)
        return monthly / frequency.monthly_divisor
    rate_per_payment = annual_rate / HUNDRED / frequency.payments_per_year
    periods = amortization_years * frequency.payments_per_year
    return annuity_payment(principal, rate_per_payment, periods)


def monthly_equivalent(payment_amount: Decimal, frequency: PaymentFrequency) -> Decimal:
    """Express a periodic payment as a monthly cost."""
    if frequency.payments_per_year == MONTHS_PER_YEAR and not frequency.accelerated:
        return payment_amount
    return payment_amount * frequency.payments_per_year / MONTHS_PER_YEAR


def calculate_payment(
    principal: object,
    annual_rate: object,
    amortization_years: object,
    payment_frequency: str = "monthly",
    tables: RegionalTables = DEFAULT_TABLES,
) -> PaymentResult:
    """Compute the periodic payment and how the first payment splits.

    ``annual_rate`` is a percentage. Unknown frequency keys fall back to the
    table's default (monthly).
    """
    amount = to_decimal(principal)
    rate = to_decimal(annual_rate)
    years = to_int(amortization_years)
    frequency = tables.frequency(payment_frequency)

    payment = periodic_payment(amount, rate, years, frequency)
    interest_portion = amount * rate / HUNDRED / frequency.payments_per_year
    return PaymentResult(
        payment_amount=payment,
        payments_per_year=frequency.payments_per_year,
        monthly_equivalent_payment=monthly_equivalent(payment, frequency),
        principal_portion=payment - interest_portion,
        interest_portion=interest_portion,
        accelerated=frequency.accelerated,
    )
