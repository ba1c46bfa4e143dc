"""Down payment qualification and mortgage default insurance.

The calculator raises an under-funded down payment to the legal minimum
instead of rejecting it, prices default insurance from the resulting
loan-to-value ratio and reports the provincial sales tax owed on the premium.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from .data_models import QualificationResult
from .tables import DEFAULT_TABLES, DownPaymentRules, RegionalTables
from .utils import HUNDRED, ZERO, marginal_tax, percent_of, safe_percentage, to_decimal

logger = logging.getLogger(__name__)


def resolve_down_payment(purchase_price: object, down_payment: object, mode: str) -> Decimal:
    """Return the caller's down payment as a dollar amount."""
    price = to_decimal(purchase_price)
    value = to_decimal(down_payment)
    if mode == "percent":
        return percent_of(price, value)
    return value


def minimum_down_payment(
    purchase_price: object,
    foreign_buyer: bool = False,
    rules: DownPaymentRules = DEFAULT_TABLES.down_payment_rules,
) -> Decimal:
    """Return the smallest down payment allowed for ``purchase_price``.

    Foreign buyers pay a flat share of the price. Otherwise the tiers are
    marginal up to the insured price limit (5 % of the first $500,000 and 10 %
    of the rest by default) and a flat share of the whole price above it.
    """
    price = to_decimal(purchase_price)
    if foreign_buyer:
        return price * rules.foreign_buyer_rate
    if price > rules.insured_price_limit:
        return price * rules.above_limit_rate
    return marginal_tax(price, rules.tiers)


def insurance_premium_rate(loan_to_value: Decimal, tables: RegionalTables = DEFAULT_TABLES) -> Decimal:
    """Return the premium percentage for ``loan_to_value`` (a percentage)."""
    for threshold, rate in tables.insurance_premiums:
        if loan_to_value >= threshold:
            return rate
    return ZERO


def mortgage_insurance(
    purchase_price: object,
    actual_down_payment: object,
    tables: RegionalTables = DEFAULT_TABLES,
) -> Decimal:
    """Return the default insurance premium; zero at 20 % down or more."""
    price = to_decimal(purchase_price)
    down = to_decimal(actual_down_payment)
    down_percent = safe_percentage(down, price)
    if down_percent >= tables.insurance_required_below_percent:
        return ZERO
    rate = insurance_premium_rate(HUNDRED - down_percent, tables)
    return percent_of(price - down, rate)


def insurance_sales_tax(premium: object, province: str, tables: RegionalTables = DEFAULT_TABLES) -> Decimal:
    """Sales tax due on the insurance premium, payable at closing."""
    rate = tables.insurance_sales_tax_rates.get(province, ZERO)
    return to_decimal(premium) * rate


def qualify(
    purchase_price: object,
    down_payment: object,
    down_payment_mode: str = "amount",
    foreign_buyer: bool = False,
    tables: RegionalTables = DEFAULT_TABLES,
) -> QualificationResult:
    """Resolve the actual down payment, insurance premium and loan principal."""
    price = to_decimal(purchase_price)
    requested = resolve_down_payment(price, down_payment, down_payment_mode)
    minimum = minimum_down_payment(price, foreign_buyer, tables.down_payment_rules)
    actual = max(requested, minimum)
    if actual > requested:
        logger.debug("Raised down payment from %s to the minimum of %s", requested, minimum)

    actual_percent = safe_percentage(actual, price)
    premium_rate = ZERO
    if actual_percent < tables.insurance_required_below_percent:
        premium_rate = insurance_premium_rate(HUNDRED - actual_percent, tables)
    premium = mortgage_insurance(price, actual, tables)
    mortgage_amount = price - actual

    return QualificationResult(
        requested_down_payment=requested,
        minimum_down_payment=minimum,
        actual_down_payment=actual,
        actual_down_payment_percent=actual_percent,
        mortgage_amount=mortgage_amount,
        insurance_premium_rate=premium_rate,
        mortgage_insurance=premium,
        total_mortgage_principal=mortgage_amount + premium,
    )
