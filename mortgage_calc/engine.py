"""Core calculation engine for the mortgage calculator.

This module simulates the loan payment by payment to build a yearly
amortization schedule, with optional prepayments (extra principal on every
payment, a percentage increase of the regular payment and an annual lump
sum). ``calculate_mortgage`` chains the qualification, payment, schedule and
closing cost calculators into a single ``CalculationResult``; the schedule is
generated twice, once without prepayments as a baseline, so the savings from
prepaying can be reported.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Callable, Dict, List, Optional

from .closing_costs import compute_closing_costs
from .data_models import (
    CalculationResult,
    MortgageInputs,
    PrepaymentOptions,
    ScheduleResult,
    YearRow,
)
from .payments import MONTHS_PER_YEAR, calculate_payment
from .qualification import insurance_sales_tax, qualify
from .tables import DEFAULT_TABLES, RegionalTables
from .utils import HUNDRED, ZERO, percent_of, to_decimal, to_int

logger = logging.getLogger(__name__)

# Balances below half a cent are treated as paid off.
RESIDUAL_TOLERANCE = Decimal("0.005")


def flat_payment_increase(payment: Decimal, increase_percent: Decimal, year: int) -> Decimal:
    """Raise the payment by ``increase_percent`` in every year alike."""
    return payment * (1 + increase_percent / HUNDRED)


def compounding_payment_increase(payment: Decimal, increase_percent: Decimal, year: int) -> Decimal:
    """Raise the payment by ``increase_percent`` each year, starting in year 2."""
    return payment * (1 + increase_percent / HUNDRED) ** (year - 1)


PAYMENT_INCREASE_STRATEGIES: Dict[str, Callable[[Decimal, Decimal, int], Decimal]] = {
    "flat": flat_payment_increase,
    "compounding": compounding_payment_increase,
}


def generate_schedule(
    principal: object,
    annual_rate: object,
    amortization_years: object,
    payment_amount: object,
    payments_per_year: object,
    term_years: object,
    prepayment: Optional[PrepaymentOptions] = None,
) -> ScheduleResult:
    """Simulate the loan and aggregate it into yearly rows.

    Parameters
    ----------
    principal: Decimal
        Amount borrowed, including any financed insurance premium.
    annual_rate: Decimal
        Annual nominal interest rate in percent.
    amortization_years: int
        Upper bound on the number of simulated years.
    payment_amount: Decimal
        Regular payment before any increase.
    payments_per_year: int
        Number of regular payments per year.
    term_years: int
        The year whose last payment is snapshotted for the term figures.
    prepayment: PrepaymentOptions
        Optional prepayments; ``None`` means none.

    Returns
    -------
    ScheduleResult
        Yearly rows (fewer than ``amortization_years`` when prepayments
        retire the loan early) plus lifetime and term totals. If the loan is
        paid off before the end of the term, the term figures equal the
        lifetime ones.
    """
    prepayment = prepayment or PrepaymentOptions()
    original_principal = to_decimal(principal)
    rate = to_decimal(annual_rate)
    years = to_int(amortization_years)
    payment = to_decimal(payment_amount)
    per_year = to_int(payments_per_year)
    term = to_int(term_years)
    extra_per_payment = to_decimal(prepayment.extra_per_payment)
    increase_percent = to_decimal(prepayment.payment_increase_percent)
    lump_sum_percent = to_decimal(prepayment.annual_lump_sum_percent)
    increase = PAYMENT_INCREASE_STRATEGIES.get(prepayment.payment_increase_strategy, flat_payment_increase)

    rows: List[YearRow] = []
    if per_year <= 0:
        return ScheduleResult((), ZERO, ZERO, original_principal, ZERO, 0, ZERO)

    rate_per_payment = rate / HUNDRED / per_year
    balance = original_principal
    total_interest = ZERO
    total_extra = ZERO
    payments_made = 0
    term_interest: Optional[Decimal] = None
    term_balance: Optional[Decimal] = None

    for year in range(1, years + 1):
        starting_balance = balance
        year_principal = ZERO
        year_interest = ZERO
        year_extra = ZERO
        year_payment = increase(payment, increase_percent, year)

        for number in range(1, per_year + 1):
            if balance <= 0:
                break
            payments_made += 1
            interest = balance * rate_per_payment
            scheduled_principal = min(year_payment - interest, balance)
            extra = ZERO
            if extra_per_payment > 0:
                extra = min(extra_per_payment, balance - scheduled_principal)
            balance -= scheduled_principal + extra

            # Fold sub-cent residuals into the payment so the loan closes at zero.
            if ZERO < balance < RESIDUAL_TOLERANCE:
                scheduled_principal += balance
                balance = ZERO

            year_principal += scheduled_principal
            year_extra += extra
            year_interest += interest
            total_interest += interest

            if year == term and number == per_year:
                term_balance = balance
                term_interest = total_interest

        if lump_sum_percent > 0 and balance > 0:
            lump_sum = min(percent_of(original_principal, lump_sum_percent), balance)
            balance -= lump_sum
            year_extra += lump_sum

        total_extra += year_extra
        rows.append(
            YearRow(
                year=year,
                starting_balance=starting_balance,
                principal_paid=year_principal,
                interest_paid=year_interest,
                extra_principal_paid=year_extra,
                ending_balance=balance,
            )
        )
        if balance <= 0:
            logger.debug("Loan retired in year %d after %d payments", year, payments_made)
            break

    if term_interest is None or term_balance is None:
        term_interest = total_interest
        term_balance = balance

    return ScheduleResult(
        rows=tuple(rows),
        total_interest_paid=total_interest,
        interest_paid_over_term=term_interest,
        balance_at_end_of_term=term_balance,
        effective_amortization_years=Decimal(payments_made) / Decimal(per_year),
        payments_made=payments_made,
        total_extra_paid=total_extra,
    )


def total_monthly_expenses(monthly_payment: Decimal, purchase_price: Decimal, inputs: MortgageInputs) -> Decimal:
    """Monthly mortgage payment plus the recurring costs of ownership."""
    expenses = inputs.expenses
    maintenance = percent_of(purchase_price, to_decimal(expenses.maintenance_percent_annual))
    return (
        monthly_payment
        + to_decimal(expenses.property_taxes_annual) / MONTHS_PER_YEAR
        + to_decimal(expenses.condo_fees_monthly)
        + to_decimal(expenses.home_insurance_annual) / MONTHS_PER_YEAR
        + to_decimal(expenses.utilities_monthly)
        + maintenance / MONTHS_PER_YEAR
    )


def calculate_mortgage(inputs: MortgageInputs, tables: RegionalTables = DEFAULT_TABLES) -> CalculationResult:
    """Run every calculator for ``inputs`` and merge the results.

    The calculation is deterministic and never raises on bad numbers:
    missing or invalid amounts count as zero and unknown codes fall back to
    the default tables.
    """
    price = to_decimal(inputs.purchase_price)
    rate = to_decimal(inputs.interest_rate)
    amortization_years = to_int(inputs.amortization_years)
    term_years = to_int(inputs.term_years)

    qualification = qualify(price, inputs.down_payment, inputs.down_payment_mode, inputs.foreign_buyer, tables)
    principal = qualification.total_mortgage_principal
    payment = calculate_payment(principal, rate, amortization_years, inputs.payment_frequency, tables)

    baseline = generate_schedule(
        principal, rate, amortization_years, payment.payment_amount, payment.payments_per_year, term_years
    )
    prepaid = generate_schedule(
        principal,
        rate,
        amortization_years,
        payment.payment_amount,
        payment.payments_per_year,
        term_years,
        inputs.prepayment,
    )

    pst = insurance_sales_tax(qualification.mortgage_insurance, inputs.province, tables)
    closing = compute_closing_costs(
        price,
        inputs.province,
        inputs.municipality,
        inputs.first_time_buyer,
        inputs.foreign_buyer,
        inputs.closing,
        pst,
        tables,
    )

    return CalculationResult(
        inputs=inputs,
        mortgage_amount=qualification.mortgage_amount,
        minimum_down_payment=qualification.minimum_down_payment,
        actual_down_payment=qualification.actual_down_payment,
        actual_down_payment_percent=qualification.actual_down_payment_percent,
        mortgage_insurance=qualification.mortgage_insurance,
        total_mortgage_principal=principal,
        payment_amount=payment.payment_amount,
        payments_per_year=payment.payments_per_year,
        monthly_equivalent_payment=payment.monthly_equivalent_payment,
        principal_portion_of_payment=payment.principal_portion,
        interest_portion_of_payment=payment.interest_portion,
        total_monthly_expenses=total_monthly_expenses(payment.monthly_equivalent_payment, price, inputs),
        baseline_schedule=baseline,
        prepayment_schedule=prepaid,
        interest_paid_over_term=prepaid.interest_paid_over_term,
        balance_at_end_of_term=prepaid.balance_at_end_of_term,
        effective_amortization_years=prepaid.effective_amortization_years,
        land_transfer_tax=closing.land_transfer_tax,
        foreign_buyer_tax=closing.foreign_buyer_tax,
        insurance_sales_tax=pst,
        closing_cost_breakdown=closing,
        closing_costs=closing.total,
        interest_savings_over_term=baseline.interest_paid_over_term - prepaid.interest_paid_over_term,
        interest_savings_over_full_amortization=baseline.total_interest_paid - prepaid.total_interest_paid,
        years_shaved_off_amortization=(
            baseline.effective_amortization_years - prepaid.effective_amortization_years
        ),
    )


def build_summary(result: CalculationResult) -> Dict[str, object]:
    """Flatten the headline figures of ``result`` into floats for display and export."""
    ltt = result.land_transfer_tax
    return {
        "purchase_price": float(to_decimal(result.inputs.purchase_price)),
        "province": result.inputs.province,
        "municipality": result.inputs.municipality,
        "payment_frequency": result.inputs.payment_frequency,
        "minimum_down_payment": float(result.minimum_down_payment),
        "down_payment": float(result.actual_down_payment),
        "down_payment_percent": float(result.actual_down_payment_percent),
        "mortgage_amount": float(result.mortgage_amount),
        "mortgage_insurance": float(result.mortgage_insurance),
        "total_mortgage": float(result.total_mortgage_principal),
        "payment_amount": float(result.payment_amount),
        "payments_per_year": result.payments_per_year,
        "monthly_payment": float(result.monthly_equivalent_payment),
        "principal_per_payment": float(result.principal_portion_of_payment),
        "interest_per_payment": float(result.interest_portion_of_payment),
        "total_monthly_expenses": float(result.total_monthly_expenses),
        "interest_paid_over_term": float(result.interest_paid_over_term),
        "balance_at_end_of_term": float(result.balance_at_end_of_term),
        "total_interest": float(result.prepayment_schedule.total_interest_paid),
        "effective_amortization": float(result.effective_amortization_years),
        "provincial_transfer_tax": float(ltt.provincial.amount),
        "provincial_transfer_tax_name": ltt.provincial.name,
        "municipal_transfer_tax": float(ltt.municipal.amount),
        "municipal_transfer_tax_name": ltt.municipal.name,
        "land_transfer_tax": float(ltt.total),
        "foreign_buyer_tax": float(result.foreign_buyer_tax),
        "insurance_sales_tax": float(result.insurance_sales_tax),
        "closing_costs": float(result.closing_costs),
        "comparison": {
            "baseline_total_interest": float(result.baseline_schedule.total_interest_paid),
            "baseline_amortization": float(result.baseline_schedule.effective_amortization_years),
            "interest_saved_over_term": float(result.interest_savings_over_term),
            "interest_saved": float(result.interest_savings_over_full_amortization),
            "years_saved": float(result.years_shaved_off_amortization),
        },
    }
