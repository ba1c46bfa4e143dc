"""Data models for the mortgage calculator.

This module defines dataclasses for the entities the calculators pass around:
the caller's inputs (property, financing, recurring expenses, prepayment
options and one-time closing costs), the intermediate results of each
calculator and the merged ``CalculationResult``. Results are frozen; a new
set is built on every calculation.

Currency amounts and rates are ``Decimal`` values. Percent fields hold
percentages (``5.5`` means 5.5 %), not fractions.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Tuple

from .utils import ZERO


@dataclass
class RecurringExpenses:
    """Ownership costs paid alongside the mortgage.

    ``maintenance_percent_annual`` is a yearly percentage of the purchase
    price; the other fields are dollar amounts at the cadence in their names.
    """

    property_taxes_annual: Decimal = ZERO
    condo_fees_monthly: Decimal = ZERO
    home_insurance_annual: Decimal = ZERO
    utilities_monthly: Decimal = ZERO
    maintenance_percent_annual: Decimal = ZERO


@dataclass
class PrepaymentOptions:
    """Prepayment options applied on top of the regular payment.

    Attributes
    ----------
    extra_per_payment: Decimal
        Extra principal added to every regular payment.
    payment_increase_percent: Decimal
        Percentage uplift of the regular payment.
    annual_lump_sum_percent: Decimal
        Lump sum paid at the end of each year, as a percentage of the
        original principal.
    payment_increase_strategy: str
        ``"flat"`` applies the uplift identically every year.
        ``"compounding"`` compounds it year over year (no uplift in year 1).
    """

    extra_per_payment: Decimal = ZERO
    payment_increase_percent: Decimal = ZERO
    annual_lump_sum_percent: Decimal = ZERO
    payment_increase_strategy: str = "flat"


@dataclass
class ClosingCostInputs:
    """One-time costs paid at closing, excluding taxes."""

    legal_fees: Decimal = ZERO
    title_insurance: Decimal = ZERO
    home_inspection: Decimal = ZERO
    appraisal_fee: Decimal = ZERO
    brokerage_fee: Decimal = ZERO
    lender_fee: Decimal = ZERO
    moving_costs: Decimal = ZERO

    def total(self) -> Decimal:
        return (
            self.legal_fees
            + self.title_insurance
            + self.home_inspection
            + self.appraisal_fee
            + self.brokerage_fee
            + self.lender_fee
            + self.moving_costs
        )


@dataclass
class MortgageInputs:
    """Everything the caller supplies for one calculation.

    ``down_payment`` is a dollar amount when ``down_payment_mode`` is
    ``"amount"`` and a percentage of ``purchase_price`` when it is
    ``"percent"``. ``payment_frequency`` is a key of the frequency table
    (``"monthly"``, ``"biweekly"``, ``"accelerated_biweekly"``,
    ``"weekly"`` or ``"accelerated_weekly"``).
    """

    purchase_price: Decimal = ZERO
    down_payment: Decimal = ZERO
    down_payment_mode: str = "amount"
    province: str = "ON"
    municipality: str = "none"
    interest_rate: Decimal = ZERO  # annual nominal rate in percent
    amortization_years: int = 25
    term_years: int = 5
    payment_frequency: str = "monthly"
    first_time_buyer: bool = False
    newly_built_home: bool = False
    foreign_buyer: bool = False
    property_type: str = "detached"
    expenses: RecurringExpenses = field(default_factory=RecurringExpenses)
    prepayment: PrepaymentOptions = field(default_factory=PrepaymentOptions)
    closing: ClosingCostInputs = field(default_factory=ClosingCostInputs)


@dataclass(frozen=True)
class QualificationResult:
    requested_down_payment: Decimal
    minimum_down_payment: Decimal
    actual_down_payment: Decimal
    actual_down_payment_percent: Decimal
    mortgage_amount: Decimal  # purchase price less the actual down payment
    insurance_premium_rate: Decimal  # percent
    mortgage_insurance: Decimal
    total_mortgage_principal: Decimal


@dataclass(frozen=True)
class PaymentResult:
    payment_amount: Decimal
    payments_per_year: int
    monthly_equivalent_payment: Decimal
    principal_portion: Decimal
    interest_portion: Decimal
    accelerated: bool


@dataclass(frozen=True)
class YearRow:
    """One year of the amortization schedule.

    ``principal_paid`` is the scheduled principal portion of the regular
    payments; ``extra_principal_paid`` holds per-payment extras plus the
    annual lump sum, so ``ending_balance == starting_balance -
    principal_paid - extra_principal_paid``.
    """

    year: int
    starting_balance: Decimal
    principal_paid: Decimal
    interest_paid: Decimal
    extra_principal_paid: Decimal
    ending_balance: Decimal


@dataclass(frozen=True)
class ScheduleResult:
    rows: Tuple[YearRow, ...]
    total_interest_paid: Decimal
    interest_paid_over_term: Decimal
    balance_at_end_of_term: Decimal
    effective_amortization_years: Decimal
    payments_made: int
    total_extra_paid: Decimal


@dataclass(frozen=True)
class TaxComponent:
    name: str
    amount: Decimal


@dataclass(frozen=True)
class LandTransferTax:
    """Land transfer tax after any first-time buyer rebate."""

    provincial: TaxComponent
    municipal: TaxComponent

    @property
    def total(self) -> Decimal:
        return self.provincial.amount + self.municipal.amount


@dataclass(frozen=True)
class ClosingCosts:
    land_transfer_tax: LandTransferTax
    foreign_buyer_tax: Decimal
    insurance_sales_tax: Decimal
    fees: ClosingCostInputs
    total: Decimal


@dataclass(frozen=True)
class CalculationResult:
    """Merged output of all calculators for one set of inputs."""

    inputs: MortgageInputs
    mortgage_amount: Decimal
    minimum_down_payment: Decimal
    actual_down_payment: Decimal
    actual_down_payment_percent: Decimal
    mortgage_insurance: Decimal
    total_mortgage_principal: Decimal
    payment_amount: Decimal
    payments_per_year: int
    monthly_equivalent_payment: Decimal
    principal_portion_of_payment: Decimal
    interest_portion_of_payment: Decimal
    total_monthly_expenses: Decimal
    baseline_schedule: ScheduleResult
    prepayment_schedule: ScheduleResult
    interest_paid_over_term: Decimal
    balance_at_end_of_term: Decimal
    effective_amortization_years: Decimal
    land_transfer_tax: LandTransferTax
    foreign_buyer_tax: Decimal
    insurance_sales_tax: Decimal
    closing_cost_breakdown: ClosingCosts
    closing_costs: Decimal
    interest_savings_over_term: Decimal
    interest_savings_over_full_amortization: Decimal
    years_shaved_off_amortization: Decimal
