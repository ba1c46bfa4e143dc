"""Regional lookup tables used by the calculators.

All business constants live here as frozen dataclasses and read-only
mappings: provinces and their municipalities, payment frequencies, land
transfer tax brackets with first-time buyer rebates, foreign buyer tax rates,
mortgage default insurance premiums, the sales tax some provinces levy on that
premium and the minimum down payment tiers. The figures are illustrative
rules for estimates, not a statement of current regulation.

Calculators take a ``RegionalTables`` instance as an argument and default to
``DEFAULT_TABLES``; pass a modified copy (``dataclasses.replace``) to model a
different rule set.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from types import MappingProxyType
from typing import Mapping, Optional, Tuple, Union

from .utils import ZERO

Bracket = Tuple[Optional[Decimal], Decimal]


def _frozen(mapping: dict) -> Mapping:
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class PaymentFrequency:
    """A payment frequency option.

    ``accelerated`` frequencies derive their payment by dividing the ordinary
    monthly payment by ``monthly_divisor`` instead of amortizing at
    ``payments_per_year`` directly.
    """

    key: str
    label: str
    payments_per_year: int
    accelerated: bool = False
    monthly_divisor: int = 1


@dataclass(frozen=True)
class CappedRebate:
    """First-time buyer rebate worth up to ``cap`` dollars of tax."""

    cap: Decimal

    def apply(self, price: Decimal, tax: Decimal) -> Decimal:
        rebate = min(self.cap, tax)
        return max(ZERO, tax - rebate)


@dataclass(frozen=True)
class PhaseOutExemption:
    """Full exemption up to ``exempt_up_to``, shrinking linearly to nothing at ``phase_out_to``."""

    exempt_up_to: Decimal
    phase_out_to: Decimal

    def apply(self, price: Decimal, tax: Decimal) -> Decimal:
        if price <= self.exempt_up_to:
            return ZERO
        if price <= self.phase_out_to:
            width = self.phase_out_to - self.exempt_up_to
            rebate = (self.phase_out_to - price) / width * tax
            return max(ZERO, tax - rebate)
        return tax


Rebate = Union[CappedRebate, PhaseOutExemption]


@dataclass(frozen=True)
class TransferTaxSchedule:
    """Marginal transfer tax brackets for one province or municipality.

    An empty ``brackets`` tuple means no tax is levied. A flat rate is a
    single open-ended bracket.
    """

    name: str
    brackets: Tuple[Bracket, ...] = ()
    first_time_rebate: Optional[Rebate] = None


@dataclass(frozen=True)
class DownPaymentRules:
    """Minimum down payment rules.

    ``tiers`` are marginal ``(upper_bound, rate)`` slices applied while the
    price is at or below ``insured_price_limit``; above it the whole price
    is charged ``above_limit_rate``. Foreign buyers always pay
    ``foreign_buyer_rate`` of the whole price.
    """

    tiers: Tuple[Bracket, ...]
    insured_price_limit: Decimal
    above_limit_rate: Decimal
    foreign_buyer_rate: Decimal


@dataclass(frozen=True)
class RegionalTables:
    provinces: Mapping[str, str]
    municipalities: Mapping[str, Tuple[Tuple[str, str], ...]]
    default_municipalities: Tuple[Tuple[str, str], ...]
    frequencies: Mapping[str, PaymentFrequency]
    default_frequency: str
    provincial_transfer_tax: Mapping[str, TransferTaxSchedule]
    default_transfer_tax: TransferTaxSchedule
    municipal_transfer_tax: Mapping[Tuple[str, str], TransferTaxSchedule]
    foreign_buyer_tax_rates: Mapping[str, Decimal]
    insurance_sales_tax_rates: Mapping[str, Decimal]
    # (minimum loan-to-value percent, premium percent), highest first
    insurance_premiums: Tuple[Tuple[Decimal, Decimal], ...]
    insurance_required_below_percent: Decimal
    down_payment_rules: DownPaymentRules
    property_types: Mapping[str, str] = field(default_factory=lambda: _frozen({}))

    def frequency(self, key: str) -> PaymentFrequency:
        """Return the frequency for ``key``, falling back to the default."""
        found = self.frequencies.get(key)
        if found is None:
            return self.frequencies[self.default_frequency]
        return found

    def municipality_options(self, province: str) -> Tuple[Tuple[str, str], ...]:
        return self.municipalities.get(province, self.default_municipalities)


PROVINCES = _frozen({
    "AB": "Alberta",
    "BC": "British Columbia",
    "MB": "Manitoba",
    "NB": "New Brunswick",
    "NL": "Newfoundland and Labrador",
    "NS": "Nova Scotia",
    "ON": "Ontario",
    "PE": "Prince Edward Island",
    "QC": "Quebec",
    "SK": "Saskatchewan",
    "NT": "Northwest Territories",
    "NU": "Nunavut",
    "YT": "Yukon",
})

MUNICIPALITIES = _frozen({
    "ON": (("ottawa", "Ottawa"), ("none", "Other Ontario Cities"), ("toronto", "Toronto")),
    "BC": (("none", "All Municipalities"),),
    "QC": (("none", "Outside Montreal"), ("montreal", "Montreal")),
    "NS": (("none", "Outside Halifax"), ("halifax", "Halifax")),
})

DEFAULT_MUNICIPALITIES = (("none", "All Municipalities"),)

PROPERTY_TYPES = _frozen({
    "detached": "Detached House",
    "semi": "Semi-Detached",
    "townhouse": "Townhouse",
    "condo": "Condominium",
})

PAYMENT_FREQUENCIES = _frozen({
    f.key: f
    for f in (
        PaymentFrequency("monthly", "Monthly", 12),
        PaymentFrequency("biweekly", "Bi-Weekly", 26),
        PaymentFrequency("accelerated_biweekly", "Accelerated Bi-Weekly", 26, True, 2),
        PaymentFrequency("weekly", "Weekly", 52),
        PaymentFrequency("accelerated_weekly", "Accelerated Weekly", 52, True, 4),
    )
})

ONTARIO_BRACKETS: Tuple[Bracket, ...] = (
    (Decimal("55000"), Decimal("0.005")),
    (Decimal("250000"), Decimal("0.01")),
    (Decimal("400000"), Decimal("0.015")),
    (Decimal("2000000"), Decimal("0.02")),
    (None, Decimal("0.025")),
)

FLAT_RATE_1_5: Tuple[Bracket, ...] = ((None, Decimal("0.015")),)

PROVINCIAL_TRANSFER_TAX = _frozen({
    "ON": TransferTaxSchedule(
        "Ontario Land Transfer Tax",
        ONTARIO_BRACKETS,
        CappedRebate(Decimal("4000")),
    ),
    "BC": TransferTaxSchedule(
        "BC Property Transfer Tax",
        (
            (Decimal("200000"), Decimal("0.01")),
            (Decimal("2000000"), Decimal("0.02")),
            (Decimal("3000000"), Decimal("0.03")),
            (None, Decimal("0.05")),
        ),
        PhaseOutExemption(Decimal("500000"), Decimal("525000")),
    ),
    "QC": TransferTaxSchedule(
        "Quebec Land Transfer Tax",
        (
            (Decimal("50000"), Decimal("0.005")),
            (Decimal("250000"), Decimal("0.01")),
            (None, Decimal("0.015")),
        ),
    ),
    "AB": TransferTaxSchedule("Alberta Transfer Fee"),
    "NS": TransferTaxSchedule("Nova Scotia Deed Transfer Tax", FLAT_RATE_1_5),
})

DEFAULT_TRANSFER_TAX = TransferTaxSchedule("Provincial Transfer Tax", FLAT_RATE_1_5)

MUNICIPAL_TRANSFER_TAX = _frozen({
    ("ON", "toronto"): TransferTaxSchedule(
        "Toronto Municipal Land Transfer Tax",
        ONTARIO_BRACKETS,
        CappedRebate(Decimal("4475")),
    ),
    ("QC", "montreal"): TransferTaxSchedule(
        "Montreal Transfer Duties",
        (
            (Decimal("50000"), Decimal("0.005")),
            (Decimal("250000"), Decimal("0.01")),
            (Decimal("500000"), Decimal("0.015")),
            (Decimal("1000000"), Decimal("0.02")),
            (None, Decimal("0.025")),
        ),
    ),
    ("NS", "halifax"): TransferTaxSchedule("Halifax Deed Transfer Tax", FLAT_RATE_1_5),
})

FOREIGN_BUYER_TAX_RATES = _frozen({
    "BC": Decimal("0.20"),
    "ON": Decimal("0.25"),
})

# Provincial sales tax charged on the mortgage default insurance premium.
INSURANCE_SALES_TAX_RATES = _frozen({
    "ON": Decimal("0.08"),
    "QC": Decimal("0.09975"),
    "SK": Decimal("0.06"),
})

INSURANCE_PREMIUMS = (
    (Decimal("95"), Decimal("4.0")),
    (Decimal("90"), Decimal("3.1")),
    (Decimal("85"), Decimal("2.8")),
    (Decimal("80"), Decimal("2.4")),
)

DOWN_PAYMENT_RULES = DownPaymentRules(
    tiers=(
        (Decimal("500000"), Decimal("0.05")),
        (Decimal("1000000"), Decimal("0.10")),
    ),
    insured_price_limit=Decimal("1000000"),
    above_limit_rate=Decimal("0.20"),
    foreign_buyer_rate=Decimal("0.35"),
)

DEFAULT_TABLES = RegionalTables(
    provinces=PROVINCES,
    municipalities=MUNICIPALITIES,
    default_municipalities=DEFAULT_MUNICIPALITIES,
    frequencies=PAYMENT_FREQUENCIES,
    default_frequency="monthly",
    provincial_transfer_tax=PROVINCIAL_TRANSFER_TAX,
    default_transfer_tax=DEFAULT_TRANSFER_TAX,
    municipal_transfer_tax=MUNICIPAL_TRANSFER_TAX,
    foreign_buyer_tax_rates=FOREIGN_BUYER_TAX_RATES,
    insurance_sales_tax_rates=INSURANCE_SALES_TAX_RATES,
    insurance_premiums=INSURANCE_PREMIUMS,
    insurance_required_below_percent=Decimal("20"),
    down_payment_rules=DOWN_PAYMENT_RULES,
    property_types=PROPERTY_TYPES,
)
