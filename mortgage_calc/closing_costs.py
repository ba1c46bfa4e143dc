"""Jurisdiction-specific taxes and one-time closing costs.

Land transfer tax is a marginal bracket calculation per province, with an
independent municipal levy in a few cities and first-time buyer rebates
where the jurisdiction offers one. Foreign buyer tax stacks on top of it.
Unknown provinces fall back to a flat default rate and unknown
municipalities levy nothing.
"""

from __future__ import annotations

import logging
from dataclasses import astuple
from decimal import Decimal
from typing import Optional, Tuple

from .data_models import ClosingCostInputs, ClosingCosts, LandTransferTax, TaxComponent
from .tables import DEFAULT_TABLES, RegionalTables, TransferTaxSchedule
from .utils import ZERO, marginal_tax, to_decimal

logger = logging.getLogger(__name__)


def apply_schedule(price: Decimal, schedule: TransferTaxSchedule, first_time_buyer: bool) -> Decimal:
    """Evaluate ``schedule`` for ``price`` and subtract any first-time rebate."""
    tax = marginal_tax(price, schedule.brackets)
    if first_time_buyer and schedule.first_time_rebate is not None:
        tax = schedule.first_time_rebate.apply(price, tax)
    return tax


def provincial_transfer_tax(
    purchase_price: object,
    province: str,
    first_time_buyer: bool = False,
    tables: RegionalTables = DEFAULT_TABLES,
) -> TaxComponent:
    price = to_decimal(purchase_price)
    schedule = tables.provincial_transfer_tax.get(province)
    if schedule is None:
        logger.debug("No transfer tax schedule for province %r; using the default rate", province)
        schedule = tables.default_transfer_tax
    return TaxComponent(schedule.name, apply_schedule(price, schedule, first_time_buyer))


def municipal_transfer_tax(
    purchase_price: object,
    province: str,
    municipality: str,
    first_time_buyer: bool = False,
    tables: RegionalTables = DEFAULT_TABLES,
) -> TaxComponent:
    """Municipal levy for ``municipality``; zero where the city charges none."""
    schedule: Optional[TransferTaxSchedule] = tables.municipal_transfer_tax.get((province, municipality))
    if schedule is None:
        return TaxComponent("", ZERO)
    price = to_decimal(purchase_price)
    return TaxComponent(schedule.name, apply_schedule(price, schedule, first_time_buyer))


def land_transfer_tax(
    purchase_price: object,
    province: str,
    municipality: str = "none",
    first_time_buyer: bool = False,
    tables: RegionalTables = DEFAULT_TABLES,
) -> LandTransferTax:
    """Provincial plus municipal land transfer tax, net of rebates."""
    return LandTransferTax(
        provincial=provincial_transfer_tax(purchase_price, province, first_time_buyer, tables),
        municipal=municipal_transfer_tax(purchase_price, province, municipality, first_time_buyer, tables),
    )


def foreign_buyer_tax(
    purchase_price: object,
    province: str,
    foreign_buyer: bool,
    tables: RegionalTables = DEFAULT_TABLES,
) -> Decimal:
    if not foreign_buyer:
        return ZERO
    rate = tables.foreign_buyer_tax_rates.get(province, ZERO)
    return to_decimal(purchase_price) * rate


def compute_closing_costs(
    purchase_price: object,
    province: str,
    municipality: str,
    first_time_buyer: bool,
    foreign_buyer: bool,
    fees: ClosingCostInputs,
    insurance_sales_tax: object = ZERO,
    tables: RegionalTables = DEFAULT_TABLES,
) -> ClosingCosts:
    """Add up every one-time cost of the purchase.

    The total is land transfer tax after rebates, foreign buyer tax, the
    caller's fees and the sales tax due on the mortgage insurance premium.
    """
    fees = ClosingCostInputs(*(to_decimal(value) for value in astuple(fees)))
    ltt = land_transfer_tax(purchase_price, province, municipality, first_time_buyer, tables)
    fbt = foreign_buyer_tax(purchase_price, province, foreign_buyer, tables)
    pst = to_decimal(insurance_sales_tax)
    return ClosingCosts(
        land_transfer_tax=ltt,
        foreign_buyer_tax=fbt,
        insurance_sales_tax=pst,
        fees=fees,
        total=ltt.total + fbt + fees.total() + pst,
    )


def list_municipalities(province: str, tables: RegionalTables = DEFAULT_TABLES) -> Tuple[Tuple[str, str], ...]:
    """Return ``(key, label)`` municipality options for ``province``."""
    return tables.municipality_options(province)
