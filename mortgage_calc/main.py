"""Command-line interface for the mortgage calculator.

This module uses the ``click`` library to implement a multi-command
interface. Users can print a summary of a purchase scenario, view or export
its yearly amortization schedules, or compare two scenarios. Results can be
printed to the terminal or exported to JSON/CSV files.
"""

from __future__ import annotations

import csv
import json
import logging
import shlex
from decimal import Decimal
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

import click

from .config import configure_logging, load_settings
from .data_models import (
    ClosingCostInputs,
    MortgageInputs,
    PrepaymentOptions,
    RecurringExpenses,
    YearRow,
)
from .engine import PAYMENT_INCREASE_STRATEGIES, build_summary, calculate_mortgage
from .formatter import print_balance_comparison, print_comparison, print_schedule, print_summary
from .tables import DEFAULT_TABLES
from .utils import parse_amount

logger = logging.getLogger(__name__)


def parse_money(value: Optional[str], name: str) -> Decimal:
    """Parse a dollar amount option, reporting failures against ``name``."""
    if value is None or not str(value).strip():
        return Decimal("0")
    try:
        amount = parse_amount(str(value))
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint=name)
    if amount < 0:
        raise click.BadParameter(f"Must not be negative: {value}", param_hint=name)
    return amount


def parse_down_payment(value: str, mode: str) -> Tuple[Decimal, str]:
    """Return ``(amount, mode)``; a trailing ``%`` forces percent mode."""
    text = value.strip()
    if text.endswith("%"):
        text = text[:-1]
        mode = "percent"
    amount = parse_money(text, "--down-payment")
    if mode == "percent" and amount > 100:
        raise click.BadParameter("Down payment percentage cannot exceed 100", param_hint="--down-payment")
    return amount, mode


def _default_setting(name: str) -> Callable[[], Any]:
    return lambda: getattr(load_settings(), name)


SCENARIO_OPTIONS = [
    click.option("--price", "-p", "price", required=True, help="Purchase price (e.g. 650k)"),
    click.option("--down-payment", "-d", "down_payment", default="0", show_default=True,
                 help="Down payment amount, or a percentage such as 10%"),
    click.option("--down-payment-mode", "down_payment_mode", type=click.Choice(["amount", "percent"]),
                 default="amount", show_default=True, help="How --down-payment is expressed"),
    click.option("--province", "province", type=click.Choice(sorted(DEFAULT_TABLES.provinces)),
                 default=_default_setting("province"), help="Province or territory code"),
    click.option("--municipality", "municipality", default=_default_setting("municipality"),
                 help="Municipality key (see the provinces command)"),
    click.option("--rate", "-r", "rate", required=True, type=click.FloatRange(min=0),
                 help="Annual interest rate (percent)"),
    click.option("--amortization", "-a", "amortization", type=click.IntRange(5, 30), default=25,
                 show_default=True, help="Amortization period in years"),
    click.option("--term", "-t", "term", type=click.IntRange(1, 10), default=5, show_default=True,
                 help="Mortgage term in years"),
    click.option("--frequency", "-f", "frequency", type=click.Choice(list(DEFAULT_TABLES.frequencies)),
                 default="monthly", show_default=True, help="Payment frequency"),
    click.option("--property-type", "property_type", type=click.Choice(list(DEFAULT_TABLES.property_types)),
                 default="detached", show_default=True),
    click.option("--first-time-buyer", "first_time_buyer", is_flag=True, help="Apply first-time buyer rebates"),
    click.option("--newly-built", "newly_built", is_flag=True, help="The home is newly built"),
    click.option("--foreign-buyer", "foreign_buyer", is_flag=True, help="Apply foreign buyer rules and taxes"),
    click.option("--property-taxes", "property_taxes", default="0", help="Annual property taxes"),
    click.option("--condo-fees", "condo_fees", default="0", help="Monthly condo fees"),
    click.option("--home-insurance", "home_insurance", default="0", help="Annual home insurance"),
    click.option("--utilities", "utilities", default="0", help="Monthly utilities"),
    click.option("--maintenance", "maintenance", type=click.FloatRange(min=0), default=0.0,
                 help="Annual maintenance as a percent of the price"),
    click.option("--extra-payment", "extra_payment", default="0", help="Extra principal with every payment"),
    click.option("--payment-increase", "payment_increase", type=click.FloatRange(min=0), default=0.0,
                 help="Increase of the regular payment (percent)"),
    click.option("--increase-strategy", "increase_strategy", type=click.Choice(list(PAYMENT_INCREASE_STRATEGIES)),
                 default="flat", show_default=True, help="Apply the increase flat or compounding yearly"),
    click.option("--annual-prepayment", "annual_prepayment", type=click.FloatRange(min=0), default=0.0,
                 help="Yearly lump sum as a percent of the original principal"),
    click.option("--legal-fees", "legal_fees", default="0"),
    click.option("--title-insurance", "title_insurance", default="0"),
    click.option("--home-inspection", "home_inspection", default="0"),
    click.option("--appraisal-fee", "appraisal_fee", default="0"),
    click.option("--brokerage-fee", "brokerage_fee", default="0"),
    click.option("--lender-fee", "lender_fee", default="0"),
    click.option("--moving-costs", "moving_costs", default="0"),
]


def scenario_options(func: Callable) -> Callable:
    for option in reversed(SCENARIO_OPTIONS):
        func = option(func)
    return func


def build_inputs_from_options(
    price: str,
    down_payment: str,
    down_payment_mode: str,
    province: str,
    municipality: str,
    rate: float,
    amortization: int,
    term: int,
    frequency: str,
    property_type: str = "detached",
    first_time_buyer: bool = False,
    newly_built: bool = False,
    foreign_buyer: bool = False,
    property_taxes: str = "0",
    condo_fees: str = "0",
    home_insurance: str = "0",
    utilities: str = "0",
    maintenance: float = 0.0,
    extra_payment: str = "0",
    payment_increase: float = 0.0,
    increase_strategy: str = "flat",
    annual_prepayment: float = 0.0,
    legal_fees: str = "0",
    title_insurance: str = "0",
    home_inspection: str = "0",
    appraisal_fee: str = "0",
    brokerage_fee: str = "0",
    lender_fee: str = "0",
    moving_costs: str = "0",
) -> MortgageInputs:
    if term > amortization:
        raise click.BadParameter("Term cannot be longer than the amortization period", param_hint="--term")
    municipality = municipality.lower()
    known = [key for key, _ in DEFAULT_TABLES.municipality_options(province)]
    if municipality not in known:
        logger.info("Municipality %r is not listed for %s; no municipal tax applies", municipality, province)
    purchase_price = parse_money(price, "--price")
    down_amount, mode = parse_down_payment(down_payment, down_payment_mode)
    if mode == "amount" and down_amount > purchase_price:
        raise click.BadParameter("Down payment cannot exceed the purchase price", param_hint="--down-payment")
    return MortgageInputs(
        purchase_price=purchase_price,
        down_payment=down_amount,
        down_payment_mode=mode,
        province=province,
        municipality=municipality,
        interest_rate=Decimal(str(rate)),
        amortization_years=amortization,
        term_years=term,
        payment_frequency=frequency,
        first_time_buyer=first_time_buyer,
        newly_built_home=newly_built,
        foreign_buyer=foreign_buyer,
        property_type=property_type,
        expenses=RecurringExpenses(
            property_taxes_annual=parse_money(property_taxes, "--property-taxes"),
            condo_fees_monthly=parse_money(condo_fees, "--condo-fees"),
            home_insurance_annual=parse_money(home_insurance, "--home-insurance"),
            utilities_monthly=parse_money(utilities, "--utilities"),
            maintenance_percent_annual=Decimal(str(maintenance)),
        ),
        prepayment=PrepaymentOptions(
            extra_per_payment=parse_money(extra_payment, "--extra-payment"),
            payment_increase_percent=Decimal(str(payment_increase)),
            annual_lump_sum_percent=Decimal(str(annual_prepayment)),
            payment_increase_strategy=increase_strategy,
        ),
        closing=ClosingCostInputs(
            legal_fees=parse_money(legal_fees, "--legal-fees"),
            title_insurance=parse_money(title_insurance, "--title-insurance"),
            home_inspection=parse_money(home_inspection, "--home-inspection"),
            appraisal_fee=parse_money(appraisal_fee, "--appraisal-fee"),
            brokerage_fee=parse_money(brokerage_fee, "--brokerage-fee"),
            lender_fee=parse_money(lender_fee, "--lender-fee"),
            moving_costs=parse_money(moving_costs, "--moving-costs"),
        ),
    )


def rows_to_dicts(rows: Iterable[YearRow]) -> List[Dict[str, Any]]:
    return [
        {
            "year": row.year,
            "starting_balance": float(row.starting_balance),
            "principal": float(row.principal_paid),
            "interest": float(row.interest_paid),
            "extra": float(row.extra_principal_paid),
            "ending_balance": float(row.ending_balance),
        }
        for row in rows
    ]


def export_to_json(path: Path, summary: Dict[str, Any], baseline: Iterable[YearRow], prepaid: Iterable[YearRow]) -> None:
    """Export the summary and both schedules to a JSON file."""
    data = {
        "summary": summary,
        "baseline_schedule": rows_to_dicts(baseline),
        "schedule": rows_to_dicts(prepaid),
    }
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def export_to_csv(path: Path, rows: Iterable[YearRow]) -> None:
    """Export a yearly schedule to a CSV file."""
    header = ["Year", "Starting_Balance", "Principal", "Interest", "Extra", "Ending_Balance"]
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(header)
        for row in rows:
            writer.writerow(
                [
                    row.year,
                    float(row.starting_balance),
                    float(row.principal_paid),
                    float(row.interest_paid),
                    float(row.extra_principal_paid),
                    float(row.ending_balance),
                ]
            )


@click.group()
@click.option("--log-level", "log_level", default=None,
              type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
              help="Logging verbosity (default: $MORTGAGE_CALC_LOG_LEVEL or WARNING)")
def cli(log_level: Optional[str]) -> None:
    """A command-line Canadian mortgage affordability calculator."""
    configure_logging(log_level or load_settings().log_level)


@cli.command()
@scenario_options
@click.option("--output", "output", type=str, help="Output file path (.json)")
def summary(output: Optional[str], **options: Any) -> None:
    """Compute and print the summary metrics for a purchase."""
    result = calculate_mortgage(build_inputs_from_options(**options))
    summary_data = build_summary(result)
    if output:
        path = Path(output)
        if path.suffix.lower() != ".json":
            raise click.BadParameter("Summary export must use .json extension", param_hint="--output")
        with path.open("w", encoding="utf-8") as f:
            json.dump({"summary": summary_data}, f, indent=2)
        click.echo(f"Summary exported to {path}")
    else:
        print_summary(summary_data)


@cli.command()
@scenario_options
@click.option("--baseline", "baseline", is_flag=True, help="Show the schedule without prepayments")
@click.option("--output", "output", type=str, help="Output file path (.json or .csv)")
def schedule(baseline: bool, output: Optional[str], **options: Any) -> None:
    """Compute and print the yearly amortization schedule."""
    result = calculate_mortgage(build_inputs_from_options(**options))
    chosen = result.baseline_schedule if baseline else result.prepayment_schedule
    if output:
        path = Path(output)
        if path.suffix.lower() == ".json":
            export_to_json(path, build_summary(result), result.baseline_schedule.rows, result.prepayment_schedule.rows)
        elif path.suffix.lower() == ".csv":
            export_to_csv(path, chosen.rows)
        else:
            raise click.BadParameter("Unsupported output format; use .json or .csv", param_hint="--output")
        click.echo(f"Schedule exported to {path}")
        return

    print_summary(build_summary(result))
    max_rows = load_settings().max_rows
    rows = chosen.rows
    if len(rows) > max_rows:
        click.echo(f"Schedule has {len(rows)} rows; showing first {max_rows} rows.")
        rows = rows[:max_rows]
    print_schedule(rows)
    if not baseline and result.years_shaved_off_amortization > 0:
        print_balance_comparison(result.baseline_schedule.rows, result.prepayment_schedule.rows)


@click.command("scenario", add_help_option=False)
@scenario_options
def _scenario(**options: Any) -> None:
    """Option parser for the scenarios given to ``compare``."""


def parse_scenario_opts(opts: str) -> Dict[str, Any]:
    """Parse a quoted option string with the same options as ``summary``."""
    tokens = shlex.split(opts)
    ctx = _scenario.make_context("scenario", tokens)
    return dict(ctx.params)


@cli.command()
@click.option("--scenario1", "scenario1", required=True, help="First scenario options quoted string")
@click.option("--scenario2", "scenario2", required=True, help="Second scenario options quoted string")
def compare(scenario1: str, scenario2: str) -> None:
    """Compare two purchase scenarios.

    Scenarios are provided as quoted option strings, for example:

        mortgage-calc compare --scenario1 "-p 650k -d 10% -r 5.5" --scenario2 "-p 650k -d 20% -r 5.2"
    """
    results = []
    for opts in (scenario1, scenario2):
        params = parse_scenario_opts(opts)
        results.append(build_summary(calculate_mortgage(build_inputs_from_options(**params))))
    print_comparison(results[0], results[1])


@cli.command()
def provinces() -> None:
    """List province codes and their municipality keys."""
    for code, name in DEFAULT_TABLES.provinces.items():
        options = ", ".join(key for key, _ in DEFAULT_TABLES.municipality_options(code))
        click.echo(f"{code}  {name:28s} {options}")


if __name__ == "__main__":
    cli()
