"""Output helpers for the mortgage calculator.

This module renders calculation summaries and yearly schedules as plain
text tables. It also lines up the baseline and prepayment schedules year by
year, and puts two scenarios side by side.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Dict, Iterable, Sequence

from .data_models import YearRow


def print_summary(summary: Dict[str, object]) -> None:
    """Print a summary of mortgage metrics in a human-readable format."""
    print("Summary")
    print("-" * 72)
    print(f"Purchase price      : {summary['purchase_price']:.2f}")
    print(f"Down payment        : {summary['down_payment']:.2f} ({summary['down_payment_percent']:.2f}%)")
    print(f"Minimum down payment: {summary['minimum_down_payment']:.2f}")
    print(f"Mortgage insurance  : {summary['mortgage_insurance']:.2f}")
    print(f"Total mortgage      : {summary['total_mortgage']:.2f}")
    print(f"Payment             : {summary['payment_amount']:.2f} x {summary['payments_per_year']}/year")
    print(f"Monthly equivalent  : {summary['monthly_payment']:.2f}")
    print(f"First payment split : {summary['principal_per_payment']:.2f} principal, "
          f"{summary['interest_per_payment']:.2f} interest")
    print(f"Monthly expenses    : {summary['total_monthly_expenses']:.2f}")
    print(f"Interest over term  : {summary['interest_paid_over_term']:.2f}")
    print(f"Balance end of term : {summary['balance_at_end_of_term']:.2f}")
    print(f"Total interest      : {summary['total_interest']:.2f}")
    print(f"Amortization        : {summary['effective_amortization']:.2f} years")
    print(f"{summary['provincial_transfer_tax_name'] or 'Land transfer tax'} : "
          f"{summary['provincial_transfer_tax']:.2f}")
    if summary.get("municipal_transfer_tax_name"):
        print(f"{summary['municipal_transfer_tax_name']} : {summary['municipal_transfer_tax']:.2f}")
    if summary.get("foreign_buyer_tax"):
        print(f"Foreign buyer tax   : {summary['foreign_buyer_tax']:.2f}")
    if summary.get("insurance_sales_tax"):
        print(f"Tax on insurance    : {summary['insurance_sales_tax']:.2f}")
    print(f"Closing costs       : {summary['closing_costs']:.2f}")
    comparison = summary.get("comparison")
    if comparison and (comparison["interest_saved"] or comparison["years_saved"]):
        print(f"Baseline interest   : {comparison['baseline_total_interest']:.2f}")
        print(f"Saved over term     : {comparison['interest_saved_over_term']:.2f}")
        print(f"Interest saved      : {comparison['interest_saved']:.2f}")
        print(f"Time saved          : {comparison['years_saved']:.2f} years")
    print("-" * 72)


def print_schedule(rows: Iterable[YearRow]) -> None:
    """Print a yearly amortization schedule as a simple table."""
    headers = ["Year", "StartBal", "Principal", "Interest", "Extra", "EndBal"]
    print("\t".join(headers))
    for row in rows:
        print(
            "\t".join(
                [
                    str(row.year),
                    f"{row.starting_balance:.2f}",
                    f"{row.principal_paid:.2f}",
                    f"{row.interest_paid:.2f}",
                    f"{row.extra_principal_paid:.2f}",
                    f"{row.ending_balance:.2f}",
                ]
            )
        )


def print_balance_comparison(baseline: Sequence[YearRow], prepaid: Sequence[YearRow]) -> None:
    """Print the year-end balance of both schedules side by side.

    The shorter schedule is padded with zero balances once its loan is
    retired.
    """
    print(f"{'Year':>4s} {'Standard':>15s} {'With prepayment':>15s} {'Difference':>15s}")
    for index in range(max(len(baseline), len(prepaid))):
        standard = baseline[index].ending_balance if index < len(baseline) else Decimal("0")
        accelerated = prepaid[index].ending_balance if index < len(prepaid) else Decimal("0")
        print(f"{index + 1:4d} {standard:15.2f} {accelerated:15.2f} {accelerated - standard:15.2f}")


def print_comparison(s1: Dict[str, object], s2: Dict[str, object]) -> None:
    """Print a comparison of two mortgage summaries side by side.

    The difference column is scenario2 - scenario1, so a negative value
    means the second scenario is cheaper or shorter.
    """
    print("Comparison")
    print("=" * 72)
    keys = [
        "total_mortgage",
        "payment_amount",
        "monthly_payment",
        "total_monthly_expenses",
        "total_interest",
        "effective_amortization",
        "closing_costs",
    ]
    print(f"{'Metric':24s} {'Scenario1':>15s} {'Scenario2':>15s} {'Difference':>15s}")
    for key in keys:
        v1 = s1.get(key)
        v2 = s2.get(key)
        diff = v2 - v1
        print(f"{key:24s} {v1:15.2f} {v2:15.2f} {diff:15.2f}")
    print("=" * 72)
