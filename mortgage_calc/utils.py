"""Numeric helpers for the mortgage calculator.

This module coerces raw user values into ``Decimal`` amounts, guards the
percentage arithmetic against zero denominators and evaluates marginal tax
brackets. Every helper degrades to zero instead of raising so that the
calculators never fail on incomplete input.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation, getcontext
from typing import Iterable, Optional, Tuple

getcontext().prec = 28  # increase decimal precision to avoid rounding errors

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def to_decimal(value: object, default: Decimal = ZERO) -> Decimal:
    """Convert ``value`` into a ``Decimal`` or return ``default``.

    Accepts ``Decimal``, ints, floats and numeric strings (commas are
    stripped). ``None``, booleans, empty strings, non-numeric text and
    non-finite numbers all resolve to ``default``.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, Decimal):
        return value if value.is_finite() else default
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        value = repr(value)
    try:
        cleaned = str(value).replace(",", "").strip()
        result = Decimal(cleaned)
    except (InvalidOperation, ValueError):
        return default
    return result if result.is_finite() else default


def to_int(value: object, default: int = 0) -> int:
    """Convert ``value`` into an ``int`` (truncating) or return ``default``."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    number = to_decimal(value, Decimal(default))
    return int(number)


def percent_of(amount: Decimal, percent: Decimal) -> Decimal:
    """Return ``percent`` % of ``amount``."""
    return amount * percent / HUNDRED


def safe_percentage(part: Decimal, whole: Decimal) -> Decimal:
    """Return ``part`` as a percentage of ``whole``; zero when ``whole`` is 0."""
    if whole == 0:
        return ZERO
    return part / whole * HUNDRED


def marginal_tax(amount: Decimal, brackets: Iterable[Tuple[Optional[Decimal], Decimal]]) -> Decimal:
    """Apply marginal ``brackets`` to ``amount``.

    ``brackets`` is an ordered sequence of ``(upper_bound, rate)`` pairs where
    ``rate`` is a fraction and the final bound may be ``None`` for an open
    ended top bracket. Each rate applies only to the slice of ``amount`` that
    falls between the previous bound and its own.
    """
    tax = ZERO
    lower = ZERO
    for upper, rate in brackets:
        if amount <= lower:
            break
        top = amount if upper is None else min(amount, upper)
        tax += (top - lower) * rate
        if upper is None:
            break
        lower = upper
    return tax


def parse_amount(value: str) -> Decimal:
    """Parse a numeric string with optional suffixes.

    Accepts plain numbers ("500000"), commas ("500,000") and shorthand with
    ``k``/``m`` suffixes (e.g., "500k" meaning 500_000).

    Raises
    ------
    ValueError
        If the string is not numeric.
    """
    cleaned = value.strip().lower().replace(",", "").lstrip("$")
    factor = Decimal("1")
    if cleaned.endswith("k"):
        factor = Decimal("1000")
        cleaned = cleaned[:-1]
    elif cleaned.endswith("m"):
        factor = Decimal("1000000")
        cleaned = cleaned[:-1]
    try:
        number = Decimal(cleaned)
    except InvalidOperation as exc:
        raise ValueError(f"Invalid amount: {value}") from exc
    if not number.is_finite():
        raise ValueError(f"Invalid amount: {value}")
    return number * factor
