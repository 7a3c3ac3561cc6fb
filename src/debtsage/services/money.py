"""Money and rate helpers shared by the payoff engine.

All money values are ``Decimal`` quantized to cents. Interest uses a single
rounding rule (half-up to the cent) so that every split, schedule and payment
record agrees to the penny.
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Union

Number = Union[Decimal, int, float, str]

CENT = Decimal("0.01")
RATE_QUANT = Decimal("0.000001")
ZERO = Decimal("0.00")
MONTHS_PER_YEAR = 12


def _to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"Non-finite amount: {value!r}")
        # str() keeps the shortest repr so 0.1 stays 0.1 instead of 0.1000000000000000055...
        return Decimal(str(value))
    try:
        return Decimal(value)
    except (InvalidOperation, TypeError) as exc:
        raise ValueError(f"Not a numeric amount: {value!r}") from exc


def round_money(value: Number) -> Decimal:
    """Round to cents using half-up rounding."""

    return _to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def to_money(value: Number | None) -> Decimal:
    """Coerce user/database input into a cent-quantized ``Decimal``."""

    if value is None:
        return ZERO
    return round_money(value)


def to_rate(value: Number | None) -> Decimal:
    """Coerce an annual rate fraction (0.2499 == 24.99%)."""

    if value is None:
        return Decimal("0")
    return _to_decimal(value).quantize(RATE_QUANT, rounding=ROUND_HALF_UP)


def monthly_interest(balance: Decimal, annual_rate: Decimal) -> Decimal:
    """Interest accrued on ``balance`` over one month, rounded to cents."""

    return round_money(balance * annual_rate / MONTHS_PER_YEAR)


def safe_divide(numerator: Number, denominator: Number, default: Decimal = ZERO) -> Decimal:
    """Divide, returning ``default`` when the denominator is zero."""

    denominator = _to_decimal(denominator)
    if denominator == 0:
        return default
    return _to_decimal(numerator) / denominator


def percent_of(part: Number, whole: Number) -> int:
    """Return ``part / whole`` as a whole percentage (0 when ``whole`` is 0)."""

    ratio = safe_divide(part, whole)
    return int((ratio * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def format_percentage(rate: Number) -> str:
    """Render an annual rate fraction as a percentage string."""

    pct = (_to_decimal(rate) * 100).quantize(CENT, rounding=ROUND_HALF_UP)
    return f"{pct}%"


def format_duration(months: int | None) -> str:
    """Render a month count as ``"1y 3m"``-style text; ``None`` means never."""

    if months is None or months < 0:
        return "Never"

    years, remaining = divmod(months, 12)
    if years == 0:
        return f"{remaining} month{'s' if remaining != 1 else ''}"
    if remaining == 0:
        return f"{years} year{'s' if years != 1 else ''}"
    return f"{years}y {remaining}m"


__all__ = [
    "CENT",
    "ZERO",
    "round_money",
    "to_money",
    "to_rate",
    "monthly_interest",
    "safe_divide",
    "percent_of",
    "format_percentage",
    "format_duration",
]
