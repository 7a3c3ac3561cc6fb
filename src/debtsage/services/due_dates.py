"""Calendar helpers for monthly due days."""

from __future__ import annotations

from calendar import monthrange
from datetime import date

from .validation import DebtValidationError


def _clamped(year: int, month: int, day: int) -> date:
    """Return ``year-month-day``, clamping ``day`` to the month's last day."""

    return date(year, month, min(day, monthrange(year, month)[1]))


def add_months(value: date, months: int, *, day: int | None = None) -> date:
    """Shift ``value`` by ``months`` keeping (or setting) the day of month.

    Days past the end of the target month clamp to its last day, so
    Jan 31 + 1 month is Feb 28 (or 29).
    """

    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    return _clamped(year, month, day if day is not None else value.day)


def next_due_date(due_day: int, *, today: date | None = None) -> date:
    """Return the first due date on or after *today* for a monthly ``due_day``."""

    if not 1 <= due_day <= 31:
        raise DebtValidationError("due_day", "must be a day of month between 1 and 31", value=due_day)
    current = today or date.today()
    candidate = _clamped(current.year, current.month, due_day)
    if candidate >= current:
        return candidate
    return add_months(current, 1, day=due_day)


def days_until_due(due_day: int, *, today: date | None = None) -> int:
    current = today or date.today()
    return (next_due_date(due_day, today=current) - current).days


__all__ = ["add_months", "next_due_date", "days_until_due"]
