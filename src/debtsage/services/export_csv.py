"""CSV export helpers for payoff schedules."""

from __future__ import annotations

import csv
from datetime import date
from pathlib import Path

from .debts import PayoffProjection

SCHEDULE_HEADERS = [
    "month",
    "date",
    "debt_id",
    "payment",
    "interest",
    "principal",
    "remaining_balance",
    "target",
]


def _serialize_value(value):
    if value is None:
        return ""
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def export_schedule_csv(*, projection: PayoffProjection, output_path: Path) -> Path:
    """Write one row per debt per simulated month to ``output_path``.

    Columns are deterministic (see ``SCHEDULE_HEADERS``). Returns the path written.
    """

    output_path.parent.mkdir(parents=True, exist_ok=True)

    # Use newline='' for csv on Windows
    with output_path.open("w", newline="", encoding="utf-8") as fh:
        writer = csv.DictWriter(
            fh, fieldnames=SCHEDULE_HEADERS, extrasaction="ignore", quoting=csv.QUOTE_MINIMAL
        )
        writer.writeheader()
        for period in projection.schedule:
            for entry in period.entries:
                writer.writerow(
                    {
                        "month": _serialize_value(period.month),
                        "date": _serialize_value(period.period_date),
                        "debt_id": _serialize_value(entry.debt_id),
                        "payment": _serialize_value(entry.payment),
                        "interest": _serialize_value(entry.interest),
                        "principal": _serialize_value(entry.principal),
                        "remaining_balance": _serialize_value(entry.remaining_balance),
                        "target": "yes" if entry.debt_id == period.target_debt_id else "",
                    }
                )

    return output_path
