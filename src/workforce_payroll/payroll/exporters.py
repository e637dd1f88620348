from __future__ import annotations

import csv
import io
from typing import Iterable, Optional

from ..core.constants import UNKNOWN_NAME
from .model import PayrollSummary, ReconciliationResult, ShiftPayrollRow

SHIFT_CSV_COLUMNS = [
    "shift_id",
    "user_id",
    "full_name",
    "store_id",
    "start_at",
    "end_at",
    "minutes",
    "rounded_hours",
]


def format_hours(value: float) -> str:
    """8.0 -> "8", 7.5 -> "7.5", 1.25 -> "1.25"."""

    value = float(value)
    if value.is_integer():
        return str(int(value))
    return f"{value:.2f}".rstrip("0").rstrip(".")


def format_signed_hours(value: float) -> str:
    """Like format_hours but positive values carry an explicit ``+``."""

    text = format_hours(value)
    return f"+{text}" if float(value) > 0 else text


def format_diff(reconciliation: ReconciliationResult) -> str:
    if reconciliation.balanced:
        return "balanced"
    return format_signed_hours(reconciliation.diff_hours)


def whatsapp_summary(summary: PayrollSummary, reconciliation: Optional[ReconciliationResult] = None) -> str:
    """Plain-text summary managers paste into the payroll chat."""

    lines = ["LV1&2 Hours:", ""]
    for row in summary.employees:
        name = row.full_name or UNKNOWN_NAME
        if row.advance_hours > 0:
            lines.append(
                f"{name}: {format_hours(row.gross_hours)} - {format_hours(row.advance_hours)} (advance)"
                f" = {format_hours(row.submit_hours)}"
            )
        else:
            lines.append(f"{name}: {format_hours(row.submit_hours)}")
    lines += ["", f"Total hours: {format_hours(summary.totals.submit_hours)}"]

    if reconciliation is not None:
        open_totals = reconciliation.open_totals
        lines += [
            "",
            "Total hours open:",
            f"LV1: {format_hours(open_totals.lv1_hours)}",
            f"LV2: {format_hours(open_totals.lv2_hours)}",
            f"Total: {format_hours(open_totals.total_hours)}",
            f"Diff: {format_diff(reconciliation)}",
        ]
    return "\n".join(lines)


def shift_rows_csv(rows: Iterable[ShiftPayrollRow]) -> str:
    out = io.StringIO()
    writer = csv.DictWriter(out, fieldnames=SHIFT_CSV_COLUMNS, lineterminator="\n")
    writer.writeheader()
    for r in rows:
        writer.writerow(
            {
                "shift_id": r.shift_id,
                "user_id": r.user_id,
                "full_name": r.full_name or UNKNOWN_NAME,
                "store_id": r.store_id,
                "start_at": r.start_at.isoformat(),
                "end_at": r.end_at.isoformat(),
                "minutes": r.minutes,
                "rounded_hours": format_hours(r.rounded_hours),
            }
        )
    return out.getvalue()
