from __future__ import annotations

from datetime import datetime, timezone

from workforce_payroll.core.enums import IssueKind
from workforce_payroll.payroll.exporters import (
    SHIFT_CSV_COLUMNS,
    format_hours,
    format_signed_hours,
    shift_rows_csv,
    whatsapp_summary,
)
from workforce_payroll.payroll.model import (
    EmployeePayroll,
    OpenTotals,
    PayrollSummary,
    PayrollTotals,
    ReconciliationResult,
    ShiftPayrollRow,
)


def make_summary():
    rows = (
        EmployeePayroll("e1", "Ann", worked_hours=8.0, projected_hours=0.0, advance_hours=1.0, submit_hours=7.0),
        EmployeePayroll("e2", "Bob", worked_hours=4.5, projected_hours=0.0, advance_hours=0.0, submit_hours=4.5),
    )
    return PayrollSummary(employees=rows, totals=PayrollTotals.of(rows))


def test_format_hours_trims_zeros():
    assert format_hours(8.0) == "8"
    assert format_hours(7.5) == "7.5"
    assert format_hours(1.25) == "1.25"


def test_format_signed_hours_prefixes_positive():
    assert format_signed_hours(2.5) == "+2.5"
    assert format_signed_hours(-2.5) == "-2.5"
    assert format_signed_hours(0) == "0"


def test_whatsapp_summary_without_reconciliation():
    text = whatsapp_summary(make_summary())

    assert text.splitlines() == [
        "LV1&2 Hours:",
        "",
        "Ann: 8 - 1 (advance) = 7",
        "Bob: 4.5",
        "",
        "Total hours: 11.5",
    ]


def test_whatsapp_summary_with_open_block():
    summary = make_summary()
    rec = ReconciliationResult(
        open_totals=OpenTotals(lv1_hours=6.0, lv2_hours=4.0, total_hours=10.0),
        gross_hours=12.5,
        diff_hours=2.5,
        balanced=False,
        anomalies=(),
    )

    lines = whatsapp_summary(summary, rec).splitlines()

    assert lines[-5:] == ["Total hours open:", "LV1: 6", "LV2: 4", "Total: 10", "Diff: +2.5"]


def test_whatsapp_summary_reports_balanced():
    rec = ReconciliationResult(
        open_totals=OpenTotals(total_hours=12.5), gross_hours=12.5, diff_hours=0.0, balanced=True, anomalies=()
    )

    assert whatsapp_summary(make_summary(), rec).endswith("Diff: balanced")


def test_shift_rows_csv_header_and_row():
    row = ShiftPayrollRow(
        shift_id="sh1",
        user_id="e1",
        full_name=None,
        store_id="s1",
        store_name="Main St",
        start_at=datetime(2026, 3, 2, 14, 0, tzinfo=timezone.utc),
        end_at=datetime(2026, 3, 2, 18, 25, tzinfo=timezone.utc),
        minutes=265,
        rounded_hours=4.5,
    )

    lines = shift_rows_csv([row]).splitlines()

    assert lines[0] == ",".join(SHIFT_CSV_COLUMNS)
    assert lines[1] == "sh1,e1,Unknown,s1,2026-03-02T14:00:00+00:00,2026-03-02T18:25:00+00:00,265,4.5"


def test_issue_kind_values_match_wire_format():
    assert [k.value for k in IssueKind] == ["open", "override", "drift"]
