from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone

from workforce_payroll.advances.model import Advance
from workforce_payroll.core.enums import AdvanceStatus, ShiftKind
from workforce_payroll.payroll.aggregator import PayrollAggregator
from workforce_payroll.payroll.model import ReportPeriod
from workforce_payroll.schedules.model import ScheduledShift
from workforce_payroll.shifts.model import Shift

PERIOD = ReportPeriod.build(date(2026, 3, 2), date(2026, 3, 6))


def make_shift(shift_id, profile_id, day, minutes, *, name="Ann", start_hour=14, **kw):
    # 14:00 UTC is 08:00 in Chicago during early March
    start = datetime(2026, 3, day, start_hour, 0, tzinfo=timezone.utc)
    kw.setdefault("ended_at", start + timedelta(minutes=minutes))
    return Shift(
        shift_id=shift_id,
        store_id="s1",
        profile_id=profile_id,
        shift_kind=ShiftKind.OPEN,
        planned_start_at=start,
        started_at=start,
        employee_name=name,
        **kw,
    )


def make_advance(advance_id, profile_id, hours, *, status=AdvanceStatus.VERIFIED, day=3):
    return Advance(
        advance_id=advance_id,
        profile_id=profile_id,
        advance_date=datetime(2026, 3, day, 18, 0, tzinfo=timezone.utc),
        advance_hours=hours,
        status=status,
        store_id="s1",
    )


def make_slot(slot_id, profile_id, day, *, name="Ann"):
    return ScheduledShift(
        schedule_shift_id=slot_id,
        store_id="s1",
        shift_date=date(2026, 3, day),
        shift_kind=ShiftKind.OPEN,
        scheduled_start=time(8, 0),
        scheduled_end=time(14, 0),
        profile_id=profile_id,
        employee_name=name,
    )


def test_end_to_end_worked_minus_verified_advance():
    shifts = [make_shift("a", "e1", 2, 240), make_shift("b", "e1", 3, 255)]
    advances = [make_advance("x", "e1", 1.0)]

    summary = PayrollAggregator().aggregate(PERIOD, shifts=shifts, advances=advances)

    (row,) = summary.employees
    assert row.worked_hours == 8.0
    assert row.advance_hours == 1.0
    assert row.submit_hours == 7.0


def test_quarter_past_rounding_band_adds_half_hour():
    shifts = [make_shift("a", "e1", 2, 240), make_shift("b", "e1", 3, 265)]
    summary = PayrollAggregator().aggregate(PERIOD, shifts=shifts, advances=[make_advance("x", "e1", 1.0)])

    assert summary.employees[0].worked_hours == 8.5
    assert summary.employees[0].submit_hours == 7.5


def test_submit_never_negative():
    summary = PayrollAggregator().aggregate(
        PERIOD, shifts=[make_shift("a", "e1", 2, 120)], advances=[make_advance("x", "e1", 5.0)]
    )

    assert summary.employees[0].submit_hours == 0.0
    assert summary.totals.submit_hours == 0.0


def test_empty_period_yields_zero_totals():
    summary = PayrollAggregator().aggregate(PERIOD, shifts=[])

    assert summary.employees == ()
    assert summary.totals.to_dict() == {
        "worked_hours": 0.0,
        "projected_hours": 0.0,
        "advance_hours": 0.0,
        "submit_hours": 0.0,
    }


def test_totals_equal_column_sums_and_rows_sorted_by_name():
    shifts = [
        make_shift("a", "e1", 2, 480, name="zoe"),
        make_shift("b", "e2", 2, 300, name="Bob"),
        make_shift("c", "e3", 4, 200, name=None),
    ]
    summary = PayrollAggregator().aggregate(PERIOD, shifts=shifts, advances=[make_advance("x", "e2", 2.0)])

    assert [r.full_name for r in summary.employees] == ["Bob", None, "zoe"]
    for column in ("worked_hours", "projected_hours", "advance_hours", "submit_hours"):
        assert getattr(summary.totals, column) == sum(getattr(r, column) for r in summary.employees)


def test_open_and_removed_shifts_are_excluded():
    shifts = [
        make_shift("a", "e1", 2, 240),
        make_shift("b", "e1", 3, 0, ended_at=None),
        make_shift("c", "e1", 4, 240, last_action="removed"),
    ]
    summary = PayrollAggregator().aggregate(PERIOD, shifts=shifts)

    assert summary.employees[0].worked_hours == 4.0


def test_shift_outside_local_period_is_excluded():
    # 03:00 UTC on the 7th is still the 6th in Chicago; 06:00 UTC on the 2nd is the 1st
    inside = make_shift("a", "e1", 7, 240, start_hour=3)
    outside = make_shift("b", "e1", 2, 240, start_hour=5)
    summary = PayrollAggregator().aggregate(PERIOD, shifts=[inside, outside])

    assert summary.employees[0].worked_hours == 4.0


def test_pending_and_voided_advances_are_ignored():
    advances = [
        make_advance("x", "e1", 1.0, status=AdvanceStatus.PENDING_VERIFICATION),
        make_advance("y", "e1", 2.0, status=AdvanceStatus.VOIDED),
    ]
    summary = PayrollAggregator().aggregate(PERIOD, shifts=[make_shift("a", "e1", 2, 240)], advances=advances)

    assert summary.employees[0].advance_hours == 0.0
    assert summary.employees[0].submit_hours == 4.0


def test_as_of_cuts_worked_and_adds_projected():
    period = ReportPeriod.build(date(2026, 3, 2), date(2026, 3, 6), date(2026, 3, 3))
    shifts = [make_shift("a", "e1", 2, 240), make_shift("b", "e1", 5, 240)]
    slots = [make_slot("p1", "e1", 3), make_slot("p2", "e1", 4), make_slot("p3", None, 5)]

    summary = PayrollAggregator().aggregate(period, shifts=shifts, scheduled=slots)

    (row,) = summary.employees
    assert row.worked_hours == 4.0
    assert row.projected_hours == 6.0
    assert row.submit_hours == 10.0


def test_employee_filter_with_and_without_totals_over_all():
    shifts = [make_shift("a", "e1", 2, 240, name="Ann"), make_shift("b", "e2", 2, 480, name="Bob")]
    agg = PayrollAggregator()

    only = agg.aggregate(PERIOD, shifts=shifts, profile_id="e1")
    over_all = agg.aggregate(PERIOD, shifts=shifts, profile_id="e1", totals_over_all=True)

    assert [r.user_id for r in only.employees] == ["e1"]
    assert only.totals.worked_hours == 4.0
    assert [r.user_id for r in over_all.employees] == ["e1"]
    assert over_all.totals.worked_hours == 12.0


def test_aggregate_is_idempotent():
    shifts = [make_shift("a", "e1", 2, 265), make_shift("b", "e2", 3, 300, name="Bob")]
    advances = [make_advance("x", "e1", 1.0)]
    agg = PayrollAggregator()

    assert agg.aggregate(PERIOD, shifts=shifts, advances=advances) == agg.aggregate(
        PERIOD, shifts=shifts, advances=advances
    )
