from datetime import datetime, time, timedelta, timezone

import pytest

from workforce_payroll.core.exceptions import ComputationError
from workforce_payroll.payroll.calculator.standard_calculator import StandardPayrollCalculator

START = datetime(2026, 3, 2, 14, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "minutes, hours",
    [(0, 0.0), (240, 4.0), (245, 4.0), (259, 4.0), (260, 4.5), (280, 4.5), (281, 5.0), (300, 5.0)],
)
def test_round_hours_bands(minutes, hours):
    assert StandardPayrollCalculator().round_hours(minutes) == hours


def test_round_hours_rejects_negative_minutes():
    with pytest.raises(ComputationError):
        StandardPayrollCalculator().round_hours(-1)


def test_worked_minutes_rounds_half_up():
    calc = StandardPayrollCalculator()
    assert calc.worked_minutes(START, START + timedelta(seconds=30)) == 1
    assert calc.worked_minutes(START, START + timedelta(seconds=29)) == 0
    assert calc.worked_minutes(START, START + timedelta(minutes=265)) == 265


def test_worked_minutes_never_negative():
    calc = StandardPayrollCalculator()
    assert calc.worked_minutes(START, START - timedelta(minutes=10)) == 0


def test_worked_minutes_open_shift_is_none():
    assert StandardPayrollCalculator().worked_minutes(START, None) is None


def test_worked_minutes_treats_naive_as_utc():
    calc = StandardPayrollCalculator()
    naive_end = datetime(2026, 3, 2, 18, 0)
    assert calc.worked_minutes(START, naive_end) == 240


def test_worked_minutes_malformed_timestamp():
    with pytest.raises(ComputationError):
        StandardPayrollCalculator().worked_minutes("2026-03-02 08:00", START)


def test_scheduled_minutes_wraps_past_midnight():
    calc = StandardPayrollCalculator()
    assert calc.scheduled_minutes(time(8, 0), time(16, 30)) == 510
    assert calc.scheduled_minutes(time(22, 0), time(6, 0)) == 480
    assert calc.scheduled_hours(time(22, 0), time(6, 0)) == 8.0
