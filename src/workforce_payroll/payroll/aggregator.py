from __future__ import annotations

from typing import Iterable, Optional, Sequence

from ..advances.model import Advance
from ..common.datetime_utils import local_date
from ..core.constants import UNKNOWN_NAME
from ..schedules.model import ScheduledShift
from ..shifts.model import Shift
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .model import EmployeePayroll, PayrollSummary, PayrollTotals, ReportPeriod


class PayrollAggregator:
    """Sum rounded hours per employee and deduct verified advances.

    Pure: works only on the rows it is given and keeps no state between calls.
    """

    def __init__(self, calculator: Optional[PayrollCalculator] = None):
        self._calculator = calculator or StandardPayrollCalculator()

    def worked_shifts(self, period: ReportPeriod, shifts: Iterable[Shift]) -> list[Shift]:
        """Closed, non-removed shifts planned inside the period and on/before as_of."""

        out = []
        for shift in shifts:
            if shift.is_removed or shift.is_open:
                continue
            day = local_date(shift.planned_start_at, period.tz_name)
            if period.contains(day) and day <= period.as_of:
                out.append(shift)
        return out

    def projected_slots(self, period: ReportPeriod, scheduled: Iterable[ScheduledShift]) -> list[ScheduledShift]:
        """Assigned schedule slots after as_of that are still inside the period."""

        return [
            slot
            for slot in scheduled
            if slot.is_assigned and period.as_of < slot.shift_date <= period.end
        ]

    def verified_advances(self, period: ReportPeriod, advances: Iterable[Advance]) -> list[Advance]:
        return [
            adv
            for adv in advances
            if adv.is_verified and period.contains(local_date(adv.advance_date, period.tz_name))
        ]

    def aggregate(
        self,
        period: ReportPeriod,
        *,
        shifts: Sequence[Shift],
        scheduled: Sequence[ScheduledShift] = (),
        advances: Sequence[Advance] = (),
        profile_id: Optional[str] = None,
        totals_over_all: bool = False,
    ) -> PayrollSummary:
        acc: dict[str, dict] = {}

        def entry(user_id: str, name: Optional[str]) -> dict:
            e = acc.get(user_id)
            if e is None:
                e = {"user_id": user_id, "full_name": name, "worked": 0.0, "projected": 0.0, "advance": 0.0}
                acc[user_id] = e
            elif not e["full_name"] and name:
                e["full_name"] = name
            return e

        for shift in self.worked_shifts(period, shifts):
            entry(shift.profile_id, shift.employee_name)["worked"] += self._calculator.shift_hours(shift)

        for slot in self.projected_slots(period, scheduled):
            hours = self._calculator.scheduled_hours(slot.scheduled_start, slot.scheduled_end)
            entry(slot.profile_id, slot.employee_name)["projected"] += hours

        for adv in self.verified_advances(period, advances):
            entry(adv.profile_id, adv.employee_name)["advance"] += float(adv.advance_hours)

        rows = sorted(
            (self._to_row(e) for e in acc.values()),
            key=lambda r: ((r.full_name or UNKNOWN_NAME).casefold(), r.user_id),
        )

        if profile_id:
            selected = [r for r in rows if r.user_id == str(profile_id)]
            totals = PayrollTotals.of(rows if totals_over_all else selected)
            return PayrollSummary(employees=tuple(selected), totals=totals)

        return PayrollSummary(employees=tuple(rows), totals=PayrollTotals.of(rows))

    @staticmethod
    def _to_row(e: dict) -> EmployeePayroll:
        gross = e["worked"] + e["projected"]
        return EmployeePayroll(
            user_id=e["user_id"],
            full_name=e["full_name"],
            worked_hours=e["worked"],
            projected_hours=e["projected"],
            advance_hours=e["advance"],
            # an employee never owes hours
            submit_hours=max(0.0, gross - e["advance"]),
        )
