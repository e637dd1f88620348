from __future__ import annotations

from typing import Iterable, Mapping, Optional, Sequence

from ..common.datetime_utils import local_date, to_local
from ..core.constants import (
    BALANCE_EPSILON_HOURS,
    DEFAULT_DRIFT_WARN_HOURS,
    DEFAULT_VARIANCE_WARN_HOURS,
    UNKNOWN_NAME,
)
from ..core.enums import IssueKind, LaborTier
from ..schedules.model import ScheduledShift
from ..shifts.model import Shift
from ..stores.model import StoreSettings
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .model import (
    Anomaly,
    CoverageGap,
    OpenTotals,
    PayrollSummary,
    ReconciliationResult,
    ReportPeriod,
)


def _fmt(hours: float) -> str:
    return f"{hours:.2f}".rstrip("0").rstrip(".")


class ReconciliationEngine:
    """Cross-check payroll gross hours against the published schedule.

    The result is advisory: it points a manager at shifts to review and never
    changes the payroll numbers.
    """

    def __init__(self, calculator: Optional[PayrollCalculator] = None, *, epsilon: float = BALANCE_EPSILON_HOURS):
        self._calculator = calculator or StandardPayrollCalculator()
        self._epsilon = float(epsilon)

    # ----- open schedule -------------------------------------------------

    def _tier_totals(self, slots: Iterable[ScheduledShift]) -> OpenTotals:
        lv1 = lv2 = total = 0.0
        for slot in slots:
            hours = self._calculator.scheduled_hours(slot.scheduled_start, slot.scheduled_end)
            if slot.labor_tier == LaborTier.TIER_A:
                lv1 += hours
            elif slot.labor_tier == LaborTier.TIER_B:
                lv2 += hours
            total += hours
        return OpenTotals(lv1_hours=lv1, lv2_hours=lv2, total_hours=total)

    def open_totals(self, scheduled: Iterable[ScheduledShift]) -> OpenTotals:
        """Every published slot, assigned or not."""
        return self._tier_totals(scheduled)

    def scheduled_totals(self, scheduled: Iterable[ScheduledShift]) -> OpenTotals:
        """Only slots with an employee assigned."""
        return self._tier_totals(slot for slot in scheduled if slot.is_assigned)

    def is_balanced(self, diff_hours: float) -> bool:
        return abs(diff_hours) <= self._epsilon

    # ----- per-shift anomalies -------------------------------------------

    def detect_anomalies(
        self,
        shifts: Sequence[Shift],
        scheduled: Sequence[ScheduledShift],
        settings: Mapping[str, StoreSettings],
        *,
        tz_name: str,
    ) -> list[Anomaly]:
        slots_by_id = {slot.schedule_shift_id: slot for slot in scheduled}
        found: list[Anomaly] = []

        for shift in shifts:
            if shift.is_removed:
                continue
            if shift.is_open:
                found.append(self._anomaly(shift, IssueKind.OPEN, "Open shift (no clock-out)",
                                           "Started but never clocked out", tz_name))
                continue

            if shift.manual_close_pending:
                found.append(self._anomaly(shift, IssueKind.OVERRIDE, "Manual close awaiting approval",
                                           "manual_close_pending_review", tz_name))
            elif shift.override_pending:
                found.append(self._anomaly(shift, IssueKind.OVERRIDE, "Override awaiting approval",
                                           "override_pending", tz_name))

            drift = self._drift(shift, slots_by_id, settings)
            if drift is not None:
                drift_hours, scheduled_minutes, actual_minutes, threshold = drift
                detail = (
                    f"actual {_fmt(actual_minutes / 60)}h vs scheduled {_fmt(scheduled_minutes / 60)}h, "
                    f"drift {_fmt(drift_hours)}h (threshold {_fmt(threshold)}h)"
                )
                found.append(self._anomaly(shift, IssueKind.DRIFT, "Unexplained drift", detail, tz_name))

        # stable: source order is kept within a kind
        return sorted(found, key=lambda a: a.issue_kind.severity)

    def _drift(self, shift: Shift, slots_by_id, settings):
        if not shift.schedule_shift_id or shift.has_note:
            return None
        slot = slots_by_id.get(shift.schedule_shift_id)
        if slot is None:
            return None

        actual = self._calculator.shift_minutes(shift)
        planned = self._calculator.scheduled_minutes(slot.scheduled_start, slot.scheduled_end)
        drift_hours = abs(actual - planned) / 60
        store_settings = settings.get(shift.store_id)
        threshold = (
            store_settings.payroll_shift_drift_warn_hours if store_settings else DEFAULT_DRIFT_WARN_HOURS
        )
        if drift_hours > threshold:
            return drift_hours, planned, actual, threshold
        return None

    @staticmethod
    def _anomaly(shift: Shift, kind: IssueKind, issue: str, detail: str, tz_name: str) -> Anomaly:
        start = shift.effective_start
        return Anomaly(
            shift_id=shift.shift_id,
            issue=issue,
            issue_kind=kind,
            employee=shift.employee_name or UNKNOWN_NAME,
            store=shift.store_name or UNKNOWN_NAME,
            when=to_local(start, tz_name).strftime("%Y-%m-%d %H:%M"),
            detail=detail,
        )

    # ----- coverage ------------------------------------------------------

    def missing_coverage(
        self,
        period: ReportPeriod,
        shifts: Sequence[Shift],
        scheduled: Sequence[ScheduledShift],
    ) -> list[CoverageGap]:
        logged = [
            s for s in shifts
            if not s.is_removed and local_date(s.planned_start_at, period.tz_name) <= period.as_of
        ]
        linked = {s.schedule_shift_id for s in logged if s.schedule_shift_id}
        by_key: dict[tuple, list[Shift]] = {}
        for s in logged:
            key = (s.profile_id, s.store_id, local_date(s.planned_start_at, period.tz_name))
            by_key.setdefault(key, []).append(s)

        gaps = []
        for slot in scheduled:
            if not slot.is_assigned or slot.shift_date > period.as_of:
                continue
            if slot.schedule_shift_id in linked:
                continue
            same_day = by_key.get((slot.profile_id, slot.store_id, slot.shift_date), [])
            if any(s.shift_kind.covers(slot.shift_kind) for s in same_day):
                continue
            gaps.append(
                CoverageGap(
                    schedule_shift_id=slot.schedule_shift_id,
                    employee=slot.employee_name or UNKNOWN_NAME,
                    store=slot.store_name or UNKNOWN_NAME,
                    shift_date=slot.shift_date,
                    shift_kind=slot.shift_kind.value,
                )
            )
        return gaps

    # ----- full run ------------------------------------------------------

    def reconcile(
        self,
        period: ReportPeriod,
        summary: PayrollSummary,
        *,
        shifts: Sequence[Shift],
        scheduled: Sequence[ScheduledShift],
        settings: Sequence[StoreSettings] = (),
    ) -> ReconciliationResult:
        settings_by_store = {s.store_id: s for s in settings}
        variance_warn = min(
            [s.payroll_variance_warn_hours for s in settings if s.payroll_variance_warn_hours >= 0]
            + [DEFAULT_VARIANCE_WARN_HOURS]
        )
        drift_warn = min(
            [s.payroll_shift_drift_warn_hours for s in settings if s.payroll_shift_drift_warn_hours >= 0]
            + [DEFAULT_DRIFT_WARN_HOURS]
        )

        open_totals = self.open_totals(scheduled)
        gross = summary.totals.gross_hours
        diff = gross - open_totals.total_hours
        balanced = self.is_balanced(diff)

        anomalies = self.detect_anomalies(shifts, scheduled, settings_by_store, tz_name=period.tz_name)
        gaps = self.missing_coverage(period, shifts, scheduled)
        scheduled_totals = self.scheduled_totals(scheduled)
        scheduled_hours = scheduled_totals.total_hours

        warnings = []
        if not balanced:
            sign = "+" if diff > 0 else "-"
            warnings.append(f"Payroll gross differs from open schedule by {sign}{_fmt(abs(diff))} hours.")
        submitted = summary.totals.submit_hours
        scheduled_minus_submitted = scheduled_hours - submitted
        if abs(scheduled_minus_submitted) > variance_warn:
            warnings.append(
                f"Scheduled vs submitted differs by {scheduled_minus_submitted:.1f} hours "
                f"(threshold {_fmt(variance_warn)})."
            )
        if gaps:
            warnings.append(f"Missing coverage detected on {len(gaps)} scheduled shift(s).")
        counts = {kind: sum(1 for a in anomalies if a.issue_kind == kind) for kind in IssueKind}
        if counts[IssueKind.OVERRIDE]:
            warnings.append(f"{counts[IssueKind.OVERRIDE]} shift(s) still need manager approval.")
        if counts[IssueKind.OPEN]:
            warnings.append(f"{counts[IssueKind.OPEN]} shift(s) are still open.")
        if counts[IssueKind.DRIFT]:
            warnings.append(f"{counts[IssueKind.DRIFT]} shift(s) have drift above threshold without a note.")

        return ReconciliationResult(
            open_totals=open_totals,
            gross_hours=gross,
            diff_hours=diff,
            balanced=balanced,
            anomalies=tuple(anomalies),
            scheduled_hours=scheduled_hours,
            scheduled_totals=scheduled_totals,
            submitted_hours=submitted,
            missing_coverage=tuple(gaps),
            warnings=tuple(warnings),
            variance_warn_hours=variance_warn,
            drift_warn_hours=drift_warn,
        )

