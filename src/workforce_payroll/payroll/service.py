from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from ..advances.repository import AdvanceRepository
from ..auth.context import ManagerContext
from ..common.datetime_utils import local_day_start_utc, next_day
from ..core.constants import DEFAULT_REPORT_TIMEZONE
from ..core.enums import AdvanceStatus
from ..core.exceptions import AuthorizationError, DataSourceError
from ..schedules.repository import ScheduleRepository
from ..shifts.repository import ShiftRepository
from ..stores.repository import StoreRepository
from .aggregator import PayrollAggregator
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .exporters import whatsapp_summary
from .model import PayrollReport, ReconciliationResult, ReportPeriod, ShiftPayrollRow
from .reconciliation import ReconciliationEngine

logger = logging.getLogger(__name__)


class PayrollReportService:
    def __init__(
        self,
        shifts: ShiftRepository,
        schedules: ScheduleRepository,
        advances: AdvanceRepository,
        stores: StoreRepository,
        *,
        calculator: Optional[PayrollCalculator] = None,
        tz_name: str = DEFAULT_REPORT_TIMEZONE,
    ):
        self._shifts = shifts
        self._schedules = schedules
        self._advances = advances
        self._stores = stores
        self._calculator = calculator or StandardPayrollCalculator()
        self._aggregator = PayrollAggregator(self._calculator)
        self._reconciler = ReconciliationEngine(self._calculator)
        self._tz_name = tz_name

    def _check_employee(self, profile_id: Optional[str], scope: tuple[str, ...]) -> None:
        if not profile_id:
            return
        member_of = set(self._stores.list_member_store_ids(str(profile_id)))
        if not member_of.intersection(scope):
            raise AuthorizationError("Invalid employee selection.", code="invalid_employee")

    def _bounds(self, period: ReportPeriod):
        return (
            local_day_start_utc(period.start, self._tz_name),
            local_day_start_utc(next_day(period.end), self._tz_name),
        )

    def build_report(
        self,
        ctx: ManagerContext,
        *,
        start: Optional[date],
        end: Optional[date],
        as_of: Optional[date] = None,
        store_id: Optional[str] = None,
        profile_id: Optional[str] = None,
        totals_over_all: bool = False,
    ) -> PayrollReport:
        period = ReportPeriod.build(start, end, as_of, tz_name=self._tz_name)
        scope = ctx.scope(store_id)
        self._check_employee(profile_id, scope)
        start_utc, end_utc = self._bounds(period)

        shifts = self._shifts.list_for_period(store_ids=scope, start_utc=start_utc, end_utc_exclusive=end_utc)
        advances = self._advances.list_for_period(
            store_ids=scope,
            start_utc=start_utc,
            end_utc_exclusive=end_utc,
            status=AdvanceStatus.VERIFIED,
        )
        projected = []
        if period.as_of < period.end:
            projected = self._schedules.list_published(
                store_ids=scope, start=next_day(period.as_of), end=period.end
            )

        summary = self._aggregator.aggregate(
            period,
            shifts=shifts,
            scheduled=projected,
            advances=advances,
            profile_id=profile_id,
            totals_over_all=totals_over_all,
        )
        # the open schedule covers every employee in scope, so the cross-check does too
        scope_summary = summary
        if profile_id and not totals_over_all:
            scope_summary = self._aggregator.aggregate(period, shifts=shifts, scheduled=projected, advances=advances)
        reconciliation = self._reconcile(period, scope, scope_summary, shifts)

        logger.info(
            "payroll report user=%s stores=%d period=%s..%s as_of=%s shifts=%d employees=%d reconciled=%s",
            ctx.acting_user_id,
            len(scope),
            period.start,
            period.end,
            period.as_of,
            len(shifts),
            len(summary.employees),
            reconciliation is not None,
        )
        return PayrollReport(
            period=period,
            summary=summary,
            reconciliation=reconciliation,
            whatsapp_text=whatsapp_summary(summary, reconciliation),
        )

    def _reconcile(self, period, scope, summary, shifts) -> Optional[ReconciliationResult]:
        """Reconciliation is optional: a failing schedule/settings source drops it."""

        try:
            scheduled = self._schedules.list_published(store_ids=scope, start=period.start, end=period.end)
            settings = self._stores.list_settings(scope)
        except DataSourceError as e:
            logger.warning("reconciliation skipped, data source unavailable: %s", e)
            return None
        return self._reconciler.reconcile(period, summary, shifts=shifts, scheduled=scheduled, settings=settings)

    def list_shift_rows(
        self,
        ctx: ManagerContext,
        *,
        start: Optional[date],
        end: Optional[date],
        store_id: Optional[str] = None,
        profile_id: Optional[str] = None,
    ) -> list[ShiftPayrollRow]:
        """Completed shifts with minutes and rounded hours (payroll page / CSV)."""

        period = ReportPeriod.build(start, end, tz_name=self._tz_name)
        scope = ctx.scope(store_id)
        self._check_employee(profile_id, scope)
        start_utc, end_utc = self._bounds(period)

        shifts = self._shifts.list_for_period(
            store_ids=scope, start_utc=start_utc, end_utc_exclusive=end_utc, profile_id=profile_id
        )
        rows = []
        for s in shifts:
            if s.is_removed or s.is_open:
                continue
            minutes = self._calculator.shift_minutes(s)
            rows.append(
                ShiftPayrollRow(
                    shift_id=s.shift_id,
                    user_id=s.profile_id,
                    full_name=s.employee_name,
                    store_id=s.store_id,
                    store_name=s.store_name,
                    start_at=s.effective_start,
                    end_at=s.ended_at,
                    minutes=minutes,
                    rounded_hours=self._calculator.round_hours(minutes),
                )
            )
        rows.sort(key=lambda r: (r.start_at, r.shift_id))
        return rows
