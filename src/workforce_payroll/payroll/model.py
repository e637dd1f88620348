from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.validators import require_date_range
from ..core.constants import DEFAULT_REPORT_TIMEZONE
from ..core.enums import IssueKind
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class ReportPeriod:
    """Inclusive business-date range ``[start, end]`` cut at ``as_of``."""

    start: date
    end: date
    as_of: date
    tz_name: str = DEFAULT_REPORT_TIMEZONE

    @classmethod
    def build(
        cls,
        start: Optional[date],
        end: Optional[date],
        as_of: Optional[date] = None,
        *,
        tz_name: str = DEFAULT_REPORT_TIMEZONE,
    ) -> "ReportPeriod":
        start, end = require_date_range(start, end)
        as_of = as_of or end
        if as_of < start or as_of > end:
            raise ValidationError("asOf must be within the selected date range.", code="invalid_as_of")
        return cls(start=start, end=end, as_of=as_of, tz_name=tz_name)

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    def to_dict(self) -> dict:
        return {
            "from": self.start.isoformat(),
            "to": self.end.isoformat(),
            "asOf": self.as_of.isoformat(),
        }


@dataclass(frozen=True)
class EmployeePayroll:
    user_id: str
    full_name: Optional[str]
    worked_hours: float
    projected_hours: float
    advance_hours: float
    submit_hours: float

    @property
    def gross_hours(self) -> float:
        return self.worked_hours + self.projected_hours

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "full_name": self.full_name,
            "worked_hours": self.worked_hours,
            "projected_hours": self.projected_hours,
            "advance_hours": self.advance_hours,
            "submit_hours": self.submit_hours,
        }


@dataclass(frozen=True)
class PayrollTotals:
    worked_hours: float = 0.0
    projected_hours: float = 0.0
    advance_hours: float = 0.0
    submit_hours: float = 0.0

    @property
    def gross_hours(self) -> float:
        return self.worked_hours + self.projected_hours

    @classmethod
    def of(cls, rows) -> "PayrollTotals":
        worked = projected = advance = submit = 0.0
        for row in rows:
            worked += row.worked_hours
            projected += row.projected_hours
            advance += row.advance_hours
            submit += row.submit_hours
        return cls(worked_hours=worked, projected_hours=projected, advance_hours=advance, submit_hours=submit)

    def to_dict(self) -> dict:
        return {
            "worked_hours": self.worked_hours,
            "projected_hours": self.projected_hours,
            "advance_hours": self.advance_hours,
            "submit_hours": self.submit_hours,
        }


@dataclass(frozen=True)
class PayrollSummary:
    employees: tuple[EmployeePayroll, ...]
    totals: PayrollTotals

    def to_dict(self) -> dict:
        return {
            "employees": [e.to_dict() for e in self.employees],
            "totals": self.totals.to_dict(),
        }


@dataclass(frozen=True)
class OpenTotals:
    lv1_hours: float = 0.0
    lv2_hours: float = 0.0
    total_hours: float = 0.0

    def to_dict(self) -> dict:
        return {
            "lv1_hours": self.lv1_hours,
            "lv2_hours": self.lv2_hours,
            "total_hours": self.total_hours,
        }


@dataclass(frozen=True)
class Anomaly:
    shift_id: str
    issue: str
    issue_kind: IssueKind
    employee: str
    store: str
    when: str
    detail: str

    def to_dict(self) -> dict:
        return {
            "shift_id": self.shift_id,
            "issue": self.issue,
            "issueKind": self.issue_kind.value,
            "employee": self.employee,
            "store": self.store,
            "when": self.when,
            "detail": self.detail,
        }


@dataclass(frozen=True)
class CoverageGap:
    """A scheduled, assigned slot with no logged shift covering it."""

    schedule_shift_id: str
    employee: str
    store: str
    shift_date: date
    shift_kind: str

    def to_dict(self) -> dict:
        return {
            "schedule_shift_id": self.schedule_shift_id,
            "employee": self.employee,
            "store": self.store,
            "shift_date": self.shift_date.isoformat(),
            "shift_type": self.shift_kind,
        }


@dataclass(frozen=True)
class ReconciliationResult:
    open_totals: OpenTotals
    gross_hours: float
    diff_hours: float
    balanced: bool
    anomalies: tuple[Anomaly, ...]
    scheduled_hours: float = 0.0
    scheduled_totals: OpenTotals = OpenTotals()
    submitted_hours: float = 0.0
    missing_coverage: tuple[CoverageGap, ...] = ()
    warnings: tuple[str, ...] = ()
    variance_warn_hours: float = 0.0
    drift_warn_hours: float = 0.0

    @property
    def status(self) -> str:
        return "needs_attention" if self.warnings else "ok"

    @property
    def open_minus_scheduled(self) -> float:
        return self.open_totals.total_hours - self.scheduled_totals.total_hours

    @property
    def coverage_percent(self) -> float:
        """Share of open hours that have someone assigned; 100 when nothing is open."""
        if self.open_totals.total_hours <= 0:
            return 100.0
        return self.scheduled_totals.total_hours / self.open_totals.total_hours * 100

    @property
    def scheduled_minus_submitted(self) -> float:
        return self.scheduled_hours - self.submitted_hours

    @property
    def open_minus_submitted(self) -> float:
        return self.open_totals.total_hours - self.submitted_hours

    def to_dict(self) -> dict:
        return {
            "status": self.status,
            "openTotals": self.open_totals.to_dict(),
            "gross_hours": self.gross_hours,
            "reconciliationDiff": self.diff_hours,
            "balanced": self.balanced,
            "scheduled_hours": self.scheduled_hours,
            "anomalies": [a.to_dict() for a in self.anomalies],
            "missingCoverage": [g.to_dict() for g in self.missing_coverage],
            "staffingReconciliation": {
                "openTotals": self.open_totals.to_dict(),
                "scheduledTotals": self.scheduled_totals.to_dict(),
                "open_minus_scheduled": round(self.open_minus_scheduled, 2),
                "coverage_percent": round(self.coverage_percent, 1),
            },
            "financialReconciliation": {
                "scheduled_hours": self.scheduled_hours,
                "submitted_hours": self.submitted_hours,
                "scheduled_minus_submitted": round(self.scheduled_minus_submitted, 2),
                "submitted_minus_scheduled": round(self.submitted_hours - self.scheduled_hours, 2),
                "open_minus_submitted": round(self.open_minus_submitted, 2),
            },
            "warnings": list(self.warnings),
            "thresholds": {
                "payroll_variance_warn_hours": self.variance_warn_hours,
                "payroll_shift_drift_warn_hours": self.drift_warn_hours,
            },
        }


@dataclass(frozen=True)
class ShiftPayrollRow:
    """One completed shift as listed on the payroll page and exported to CSV."""

    shift_id: str
    user_id: str
    full_name: Optional[str]
    store_id: str
    store_name: Optional[str]
    start_at: datetime
    end_at: datetime
    minutes: int
    rounded_hours: float

    def to_dict(self) -> dict:
        return {
            "id": self.shift_id,
            "user_id": self.user_id,
            "full_name": self.full_name,
            "store_id": self.store_id,
            "store_name": self.store_name,
            "start_at": self.start_at.isoformat(),
            "end_at": self.end_at.isoformat(),
            "minutes": self.minutes,
            "rounded_hours": self.rounded_hours,
        }


@dataclass(frozen=True)
class PayrollReport:
    period: ReportPeriod
    summary: PayrollSummary
    reconciliation: Optional[ReconciliationResult] = None
    whatsapp_text: str = ""

    def to_dict(self) -> dict:
        data = {
            "period": self.period.to_dict(),
            **self.summary.to_dict(),
            "openTotals": None,
            "reconciliationDiff": None,
            "reconciliation": None,
            "whatsappText": self.whatsapp_text,
        }
        if self.reconciliation is not None:
            data["openTotals"] = self.reconciliation.open_totals.to_dict()
            data["reconciliationDiff"] = self.reconciliation.diff_hours
            data["reconciliation"] = self.reconciliation.to_dict()
        return data
