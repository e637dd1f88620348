from __future__ import annotations

from dataclasses import dataclass

from .advances.mysql_advance_repository import MySQLAdvanceRepository
from .advances.service import AdvanceService
from .core.constants import DEFAULT_REPORT_TIMEZONE
from .database.connection import DBConfig, DatabaseConnection
from .payroll.calculator.standard_calculator import StandardPayrollCalculator
from .payroll.service import PayrollReportService
from .schedules.mysql_schedule_repository import MySQLScheduleRepository
from .shifts.mysql_shift_repository import MySQLShiftRepository
from .shifts.service import ShiftReviewService
from .stores.mysql_store_repository import MySQLStoreRepository


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    shifts_repo: MySQLShiftRepository
    schedules_repo: MySQLScheduleRepository
    stores_repo: MySQLStoreRepository
    advances_repo: MySQLAdvanceRepository

    payroll_report_service: PayrollReportService
    advance_service: AdvanceService
    shift_review_service: ShiftReviewService


def build_container(*, db_config: dict, tz_name: str = DEFAULT_REPORT_TIMEZONE) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    shifts_repo = MySQLShiftRepository(conn)
    schedules_repo = MySQLScheduleRepository(conn)
    stores_repo = MySQLStoreRepository(conn)
    advances_repo = MySQLAdvanceRepository(conn)

    payroll_report_service = PayrollReportService(
        shifts_repo,
        schedules_repo,
        advances_repo,
        stores_repo,
        calculator=StandardPayrollCalculator(),
        tz_name=tz_name,
    )
    advance_service = AdvanceService(advances_repo, stores_repo, tz_name=tz_name)
    shift_review_service = ShiftReviewService(shifts_repo)

    return Container(
        conn=conn,
        shifts_repo=shifts_repo,
        schedules_repo=schedules_repo,
        stores_repo=stores_repo,
        advances_repo=advances_repo,
        payroll_report_service=payroll_report_service,
        advance_service=advance_service,
        shift_review_service=shift_review_service,
    )
