from __future__ import annotations

from datetime import date
from typing import Sequence

from ..core.enums import LaborTier, ShiftKind
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, in_clause, normalize_mysql_time
from .model import ScheduledShift
from .repository import ScheduleRepository


class MySQLScheduleRepository(ScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_published(self, *, store_ids: Sequence[str], start: date, end: date) -> Sequence[ScheduledShift]:
        if not store_ids:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT ss.id, ss.store_id, ss.profile_id, ss.shift_date, ss.shift_type,
                       ss.scheduled_start, ss.scheduled_end,
                       st.name AS store_name, st.labor_tier, p.name AS employee_name
                FROM schedule_shifts ss
                JOIN schedules sc ON sc.id = ss.schedule_id AND sc.status = 'published'
                LEFT JOIN stores st ON st.id = ss.store_id
                LEFT JOIN profiles p ON p.id = ss.profile_id
                WHERE ss.store_id IN ({in_clause(store_ids)})
                  AND ss.shift_date >= %s
                  AND ss.shift_date <= %s
                ORDER BY ss.shift_date, ss.scheduled_start, ss.id
                """,
                (*store_ids, start, end),
            )
            rows = fetchall(cur)
            return [
                ScheduledShift(
                    schedule_shift_id=str(r["id"]),
                    store_id=str(r["store_id"]),
                    profile_id=str(r["profile_id"]) if r.get("profile_id") else None,
                    shift_date=r["shift_date"],
                    shift_kind=ShiftKind.parse(r.get("shift_type")),
                    scheduled_start=normalize_mysql_time(r["scheduled_start"]),
                    scheduled_end=normalize_mysql_time(r["scheduled_end"]),
                    labor_tier=LaborTier(r["labor_tier"]) if r.get("labor_tier") else None,
                    employee_name=r.get("employee_name"),
                    store_name=r.get("store_name"),
                )
                for r in rows
            ]
