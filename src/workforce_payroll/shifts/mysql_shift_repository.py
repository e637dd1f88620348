from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from ..common.datetime_utils import parse_timestamp
from ..core.constants import REMOVED_LAST_ACTION
from ..core.enums import ShiftKind
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause, to_bool
from .model import Shift
from .repository import ShiftRepository

_SELECT = """
    SELECT s.id, s.store_id, s.profile_id, s.shift_type, s.planned_start_at,
           s.started_at, s.ended_at, s.last_action, s.manual_closed,
           s.manual_closed_reviewed_at, s.requires_override, s.override_at,
           s.override_note, s.schedule_shift_id,
           p.name AS employee_name, st.name AS store_name
    FROM shifts s
    LEFT JOIN profiles p ON p.id = s.profile_id
    LEFT JOIN stores st ON st.id = s.store_id
"""


def _optional_ts(value: Any) -> Optional[datetime]:
    return parse_timestamp(value) if value is not None else None


def _row_to_shift(r: Dict[str, Any]) -> Shift:
    return Shift(
        shift_id=str(r["id"]),
        store_id=str(r["store_id"]),
        profile_id=str(r["profile_id"]),
        shift_kind=ShiftKind.parse(r.get("shift_type")),
        planned_start_at=parse_timestamp(r["planned_start_at"]),
        started_at=_optional_ts(r.get("started_at")),
        ended_at=_optional_ts(r.get("ended_at")),
        last_action=r.get("last_action"),
        manual_closed=to_bool(r.get("manual_closed")),
        manual_closed_reviewed_at=_optional_ts(r.get("manual_closed_reviewed_at")),
        requires_override=to_bool(r.get("requires_override")),
        override_at=_optional_ts(r.get("override_at")),
        override_note=r.get("override_note"),
        schedule_shift_id=str(r["schedule_shift_id"]) if r.get("schedule_shift_id") else None,
        employee_name=r.get("employee_name"),
        store_name=r.get("store_name"),
    )


class MySQLShiftRepository(ShiftRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_period(
        self,
        *,
        store_ids: Sequence[str],
        start_utc: datetime,
        end_utc_exclusive: datetime,
        profile_id: Optional[str] = None,
    ) -> Sequence[Shift]:
        if not store_ids:
            return []
        sql = (
            _SELECT
            + f"""
            WHERE s.store_id IN ({in_clause(store_ids)})
              AND (s.last_action IS NULL OR s.last_action <> %s)
              AND s.planned_start_at >= %s
              AND s.planned_start_at < %s
            """
        )
        params: list[Any] = [*store_ids, REMOVED_LAST_ACTION, start_utc, end_utc_exclusive]
        if profile_id:
            sql += " AND s.profile_id = %s"
            params.append(profile_id)
        sql += " ORDER BY s.planned_start_at, s.id"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_row_to_shift(r) for r in fetchall(cur)]

    def get_by_id(self, shift_id: str) -> Optional[Shift]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE s.id = %s", (shift_id,))
            r = fetchone(cur)
            return _row_to_shift(r) if r else None

    def list_pending_review(self, *, store_ids: Sequence[str]) -> Sequence[Shift]:
        if not store_ids:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT
                + f"""
                WHERE s.store_id IN ({in_clause(store_ids)})
                  AND (s.last_action IS NULL OR s.last_action <> %s)
                  AND (
                    (s.manual_closed = 1 AND s.manual_closed_reviewed_at IS NULL)
                    OR (s.requires_override = 1 AND s.ended_at IS NOT NULL AND s.override_at IS NULL)
                  )
                ORDER BY s.ended_at DESC, s.id
                """,
                (*store_ids, REMOVED_LAST_ACTION),
            )
            return [_row_to_shift(r) for r in fetchall(cur)]

    def mark_override_approved(self, *, shift_id: str, approved_by: str, note: str, at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE shifts
                SET override_at=%s, override_by=%s, override_note=%s, last_action='override_approved'
                WHERE id=%s AND requires_override = 1 AND override_at IS NULL
                """,
                (at, approved_by, note, shift_id),
            )
            return cur.rowcount == 1

    def mark_manual_close_reviewed(self, *, shift_id: str, reviewed_by: str, at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE shifts
                SET manual_closed_reviewed_at=%s, manual_closed_reviewed_by=%s
                WHERE id=%s AND manual_closed = 1 AND manual_closed_reviewed_at IS NULL
                """,
                (at, reviewed_by, shift_id),
            )
            return cur.rowcount == 1
