from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from ..common.datetime_utils import parse_timestamp, utc_now
from ..core.enums import AdvanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause, to_float
from .model import Advance
from .repository import AdvanceRepository

_SELECT = """
    SELECT a.id, a.profile_id, a.store_id, a.advance_date, a.advance_hours,
           a.cash_amount_cents, a.note, a.status, a.created_at, p.name AS employee_name
    FROM payroll_advances a
    LEFT JOIN profiles p ON p.id = a.profile_id
"""

_UPDATABLE_COLUMNS = {
    "advance_date",
    "advance_hours",
    "cash_amount_cents",
    "note",
    "status",
    "verified_by_auth_user_id",
}


def _row_to_advance(r: Dict[str, Any]) -> Advance:
    return Advance(
        advance_id=str(r["id"]),
        profile_id=str(r["profile_id"]),
        store_id=str(r["store_id"]) if r.get("store_id") else None,
        advance_date=parse_timestamp(r["advance_date"]),
        advance_hours=to_float(r.get("advance_hours")),
        cash_amount_cents=int(r["cash_amount_cents"]) if r.get("cash_amount_cents") is not None else None,
        note=r.get("note"),
        status=AdvanceStatus(r["status"]),
        created_at=parse_timestamp(r["created_at"]) if r.get("created_at") else None,
        employee_name=r.get("employee_name"),
    )


class MySQLAdvanceRepository(AdvanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_period(
        self,
        *,
        store_ids: Sequence[str],
        start_utc: Optional[datetime] = None,
        end_utc_exclusive: Optional[datetime] = None,
        profile_id: Optional[str] = None,
        status: Optional[AdvanceStatus] = None,
    ) -> Sequence[Advance]:
        if not store_ids:
            return []
        where = [f"a.store_id IN ({in_clause(store_ids)})"]
        params: list[Any] = list(store_ids)
        if start_utc is not None:
            where.append("a.advance_date >= %s")
            params.append(start_utc)
        if end_utc_exclusive is not None:
            where.append("a.advance_date < %s")
            params.append(end_utc_exclusive)
        if profile_id:
            where.append("a.profile_id = %s")
            params.append(profile_id)
        if status is not None:
            where.append("a.status = %s")
            params.append(status.value)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + " WHERE " + " AND ".join(where) + " ORDER BY a.advance_date DESC, a.id",
                tuple(params),
            )
            return [_row_to_advance(r) for r in fetchall(cur)]

    def get_by_id(self, advance_id: str) -> Optional[Advance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE a.id = %s", (advance_id,))
            r = fetchone(cur)
            return _row_to_advance(r) if r else None

    def create(
        self,
        *,
        profile_id: str,
        store_id: str,
        advance_date: datetime,
        advance_hours: float,
        cash_amount_cents: Optional[int],
        note: Optional[str],
        status: AdvanceStatus,
        verified_by: Optional[str],
    ) -> str:
        advance_id = str(uuid.uuid4())
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO payroll_advances
                    (id, profile_id, store_id, advance_date, advance_hours, cash_amount_cents,
                     note, status, verified_by_auth_user_id, created_at, updated_at)
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                """,
                (
                    advance_id,
                    profile_id,
                    store_id,
                    advance_date,
                    advance_hours,
                    cash_amount_cents,
                    note,
                    status.value,
                    verified_by,
                    utc_now(),
                    utc_now(),
                ),
            )
        return advance_id

    def update(self, *, advance_id: str, changes: dict) -> bool:
        unknown = set(changes) - _UPDATABLE_COLUMNS
        if unknown:
            raise ValueError(f"Cannot update columns: {sorted(unknown)}")
        if not changes:
            return True

        values = {k: (v.value if isinstance(v, AdvanceStatus) else v) for k, v in changes.items()}
        assignments = ", ".join(f"{col}=%s" for col in values)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE payroll_advances SET {assignments}, updated_at=%s WHERE id=%s",
                (*values.values(), utc_now(), advance_id),
            )
            return cur.rowcount == 1
