from __future__ import annotations

from typing import Sequence

from ..core.constants import (
    DEFAULT_DRIFT_WARN_HOURS,
    DEFAULT_EXPECTED_DRAWER_CENTS,
    DEFAULT_VARIANCE_WARN_HOURS,
)
from ..core.enums import LaborTier
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, in_clause, to_float
from .model import Store, StoreSettings
from .repository import StoreRepository


class MySQLStoreRepository(StoreRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_managed_store_ids(self, user_id: str) -> Sequence[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT store_id FROM store_managers WHERE user_id=%s ORDER BY store_id", (user_id,))
            return [str(r["store_id"]) for r in fetchall(cur)]

    def list_member_store_ids(self, profile_id: str) -> Sequence[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT store_id FROM store_memberships WHERE profile_id=%s ORDER BY store_id",
                (profile_id,),
            )
            return [str(r["store_id"]) for r in fetchall(cur)]

    def list_stores(self, store_ids: Sequence[str]) -> Sequence[Store]:
        if not store_ids:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT id, name, labor_tier FROM stores WHERE id IN ({in_clause(store_ids)}) ORDER BY name",
                tuple(store_ids),
            )
            return [
                Store(
                    store_id=str(r["id"]),
                    name=r["name"],
                    labor_tier=LaborTier(r["labor_tier"]) if r.get("labor_tier") else None,
                )
                for r in fetchall(cur)
            ]

    def list_settings(self, store_ids: Sequence[str]) -> Sequence[StoreSettings]:
        if not store_ids:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT store_id, expected_drawer_cents,
                       payroll_variance_warn_hours, payroll_shift_drift_warn_hours
                FROM store_settings
                WHERE store_id IN ({in_clause(store_ids)})
                """,
                tuple(store_ids),
            )
            return [
                StoreSettings(
                    store_id=str(r["store_id"]),
                    expected_drawer_cents=int(to_float(r.get("expected_drawer_cents"), DEFAULT_EXPECTED_DRAWER_CENTS)),
                    payroll_variance_warn_hours=to_float(
                        r.get("payroll_variance_warn_hours"), DEFAULT_VARIANCE_WARN_HOURS
                    ),
                    payroll_shift_drift_warn_hours=to_float(
                        r.get("payroll_shift_drift_warn_hours"), DEFAULT_DRIFT_WARN_HOURS
                    ),
                )
                for r in fetchall(cur)
            ]
