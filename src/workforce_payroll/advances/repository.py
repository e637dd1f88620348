from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AdvanceStatus
from .model import Advance


class AdvanceRepository(Protocol):
    def list_for_period(
        self,
        *,
        store_ids: Sequence[str],
        start_utc: Optional[datetime] = None,
        end_utc_exclusive: Optional[datetime] = None,
        profile_id: Optional[str] = None,
        status: Optional[AdvanceStatus] = None,
    ) -> Sequence[Advance]:
        raise NotImplementedError

    def get_by_id(self, advance_id: str) -> Optional[Advance]:
        raise NotImplementedError

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
        """Insert an advance; returns its id."""

        raise NotImplementedError

    def update(self, *, advance_id: str, changes: dict) -> bool:
        """Apply a column -> value patch (columns already validated by the service)."""

        raise NotImplementedError
