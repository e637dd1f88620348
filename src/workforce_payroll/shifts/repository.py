from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import Shift


class ShiftRepository(Protocol):
    def list_for_period(
        self,
        *,
        store_ids: Sequence[str],
        start_utc: datetime,
        end_utc_exclusive: datetime,
        profile_id: Optional[str] = None,
    ) -> Sequence[Shift]:
        """Non-removed shifts whose planned start falls in ``[start, end)``."""

        raise NotImplementedError

    def get_by_id(self, shift_id: str) -> Optional[Shift]:
        raise NotImplementedError

    def list_pending_review(self, *, store_ids: Sequence[str]) -> Sequence[Shift]:
        raise NotImplementedError

    def mark_override_approved(self, *, shift_id: str, approved_by: str, note: str, at: datetime) -> bool:
        raise NotImplementedError

    def mark_manual_close_reviewed(self, *, shift_id: str, reviewed_by: str, at: datetime) -> bool:
        raise NotImplementedError
