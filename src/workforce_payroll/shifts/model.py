from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.constants import REMOVED_LAST_ACTION
from ..core.enums import ShiftKind


@dataclass(frozen=True)
class Shift:
    """Thực thể miền (domain): Ca đã chấm công của một nhân viên tại một cửa hàng."""

    shift_id: str
    store_id: str
    profile_id: str
    shift_kind: ShiftKind
    planned_start_at: datetime
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None
    last_action: Optional[str] = None
    manual_closed: bool = False
    manual_closed_reviewed_at: Optional[datetime] = None
    requires_override: bool = False
    override_at: Optional[datetime] = None
    override_note: Optional[str] = None
    schedule_shift_id: Optional[str] = None
    employee_name: Optional[str] = None
    store_name: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.ended_at is None

    @property
    def is_removed(self) -> bool:
        return (self.last_action or "").strip().lower() == REMOVED_LAST_ACTION

    @property
    def effective_start(self) -> datetime:
        return self.started_at or self.planned_start_at

    @property
    def manual_close_pending(self) -> bool:
        return self.manual_closed and self.manual_closed_reviewed_at is None

    @property
    def override_pending(self) -> bool:
        return self.requires_override and self.ended_at is not None and self.override_at is None

    @property
    def needs_review(self) -> bool:
        return self.manual_close_pending or self.override_pending

    @property
    def has_note(self) -> bool:
        return bool((self.override_note or "").strip())
