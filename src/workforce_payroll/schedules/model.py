from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from typing import Optional

from ..core.enums import LaborTier, ShiftKind


@dataclass(frozen=True)
class ScheduledShift:
    """A slot on a published schedule. ``profile_id`` is None for an unassigned slot."""

    schedule_shift_id: str
    store_id: str
    shift_date: date
    shift_kind: ShiftKind
    scheduled_start: time
    scheduled_end: time
    profile_id: Optional[str] = None
    labor_tier: Optional[LaborTier] = None
    employee_name: Optional[str] = None
    store_name: Optional[str] = None

    @property
    def is_assigned(self) -> bool:
        return bool(self.profile_id)
