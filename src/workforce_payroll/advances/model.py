from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import AdvanceStatus


@dataclass(frozen=True)
class Advance:
    """Thực thể miền (domain): Tạm ứng giờ/tiền trừ vào kỳ lương sau."""

    advance_id: str
    profile_id: str
    advance_date: datetime
    advance_hours: float
    status: AdvanceStatus
    store_id: Optional[str] = None
    cash_amount_cents: Optional[int] = None
    note: Optional[str] = None
    created_at: Optional[datetime] = None
    employee_name: Optional[str] = None

    @property
    def is_verified(self) -> bool:
        return self.status == AdvanceStatus.VERIFIED

    def to_dict(self) -> dict:
        return {
            "id": self.advance_id,
            "profile_id": self.profile_id,
            "store_id": self.store_id,
            "advance_date": self.advance_date.isoformat(),
            "advance_hours": self.advance_hours,
            "cash_amount_cents": self.cash_amount_cents,
            "note": self.note,
            "status": self.status.value,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "employee_name": self.employee_name,
        }
