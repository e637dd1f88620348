from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, time
from typing import Optional

from ...shifts.model import Shift


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll time rules)."""

    @abstractmethod
    def worked_minutes(self, start: datetime, end: Optional[datetime]) -> Optional[int]:
        """Elapsed minutes, or None while the shift is still open."""
        raise NotImplementedError

    @abstractmethod
    def round_hours(self, minutes: int) -> float:
        raise NotImplementedError

    @abstractmethod
    def scheduled_minutes(self, start: time, end: time) -> int:
        raise NotImplementedError

    def shift_minutes(self, shift: Shift) -> Optional[int]:
        return self.worked_minutes(shift.effective_start, shift.ended_at)

    def shift_hours(self, shift: Shift) -> Optional[float]:
        minutes = self.shift_minutes(shift)
        return None if minutes is None else self.round_hours(minutes)

    def scheduled_hours(self, start: time, end: time) -> float:
        return self.round_hours(self.scheduled_minutes(start, end))
