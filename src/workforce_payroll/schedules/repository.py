from __future__ import annotations

from datetime import date
from typing import Protocol, Sequence

from .model import ScheduledShift


class ScheduleRepository(Protocol):
    def list_published(self, *, store_ids: Sequence[str], start: date, end: date) -> Sequence[ScheduledShift]:
        """Published schedule slots with ``start <= shift_date <= end``."""

        raise NotImplementedError
