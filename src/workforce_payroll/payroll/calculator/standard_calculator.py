from __future__ import annotations

import math
from datetime import datetime, time, timezone
from typing import Optional

from ...core.exceptions import ComputationError
from .base import PayrollCalculator

MINUTES_PER_DAY = 24 * 60


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule set.

    - minutes = round((end - start) / 60s), never below 0 (clock skew)
    - hours: remainder < 20 rounds down, > 40 rounds up, otherwise half an hour
    - scheduled slots ending before they start run past midnight
    """

    def worked_minutes(self, start: datetime, end: Optional[datetime]) -> Optional[int]:
        if end is None:
            return None
        if not isinstance(start, datetime) or not isinstance(end, datetime):
            raise ComputationError(f"Invalid shift timestamps: start={start!r} end={end!r}")
        seconds = (_as_utc(end) - _as_utc(start)).total_seconds()
        # half-up, not banker's rounding: 30s counts as a minute
        return max(0, math.floor(seconds / 60 + 0.5))

    def round_hours(self, minutes: int) -> float:
        if minutes < 0:
            raise ComputationError(f"Negative minutes: {minutes}")
        hours, remainder = divmod(int(minutes), 60)
        if remainder < 20:
            return float(hours)
        if remainder > 40:
            return float(hours + 1)
        return hours + 0.5

    def scheduled_minutes(self, start: time, end: time) -> int:
        if not isinstance(start, time) or not isinstance(end, time):
            raise ComputationError(f"Invalid scheduled times: start={start!r} end={end!r}")
        start_min = start.hour * 60 + start.minute
        end_min = end.hour * 60 + end.minute
        if end_min >= start_min:
            return end_min - start_min
        return (MINUTES_PER_DAY - start_min) + end_min
