from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.constants import (
    DEFAULT_DRIFT_WARN_HOURS,
    DEFAULT_EXPECTED_DRAWER_CENTS,
    DEFAULT_VARIANCE_WARN_HOURS,
)
from ..core.enums import LaborTier


@dataclass(frozen=True)
class Store:
    store_id: str
    name: str
    labor_tier: Optional[LaborTier] = None


@dataclass(frozen=True)
class StoreSettings:
    """Per-store configuration (one row of store_settings)."""

    store_id: str
    expected_drawer_cents: int = DEFAULT_EXPECTED_DRAWER_CENTS
    payroll_variance_warn_hours: float = DEFAULT_VARIANCE_WARN_HOURS
    payroll_shift_drift_warn_hours: float = DEFAULT_DRIFT_WARN_HOURS
