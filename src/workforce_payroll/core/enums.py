from __future__ import annotations

from enum import Enum

from .exceptions import ComputationError


class ShiftKind(str, Enum):
    """Loại ca làm việc (khớp với cột shift_type)."""

    OPEN = "open"
    CLOSE = "close"
    DOUBLE = "double"
    OTHER = "other"

    @classmethod
    def parse(cls, value: str | None) -> "ShiftKind":
        """Blank means OTHER; an unknown non-blank value is a data defect."""

        raw = (value or "").strip().lower()
        if not raw:
            return cls.OTHER
        try:
            return cls(raw)
        except ValueError:
            raise ComputationError(f"Unknown shift_type: {value!r}")

    def covers(self, scheduled: "ShiftKind") -> bool:
        """Whether a logged shift of this kind covers a scheduled slot."""

        if self == scheduled:
            return True
        if self == ShiftKind.DOUBLE:
            return scheduled in {ShiftKind.OPEN, ShiftKind.CLOSE}
        if scheduled == ShiftKind.DOUBLE:
            return self in {ShiftKind.OPEN, ShiftKind.CLOSE}
        return False


class AdvanceStatus(str, Enum):
    """Trạng thái tạm ứng. Chỉ VERIFIED được trừ vào bảng lương."""

    PENDING_VERIFICATION = "pending_verification"
    VERIFIED = "verified"
    VOIDED = "voided"


class LaborTier(str, Enum):
    """Two-tier labor category attached to a store."""

    TIER_A = "lv1"
    TIER_B = "lv2"


class IssueKind(str, Enum):
    OPEN = "open"
    OVERRIDE = "override"
    DRIFT = "drift"

    @property
    def severity(self) -> int:
        return _ISSUE_SEVERITY[self]


_ISSUE_SEVERITY = {IssueKind.OPEN: 0, IssueKind.OVERRIDE: 1, IssueKind.DRIFT: 2}
