from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional

from ..auth.context import ManagerContext
from ..common.datetime_utils import utc_now
from ..common.validators import require_non_empty
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from .model import Shift
from .repository import ShiftRepository

logger = logging.getLogger(__name__)


class ShiftReviewService:
    """Manager approval of manual closes and override-required shifts."""

    def __init__(self, shifts: ShiftRepository, *, clock: Optional[Callable[[], datetime]] = None):
        self._shifts = shifts
        self._clock = clock or utc_now

    def pending_reviews(self, ctx: ManagerContext) -> list[Shift]:
        ctx.require_stores()
        return list(self._shifts.list_pending_review(store_ids=ctx.store_ids))

    def _get_in_scope(self, ctx: ManagerContext, shift_id: str) -> Shift:
        if not shift_id:
            raise ValidationError("Missing shiftId.", code="missing_field")
        shift = self._shifts.get_by_id(str(shift_id))
        if not shift:
            raise NotFoundError("Shift not found.")
        if not ctx.manages(shift.store_id):
            raise AuthorizationError("Forbidden.")
        return shift

    def approve_override(self, ctx: ManagerContext, *, shift_id: str, note: str) -> None:
        note = require_non_empty(note, "Approval note")
        shift = self._get_in_scope(ctx, shift_id)
        if not shift.requires_override:
            raise ValidationError("Override not required.", code="not_required")
        if shift.override_at is not None:
            raise ValidationError("Already approved.", code="already_approved")

        ok = self._shifts.mark_override_approved(
            shift_id=shift.shift_id, approved_by=ctx.acting_user_id, note=note, at=self._clock()
        )
        if not ok:
            raise ValidationError("Already approved.", code="already_approved")
        logger.info("override approved shift=%s by=%s", shift.shift_id, ctx.acting_user_id)

    def approve_manual_close(self, ctx: ManagerContext, *, shift_id: str) -> None:
        shift = self._get_in_scope(ctx, shift_id)
        if not shift.manual_closed:
            raise ValidationError("Shift was not manually closed.", code="not_required")
        if shift.manual_closed_reviewed_at is not None:
            raise ValidationError("Already approved.", code="already_approved")

        ok = self._shifts.mark_manual_close_reviewed(
            shift_id=shift.shift_id, reviewed_by=ctx.acting_user_id, at=self._clock()
        )
        if not ok:
            raise ValidationError("Already approved.", code="already_approved")
        logger.info("manual close reviewed shift=%s by=%s", shift.shift_id, ctx.acting_user_id)
