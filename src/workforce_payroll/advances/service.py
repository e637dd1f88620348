from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Callable, Optional

from ..auth.context import ManagerContext
from ..common.datetime_utils import local_day_start_utc, next_day, parse_timestamp, to_utc, utc_now
from ..common.validators import require_non_negative_number, require_positive_number
from ..core.constants import DEFAULT_REPORT_TIMEZONE
from ..core.enums import AdvanceStatus
from ..core.exceptions import AuthorizationError, ComputationError, NotFoundError, ValidationError
from ..stores.repository import StoreRepository
from .model import Advance
from .repository import AdvanceRepository

logger = logging.getLogger(__name__)


def _parse_status(value) -> AdvanceStatus:
    if isinstance(value, AdvanceStatus):
        return value
    try:
        return AdvanceStatus(str(value))
    except ValueError:
        raise ValidationError("Invalid status.", code="invalid_status")


def _parse_when(value) -> datetime:
    # the driver drops tzinfo on write, so only UTC may reach the repository
    try:
        return to_utc(parse_timestamp(value))
    except ComputationError:
        raise ValidationError("advanceDate must be an ISO timestamp.", code="invalid_date")


def _dollars_to_cents(value) -> Optional[int]:
    if value is None or value == "":
        return None
    dollars = require_non_negative_number(value, "cashAmountDollars")
    return int(round(dollars * 100))


class AdvanceService:
    """Manager workflow for payroll advances (create, edit, verify, void)."""

    def __init__(
        self,
        advances: AdvanceRepository,
        stores: StoreRepository,
        *,
        tz_name: str = DEFAULT_REPORT_TIMEZONE,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._advances = advances
        self._stores = stores
        self._tz_name = tz_name
        self._clock = clock or utc_now

    def list(
        self,
        ctx: ManagerContext,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        profile_id: Optional[str] = None,
        status: Optional[str] = None,
    ) -> list[Advance]:
        ctx.require_stores()
        return list(
            self._advances.list_for_period(
                store_ids=ctx.store_ids,
                start_utc=local_day_start_utc(start, self._tz_name) if start else None,
                end_utc_exclusive=local_day_start_utc(next_day(end), self._tz_name) if end else None,
                profile_id=profile_id or None,
                status=_parse_status(status) if status else None,
            )
        )

    def create(
        self,
        ctx: ManagerContext,
        *,
        profile_id: str,
        advance_hours,
        advance_date=None,
        store_id: Optional[str] = None,
        cash_amount=None,
        note: Optional[str] = None,
        status=AdvanceStatus.VERIFIED,
    ) -> str:
        ctx.require_stores()
        profile_id = str(profile_id or "").strip()
        if not profile_id:
            raise ValidationError("profileId is required.", code="missing_field")
        hours = require_positive_number(advance_hours, "advanceHours")
        cents = _dollars_to_cents(cash_amount)
        status = _parse_status(status)
        when = _parse_when(advance_date) if advance_date else to_utc(self._clock())

        if store_id and not ctx.manages(store_id):
            raise AuthorizationError("Invalid store selection.", code="invalid_store")
        if not store_id:
            member_of = [s for s in self._stores.list_member_store_ids(profile_id) if ctx.manages(s)]
            store_id = member_of[0] if member_of else ctx.store_ids[0]

        advance_id = self._advances.create(
            profile_id=profile_id,
            store_id=str(store_id),
            advance_date=when,
            advance_hours=hours,
            cash_amount_cents=cents,
            note=(note or "").strip() or None,
            status=status,
            verified_by=ctx.acting_user_id if status == AdvanceStatus.VERIFIED else None,
        )
        logger.info("advance created id=%s profile=%s hours=%s status=%s", advance_id, profile_id, hours, status.value)
        return advance_id

    def _get_in_scope(self, ctx: ManagerContext, advance_id: str) -> Advance:
        ctx.require_stores()
        adv = self._advances.get_by_id(str(advance_id))
        if not adv:
            raise NotFoundError("Advance not found.")
        if not ctx.manages(adv.store_id):
            raise AuthorizationError("Forbidden.")
        return adv

    def update(self, ctx: ManagerContext, advance_id: str, **fields) -> None:
        """Patch an advance. Keys: advance_date, advance_hours, cash_amount, note, status."""

        self._get_in_scope(ctx, advance_id)
        changes: dict = {}
        if fields.get("advance_date"):
            changes["advance_date"] = _parse_when(fields["advance_date"])
        if fields.get("advance_hours") is not None:
            changes["advance_hours"] = require_positive_number(fields["advance_hours"], "advanceHours")
        if "cash_amount" in fields:
            changes["cash_amount_cents"] = _dollars_to_cents(fields["cash_amount"])
        if "note" in fields:
            changes["note"] = (fields["note"] or "").strip() or None
        if fields.get("status"):
            status = _parse_status(fields["status"])
            changes["status"] = status
            changes["verified_by_auth_user_id"] = ctx.acting_user_id if status == AdvanceStatus.VERIFIED else None

        if not self._advances.update(advance_id=str(advance_id), changes=changes):
            raise ValidationError("Failed to update advance.", code="update_failed")
        logger.info("advance updated id=%s fields=%s", advance_id, sorted(changes))

    def void(self, ctx: ManagerContext, advance_id: str) -> None:
        self.update(ctx, advance_id, status=AdvanceStatus.VOIDED)
