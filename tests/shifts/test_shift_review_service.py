from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from fakes import FakeShiftRepo
from workforce_payroll.auth.context import ManagerContext
from workforce_payroll.core.enums import ShiftKind
from workforce_payroll.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from workforce_payroll.shifts.model import Shift
from workforce_payroll.shifts.service import ShiftReviewService

CTX = ManagerContext(acting_user_id="m1", store_ids=("s1",))
NOW = datetime(2026, 3, 5, 12, 0, tzinfo=timezone.utc)
START = datetime(2026, 3, 4, 14, 0, tzinfo=timezone.utc)


def make_shift(shift_id, *, store_id="s1", **kw):
    return Shift(
        shift_id=shift_id,
        store_id=store_id,
        profile_id="e1",
        shift_kind=ShiftKind.CLOSE,
        planned_start_at=START,
        started_at=START,
        ended_at=START + timedelta(hours=8),
        **kw,
    )


def make_service(*shifts):
    repo = FakeShiftRepo(shifts)
    return ShiftReviewService(repo, clock=lambda: NOW), repo


def test_pending_reviews_lists_manual_and_override_shifts():
    svc, _ = make_service(
        make_shift("manual", manual_closed=True),
        make_shift("override", requires_override=True),
        make_shift("done", requires_override=True, override_at=NOW),
        make_shift("other-store", store_id="s2", manual_closed=True),
    )

    assert sorted(s.shift_id for s in svc.pending_reviews(CTX)) == ["manual", "override"]


def test_approve_override_requires_note():
    svc, _ = make_service(make_shift("o", requires_override=True))

    with pytest.raises(ValidationError) as exc:
        svc.approve_override(CTX, shift_id="o", note="   ")
    assert exc.value.code == "missing_field"


def test_approve_override_records_note_and_approver():
    svc, repo = make_service(make_shift("o", requires_override=True))

    svc.approve_override(CTX, shift_id="o", note=" stayed late ")

    assert repo.shifts["o"].override_note == "stayed late"
    assert repo.shifts["o"].override_at == NOW
    assert repo.approvals == [("override", "o", "m1")]


@pytest.mark.parametrize(
    "shift, code",
    [
        (make_shift("o"), "not_required"),
        (make_shift("o", requires_override=True, override_at=NOW), "already_approved"),
    ],
)
def test_approve_override_rejects_invalid_state(shift, code):
    svc, _ = make_service(shift)

    with pytest.raises(ValidationError) as exc:
        svc.approve_override(CTX, shift_id="o", note="ok")
    assert exc.value.code == code


def test_approve_manual_close_marks_reviewed():
    svc, repo = make_service(make_shift("m", manual_closed=True))

    svc.approve_manual_close(CTX, shift_id="m")

    assert repo.shifts["m"].manual_closed_reviewed_at == NOW
    with pytest.raises(ValidationError) as exc:
        svc.approve_manual_close(CTX, shift_id="m")
    assert exc.value.code == "already_approved"


def test_review_outside_scope_or_missing():
    svc, _ = make_service(make_shift("x", store_id="s2", manual_closed=True))

    with pytest.raises(AuthorizationError):
        svc.approve_manual_close(CTX, shift_id="x")
    with pytest.raises(NotFoundError):
        svc.approve_manual_close(CTX, shift_id="missing")
