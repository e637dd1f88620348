"""In-memory repositories shared by the service and controller tests."""

from __future__ import annotations

from dataclasses import replace

from workforce_payroll.core.exceptions import DataSourceError


class FakeShiftRepo:
    def __init__(self, shifts=()):
        self.shifts = {s.shift_id: s for s in shifts}
        self.last_args = None
        self.approvals = []

    def list_for_period(self, *, store_ids, start_utc, end_utc_exclusive, profile_id=None):
        self.last_args = {
            "store_ids": tuple(store_ids),
            "start_utc": start_utc,
            "end_utc_exclusive": end_utc_exclusive,
            "profile_id": profile_id,
        }
        return [
            s
            for s in self.shifts.values()
            if s.store_id in store_ids
            and start_utc <= s.planned_start_at < end_utc_exclusive
            and (profile_id is None or s.profile_id == profile_id)
        ]

    def get_by_id(self, shift_id):
        return self.shifts.get(shift_id)

    def list_pending_review(self, *, store_ids):
        return [s for s in self.shifts.values() if s.store_id in store_ids and s.needs_review]

    def mark_override_approved(self, *, shift_id, approved_by, note, at):
        shift = self.shifts[shift_id]
        if shift.override_at is not None:
            return False
        self.shifts[shift_id] = replace(shift, override_at=at, override_note=note)
        self.approvals.append(("override", shift_id, approved_by))
        return True

    def mark_manual_close_reviewed(self, *, shift_id, reviewed_by, at):
        shift = self.shifts[shift_id]
        if shift.manual_closed_reviewed_at is not None:
            return False
        self.shifts[shift_id] = replace(shift, manual_closed_reviewed_at=at)
        self.approvals.append(("manual_close", shift_id, reviewed_by))
        return True


class FakeScheduleRepo:
    def __init__(self, slots=(), *, fail=False):
        self.slots = list(slots)
        self.fail = fail
        self.calls = []

    def list_published(self, *, store_ids, start, end):
        self.calls.append((tuple(store_ids), start, end))
        if self.fail:
            raise DataSourceError("schedule table unavailable")
        return [s for s in self.slots if s.store_id in store_ids and start <= s.shift_date <= end]


class FakeAdvanceRepo:
    def __init__(self, advances=()):
        self.advances = {a.advance_id: a for a in advances}
        self.last_args = None
        self.created = []
        self.updates = []

    def list_for_period(self, *, store_ids, start_utc=None, end_utc_exclusive=None, profile_id=None, status=None):
        self.last_args = {
            "store_ids": tuple(store_ids),
            "start_utc": start_utc,
            "end_utc_exclusive": end_utc_exclusive,
            "profile_id": profile_id,
            "status": status,
        }
        return [
            a
            for a in self.advances.values()
            if a.store_id in store_ids
            and (status is None or a.status == status)
            and (profile_id is None or a.profile_id == profile_id)
        ]

    def get_by_id(self, advance_id):
        return self.advances.get(advance_id)

    def create(self, **fields):
        self.created.append(fields)
        return f"adv-{len(self.created)}"

    def update(self, *, advance_id, changes):
        if advance_id not in self.advances:
            return False
        self.updates.append((advance_id, changes))
        return True


class FakeStoreRepo:
    def __init__(self, *, managed=None, members=None, stores=(), settings=(), fail_settings=False):
        self.stores = list(stores)
        self.managed = managed or {}
        self.members = members or {}
        self.settings = list(settings)
        self.fail_settings = fail_settings

    def list_managed_store_ids(self, user_id):
        return self.managed.get(user_id, [])

    def list_member_store_ids(self, profile_id):
        return self.members.get(profile_id, [])

    def list_stores(self, store_ids):
        return [s for s in self.stores if s.store_id in store_ids]

    def list_settings(self, store_ids):
        if self.fail_settings:
            raise DataSourceError("store_settings unavailable")
        return [s for s in self.settings if s.store_id in store_ids]
