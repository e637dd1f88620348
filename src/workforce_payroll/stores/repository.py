from __future__ import annotations

from typing import Protocol, Sequence

from .model import Store, StoreSettings


class StoreRepository(Protocol):
    def list_managed_store_ids(self, user_id: str) -> Sequence[str]:
        raise NotImplementedError

    def list_member_store_ids(self, profile_id: str) -> Sequence[str]:
        """Stores an employee belongs to (store_memberships)."""

        raise NotImplementedError

    def list_stores(self, store_ids: Sequence[str]) -> Sequence[Store]:
        raise NotImplementedError

    def list_settings(self, store_ids: Sequence[str]) -> Sequence[StoreSettings]:
        """Settings rows; stores without a row are simply absent."""

        raise NotImplementedError
