from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.exceptions import AuthorizationError


@dataclass(frozen=True)
class ManagerContext:
    """Who is asking and which stores they may see.

    Passed explicitly into every report/service call instead of being read from
    the request session.
    """

    acting_user_id: str
    store_ids: tuple[str, ...]

    def __post_init__(self):
        object.__setattr__(self, "store_ids", tuple(dict.fromkeys(str(s) for s in self.store_ids)))

    def require_stores(self) -> None:
        if not self.store_ids:
            raise AuthorizationError("No managed stores.", code="no_stores")

    def manages(self, store_id: Optional[str]) -> bool:
        return store_id is not None and str(store_id) in self.store_ids

    def scope(self, store_id: Optional[str] = None) -> tuple[str, ...]:
        """Store ids to query; a single store must be one the manager owns."""

        self.require_stores()
        if store_id:
            if not self.manages(store_id):
                raise AuthorizationError("Invalid store selection.", code="invalid_store")
            return (str(store_id),)
        return self.store_ids
