from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from ..db.store import StoreError

"""Session context passed explicitly to the admin operations.

Lifecycle: SessionContext.start() at session start (reads the caller's
profile), clear() at sign-out. An unauthenticated context is simply one with
no user id.
"""

logger = logging.getLogger(__name__)

ADMIN_ROLE = "admin"


class PermissionDeniedError(Exception):
    pass


@dataclass(frozen=True)
class Profile:
    id: str
    role: str | None = None
    full_name: str | None = None

    @staticmethod
    def from_row(row: dict[str, Any]) -> Profile:
        return Profile(id=str(row.get("id")), role=row.get("role"), full_name=row.get("full_name"))


class SessionContext:
    def __init__(self, user_id: str | None = None, profile: Profile | None = None) -> None:
        self.user_id = user_id
        self.profile = profile

    @classmethod
    def start(cls, store: Any, user_id: str | None) -> SessionContext:
        if not user_id:
            return cls()
        try:
            row = store.fetch_profile(user_id)
        except StoreError as e:
            logger.error(f"Error fetching profile: {e}")
            return cls(user_id=user_id)
        if row is None:
            logger.warning(f"No profile found for user: {user_id}")
            return cls(user_id=user_id)
        return cls(user_id=user_id, profile=Profile.from_row(row))

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    @property
    def is_admin(self) -> bool:
        return self.profile is not None and self.profile.role == ADMIN_ROLE

    def require_admin(self) -> None:
        if not self.is_admin:
            raise PermissionDeniedError("administrator role required")

    def clear(self) -> None:
        self.user_id = None
        self.profile = None
