"""
User Scope Resolution

One device, one user. The tracker holds at most one local user at a time;
that user's id suffixes the keys of their transactions, budgets and goals
so data from an earlier user never shows up under a new one.

The resolver hands out immutable Session snapshots (cashflow.models.session)
that the repositories are built against.

CRITICAL: Creating a user while another exists first PURGES the previous
user's three scoped keys, then stores the new user. Purge-before-create is
what guarantees old data never leaks into a new identity. It cannot be
undone.
"""

import secrets
import string
import time
from datetime import datetime, timezone
from typing import Optional

import structlog
from pydantic import ValidationError

from cashflow.audit import AuditLogger
from cashflow.models.audit import AuditEventType
from cashflow.models.finance import User
from cashflow.models.session import Session
from cashflow.services.storage.adapter import KeyValueStore
from cashflow.services.storage.keys import CURRENT_USER_KEY, USER_SCOPED_KEYS


_ID_ALPHABET = string.digits + string.ascii_lowercase


def generate_user_id() -> str:
    """user_<epoch ms>_<9 random base36 chars>"""
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))
    return f"user_{int(time.time() * 1000)}_{suffix}"


class UserScopeResolver:
    """
    Owns the single-occupancy `currentUser` slot.

    Reads the slot once at construction and keeps it in step with every
    create/delete/logout.
    """

    def __init__(
        self,
        store: KeyValueStore,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._audit_logger = audit_logger
        self._logger = structlog.get_logger("cashflow.session")
        self._user = self._load_user()

    def _load_user(self) -> Optional[User]:
        raw = self._store.get(CURRENT_USER_KEY, None).value
        if raw is None:
            return None
        try:
            return User.model_validate(raw)
        except ValidationError as e:
            self._logger.warning("current_user_unreadable", error=str(e))
            return None

    @property
    def current_user(self) -> Optional[User]:
        return self._user

    def session(self) -> Session:
        """Snapshot of the current scope."""
        return Session(user=self._user)

    def get_scoped_key(self, base_key: str) -> str:
        return self.session().scoped_key(base_key)

    def _purge_user_data(self, user: User) -> list[str]:
        """Remove the three scoped keys belonging to `user`."""
        scope = Session(user=user)
        purged = []
        for base_key in USER_SCOPED_KEYS:
            key = scope.scoped_key(base_key)
            self._store.remove(key)
            purged.append(key)

        if self._audit_logger:
            self._audit_logger.log_user(
                AuditEventType.USER_DATA_PURGED,
                user.id,
                details={"keys": purged},
            )
        return purged

    def create_user(self, name: str) -> User:
        """
        Replace whoever occupies the slot with a new user.

        The new user is validated first, so a rejected name leaves the
        current user and their data untouched. The previous user's data
        is then purged before the new user is stored.

        Raises:
            ValueError: If `name` is empty
        """
        user = User(
            id=generate_user_id(),
            name=name,
            created_at=datetime.now(timezone.utc),
        )

        if self._user is not None:
            self._purge_user_data(self._user)

        self._store.set(CURRENT_USER_KEY, user.to_storage())
        self._user = user

        if self._audit_logger:
            self._audit_logger.log_user(
                AuditEventType.USER_CREATED,
                user.id,
                details={"name": user.name},
            )
        return user

    def delete_user(self, user_id: str) -> bool:
        """
        Delete the current user and their data.

        Does nothing (returns False) unless `user_id` is the current user.
        """
        if self._user is None or self._user.id != user_id:
            return False

        self._purge_user_data(self._user)
        self._store.remove(CURRENT_USER_KEY)
        self._user = None

        if self._audit_logger:
            self._audit_logger.log_user(AuditEventType.USER_DELETED, user_id)
        return True

    def logout(self) -> Optional[User]:
        """
        Empty the slot but keep the user's data.

        The data stays under the old id; ids are never reissued, so in
        practice it is hidden for good.
        """
        previous = self._user
        if previous is None:
            return None

        self._store.remove(CURRENT_USER_KEY)
        self._user = None

        if self._audit_logger:
            self._audit_logger.log_user(AuditEventType.USER_LOGGED_OUT, previous.id)
        return previous

    def switch_user(self, user_id: str) -> Optional[User]:
        """Not supported in one-device, one-user mode. Changes nothing."""
        self._logger.warning(
            "switch_user_unsupported",
            requested_user_id=user_id,
            current_user_id=self._user.id if self._user else None,
        )
        return self._user
