"""
User list persistence.

The unit of durability is the whole list stored under the "users" key:
every mutation is read-all -> mutate-one -> write-all, and the last writer
wins.
"""

from __future__ import annotations

import json
import logging
from typing import List, Optional

from vault.domain.accounts import User
from vault.repositories.kv_store import KeyValueStore, get_store

USERS_KEY = "users"

logger = logging.getLogger(__name__)


class UserNotFoundError(LookupError):
    """Raised when replacing a user that is not in the list."""


class UserRepository:
    """Load/find/replace/persist over the stored user list."""

    def __init__(self, store: KeyValueStore | None = None) -> None:
        self._store = store

    @property
    def store(self) -> KeyValueStore:
        return self._store or get_store()

    def list_users(self) -> List[User]:
        raw = self.store.get(USERS_KEY)
        if not raw:
            return []
        try:
            data = json.loads(raw)
        except ValueError:
            logger.warning("Stored user list is not valid JSON; treating it as empty")
            return []
        if not isinstance(data, list):
            logger.warning("Stored user list is not an array; treating it as empty")
            return []
        return [User.from_dict(entry) for entry in data if isinstance(entry, dict)]

    @staticmethod
    def find_by_email(users: List[User], email: str | None) -> Optional[User]:
        for user in users:
            if user.email == email:
                return user
        return None

    @staticmethod
    def replace(users: List[User], email: str, updated: User) -> List[User]:
        for idx, user in enumerate(users):
            if user.email == email:
                users[idx] = updated
                return users
        raise UserNotFoundError(email)

    def persist(self, users: List[User]) -> None:
        payload = json.dumps([user.to_dict() for user in users], ensure_ascii=False)
        self.store.set(USERS_KEY, payload)

    def get_user(self, email: str | None) -> Optional[User]:
        if not email:
            return None
        return self.find_by_email(self.list_users(), email)
