"""Process-resident user repository guarded by a single lock."""

from __future__ import annotations

import itertools
import threading
from typing import TYPE_CHECKING

import structlog

from shared.users.errors import InvalidUserError, UserMismatchError, UsernameTakenError
from shared.users.models import User
from shared.users.repository import UserRepository

if TYPE_CHECKING:
    from shared.users.models import UserPayload

logger = structlog.get_logger()


class InMemoryUserRepository(UserRepository):
    """In-memory user repository.

    Records are kept in a dict keyed by id (insertion ordered) with a second
    index from username to id. One re-entrant lock guards both indexes and the
    id counter for the whole of each logical operation, so check-then-insert
    in create() cannot race with another create() of the same username.

    Ids are drawn from the counter only when a record is actually inserted,
    so successful creates get strictly increasing ids and an id is never
    handed out twice, even after the record holding it is deleted.

    With strict=True, rejected create/update calls raise a UserDirectoryError
    subclass instead of returning None. Lookups, deletes and login never raise.
    """

    def __init__(self, *, strict: bool = False) -> None:
        self._users: dict[int, User] = {}
        self._ids_by_username: dict[str, int] = {}
        self._next_id = itertools.count(1)
        self._lock = threading.RLock()
        self._strict = strict

    def exists(self, username: str | None) -> bool:
        if username is None:
            return False
        with self._lock:
            return username in self._ids_by_username

    def get_by_id(self, user_id: int | None) -> User | None:
        if user_id is None:
            return None
        with self._lock:
            return self._users.get(user_id)

    def get_by_name(self, username: str | None) -> User | None:
        if username is None:
            return None
        with self._lock:
            user_id = self._ids_by_username.get(username)
            return None if user_id is None else self._users[user_id]

    def create(self, candidate: UserPayload) -> User | None:
        """Insert the candidate under a fresh id unless its username is null or taken."""
        with self._lock:
            if candidate.username is None:
                return self._reject(InvalidUserError("Username is required"), "create", reason="missing username")
            if self.exists(candidate.username):
                return self._reject(
                    UsernameTakenError(f"Username '{candidate.username}' already taken"),
                    "create",
                    reason="username taken",
                    username=candidate.username,
                )
            return self._insert(candidate.username, candidate.password)

    def update(self, candidate: UserPayload) -> User | None:
        """Overwrite the password when id and username resolve to the same record."""
        with self._lock:
            existing = self._resolve_same_record(candidate)
            if existing is None:
                return self._reject(
                    UserMismatchError(_mismatch_message(candidate)),
                    "update",
                    reason="id and username do not match",
                    user_id=candidate.id,
                    username=candidate.username,
                )
            return self._replace_password(existing, candidate.password)

    def create_or_update(self, candidate: UserPayload) -> User | None:
        """Create when neither key is known, update when both keys agree."""
        with self._lock:
            by_id = self.get_by_id(candidate.id)
            by_name = self.get_by_name(candidate.username)
            if by_id is None and by_name is None:
                if candidate.username is None:
                    return self._reject(
                        InvalidUserError("Username is required"),
                        "create_or_update",
                        reason="missing username",
                    )
                return self._insert(candidate.username, candidate.password)
            if by_id is not None and by_id == by_name:
                return self._replace_password(by_id, candidate.password)
            return self._reject(
                UserMismatchError(_mismatch_message(candidate)),
                "create_or_update",
                reason="id and username do not match",
                user_id=candidate.id,
                username=candidate.username,
            )

    def delete_by_id(self, user_id: int | None) -> bool:
        with self._lock:
            user = self.get_by_id(user_id)
            if user is None:
                return False
            self._remove(user)
            return True

    def delete_by_name(self, username: str | None) -> bool:
        with self._lock:
            user = self.get_by_name(username)
            if user is None:
                return False
            self._remove(user)
            return True

    def list(self) -> list[User]:
        """Return a snapshot of all records in insertion order."""
        with self._lock:
            return list(self._users.values())

    def login(self, username: str | None, password: str | None) -> User | None:
        """Return the record whose username and password both match exactly."""
        user = self.get_by_name(username)
        if user is None or user.password != password:
            return None
        return user

    def count(self) -> int:
        with self._lock:
            return len(self._users)

    # -- private helpers --

    def _resolve_same_record(self, candidate: UserPayload) -> User | None:
        by_id = self.get_by_id(candidate.id)
        if by_id is None or by_id != self.get_by_name(candidate.username):
            return None
        return by_id

    def _insert(self, username: str, password: str | None) -> User:
        user = User(id=next(self._next_id), username=username, password=password)
        self._users[user.id] = user
        self._ids_by_username[user.username] = user.id
        logger.info("user created", user_id=user.id, username=user.username)
        return user

    def _replace_password(self, existing: User, password: str | None) -> User:
        updated = existing.model_copy(update={"password": password})
        self._users[updated.id] = updated
        logger.info("user password updated", user_id=updated.id, username=updated.username)
        return updated

    def _remove(self, user: User) -> None:
        del self._users[user.id]
        del self._ids_by_username[user.username]
        logger.info("user deleted", user_id=user.id, username=user.username)

    def _reject(self, error: Exception, operation: str, **context: object) -> None:
        logger.debug("user operation skipped", operation=operation, **context)
        if self._strict:
            raise error


def _mismatch_message(candidate: UserPayload) -> str:
    return f"User id {candidate.id!r} and username {candidate.username!r} do not match an existing user"
