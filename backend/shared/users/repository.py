"""Abstract interface for user storage."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from shared.users.models import User, UserPayload


class UserRepository(ABC):
    """Abstract interface for the user collection.

    Every operation is total: lookups return None for a miss and mutations
    that break a business rule are silent no-ops returning None, unless an
    implementation documents an explicit-error mode.
    """

    @abstractmethod
    def exists(self, username: str | None) -> bool: ...

    @abstractmethod
    def get_by_id(self, user_id: int | None) -> User | None: ...

    @abstractmethod
    def get_by_name(self, username: str | None) -> User | None: ...

    @abstractmethod
    def create(self, candidate: UserPayload) -> User | None: ...

    @abstractmethod
    def update(self, candidate: UserPayload) -> User | None: ...

    @abstractmethod
    def create_or_update(self, candidate: UserPayload) -> User | None: ...

    @abstractmethod
    def delete_by_id(self, user_id: int | None) -> bool: ...

    @abstractmethod
    def delete_by_name(self, username: str | None) -> bool: ...

    @abstractmethod
    def list(self) -> list[User]: ...

    @abstractmethod
    def login(self, username: str | None, password: str | None) -> User | None: ...

    @abstractmethod
    def count(self) -> int: ...
