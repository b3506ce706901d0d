"""User records and the repository that owns them."""

from shared.users.errors import InvalidUserError, UserDirectoryError, UserMismatchError, UsernameTakenError
from shared.users.memory_repository import InMemoryUserRepository
from shared.users.models import LoginRequest, User, UserPayload
from shared.users.repository import UserRepository

__all__ = [
    "InMemoryUserRepository",
    "InvalidUserError",
    "LoginRequest",
    "User",
    "UserDirectoryError",
    "UserMismatchError",
    "UserPayload",
    "UserRepository",
    "UsernameTakenError",
]
