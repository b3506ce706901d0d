"""Business-rule errors raised by a repository running in strict mode."""


class UserDirectoryError(Exception):
    """Base class for rejected user directory operations."""


class InvalidUserError(UserDirectoryError):
    """Candidate record is missing a required field."""


class UsernameTakenError(UserDirectoryError):
    """Another record already owns the requested username."""


class UserMismatchError(UserDirectoryError):
    """Supplied id and username do not resolve to the same existing record."""
