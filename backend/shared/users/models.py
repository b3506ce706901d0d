"""User record and inbound candidate payload."""

import re

from pydantic import BaseModel, ConfigDict, field_validator

# Characters XML 1.0 cannot carry, even escaped.
_XML_ILLEGAL_CHARS = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")


class User(BaseModel, frozen=True):
    """User record owned by the user repository.

    Instances are snapshots: the repository replaces a stored record instead
    of mutating it, so a reference held by a caller never changes under it.
    """

    id: int
    username: str
    password: str | None = None


class UserPayload(BaseModel):
    """Candidate record supplied by a client for create/update operations."""

    model_config = ConfigDict(extra="ignore")

    id: int | None = None
    username: str | None = None
    password: str | None = None

    @field_validator("username", "password")
    @classmethod
    def reject_control_characters(cls, v: str | None) -> str | None:
        if v is not None and _XML_ILLEGAL_CHARS.search(v):
            raise ValueError("must not contain control characters")
        return v


class LoginRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    username: str
    password: str
