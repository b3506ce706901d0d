"""Tests for user record and payload models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from shared.users.models import LoginRequest, User, UserPayload


class TestUser:
    def test_is_frozen(self):
        user = User(id=1, username="admin", password="123456")
        with pytest.raises(ValidationError):
            user.password = "changed"

    def test_equality_by_fields(self):
        assert User(id=1, username="a", password="p") == User(id=1, username="a", password="p")
        assert User(id=1, username="a", password="p") != User(id=1, username="a", password="q")


class TestUserPayload:
    def test_all_fields_optional(self):
        payload = UserPayload()
        assert payload.id is None
        assert payload.username is None
        assert payload.password is None

    def test_unknown_fields_ignored(self):
        payload = UserPayload.model_validate({"username": "bob", "role": "admin"})
        assert payload.username == "bob"
        assert not hasattr(payload, "role")

    def test_numeric_string_id_coerced(self):
        assert UserPayload.model_validate({"id": "2"}).id == 2

    def test_non_numeric_id_rejected(self):
        with pytest.raises(ValidationError, match="id"):
            UserPayload.model_validate({"id": "two"})

    @pytest.mark.parametrize("field", ["username", "password"])
    @pytest.mark.parametrize("text", ["a\x01b", "nul\x00", "\x0bvtab", "bad\ufffe"])
    def test_control_characters_rejected(self, field, text):
        with pytest.raises(ValidationError, match="control characters"):
            UserPayload.model_validate({field: text})

    def test_tab_newline_and_unicode_allowed(self):
        payload = UserPayload(username="Zo\u00eb", password="line1\nline2\tend")
        assert payload.password == "line1\nline2\tend"


class TestLoginRequest:
    def test_requires_both_fields(self):
        with pytest.raises(ValidationError, match="password"):
            LoginRequest.model_validate({"username": "admin"})
