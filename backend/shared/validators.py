"""Parsing helpers for list-valued settings."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from pydantic_settings import EnvSettingsSource

if TYPE_CHECKING:
    from pydantic.fields import FieldInfo


def parse_string_list(value: str | list[str], *, allow_empty: bool = False) -> list[str]:
    """Parse a list of strings from a settings value.

    Accepts a list (returned unchanged), a JSON array string such as
    '["a","b"]', or a comma-separated string such as 'a,b'. Blank strings
    and malformed JSON raise ValueError, and so does an empty result unless
    allow_empty is set.
    """
    if isinstance(value, list):
        items = value
    else:
        stripped = value.strip()
        if not stripped:
            raise ValueError("String list value must not be empty")
        items = _parse_json_list(stripped) if stripped.startswith("[") else _parse_csv(stripped)

    if not items and not allow_empty:
        raise ValueError("String list value must not be empty")
    return items


def _parse_json_list(raw: str) -> list[str]:
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON array: {e}") from e
    if not isinstance(parsed, list) or not all(isinstance(item, str) for item in parsed):
        raise ValueError("JSON value must be an array of strings")
    return parsed


def _parse_csv(raw: str) -> list[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


class StringListEnvSettingsSource(EnvSettingsSource):
    """Env source that hands list-of-string fields to validators as raw strings.

    pydantic-settings JSON-decodes complex fields before validators run, which
    rejects the comma-separated form. Fields listed in string_list_fields skip
    that step so parse_string_list can accept both forms.
    """

    string_list_fields: frozenset[str] = frozenset({"cors_origins"})

    def prepare_field_value(
        self,
        field_name: str,
        field: FieldInfo,
        value: Any,  # noqa: ANN401
        value_is_complex: bool,  # noqa: FBT001
    ) -> Any:  # noqa: ANN401
        if field_name in self.string_list_fields and isinstance(value, str):
            return value
        return super().prepare_field_value(field_name, field, value, value_is_complex)
