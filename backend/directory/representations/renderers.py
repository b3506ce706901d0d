"""Encode user records as JSON or XML response bodies."""

from __future__ import annotations

from typing import TYPE_CHECKING
from xml.etree import ElementTree as ET

from pydantic import TypeAdapter

from directory.representations.negotiation import MediaType
from shared.users.models import User

if TYPE_CHECKING:
    from collections.abc import Callable

Entity = User | list[User]

_ENTITY_ADAPTER: TypeAdapter[Entity] = TypeAdapter(Entity)

# Representations offered for user records, in server preference order.
USER_MEDIA_TYPES: tuple[MediaType, ...] = (MediaType.JSON, MediaType.XML)


def _render_json(entity: Entity) -> bytes:
    return _ENTITY_ADAPTER.dump_json(entity)


def _user_element(user: User) -> ET.Element:
    element = ET.Element("user")
    for name, value in user.model_dump().items():
        child = ET.SubElement(element, name)
        if value is not None:
            child.text = str(value)
    return element


def _render_xml(entity: Entity) -> bytes:
    if isinstance(entity, User):
        root = _user_element(entity)
    else:
        root = ET.Element("users")
        root.extend(_user_element(user) for user in entity)
    return ET.tostring(root, encoding="utf-8", xml_declaration=True)


_RENDERERS: dict[str, Callable[[Entity], bytes]] = {
    MediaType.JSON: _render_json,
    MediaType.XML: _render_xml,
}


def represent(entity: Entity, media_type: str) -> bytes:
    """Encode a user or list of users in the given media type.

    Raises KeyError for a media type without a registered renderer; callers
    negotiate among USER_MEDIA_TYPES first.
    """
    return _RENDERERS[media_type](entity)


def register_renderer(media_type: str, renderer: Callable[[Entity], bytes]) -> None:
    """Add or replace the encoder used for a media type."""
    _RENDERERS[media_type] = renderer
