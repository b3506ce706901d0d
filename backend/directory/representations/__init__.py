"""Content negotiation and response body encoders."""

from directory.representations.negotiation import MediaType, NotAcceptableError, negotiate, parse_accept
from directory.representations.renderers import USER_MEDIA_TYPES, register_renderer, represent

__all__ = [
    "USER_MEDIA_TYPES",
    "MediaType",
    "NotAcceptableError",
    "negotiate",
    "parse_accept",
    "register_renderer",
    "represent",
]
