"""Accept-header content negotiation.

The client's Accept header is parsed into weighted media ranges. Each
representation an operation can produce is scored by the most specific range
that matches it (type/subtype beats type/* beats */*). The highest weight
wins; ties go to the more specific match and then to the order in which the
server declared its representations.

When the tied winners were all matched only through a type/* range (e.g.
"text/*" against text/plain and text/html) the choice between them is
unspecified and made at random.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from enum import IntEnum, StrEnum
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = structlog.get_logger()


class MediaType(StrEnum):
    JSON = "application/json"
    XML = "application/xml"
    TEXT = "text/plain"
    HTML = "text/html"


class Specificity(IntEnum):
    ANY = 0  # */*
    TYPE = 1  # text/*
    EXACT = 2  # text/plain


class NotAcceptableError(Exception):
    """None of the offered representations is acceptable to the client."""

    def __init__(self, offered: Sequence[str]) -> None:
        self.offered = tuple(offered)
        super().__init__(f"Not Acceptable. Supported media types: {', '.join(self.offered)}")


@dataclass(frozen=True)
class MediaRange:
    type: str
    subtype: str
    weight: float = 1.0

    @property
    def specificity(self) -> Specificity:
        if self.type == "*":
            return Specificity.ANY
        if self.subtype == "*":
            return Specificity.TYPE
        return Specificity.EXACT

    def matches(self, media_type: str) -> bool:
        type_, _, subtype = media_type.lower().partition("/")
        if self.type == "*":
            return True
        return self.type == type_ and self.subtype in ("*", subtype)


def parse_accept(header: str | None) -> list[MediaRange]:
    """Parse an Accept header into media ranges, skipping malformed entries."""
    if not header:
        return []
    ranges = []
    for entry in header.split(","):
        media_range = _parse_media_range(entry)
        if media_range is None:
            if entry.strip():
                logger.debug("ignoring malformed accept entry", entry=entry.strip())
            continue
        ranges.append(media_range)
    return ranges


def _parse_media_range(entry: str) -> MediaRange | None:
    media, *params = (part.strip() for part in entry.split(";"))
    media = media.lower()
    if media == "*":
        media = "*/*"
    type_, sep, subtype = media.partition("/")
    if not sep or not type_ or not subtype or (type_ == "*" and subtype != "*"):
        return None

    weight = 1.0
    for param in params:
        name, _, value = param.partition("=")
        if name.strip().lower() != "q":
            continue
        try:
            weight = float(value.strip())
        except ValueError:
            return None
        if not 0.0 <= weight <= 1.0:
            return None
    return MediaRange(type=type_, subtype=subtype, weight=weight)


def _score(ranges: Sequence[MediaRange], media_type: str) -> tuple[float, Specificity] | None:
    """Weight and specificity of the most specific range matching media_type."""
    matching = [r for r in ranges if r.matches(media_type)]
    if not matching:
        return None
    best = max(matching, key=lambda r: (r.specificity, r.weight))
    return best.weight, best.specificity


def negotiate(
    accept: str | None,
    offered: Sequence[str],
    *,
    rng: random.Random | None = None,
) -> str:
    """Select one of `offered` (in server preference order) for an Accept header.

    A missing or blank header selects the first offered representation.
    Raises NotAcceptableError when nothing offered is acceptable.
    """
    if not offered:
        raise NotAcceptableError(offered)
    if accept is None or not accept.strip():
        return _selected(offered[0], accept)

    ranges = parse_accept(accept)
    scored = []
    for media_type in offered:
        score = _score(ranges, media_type)
        if score is not None and score[0] > 0:
            scored.append((media_type, *score))
    if not scored:
        raise NotAcceptableError(offered)

    best_weight = max(weight for _, weight, _ in scored)
    tied = [(media_type, specificity) for media_type, weight, specificity in scored if weight == best_weight]
    best_specificity = max(specificity for _, specificity in tied)
    candidates = [media_type for media_type, specificity in tied if specificity == best_specificity]

    if len(candidates) > 1 and best_specificity == Specificity.TYPE:
        return _selected((rng or random).choice(candidates), accept)
    return _selected(candidates[0], accept)


def _selected(media_type: str, accept: str | None) -> str:
    logger.debug("representation selected", media_type=media_type, accept=accept)
    return media_type
