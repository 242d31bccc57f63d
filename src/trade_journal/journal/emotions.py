"""Emotion tag parsing.

The emotions column has arrived in several shapes over the life of the
journal schema: a native array, a JSON list string (``'["FOMO"]'``), a
Postgres ``text[]`` literal (``'{FOMO,Revenge}'``), a comma-delimited
string, or a single bare word.  Parsing is split into two steps:

1. :func:`classify` decides which shape a raw value has.
2. :func:`parse_emotions` splits it accordingly and normalizes each tag.

Nothing here raises on malformed input; a value that cannot be split
degrades to a single token or an empty tag list.
"""

from __future__ import annotations

import enum
import json
import logging
from collections.abc import Iterable, Sequence

logger = logging.getLogger(__name__)

DEFAULT_MIN_TAG_LENGTH = 2
DEFAULT_ACRONYMS: tuple[str, ...] = ("FOMO",)


class EmotionShape(str, enum.Enum):
    """Raw shape of a stored emotions value."""

    EMPTY = "empty"
    ARRAY = "array"
    JSON_LIST = "json_list"
    PG_ARRAY = "pg_array"
    DELIMITED = "delimited"
    TOKEN = "token"


def classify(raw: object) -> EmotionShape:
    """Classify a raw emotions value without parsing it."""
    if raw is None:
        return EmotionShape.EMPTY
    if isinstance(raw, (list, tuple, set, frozenset)):
        return EmotionShape.ARRAY if raw else EmotionShape.EMPTY
    if not isinstance(raw, str):
        return EmotionShape.TOKEN

    text = raw.strip()
    if not text:
        return EmotionShape.EMPTY
    if text.startswith("[") and text.endswith("]"):
        return EmotionShape.JSON_LIST
    if text.startswith("{") and text.endswith("}"):
        return EmotionShape.PG_ARRAY
    if "," in text:
        return EmotionShape.DELIMITED
    return EmotionShape.TOKEN


def _split(raw: object, shape: EmotionShape) -> list[str]:
    if shape == EmotionShape.EMPTY:
        return []
    if shape == EmotionShape.ARRAY:
        return [str(item) for item in raw]  # type: ignore[union-attr]

    text = str(raw).strip()
    if shape == EmotionShape.JSON_LIST:
        try:
            decoded = json.loads(text)
        except json.JSONDecodeError:
            logger.debug("Undecodable emotions list %r kept as one token", text)
            return [text]
        if isinstance(decoded, list):
            return [str(item) for item in decoded]
        return [str(decoded)]
    if shape == EmotionShape.PG_ARRAY:
        return [part.replace('"', "") for part in text[1:-1].split(",")]
    if shape == EmotionShape.DELIMITED:
        return text.split(",")
    return [text]


def normalize_tag(tag: str, acronyms: Iterable[str] = DEFAULT_ACRONYMS) -> str:
    """Title-case a tag, keeping known acronyms uppercase.

    Only the first character is uppercased; the rest is lowered, so
    ``"revenge TRADING"`` becomes ``"Revenge trading"``.
    """
    upper = tag.upper()
    if upper in {a.upper() for a in acronyms}:
        return upper
    return tag[:1].upper() + tag[1:].lower()


def normalize_tags(
    tags: Iterable[str],
    *,
    min_length: int = DEFAULT_MIN_TAG_LENGTH,
    acronyms: Sequence[str] = DEFAULT_ACRONYMS,
) -> tuple[str, ...]:
    """Strip, drop noise fragments, case-normalize and dedupe (first wins)."""
    seen: dict[str, None] = {}
    for tag in tags:
        cleaned = str(tag).strip()
        if len(cleaned) < min_length:
            continue
        seen.setdefault(normalize_tag(cleaned, acronyms), None)
    return tuple(seen)


def parse_emotions(
    raw: object,
    *,
    min_length: int = DEFAULT_MIN_TAG_LENGTH,
    acronyms: Sequence[str] = DEFAULT_ACRONYMS,
) -> tuple[str, ...]:
    """Parse any stored emotions shape into an ordered, deduplicated tag tuple.

    >>> parse_emotions("{FOMO,revenge}")
    ('FOMO', 'Revenge')
    >>> parse_emotions('["FOMO", "Revenge"]')
    ('FOMO', 'Revenge')
    """
    shape = classify(raw)
    return normalize_tags(_split(raw, shape), min_length=min_length, acronyms=acronyms)
