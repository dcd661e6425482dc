"""String normalization for researcher names, affiliations and tags.

Two forms are produced for every string:

- the *display* form: surrounding whitespace trimmed and internal runs collapsed to
  a single space, original casing kept;
- the *key* form: the display form lowercased, used for every lookup.

Lowercasing uses ``str.lower`` which is locale-independent.
"""

from __future__ import annotations

import re
from typing import List

from pydantic import BaseModel, ConfigDict

_WHITESPACE_RE = re.compile(r"\s+")

LABEL_SEPARATOR = "/"
LABEL_SPACE = "@"


class NormalizationResult(BaseModel):
    """Display and key forms of one normalized string."""

    model_config = ConfigDict(frozen=True)

    original: str
    display: str
    key: str


def normalize_name(text: str | None) -> str:
    """Trim and collapse whitespace, keeping case."""
    if not text:
        return ""
    return _WHITESPACE_RE.sub(" ", text).strip()


def fold_key(text: str | None) -> str:
    """Normalize and lowercase a string for use as a lookup key."""
    return normalize_name(text).lower()


def normalize(text: str | None) -> NormalizationResult:
    """Return both forms of ``text`` in one call."""
    display = normalize_name(text)
    return NormalizationResult(original=text or "", display=display, key=display.lower())


def split_tags(text: str | None, separator: str = ",") -> List[str]:
    """Split free-text tags on ``separator`` into normalized display forms.

    Empty pieces are dropped; duplicates are kept for the caller to resolve.
    """
    if not text:
        return []
    tags: List[str] = []
    for piece in text.split(separator):
        tag = normalize_name(piece)
        if tag:
            tags.append(tag)
    return tags


def corpus_token(tag: str) -> str:
    """Fold a tag into a single whitespace-free token for the topic-model corpus."""
    return _WHITESPACE_RE.sub("", fold_key(tag))


def entity_label(name: str, entity_id: int) -> str:
    """Build the corpus label of an entity, e.g. ``alice@smith/1``."""
    return f"{name}{LABEL_SEPARATOR}{entity_id}".replace(" ", LABEL_SPACE).lower()

