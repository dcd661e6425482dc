"""Normalization package."""

from researcher_index.normalization.string_normalizer import (
    NormalizationResult,
    corpus_token,
    entity_label,
    fold_key,
    normalize,
    normalize_name,
    split_tags,
)

__all__ = [
    "NormalizationResult",
    "corpus_token",
    "entity_label",
    "fold_key",
    "normalize",
    "normalize_name",
    "split_tags",
]
