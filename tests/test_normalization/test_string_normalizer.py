"""Tests for the display/key string normalizer."""

from __future__ import annotations

from researcher_index.normalization.string_normalizer import (
    corpus_token,
    entity_label,
    fold_key,
    normalize,
    normalize_name,
    split_tags,
)


def test_normalize_name_collapses_whitespace_and_keeps_case() -> None:
    assert normalize_name("  Alice \t  Smith \n") == "Alice Smith"
    assert normalize_name("") == ""
    assert normalize_name(None) == ""


def test_fold_key_lowercases_normalized_form() -> None:
    assert fold_key("  Alice   SMITH ") == "alice smith"
    assert fold_key("Alice  Smith") == fold_key("alice smith")


def test_fold_key_is_locale_independent_for_dotted_i() -> None:
    # Plain lowercasing: "I" always maps to "i", never to a dotless variant.
    assert fold_key("INFORMATION Retrieval") == "information retrieval"


def test_normalize_returns_both_forms() -> None:
    result = normalize("  Machine   Learning ")

    assert result.display == "Machine Learning"
    assert result.key == "machine learning"
    assert result.original == "  Machine   Learning "


def test_split_tags_drops_empty_pieces() -> None:
    assert split_tags(" ML,  Natural  Language Processing ,, ,Robotics ") == [
        "ML",
        "Natural Language Processing",
        "Robotics",
    ]
    assert split_tags("") == []
    assert split_tags(None) == []


def test_split_tags_with_custom_separator() -> None:
    assert split_tags("ML; NLP", separator=";") == ["ML", "NLP"]


def test_corpus_token_removes_inner_whitespace() -> None:
    assert corpus_token("Natural  Language Processing") == "naturallanguageprocessing"


def test_entity_label_replaces_spaces_and_folds_case() -> None:
    assert entity_label("Alice Smith", 1) == "alice@smith/1"
