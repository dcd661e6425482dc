"""Pydantic models for entities, corpus documents and duplicate reporting."""

from __future__ import annotations

from typing import List, Set

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from researcher_index.normalization.string_normalizer import (
    corpus_token,
    entity_label,
    fold_key,
    normalize_name,
)

NOT_GIVEN = "not given"


class Entity(BaseModel):
    """One deduplicated researcher with an insertion-ordered tag set.

    Display strings keep their original case; the ``*_key`` fields hold the folded
    forms used for identity checks. Both are computed once, at creation.
    """

    id: int
    name: str
    organization: str = ""
    subunit: str = ""
    name_key: str = ""
    organization_key: str = ""
    subunit_key: str = ""
    tags: List[str] = Field(default_factory=list)

    _tag_keys: Set[str] = PrivateAttr(default_factory=set)

    @classmethod
    def create(cls, entity_id: int, name: str, organization: str = "", subunit: str = "") -> Entity:
        """Build an entity from raw strings, storing display and key forms."""
        display_name = normalize_name(name)
        display_org = normalize_name(organization)
        display_subunit = normalize_name(subunit)
        return cls(
            id=entity_id,
            name=display_name,
            organization=display_org,
            subunit=display_subunit,
            name_key=display_name.lower(),
            organization_key=display_org.lower(),
            subunit_key=display_subunit.lower(),
        )

    @property
    def label(self) -> str:
        """Collision-free corpus label derived from name and id."""
        return entity_label(self.name, self.id)

    def organization_display(self, missing: str = NOT_GIVEN) -> str:
        return self.organization or missing

    def subunit_display(self, missing: str = NOT_GIVEN) -> str:
        return self.subunit or missing

    def same_identity(self, organization_key: str, subunit_key: str) -> bool:
        """True when both folded affiliation strings match this entity's."""
        return self.organization_key == organization_key and self.subunit_key == subunit_key

    def add_tag(self, tag: str) -> bool:
        """Add a display-form tag; return False when its folded form is already held."""
        key = fold_key(tag)
        if not key or key in self._tag_keys:
            return False
        self._tag_keys.add(key)
        self.tags.append(normalize_name(tag))
        return True

    def has_tag(self, tag: str) -> bool:
        return fold_key(tag) in self._tag_keys

    def tags_summary(self, per_line: int = 5, empty: str = "None") -> str:
        """Comma-separated tags, wrapped every ``per_line`` tags."""
        if not self.tags:
            return empty
        lines = [
            ", ".join(self.tags[start : start + per_line])
            for start in range(0, len(self.tags), per_line)
        ]
        return ",\n".join(lines)

    def describe(self, missing: str = NOT_GIVEN) -> str:
        """Short one-line description for CLI display."""
        return f"{self.name} ({self.organization_display(missing)} - {self.subunit_display(missing)})"


class CorpusDocument(BaseModel):
    """One training document for the topic-model collaborator."""

    model_config = ConfigDict(frozen=True)

    label: str
    tokens: List[str]

    @classmethod
    def from_entity(cls, entity: Entity) -> CorpusDocument:
        return cls(label=entity.label, tokens=[corpus_token(tag) for tag in entity.tags])

    def to_line(self) -> str:
        """Render in the one-document-per-line import format (``label X tokens...``)."""
        return " ".join([self.label, "X", *self.tokens])


class DuplicateReport(BaseModel):
    """Summary of how duplicate names were resolved during ingestion."""

    model_config = ConfigDict(frozen=True)

    distinct_entities: int
    same_identity_count: int
    same_identity_names: List[str]
    distinct_identity_count: int
    distinct_identity_names: List[str]

    def to_text(self) -> str:
        """Human-readable warning block for the CLI."""
        return "\n".join(
            [
                "WARNING:",
                f"  There are {self.same_identity_count} records sharing the same name, "
                "organization and subunit with at least one other record.",
                "  They are treated as the same person and their tags are merged.",
                f"  [{', '.join(self.same_identity_names)}]",
                f"  Another {self.distinct_identity_count} records share only the name "
                "with at least one other record.",
                "  They are treated as different people since their organization or "
                "subunit differs.",
                f"  [{', '.join(self.distinct_identity_names)}]",
            ]
        )
