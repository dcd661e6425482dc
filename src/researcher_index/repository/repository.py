"""Researcher repository: the composition root for ingestion and queries.

The repository is an explicit value: the entry point constructs one, ingests rows into
it and passes it to every query. Nothing here is process-global.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterator, List

from loguru import logger

from researcher_index.normalization.string_normalizer import split_tags
from researcher_index.repository.identity_resolver import IdentityResolver, Resolution
from researcher_index.repository.models import CorpusDocument, DuplicateReport, Entity
from researcher_index.repository.tag_index import TagIndex
from researcher_index.utils.config import NormalizationConfig


class Repository:
    """Entity store, identity resolver and tag index behind one interface."""

    def __init__(
        self,
        config: NormalizationConfig | None = None,
        *,
        resolver: IdentityResolver | None = None,
        tag_index: TagIndex | None = None,
    ) -> None:
        self.config = config or NormalizationConfig()
        self.resolver = resolver or IdentityResolver()
        self.tag_index = tag_index or TagIndex()
        self._by_label: Dict[str, Entity] = {}

    # Ingestion
    def ingest(
        self, raw_name: str, raw_organization: str, raw_subunit: str, suggested_id: int
    ) -> Entity:
        """Resolve a raw record to its canonical entity (see ``IdentityResolver``)."""
        return self._resolve(raw_name, raw_organization, raw_subunit, suggested_id).entity

    def add_tags(self, entity: Entity, tags_text: str | None) -> List[str]:
        """Union comma-separated tags into ``entity`` and the index.

        Returns the display forms that were new to the entity.
        """
        return self._apply_tags(entity, split_tags(tags_text, self.config.tag_separator))

    def ingest_record(
        self,
        name: str,
        organization: str,
        subunit: str,
        suggested_id: int,
        *tags_texts: str | None,
    ) -> Entity:
        """Ingest one row: resolve its identity and union every tag column into it.

        Tag text is split before the identity is resolved, so a failure leaves no
        half-built entity behind.
        """
        tags: List[str] = []
        for text in tags_texts:
            tags.extend(split_tags(text, self.config.tag_separator))

        entity = self.ingest(name, organization, subunit, suggested_id)
        self._apply_tags(entity, tags)
        return entity

    # Queries
    def distinct_entity_count(self) -> int:
        return self.resolver.distinct_count

    def distinct_tag_count(self) -> int:
        return self.tag_index.distinct_tag_count()

    def tag_count(self, tag: str) -> int:
        return self.tag_index.count_for_tag(tag)

    def cooccurrence_count(self, tag_a: str, tag_b: str) -> int:
        return self.tag_index.cooccurrence(tag_a, tag_b)

    def lookup_by_name(self, name: str) -> List[Entity]:
        """All entities with this (normalized, case-insensitive) name; empty when unknown."""
        return self.resolver.lookup(name)

    def get(self, entity_id: int) -> Entity | None:
        return self.resolver.get(entity_id)

    def entities(self) -> Iterator[Entity]:
        return iter(self.resolver)

    # Topic-model corpus
    def export_corpus(self) -> List[CorpusDocument]:
        """One document per entity, labelled so ``entity_for_label`` can reverse it."""
        return [CorpusDocument.from_entity(entity) for entity in self.resolver]

    def write_corpus(self, path: str | Path) -> Path:
        """Write the corpus in the one-document-per-line import format."""
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        documents = self.export_corpus()
        with target.open("w", encoding="utf-8") as handle:
            for document in documents:
                handle.write(document.to_line() + "\n")
        logger.info("Wrote corpus of {} documents to {}", len(documents), target)
        return target

    def entity_for_label(self, label: str) -> Entity | None:
        return self._by_label.get(label)

    # Reporting
    def duplicate_report(self) -> DuplicateReport:
        return DuplicateReport(
            distinct_entities=self.resolver.distinct_count,
            same_identity_count=self.resolver.same_identity.count,
            same_identity_names=self.resolver.same_identity.names,
            distinct_identity_count=self.resolver.distinct_identity.count,
            distinct_identity_names=self.resolver.distinct_identity.names,
        )

    def _resolve(
        self, raw_name: str, raw_organization: str, raw_subunit: str, suggested_id: int
    ) -> Resolution:
        resolution = self.resolver.resolve(raw_name, raw_organization, raw_subunit, suggested_id)
        entity = resolution.entity
        self._by_label.setdefault(entity.label, entity)
        return resolution

    def _apply_tags(self, entity: Entity, tags: List[str]) -> List[str]:
        added: List[str] = []
        for tag in tags:
            if entity.add_tag(tag):
                added.append(tag)
            self.tag_index.add_tag(entity.id, tag)
        return added
