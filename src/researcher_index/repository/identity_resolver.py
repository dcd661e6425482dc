"""Exact, case-insensitive identity resolution for researcher records.

Two records with the same folded name are the same person only when their folded
organization and subunit strings are equal too; otherwise they are distinct people who
happen to share a name. Resolution never creates a transient duplicate object: a
matching record is routed straight to the canonical entity.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Iterator, List

from loguru import logger
from pydantic import BaseModel, ConfigDict

from researcher_index.exceptions import DuplicateIdentifierError, EmptyNameError
from researcher_index.normalization.string_normalizer import normalize
from researcher_index.repository.models import Entity


class ResolutionOutcome(str, Enum):
    """How an ingested record was resolved."""

    NEW = "new"
    SAME_IDENTITY = "same_identity"
    DISTINCT_IDENTITY = "distinct_identity"


class Resolution(BaseModel):
    """Canonical entity for a record plus how it was reached."""

    model_config = ConfigDict(frozen=True)

    entity: Entity
    outcome: ResolutionOutcome


class DuplicateTally:
    """Counts records that collided on a name.

    The first collision of a name adds 2 (the earlier record and the new one); every
    later collision of that name adds 1. Names are compared as displayed, so case
    variants of one name are tallied separately.
    """

    def __init__(self) -> None:
        self.count = 0
        self._names: Dict[str, None] = {}

    def record(self, display_name: str) -> None:
        if display_name in self._names:
            self.count += 1
        else:
            self._names[display_name] = None
            self.count += 2

    @property
    def names(self) -> List[str]:
        return list(self._names)


class IdentityResolver:
    """Owns the name buckets and hands out canonical entities."""

    def __init__(self) -> None:
        self._buckets: Dict[str, List[Entity]] = {}
        self._by_id: Dict[int, Entity] = {}
        self.distinct_count = 0
        self.same_identity = DuplicateTally()
        self.distinct_identity = DuplicateTally()

    def resolve(
        self, raw_name: str, raw_organization: str, raw_subunit: str, suggested_id: int
    ) -> Resolution:
        """Return the canonical entity for a raw record, creating it when unseen.

        Raises:
            EmptyNameError: If the name is blank after normalization.
            DuplicateIdentifierError: If a new entity would reuse another entity's id.
        """
        name = normalize(raw_name)
        if not name.key:
            raise EmptyNameError(f"Record {suggested_id} has an empty name")
        organization = normalize(raw_organization)
        subunit = normalize(raw_subunit)

        bucket = self._buckets.get(name.key)
        if bucket is None:
            entity = self._create(suggested_id, name.display, organization.display, subunit.display)
            self._buckets[name.key] = [entity]
            return Resolution(entity=entity, outcome=ResolutionOutcome.NEW)

        for existing in bucket:
            if existing.same_identity(organization.key, subunit.key):
                self.same_identity.record(name.display)
                logger.debug(
                    "Record {} unified with entity {} ({})", suggested_id, existing.id, existing.name
                )
                return Resolution(entity=existing, outcome=ResolutionOutcome.SAME_IDENTITY)

        entity = self._create(suggested_id, name.display, organization.display, subunit.display)
        bucket.append(entity)
        self.distinct_identity.record(name.display)
        logger.debug("Record {} shares the name {!r} with another entity", suggested_id, name.display)
        return Resolution(entity=entity, outcome=ResolutionOutcome.DISTINCT_IDENTITY)

    def lookup(self, name: str) -> List[Entity]:
        """Entities sharing the folded name, in ingestion order (empty when unknown)."""
        return list(self._buckets.get(normalize(name).key, []))

    def get(self, entity_id: int) -> Entity | None:
        return self._by_id.get(entity_id)

    def __iter__(self) -> Iterator[Entity]:
        for bucket in self._buckets.values():
            yield from bucket

    def __len__(self) -> int:
        return self.distinct_count

    def _create(self, entity_id: int, name: str, organization: str, subunit: str) -> Entity:
        owner = self._by_id.get(entity_id)
        if owner is not None:
            raise DuplicateIdentifierError(entity_id, owner.name)
        entity = Entity.create(entity_id, name, organization, subunit)
        self._by_id[entity_id] = entity
        self.distinct_count += 1
        return entity
