"""Entity repository: identity resolution, tag index and the composition root."""

from researcher_index.repository.identity_resolver import (
    DuplicateTally,
    IdentityResolver,
    Resolution,
    ResolutionOutcome,
)
from researcher_index.repository.models import CorpusDocument, DuplicateReport, Entity
from researcher_index.repository.repository import Repository
from researcher_index.repository.tag_index import SENTINEL, TagIndex

__all__ = [
    "SENTINEL",
    "CorpusDocument",
    "DuplicateReport",
    "DuplicateTally",
    "Entity",
    "IdentityResolver",
    "Repository",
    "Resolution",
    "ResolutionOutcome",
    "TagIndex",
]
