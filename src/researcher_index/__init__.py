"""Researcher repository with duplicate resolution, a tag index and top-K ranking."""

from researcher_index.ranking.ranked_list import RankedEntry, RankedList
from researcher_index.repository.models import CorpusDocument, DuplicateReport, Entity
from researcher_index.repository.repository import Repository

__version__ = "0.1.0"

__all__ = [
    "CorpusDocument",
    "DuplicateReport",
    "Entity",
    "RankedEntry",
    "RankedList",
    "Repository",
]
