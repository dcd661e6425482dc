"""Bounded online top-K selection for similarity recommendations.

A ``RankedList`` keeps at most ``capacity`` ``(entity, score)`` pairs in sorted order
while scores stream in, so candidates never need a full sort. Equal scores keep their
arrival order. Once ``results()`` has been read the list is closed to further offers.
"""

from __future__ import annotations

from typing import Iterator, List, NamedTuple

from researcher_index.exceptions import RankedListClosedError
from researcher_index.repository.models import Entity


class RankedEntry(NamedTuple):
    entity: Entity
    score: float


class RankedList:
    """Fixed-capacity list ordered by score, best first."""

    def __init__(self, owner: Entity, ascending_is_better: bool, capacity: int = 5) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self.owner = owner
        self.ascending_is_better = ascending_is_better
        self.capacity = capacity
        self._entries: List[RankedEntry] = []
        self._closed = False

    def _better(self, score: float, other: float) -> bool:
        return score < other if self.ascending_is_better else score > other

    def offer(self, entity: Entity, score: float) -> bool:
        """Insert ``entity`` if it ranks among the best ``capacity`` seen so far.

        Returns True when the entity was kept.

        Raises:
            RankedListClosedError: If ``results()`` was already read.
        """
        if self._closed:
            raise RankedListClosedError("Cannot offer to a ranked list after reading its results")

        entries = self._entries
        if len(entries) == self.capacity and not self._better(score, entries[-1].score):
            return False

        # Walk back past strictly worse scores only, so ties stay in arrival order.
        position = len(entries)
        while position > 0 and self._better(score, entries[position - 1].score):
            position -= 1
        entries.insert(position, RankedEntry(entity, score))
        if len(entries) > self.capacity:
            entries.pop()
        return True

    def results(self) -> List[RankedEntry]:
        """Return the kept entries, best first, and close the list."""
        self._closed = True
        return list(self._entries)

    @property
    def closed(self) -> bool:
        return self._closed

    def scores(self) -> List[float]:
        return [entry.score for entry in self._entries]

    def entities(self) -> List[Entity]:
        return [entry.entity for entry in self._entries]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[RankedEntry]:
        return iter(list(self._entries))
