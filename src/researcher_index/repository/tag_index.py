"""Inverted index from folded tag to the ascending ids of the entities holding it."""

from __future__ import annotations

import sys
from bisect import bisect_left
from typing import Dict, List, Sequence

from researcher_index.normalization.string_normalizer import fold_key

# Larger than any real entity id; terminates both sequences in the merge walk.
SENTINEL = sys.maxsize


def _at(ids: Sequence[int], position: int) -> int:
    return ids[position] if position < len(ids) else SENTINEL


class TagIndex:
    """Incrementally maintained tag -> sorted id set mapping."""

    def __init__(self) -> None:
        self._postings: Dict[str, List[int]] = {}

    def add_tag(self, entity_id: int, tag: str) -> bool:
        """Index ``entity_id`` under ``tag``; returns False for empty tags or repeats."""
        key = fold_key(tag)
        if not key:
            return False
        ids = self._postings.setdefault(key, [])
        position = bisect_left(ids, entity_id)
        if position < len(ids) and ids[position] == entity_id:
            return False
        ids.insert(position, entity_id)
        return True

    def count_for_tag(self, tag: str) -> int:
        return len(self._postings.get(fold_key(tag), ()))

    def ids_for_tag(self, tag: str) -> tuple[int, ...]:
        return tuple(self._postings.get(fold_key(tag), ()))

    def distinct_tag_count(self) -> int:
        return len(self._postings)

    def cooccurrence(self, tag_a: str, tag_b: str) -> int:
        """Count ids held under both tags with a two-pointer merge walk.

        Each posting list is read as if followed by ``SENTINEL``; the stored lists are
        never modified. Runs in O(|A| + |B|).
        """
        ids_a = self._postings.get(fold_key(tag_a))
        ids_b = self._postings.get(fold_key(tag_b))
        if not ids_a or not ids_b:
            return 0

        count = 0
        i = j = 0
        value_a, value_b = ids_a[0], ids_b[0]
        while value_a != SENTINEL and value_b != SENTINEL:
            if value_a < value_b:
                i += 1
                value_a = _at(ids_a, i)
            elif value_b < value_a:
                j += 1
                value_b = _at(ids_b, j)
            else:
                count += 1
                i += 1
                j += 1
                value_a, value_b = _at(ids_a, i), _at(ids_b, j)
        return count

    def __contains__(self, tag: object) -> bool:
        return isinstance(tag, str) and fold_key(tag) in self._postings

    def __len__(self) -> int:
        return len(self._postings)
