"""Tests for bounded top-K selection."""

from __future__ import annotations

import math
import random
from typing import List

import pytest

from researcher_index.exceptions import RankedListClosedError
from researcher_index.ranking.ranked_list import RankedList
from researcher_index.repository.models import Entity


def _entities(count: int) -> List[Entity]:
    return [Entity.create(i, f"Researcher {i}") for i in range(1, count + 1)]


@pytest.fixture
def owner() -> Entity:
    return Entity.create(0, "Owner")


def test_keeps_best_scores_descending(owner: Entity) -> None:
    ranked = RankedList(owner, ascending_is_better=False, capacity=3)
    for entity, score in zip(_entities(6), [0.9, 0.3, 0.7, 0.95, 0.1, 0.6]):
        ranked.offer(entity, score)

    assert ranked.scores() == [0.95, 0.9, 0.7]
    assert [entity.id for entity in ranked.entities()] == [4, 1, 3]


def test_keeps_best_scores_ascending(owner: Entity) -> None:
    ranked = RankedList(owner, ascending_is_better=True, capacity=3)
    for entity, score in zip(_entities(6), [0.9, 0.3, 0.7, 0.95, 0.1, 0.6]):
        ranked.offer(entity, score)

    assert ranked.scores() == [0.1, 0.3, 0.6]


def test_offer_reports_whether_entity_was_kept(owner: Entity) -> None:
    a, b, c = _entities(3)
    ranked = RankedList(owner, ascending_is_better=False, capacity=1)

    assert ranked.offer(a, 0.5) is True
    assert ranked.offer(b, 0.4) is False
    assert ranked.offer(c, 0.6) is True
    assert ranked.entities() == [c]


def test_ties_keep_arrival_order(owner: Entity) -> None:
    a, b, c, d = _entities(4)
    ranked = RankedList(owner, ascending_is_better=False, capacity=3)
    ranked.offer(a, 0.5)
    ranked.offer(b, 0.8)
    ranked.offer(c, 0.5)
    ranked.offer(d, 0.5)

    assert ranked.entities() == [b, a, c]


def test_tie_with_worst_of_full_list_is_rejected(owner: Entity) -> None:
    a, b, c = _entities(3)
    ranked = RankedList(owner, ascending_is_better=True, capacity=2)
    ranked.offer(a, 1.0)
    ranked.offer(b, 2.0)

    assert ranked.offer(c, 2.0) is False
    assert ranked.entities() == [a, b]


def test_fewer_candidates_than_capacity(owner: Entity) -> None:
    ranked = RankedList(owner, ascending_is_better=False, capacity=5)
    for entity, score in zip(_entities(2), [0.2, 0.4]):
        ranked.offer(entity, score)

    assert len(ranked) == 2
    assert ranked.scores() == [0.4, 0.2]


@pytest.mark.parametrize("ascending", [True, False])
def test_matches_stable_full_sort(owner: Entity, ascending: bool) -> None:
    rng = random.Random(11)
    entities = _entities(200)
    scores = [round(rng.random(), 2) for _ in entities]
    ranked = RankedList(owner, ascending_is_better=ascending, capacity=7)
    for entity, score in zip(entities, scores):
        ranked.offer(entity, score)

    expected = sorted(
        zip(entities, scores), key=lambda pair: pair[1] if ascending else -pair[1]
    )[:7]
    assert [(entry.entity, entry.score) for entry in ranked.results()] == expected


def test_results_close_the_list(owner: Entity) -> None:
    a, b = _entities(2)
    ranked = RankedList(owner, ascending_is_better=False)
    ranked.offer(a, 0.1)

    results = ranked.results()

    assert ranked.closed
    assert [entry.entity for entry in results] == [a]
    with pytest.raises(RankedListClosedError):
        ranked.offer(b, 0.9)


def test_results_is_a_copy(owner: Entity) -> None:
    ranked = RankedList(owner, ascending_is_better=False)
    ranked.offer(_entities(1)[0], 0.1)

    ranked.results().clear()

    assert len(ranked.results()) == 1


@pytest.mark.parametrize("capacity", [0, -1])
def test_capacity_must_be_positive(owner: Entity, capacity: int) -> None:
    with pytest.raises(ValueError):
        RankedList(owner, ascending_is_better=False, capacity=capacity)


def test_infinite_divergence_ranks_last(owner: Entity) -> None:
    a, b, c = _entities(3)
    ranked = RankedList(owner, ascending_is_better=True, capacity=3)
    ranked.offer(a, math.inf)
    ranked.offer(b, 0.4)
    ranked.offer(c, 0.0)

    assert ranked.entities() == [c, b, a]
