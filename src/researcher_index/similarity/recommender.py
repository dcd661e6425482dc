"""Similar-researcher recommendations over an external topic model.

Every document of the topic model is scored against the owner and offered to a
``RankedList``; only the best ``capacity`` candidates are kept. The recommender does
not train anything: distributions, word weights and cluster labels all come from the
collaborators' output files.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, Dict, List, Mapping

import numpy as np
from loguru import logger

from researcher_index.exceptions import UnknownEntityError
from researcher_index.normalization.string_normalizer import corpus_token
from researcher_index.ranking.ranked_list import RankedList
from researcher_index.repository.models import Entity
from researcher_index.repository.repository import Repository
from researcher_index.similarity.metrics import (
    cosine_similarity,
    kl_divergence,
    predictive_probability,
)
from researcher_index.similarity.topic_model import TopicModelResult
from researcher_index.utils.config import RankingConfig


class SimilarityMethod(str, Enum):
    """Scoring methods and their display names."""

    PROBABILITY = "probability"
    KL = "kl"
    COSINE = "cosine"

    @property
    def ascending_is_better(self) -> bool:
        return self is SimilarityMethod.KL

    @property
    def display_name(self) -> str:
        return _TITLES[self]


_TITLES: Dict[SimilarityMethod, str] = {
    SimilarityMethod.PROBABILITY: "predictive conditional probability",
    SimilarityMethod.KL: "KL divergence (asymmetric)",
    SimilarityMethod.COSINE: "cosine similarity",
}

Scorer = Callable[[np.ndarray], float]


class Recommender:
    """Rank repository entities by similarity to an owner."""

    def __init__(
        self,
        repository: Repository,
        topic_model: TopicModelResult,
        config: RankingConfig | None = None,
        *,
        smoothing: float = 1e-8,
    ) -> None:
        self.repository = repository
        self.topic_model = topic_model
        self.config = config or RankingConfig()
        self.smoothing = smoothing

    def recommend(self, owner: Entity, method: SimilarityMethod | str) -> RankedList:
        """Return a ranked list of the entities most similar to ``owner``.

        Raises:
            UnknownEntityError: If ``method`` needs the owner's distribution and the
                topic model has none.
        """
        method = SimilarityMethod(method)
        scorer = self._scorer(owner, method)
        ranked = RankedList(
            owner, ascending_is_better=method.ascending_is_better, capacity=self.config.capacity
        )

        skipped = 0
        for label, distribution in self.topic_model.distributions.items():
            candidate = self.repository.entity_for_label(label)
            if candidate is None:
                skipped += 1
                continue
            if candidate is owner and not self.config.include_owner:
                continue
            ranked.offer(candidate, scorer(distribution))

        if skipped:
            logger.warning("{} topic-model documents had no matching entity", skipped)
        logger.debug("Ranked {} candidates for {} by {}", len(ranked), owner.label, method.value)
        return ranked

    def same_cluster(self, owner: Entity, assignments: Mapping[str, int]) -> List[Entity]:
        """Entities sharing the owner's cluster, in assignment order."""
        if owner.label not in assignments:
            raise UnknownEntityError(f"No cluster assignment for {owner.label!r}")
        cluster = assignments[owner.label]
        members: List[Entity] = []
        for label, assigned in assignments.items():
            if assigned != cluster:
                continue
            entity = self.repository.entity_for_label(label)
            if entity is not None:
                members.append(entity)
        return members

    def _scorer(self, owner: Entity, method: SimilarityMethod) -> Scorer:
        if method is SimilarityMethod.PROBABILITY:
            weights = self.topic_model.token_weights([corpus_token(tag) for tag in owner.tags])
            return lambda distribution: predictive_probability(weights, distribution, self.smoothing)

        reference = self.topic_model.distribution(owner.label)
        if method is SimilarityMethod.KL:
            return lambda distribution: kl_divergence(reference, distribution)
        return lambda distribution: cosine_similarity(reference, distribution)
