"""Similarity scoring and recommendations over external topic-model output."""

from researcher_index.similarity.clustering import read_cluster_assignments, write_arff
from researcher_index.similarity.metrics import (
    UNDEFINED_COSINE,
    cosine_similarity,
    kl_divergence,
    predictive_probability,
)
from researcher_index.similarity.recommender import Recommender, SimilarityMethod
from researcher_index.similarity.topic_model import (
    TopicModelResult,
    load_topic_model,
    read_doc_topics,
    read_topic_word_weights,
)

__all__ = [
    "UNDEFINED_COSINE",
    "Recommender",
    "SimilarityMethod",
    "TopicModelResult",
    "cosine_similarity",
    "kl_divergence",
    "load_topic_model",
    "predictive_probability",
    "read_cluster_assignments",
    "read_doc_topics",
    "read_topic_word_weights",
    "write_arff",
]
