"""Similarity measures over topic distributions."""

from __future__ import annotations

import numpy as np

# Returned by cosine_similarity when either vector has no direction.
UNDEFINED_COSINE = -2.0


def cosine_similarity(a: np.ndarray, b: np.ndarray) -> float:
    """Cosine similarity after mapping each probability ``x`` to ``2x - 1``.

    The rescaling centres probabilities on zero so that topics both distributions
    ignore count as agreement. Returns ``UNDEFINED_COSINE`` for zero-norm input.
    """
    x = 2.0 * np.asarray(a, dtype=np.float64) - 1.0
    y = 2.0 * np.asarray(b, dtype=np.float64) - 1.0
    norm_x = float(np.linalg.norm(x))
    norm_y = float(np.linalg.norm(y))
    if norm_x == 0.0 or norm_y == 0.0:
        return UNDEFINED_COSINE
    return float(np.dot(x, y) / (norm_x * norm_y))


def kl_divergence(p: np.ndarray, q: np.ndarray) -> float:
    """KL(p || q) in bits. Terms with ``p == 0`` contribute nothing."""
    p = np.asarray(p, dtype=np.float64)
    q = np.asarray(q, dtype=np.float64)
    if p.shape != q.shape:
        raise ValueError(f"Distribution shapes differ: {p.shape} vs {q.shape}")
    mask = p > 0
    with np.errstate(divide="ignore"):
        return float(np.sum(p[mask] * np.log2(p[mask] / q[mask])))


def predictive_probability(
    token_weights: np.ndarray, distribution: np.ndarray, smoothing: float = 1e-8
) -> float:
    """Probability of generating every token from a candidate's topic mixture.

    Args:
        token_weights: ``(n_tokens, n_topics)`` matrix of per-topic word probabilities
        distribution: the candidate's topic distribution, length ``n_topics``
        smoothing: added to each token's probability so unseen words don't zero the product
    """
    if token_weights.size == 0:
        return 1.0
    per_token = smoothing + token_weights @ np.asarray(distribution, dtype=np.float64)
    return float(np.prod(per_token))
