"""Readers for the topic-model collaborator's output files.

The topic model itself is trained outside this package on the corpus written by
``Repository.write_corpus``. Two of its outputs are read back here:

- doc-topics: one line per document with its topic proportions, either dense
  (``doc name p0 p1 ...``) or sparse (``doc name topic proportion topic proportion ...``,
  announced by a ``#doc name topic proportion`` header);
- topic-word weights: ``topic<TAB>word<TAB>weight`` lines.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Sequence, Tuple

import numpy as np
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

from researcher_index.exceptions import UnknownEntityError


class TopicModelResult(BaseModel):
    """Per-document topic distributions and per-topic word weights."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    distributions: Dict[str, np.ndarray]
    word_weights: List[Dict[str, float]] = Field(default_factory=list)

    @property
    def num_topics(self) -> int:
        return len(self.word_weights)

    def labels(self) -> List[str]:
        return list(self.distributions)

    def distribution(self, label: str) -> np.ndarray:
        try:
            return self.distributions[label]
        except KeyError:
            raise UnknownEntityError(f"No topic distribution for {label!r}") from None

    def normalized_weights(self, topic: int) -> Dict[str, float]:
        """Word probabilities of one topic (weights divided by their sum)."""
        weights = self.word_weights[topic]
        total = sum(weights.values())
        if total <= 0:
            return {word: 0.0 for word in weights}
        return {word: weight / total for word, weight in weights.items()}

    def token_weights(self, tokens: Sequence[str]) -> np.ndarray:
        """``(len(tokens), num_topics)`` matrix of per-topic token probabilities."""
        matrix = np.zeros((len(tokens), self.num_topics), dtype=np.float64)
        for topic in range(self.num_topics):
            probabilities = self.normalized_weights(topic)
            for row, token in enumerate(tokens):
                matrix[row, topic] = probabilities.get(token, 0.0)
        return matrix

    def top_topics(self, label: str, n: int = 5) -> List[Tuple[int, float]]:
        """The ``n`` largest topics of a document, earlier topics first on ties."""
        dist = self.distribution(label)
        order = np.argsort(-dist, kind="stable")[:n]
        return [(int(topic), float(dist[topic])) for topic in order]

    def hottest_words(self, topic: int, n: int = 10) -> List[Tuple[str, float]]:
        """The ``n`` heaviest words of a topic with their raw weights."""
        ranked = sorted(self.word_weights[topic].items(), key=lambda item: item[1], reverse=True)
        return ranked[:n]


def read_doc_topics(path: str | Path) -> Dict[str, np.ndarray]:
    """Parse a doc-topics file into ``label -> distribution``.

    Raises:
        FileNotFoundError: If the file is missing.
        ValueError: If a line cannot be parsed or row lengths disagree.
    """
    source = Path(path)
    if not source.exists():
        raise FileNotFoundError(f"Doc-topics file not found: {source}")

    sparse = False
    dense_rows: Dict[str, List[float]] = {}
    sparse_rows: Dict[str, List[Tuple[int, float]]] = {}

    for line_number, line in enumerate(source.read_text(encoding="utf-8").splitlines(), 1):
        stripped = line.strip()
        if not stripped:
            continue
        if stripped.startswith("#"):
            sparse = sparse or "proportion" in stripped
            continue
        parts = stripped.split()
        if len(parts) < 3:
            raise ValueError(f"{source}:{line_number}: expected 'doc name values...'")
        label, values = parts[1], parts[2:]
        try:
            if sparse:
                if len(values) % 2:
                    raise ValueError("unpaired topic/proportion")
                sparse_rows[label] = [
                    (int(values[i]), float(values[i + 1])) for i in range(0, len(values), 2)
                ]
            else:
                dense_rows[label] = [float(value) for value in values]
        except ValueError as exc:
            raise ValueError(f"{source}:{line_number}: {exc}") from exc

    if sparse:
        num_topics = 1 + max((topic for row in sparse_rows.values() for topic, _ in row), default=-1)
        distributions: Dict[str, np.ndarray] = {}
        for label, pairs in sparse_rows.items():
            vector = np.zeros(num_topics, dtype=np.float64)
            for topic, proportion in pairs:
                vector[topic] = proportion
            distributions[label] = vector
    else:
        lengths = {len(values) for values in dense_rows.values()}
        if len(lengths) > 1:
            raise ValueError(f"{source}: rows have differing topic counts {sorted(lengths)}")
        distributions = {
            label: np.asarray(values, dtype=np.float64) for label, values in dense_rows.items()
        }

    logger.info("Loaded topic distributions for {} documents from {}", len(distributions), source)
    return distributions


def read_topic_word_weights(path: str | Path) -> List[Dict[str, float]]:
    """Parse ``topic<TAB>word<TAB>weight`` lines into one word-weight dict per topic."""
    source = Path(path)
    if not source.exists():
        raise FileNotFoundError(f"Topic-word weights file not found: {source}")

    topics: Dict[int, Dict[str, float]] = {}
    for line_number, line in enumerate(source.read_text(encoding="utf-8").splitlines(), 1):
        if not line.strip():
            continue
        parts = line.split("\t") if "\t" in line else line.split()
        if len(parts) != 3:
            raise ValueError(f"{source}:{line_number}: expected 'topic word weight'")
        try:
            topic, word, weight = int(parts[0]), parts[1].strip(), float(parts[2])
        except ValueError as exc:
            raise ValueError(f"{source}:{line_number}: {exc}") from exc
        weights = topics.setdefault(topic, {})
        weights[word] = weights.get(word, 0.0) + weight

    num_topics = 1 + max(topics, default=-1)
    return [topics.get(topic, {}) for topic in range(num_topics)]


def load_topic_model(doc_topics_path: str | Path, word_weights_path: str | Path) -> TopicModelResult:
    """Read both files and check they describe the same number of topics."""
    distributions = read_doc_topics(doc_topics_path)
    word_weights = read_topic_word_weights(word_weights_path)
    for label, vector in distributions.items():
        if len(vector) > len(word_weights):
            raise ValueError(
                f"Document {label!r} has {len(vector)} topics but only "
                f"{len(word_weights)} topics have word weights"
            )
        if len(vector) < len(word_weights):
            distributions[label] = np.pad(vector, (0, len(word_weights) - len(vector)))
    return TopicModelResult(distributions=distributions, word_weights=word_weights)
