"""File exchange with the clustering collaborator.

Topic distributions go out as an ARFF data set (one row per entity, one REAL attribute
per topic); cluster labels come back as a ``label,cluster`` CSV.
"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Dict, List

from loguru import logger

from researcher_index.repository.models import Entity
from researcher_index.repository.repository import Repository
from researcher_index.similarity.topic_model import TopicModelResult

ARFF_RELATION = "topicDistribution"


def write_arff(path: str | Path, topic_model: TopicModelResult, repository: Repository) -> List[Entity]:
    """Write topic distributions as ARFF and return the entity for each data row.

    Documents whose label no longer resolves to an entity are left out so that row
    ``i`` of the file always belongs to ``catalog[i]``.
    """
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)

    catalog: List[Entity] = []
    rows: List[str] = []
    for label, vector in topic_model.distributions.items():
        entity = repository.entity_for_label(label)
        if entity is None:
            logger.warning("Skipping topic distribution for unknown label {!r}", label)
            continue
        catalog.append(entity)
        rows.append(",".join(repr(float(value)) for value in vector))

    num_topics = max(
        [topic_model.num_topics, *(len(vector) for vector in topic_model.distributions.values())]
    )
    lines = [f"@RELATION {ARFF_RELATION}", ""]
    lines.extend(f"@ATTRIBUTE topic{i} REAL" for i in range(num_topics))
    lines.extend(["", "@DATA", *rows])
    target.write_text("\n".join(lines) + "\n", encoding="utf-8")

    logger.info("Wrote {} topic distributions to {}", len(catalog), target)
    return catalog


def read_cluster_assignments(path: str | Path) -> Dict[str, int]:
    """Read ``label,cluster`` rows (header required) into a mapping."""
    source = Path(path)
    if not source.exists():
        raise FileNotFoundError(f"Cluster assignments file not found: {source}")

    assignments: Dict[str, int] = {}
    with source.open(newline="", encoding="utf-8") as handle:
        reader = csv.DictReader(handle)
        missing = {"label", "cluster"} - set(reader.fieldnames or [])
        if missing:
            raise ValueError(f"{source}: missing columns {sorted(missing)}")
        for row in reader:
            label = (row["label"] or "").strip()
            if not label:
                continue
            try:
                assignments[label] = int(row["cluster"])
            except (TypeError, ValueError) as exc:
                raise ValueError(f"{source}: bad cluster for {label!r}: {row['cluster']!r}") from exc
    return assignments
