"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Callable, List

import pytest
import yaml

from researcher_index.repository.repository import Repository

HEADER = ["University", "Department", "Name", "Research Topics", "Skills"]

ROWS: List[List[str]] = [
    ["MIT", "CS", "Alice Smith", "ML, NLP", "Python"],
    ["mit", "cs", "Alice  Smith", "Robotics", ""],
    ["MIT", "CS", "Bob Lee", "ML", ""],
    ["Stanford", "EE", "Bob Lee", "Vision", "ML"],
    ["", "", "   ", "Orphan", ""],
    ["Oxford", "", "Carol King", "NLP, Vision", "Statistics"],
]

TableWriter = Callable[[Path, List[str], List[List[str]]], Path]


def _write_csv(path: Path, header: List[str], rows: List[List[str]]) -> Path:
    with path.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.writer(handle)
        writer.writerow(header)
        writer.writerows(rows)
    return path


@pytest.fixture
def repository() -> Repository:
    """Fresh repository per test."""
    return Repository()


@pytest.fixture
def table_header() -> List[str]:
    return list(HEADER)


@pytest.fixture
def table_rows() -> List[List[str]]:
    """One same-identity pair, one distinct-identity pair and one nameless row."""
    return [list(row) for row in ROWS]


@pytest.fixture
def write_table() -> TableWriter:
    return _write_csv


@pytest.fixture
def researchers_csv(tmp_path: Path) -> Path:
    return _write_csv(tmp_path / "researchers.csv", HEADER, ROWS)


@pytest.fixture
def config_file(tmp_path: Path, researchers_csv: Path) -> Path:
    """YAML config pointing every file at ``tmp_path``."""
    path = tmp_path / "config.yaml"
    path.write_text(
        yaml.safe_dump(
            {
                "ingestion": {"source_file": str(researchers_csv)},
                "topic_model": {
                    "corpus_file": str(tmp_path / "corpus.txt"),
                    "doc_topics_file": str(tmp_path / "doc_topics.txt"),
                    "topic_word_weights_file": str(tmp_path / "topic_words.txt"),
                    "arff_file": str(tmp_path / "topics.arff"),
                    "cluster_assignments_file": str(tmp_path / "clusters.csv"),
                },
                "ranking": {"capacity": 3},
            }
        ),
        encoding="utf-8",
    )
    return path
