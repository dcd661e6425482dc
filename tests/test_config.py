"""Tests for configuration loading and override behavior.

Environment variables override YAML values, which override model defaults.
"""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from researcher_index.utils.config import get_config, load_config, reset_config


@pytest.fixture(autouse=True)
def _reset_global_config() -> None:
    """Ensure config singleton doesn't leak between tests."""
    reset_config()
    yield
    reset_config()


def _write_yaml(path: Path, data: object) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(data), encoding="utf-8")


def test_yaml_loads_values(tmp_path: Path) -> None:
    cfg_path = tmp_path / "config.yaml"
    _write_yaml(
        cfg_path,
        {
            "ranking": {"capacity": 3},
            "ingestion": {"columns": {"name": "Person", "tags": ["Keywords"]}},
        },
    )

    cfg = load_config(cfg_path)

    assert cfg.ranking.capacity == 3
    assert cfg.ranking.include_owner is True
    assert cfg.ingestion.columns.name == "Person"
    assert cfg.ingestion.columns.organization == "University"
    assert cfg.ingestion.columns.tags == ["Keywords"]


def test_defaults_for_empty_yaml(tmp_path: Path) -> None:
    cfg_path = tmp_path / "config.yaml"
    cfg_path.write_text("", encoding="utf-8")

    cfg = load_config(cfg_path)

    assert cfg.normalization.tag_separator == ","
    assert cfg.ranking.capacity == 5
    assert cfg.topic_model.top_topics == 5
    assert cfg.topic_model.hottest_words == 10
    assert cfg.logging.level == "INFO"


def test_env_overrides_yaml(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    cfg_path = tmp_path / "config.yaml"
    _write_yaml(cfg_path, {"ranking": {"capacity": 3}})

    monkeypatch.setenv("RESEARCHER_INDEX_RANKING__CAPACITY", "10")

    cfg = load_config(cfg_path)

    assert cfg.ranking.capacity == 10


def test_repo_config_file_loads() -> None:
    cfg = load_config(Path(__file__).resolve().parents[1] / "config" / "config.yaml")

    assert cfg.ingestion.columns.tags == ["Research Topics", "Skills"]
    assert cfg.topic_model.smoothing == pytest.approx(1e-8)


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "missing.yaml")


def test_non_mapping_root_raises(tmp_path: Path) -> None:
    cfg_path = tmp_path / "config.yaml"
    _write_yaml(cfg_path, ["not", "a", "mapping"])

    with pytest.raises(ValueError, match="mapping"):
        load_config(cfg_path)


def test_log_level_is_normalized(tmp_path: Path) -> None:
    cfg_path = tmp_path / "config.yaml"
    _write_yaml(cfg_path, {"logging": {"level": "debug"}})

    assert load_config(cfg_path).logging.level == "DEBUG"


def test_invalid_values_are_rejected(tmp_path: Path) -> None:
    cfg_path = tmp_path / "config.yaml"
    _write_yaml(cfg_path, {"logging": {"level": "LOUD"}})
    with pytest.raises(ValidationError):
        load_config(cfg_path)

    _write_yaml(cfg_path, {"ranking": {"capacity": 0}})
    with pytest.raises(ValidationError):
        load_config(cfg_path)

    _write_yaml(cfg_path, {"normalization": {"tag_separator": ""}})
    with pytest.raises(ValidationError):
        load_config(cfg_path)


def test_identity_columns_must_differ(tmp_path: Path) -> None:
    cfg_path = tmp_path / "config.yaml"
    _write_yaml(cfg_path, {"ingestion": {"columns": {"organization": "Name"}}})

    with pytest.raises(ValueError, match="must differ"):
        load_config(cfg_path)


def test_get_config_requires_load(tmp_path: Path) -> None:
    with pytest.raises(RuntimeError):
        get_config()

    cfg_path = tmp_path / "config.yaml"
    _write_yaml(cfg_path, {})
    cfg = load_config(cfg_path)

    assert get_config() is cfg
