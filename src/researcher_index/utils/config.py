"""Configuration management using Pydantic for validation."""

from pathlib import Path
from typing import Any, Dict, List, Literal

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class NormalizationConfig(BaseSettings):
    """Normalization configuration."""

    tag_separator: str = ","
    not_given_label: str = "not given"

    @field_validator("tag_separator")
    @classmethod
    def validate_tag_separator(cls, v: str) -> str:
        """Reject an empty separator, which would make str.split fail."""
        if not v:
            raise ValueError("tag_separator must not be empty")
        return v


class ColumnMapping(BaseModel):
    """Header names of the tabular source file."""

    name: str = "Name"
    organization: str = "University"
    subunit: str = "Department"
    tags: List[str] = ["Research Topics", "Skills"]


class IngestionConfig(BaseSettings):
    """Tabular ingestion configuration."""

    source_file: str = "data/researchers.xlsx"
    sheet_index: int = Field(default=0, ge=0)
    csv_delimiter: str = ","
    encoding: str = "utf-8"
    columns: ColumnMapping = Field(default_factory=ColumnMapping)
    progress_interval: int = Field(default=1000, ge=1)


class RankingConfig(BaseSettings):
    """Top-K recommendation configuration."""

    capacity: int = Field(default=5, ge=1)
    include_owner: bool = True


class TopicModelConfig(BaseSettings):
    """Locations of files exchanged with the topic-model and clustering tools."""

    corpus_file: str = "data/corpus.txt"
    doc_topics_file: str = "data/doc_topics.txt"
    topic_word_weights_file: str = "data/topic_word_weights.txt"
    arff_file: str = "data/topicDistribution.arff"
    cluster_assignments_file: str = "data/clusters.csv"
    top_topics: int = Field(default=5, ge=1)
    hottest_words: int = Field(default=10, ge=1)
    smoothing: float = Field(default=1e-8, gt=0.0)


class LoggingConfig(BaseSettings):
    """Logging configuration."""

    level: str = "INFO"
    format: Literal["json", "text"] = "text"
    file: str = ""
    rotation: str = "10 MB"
    retention: int = 3

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate level is a loguru level name."""
        valid = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid:
            raise ValueError(f"Invalid log level '{v}'. Must be one of {sorted(valid)}.")
        return upper


class Config(BaseSettings):
    """Main configuration class."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="RESEARCHER_INDEX_",
        case_sensitive=False,
        extra="allow",
        env_nested_delimiter="__",
    )

    normalization: NormalizationConfig = Field(default_factory=NormalizationConfig)
    ingestion: IngestionConfig = Field(default_factory=IngestionConfig)
    ranking: RankingConfig = Field(default_factory=RankingConfig)
    topic_model: TopicModelConfig = Field(default_factory=TopicModelConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @staticmethod
    def _deep_merge_dict(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
        """Deep-merge two dicts (overrides win).

        This is used to apply environment-derived overrides on top of YAML defaults.
        """
        merged: Dict[str, Any] = dict(base)
        for key, value in overrides.items():
            if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
                merged[key] = Config._deep_merge_dict(merged[key], value)
            else:
                merged[key] = value
        return merged

    @classmethod
    def from_yaml(cls, yaml_path: str | Path = "config/config.yaml") -> "Config":
        """Load configuration from YAML file and environment variables.

        Precedence (highest to lowest):
        1) Environment variables / .env
        2) YAML file
        3) Model defaults

        Args:
            yaml_path: Path to YAML configuration file

        Returns:
            Config instance with loaded settings

        Raises:
            FileNotFoundError: If YAML file doesn't exist
            ValueError: If the YAML root is not a mapping
        """
        yaml_path = Path(yaml_path)
        if not yaml_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {yaml_path}")

        with open(yaml_path, encoding="utf-8") as f:
            yaml_config = yaml.safe_load(f) or {}

        if not isinstance(yaml_config, dict):
            raise ValueError(f"YAML config root must be a mapping/dict: {yaml_path}")

        # Only values that differ from the defaults count as env overrides.
        env_overrides = cls().model_dump(exclude_defaults=True)
        merged = cls._deep_merge_dict(yaml_config, env_overrides)

        return cls(**merged)

    def validate_config(self) -> None:
        """Validate cross-section settings.

        Raises:
            ValueError: If configuration is invalid
        """
        columns = self.ingestion.columns
        identity_columns = [columns.name, columns.organization, columns.subunit]
        if len(set(identity_columns)) != len(identity_columns):
            raise ValueError(
                f"Name, organization and subunit columns must differ, got {identity_columns}"
            )
        if not columns.tags:
            raise ValueError("At least one tag column must be configured")


# Global configuration instance
_config: Config | None = None


def get_config() -> Config:
    """Get or create global configuration instance.

    Returns:
        Global Config instance

    Raises:
        RuntimeError: If configuration hasn't been initialized
    """
    global _config
    if _config is None:
        raise RuntimeError("Configuration not initialized. Call load_config() first.")
    return _config


def load_config(yaml_path: str | Path = "config/config.yaml") -> Config:
    """Load and validate configuration.

    Args:
        yaml_path: Path to YAML configuration file

    Returns:
        Loaded and validated Config instance
    """
    global _config
    _config = Config.from_yaml(yaml_path)
    _config.validate_config()
    return _config


def reset_config() -> None:
    """Reset global configuration (mainly for testing)."""
    global _config
    _config = None
