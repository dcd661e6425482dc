"""Command line interface for querying a researcher table.

Every command builds a fresh repository from the configured source table, runs one
query against it and prints the result.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import List, Optional

import typer
from loguru import logger
from rich.console import Console
from rich.table import Table

from researcher_index.exceptions import ResearcherIndexError
from researcher_index.ingestion.table_loader import TableLoader
from researcher_index.ranking.ranked_list import RankedEntry
from researcher_index.repository.models import Entity
from researcher_index.repository.repository import Repository
from researcher_index.similarity.clustering import read_cluster_assignments, write_arff
from researcher_index.similarity.recommender import Recommender, SimilarityMethod
from researcher_index.similarity.topic_model import TopicModelResult, load_topic_model
from researcher_index.utils.config import Config, load_config
from researcher_index.utils.logging_setup import setup_logging

app = typer.Typer(help="Query researchers, their interests and similar researchers.")

console = Console()

CONFIG_OPTION = typer.Option(Path("config/config.yaml"), help="Path to config file.")
SOURCE_OPTION = typer.Option(None, help="Override the source table (CSV or XLSX).")
VERBOSE_OPTION = typer.Option(False, "--verbose", "-v", help="Enable debug logging.")


class RecommendMethod(str, Enum):
    PROBABILITY = "probability"
    KL = "kl"
    COSINE = "cosine"
    CLUSTER = "cluster"


def _load(config_path: Path, verbose: bool) -> Config:
    try:
        cfg = load_config(config_path)
    except (FileNotFoundError, ValueError) as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1) from exc
    setup_logging(cfg.logging, verbose=verbose)
    return cfg


def _build_repository(cfg: Config, source: Path | None) -> Repository:
    repository = Repository(cfg.normalization)
    path = source or Path(cfg.ingestion.source_file)
    try:
        TableLoader(cfg.ingestion).load(path, repository)
    except (FileNotFoundError, ValueError) as exc:
        console.print(f"[red]Failed to load {path}: {exc}[/red]")
        raise typer.Exit(code=1) from exc
    return repository


def _load_topic_model(cfg: Config) -> TopicModelResult:
    try:
        return load_topic_model(
            cfg.topic_model.doc_topics_file, cfg.topic_model.topic_word_weights_file
        )
    except (FileNotFoundError, ValueError) as exc:
        console.print(f"[red]Failed to load topic model: {exc}[/red]")
        raise typer.Exit(code=1) from exc


def _lookup_or_exit(repository: Repository, name: str) -> List[Entity]:
    entities = repository.lookup_by_name(name)
    if not entities:
        console.print(f"Not found {name}")
        raise typer.Exit(code=1)
    console.print(f"There are {len(entities)} researcher(s) named {name}")
    return entities


def _print_entity(entity: Entity, cfg: Config) -> None:
    missing = cfg.normalization.not_given_label
    console.print(entity.name)
    console.print(f"  Organization  {entity.organization_display(missing)}")
    console.print(f"  Subunit       {entity.subunit_display(missing)}")
    console.print(f"  Tags          {entity.tags_summary()}")


def _print_topics(entity: Entity, topic_model: TopicModelResult, cfg: Config) -> None:
    if entity.label not in topic_model.distributions:
        return
    top_topics = topic_model.top_topics(entity.label, cfg.topic_model.top_topics)
    for rank, (topic, share) in enumerate(top_topics):
        words = " ".join(
            f"{word} ({weight:.0f})"
            for word, weight in topic_model.hottest_words(topic, cfg.topic_model.hottest_words)
        )
        prefix = "Composition   =" if rank == 0 else "              +"
        console.print(f"  {prefix} {share * 100:5.2f}% Topic{topic} ({words} ...)")


def _print_recommended(entity: Entity, topic_model: TopicModelResult, cfg: Config) -> None:
    console.print("")
    console.print(entity.describe(cfg.normalization.not_given_label))
    console.print(f"  Tags          {entity.tags_summary()}")
    _print_topics(entity, topic_model, cfg)


def _render_ranking(
    entries: List[RankedEntry], *, title: str, indicator: str, cfg: Config
) -> None:
    missing = cfg.normalization.not_given_label
    table = Table(title=title)
    table.add_column("#", justify="right")
    table.add_column("Name", style="cyan")
    table.add_column("Organization")
    table.add_column("Subunit")
    table.add_column(indicator, justify="right")
    table.add_column("Tags")
    for rank, entry in enumerate(entries, 1):
        table.add_row(
            str(rank),
            entry.entity.name,
            entry.entity.organization_display(missing),
            entry.entity.subunit_display(missing),
            f"{entry.score:.6g}",
            ", ".join(entry.entity.tags),
        )
    console.print(table)


@app.command("stats")
def stats(
    source: Optional[Path] = SOURCE_OPTION,
    config: Path = CONFIG_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Show the number of distinct researchers and distinct interests."""
    cfg = _load(config, verbose)
    repository = _build_repository(cfg, source)
    console.print(f"Number of distinct researchers = {repository.distinct_entity_count()}")
    console.print(f"Number of distinct interests = {repository.distinct_tag_count()}")


@app.command("duplicates")
def duplicates(
    source: Optional[Path] = SOURCE_OPTION,
    config: Path = CONFIG_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Report how records with the same name were resolved."""
    cfg = _load(config, verbose)
    repository = _build_repository(cfg, source)
    console.print(repository.duplicate_report().to_text(), markup=False)


@app.command("show")
def show(
    name: str = typer.Argument(..., help="Researcher name (case-insensitive)."),
    source: Optional[Path] = SOURCE_OPTION,
    config: Path = CONFIG_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Show organization, subunit and tags of every researcher with this name."""
    cfg = _load(config, verbose)
    repository = _build_repository(cfg, source)
    for entity in _lookup_or_exit(repository, name):
        _print_entity(entity, cfg)


@app.command("tag-count")
def tag_count(
    tag: str = typer.Argument(..., help="Interest to count."),
    source: Optional[Path] = SOURCE_OPTION,
    config: Path = CONFIG_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Count the researchers holding an interest."""
    cfg = _load(config, verbose)
    repository = _build_repository(cfg, source)
    console.print(
        f'Number of distinct researchers with interest "{tag}" = {repository.tag_count(tag)}'
    )


@app.command("cooccur")
def cooccur(
    tag_a: str = typer.Argument(..., help="First interest."),
    tag_b: str = typer.Argument(..., help="Second interest."),
    source: Optional[Path] = SOURCE_OPTION,
    config: Path = CONFIG_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Count the researchers holding both interests."""
    cfg = _load(config, verbose)
    repository = _build_repository(cfg, source)
    count = repository.cooccurrence_count(tag_a, tag_b)
    console.print(f"Number of times they co-occur = {count}")


@app.command("export-corpus")
def export_corpus(
    output: Optional[Path] = typer.Option(None, help="Corpus path (default from config)."),
    source: Optional[Path] = SOURCE_OPTION,
    config: Path = CONFIG_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Write the topic-model training corpus, one researcher per line."""
    cfg = _load(config, verbose)
    repository = _build_repository(cfg, source)
    target = repository.write_corpus(output or Path(cfg.topic_model.corpus_file))
    console.print(f"Wrote {repository.distinct_entity_count()} documents to {target}")


@app.command("export-arff")
def export_arff(
    output: Optional[Path] = typer.Option(None, help="ARFF path (default from config)."),
    source: Optional[Path] = SOURCE_OPTION,
    config: Path = CONFIG_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Write topic distributions as ARFF for the clustering tool."""
    cfg = _load(config, verbose)
    repository = _build_repository(cfg, source)
    topic_model = _load_topic_model(cfg)
    target = output or Path(cfg.topic_model.arff_file)
    catalog = write_arff(target, topic_model, repository)
    console.print(f"Wrote {len(catalog)} topic distributions to {target}")


@app.command("recommend")
def recommend(
    name: str = typer.Argument(..., help="Researcher name (case-insensitive)."),
    method: RecommendMethod = typer.Option(
        RecommendMethod.PROBABILITY, help="Similarity measure.", show_default=True
    ),
    source: Optional[Path] = SOURCE_OPTION,
    config: Path = CONFIG_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Recommend researchers similar to every researcher with this name."""
    cfg = _load(config, verbose)
    repository = _build_repository(cfg, source)
    owners = _lookup_or_exit(repository, name)
    topic_model = _load_topic_model(cfg)
    recommender = Recommender(
        repository, topic_model, cfg.ranking, smoothing=cfg.topic_model.smoothing
    )

    assignments = None
    if method is RecommendMethod.CLUSTER:
        try:
            assignments = read_cluster_assignments(cfg.topic_model.cluster_assignments_file)
        except (FileNotFoundError, ValueError) as exc:
            console.print(f"[red]Failed to load cluster assignments: {exc}[/red]")
            raise typer.Exit(code=1) from exc

    for owner in owners:
        console.print("")
        console.print(f"Your information: {owner.describe(cfg.normalization.not_given_label)}")
        console.print(f"  Tags          {owner.tags_summary()}")
        _print_topics(owner, topic_model, cfg)
        try:
            if assignments is not None:
                for member in recommender.same_cluster(owner, assignments):
                    _print_recommended(member, topic_model, cfg)
                continue
            similarity = SimilarityMethod(method.value)
            ranked = recommender.recommend(owner, similarity)
        except ResearcherIndexError as exc:
            logger.warning("No recommendation for {}: {}", owner.label, exc)
            console.print(f"[yellow]{exc}[/yellow]")
            continue
        entries = ranked.results()
        _render_ranking(
            entries,
            title=f"Similar researchers by {similarity.display_name}",
            indicator=similarity.value,
            cfg=cfg,
        )
        for entry in entries:
            _print_recommended(entry.entity, topic_model, cfg)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
