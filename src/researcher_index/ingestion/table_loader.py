"""Tabular researcher files (CSV or XLSX) to repository records.

Columns are located by header name (see ``IngestionConfig.columns``). Each data row is
numbered from 1, and that number becomes the record's suggested id. Rows without a
name are skipped here; the repository itself rejects blank names.
"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Any, Dict, Iterator, List, Sequence, Tuple

from loguru import logger
from openpyxl import load_workbook
from pydantic import BaseModel, ConfigDict, Field

from researcher_index.normalization.string_normalizer import normalize_name
from researcher_index.repository.repository import Repository
from researcher_index.utils.config import IngestionConfig

SUPPORTED_SUFFIXES = (".csv", ".xlsx")


class RawRecord(BaseModel):
    """One row of the source table, before identity resolution."""

    model_config = ConfigDict(frozen=True)

    row_number: int
    name: str
    organization: str = ""
    subunit: str = ""
    tags_texts: List[str] = Field(default_factory=list)


class LoadSummary(BaseModel):
    """Counts reported after a load."""

    model_config = ConfigDict(frozen=True)

    source: str
    rows_read: int
    rows_ingested: int
    rows_skipped: int
    distinct_entities: int


def _cell_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class TableLoader:
    """Read researcher rows from a CSV or XLSX file."""

    def __init__(self, config: IngestionConfig | None = None) -> None:
        self.config = config or IngestionConfig()

    def read_records(self, path: str | Path) -> Iterator[RawRecord]:
        """Yield every data row that has a non-blank name."""
        for row_number, row in self._read_rows(Path(path)):
            record = self._to_record(row_number, row)
            if record is not None:
                yield record

    def load(self, path: str | Path, repository: Repository) -> LoadSummary:
        """Ingest every usable row of ``path`` into ``repository``."""
        source = Path(path)
        logger.info("Loading {} into the repository", source)

        rows_read = rows_ingested = 0
        for row_number, row in self._read_rows(source):
            rows_read = row_number
            record = self._to_record(row_number, row)
            if record is None:
                continue
            repository.ingest_record(
                record.name,
                record.organization,
                record.subunit,
                record.row_number,
                *record.tags_texts,
            )
            rows_ingested += 1
            if rows_ingested % self.config.progress_interval == 0:
                logger.info("Ingested {} rows", rows_ingested)

        summary = LoadSummary(
            source=str(source),
            rows_read=rows_read,
            rows_ingested=rows_ingested,
            rows_skipped=rows_read - rows_ingested,
            distinct_entities=repository.distinct_entity_count(),
        )
        logger.info(
            "Repository built from {}: {} rows, {} skipped, {} distinct entities",
            source,
            summary.rows_read,
            summary.rows_skipped,
            summary.distinct_entities,
        )
        return summary

    def _to_record(self, row_number: int, row: Dict[str, str]) -> RawRecord | None:
        if not any(value.strip() for value in row.values()):
            return None
        columns = self.config.columns
        name = row.get(columns.name, "")
        if not normalize_name(name):
            logger.warning("Skipping row {}: no name", row_number)
            return None
        return RawRecord(
            row_number=row_number,
            name=name,
            organization=row.get(columns.organization, ""),
            subunit=row.get(columns.subunit, ""),
            tags_texts=[row.get(column, "") for column in columns.tags],
        )

    def _read_rows(self, path: Path) -> Iterator[Tuple[int, Dict[str, str]]]:
        if not path.exists():
            raise FileNotFoundError(f"Source table not found: {path}")
        suffix = path.suffix.lower()
        if suffix not in SUPPORTED_SUFFIXES:
            raise ValueError(
                f"Unsupported table format '{suffix}', expected one of {SUPPORTED_SUFFIXES}"
            )
        rows = self._read_csv(path) if suffix == ".csv" else self._read_xlsx(path)
        yield from enumerate(rows, 1)

    def _check_header(self, path: Path, header: Sequence[str]) -> None:
        columns = self.config.columns
        required = [columns.name, columns.organization, columns.subunit, *columns.tags]
        missing = [column for column in required if column not in header]
        if missing:
            raise ValueError(
                f"{path}: missing expected columns {missing}. Actual columns: {list(header)}"
            )

    def _read_csv(self, path: Path) -> Iterator[Dict[str, str]]:
        with path.open(newline="", encoding=self.config.encoding) as handle:
            reader = csv.DictReader(handle, delimiter=self.config.csv_delimiter)
            self._check_header(path, [name.strip() for name in reader.fieldnames or []])
            for row in reader:
                yield {
                    (key or "").strip(): value or ""
                    for key, value in row.items()
                    if not isinstance(value, list)
                }

    def _read_xlsx(self, path: Path) -> Iterator[Dict[str, str]]:
        wb = load_workbook(filename=path, read_only=True, data_only=True)
        try:
            ws = wb.worksheets[self.config.sheet_index]
            header: List[str] = []
            for i, row in enumerate(ws.iter_rows(values_only=True)):
                if i == 0:
                    header = [_cell_text(cell).strip() for cell in row]
                    self._check_header(path, header)
                    continue
                yield {
                    column: _cell_text(value)
                    for column, value in zip(header, row)
                    if column
                }
        finally:
            wb.close()
