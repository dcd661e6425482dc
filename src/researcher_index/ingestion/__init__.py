"""Tabular ingestion."""

from researcher_index.ingestion.table_loader import LoadSummary, RawRecord, TableLoader

__all__ = ["LoadSummary", "RawRecord", "TableLoader"]
