"""Top-K ranking."""

from researcher_index.ranking.ranked_list import RankedEntry, RankedList

__all__ = ["RankedEntry", "RankedList"]
