"""Fuzzy search over prompt index entries."""

from .ranker import score_entry, search, sort_by_recency
from .text import fuzzy_score, is_blank_query

__all__ = ["fuzzy_score", "is_blank_query", "score_entry", "search", "sort_by_recency"]
