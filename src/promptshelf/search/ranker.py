"""Ranking of index entries against a free-text query."""

from __future__ import annotations

from typing import Iterable, Sequence

from promptshelf.state.models import DocumentMetadata

from .text import fuzzy_score, is_blank_query

NAME_WEIGHT = 3.0
DESCRIPTION_WEIGHT = 2.0
FOLDER_WEIGHT = 1.0
PREFIX_BONUS = 10.0


def score_entry(entry: DocumentMetadata, query: str) -> float:
    """Return the relevance of ``entry`` for an already-lowercased ``query``."""
    name = entry.name.lower()
    best = max(
        fuzzy_score(name, query) * NAME_WEIGHT,
        fuzzy_score(entry.description.lower(), query) * DESCRIPTION_WEIGHT,
        fuzzy_score(entry.folder.lower(), query) * FOLDER_WEIGHT,
    )
    if best <= 0:
        return 0.0
    if name.startswith(query):
        best += PREFIX_BONUS
    return best


def sort_by_recency(entries: Iterable[DocumentMetadata]) -> list[DocumentMetadata]:
    """Order entries by most recent use, then by most recent update.

    Entries that were used at least once come first (latest use first); the
    rest follow ordered by their ``updated`` timestamp, newest first.
    """

    items = list(entries)
    used = [entry for entry in items if entry.last_used is not None]
    unused = [entry for entry in items if entry.last_used is None]
    used.sort(key=lambda entry: entry.last_used or "", reverse=True)
    unused.sort(key=lambda entry: entry.updated, reverse=True)
    return used + unused


def search(entries: Sequence[DocumentMetadata], query: str) -> list[DocumentMetadata]:
    """Return entries matching ``query``, best match first.

    Args:
        entries: Snapshot of index entries.
        query: Free-text query; blank queries return recency order.

    Returns:
        list[DocumentMetadata]: Matching entries. Non-matching entries are
        excluded and ties keep their input order.
    """

    if is_blank_query(query):
        return sort_by_recency(entries)

    normalized = query.lower()

    scored = [(score_entry(entry, normalized), entry) for entry in entries]
    matches = [(score, entry) for score, entry in scored if score > 0]
    matches.sort(key=lambda pair: pair[0], reverse=True)
    return [entry for _, entry in matches]


__all__ = [
    "DESCRIPTION_WEIGHT",
    "FOLDER_WEIGHT",
    "NAME_WEIGHT",
    "PREFIX_BONUS",
    "score_entry",
    "search",
    "sort_by_recency",
]
