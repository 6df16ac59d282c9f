"""Text matching primitives for prompt search."""

from __future__ import annotations

CONTIGUOUS_BONUS = 2.0


def is_blank_query(query: str) -> bool:
    """Return whether ``query`` is empty or whitespace only."""
    return not query.strip()


def fuzzy_score(text: str, query: str) -> float:
    """Score how well ``query`` matches ``text`` as an in-order subsequence.

    Each matched character earns 1.0, plus ``CONTIGUOUS_BONUS`` when it directly
    follows the previous match, plus ``1 / (position + 1)`` for matching early.

    Args:
        text: Lowercased text to search in.
        query: Lowercased query.

    Returns:
        float: Positive score, ``1.0`` for an empty query, ``0.0`` when not every
        query character is matched in order.
    """

    if not query:
        return 1.0
    if len(query) > len(text):
        return 0.0

    score = 0.0
    matched = 0
    previous: int | None = None
    for position, char in enumerate(text):
        if matched == len(query):
            break
        if char != query[matched]:
            continue
        score += 1.0
        if previous is not None and position == previous + 1:
            score += CONTIGUOUS_BONUS
        score += 1.0 / (position + 1)
        previous = position
        matched += 1

    if matched < len(query):
        return 0.0
    return score


__all__ = ["CONTIGUOUS_BONUS", "fuzzy_score", "is_blank_query"]
