"""Approximate string similarity for "did you mean" suggestions.

This is a fast, order-insensitive character-set heuristic, not an edit
distance. It finds a plausible candidate, not necessarily the one the author
intended, and is never used for resolution.
"""

from __future__ import annotations

from collections.abc import Iterable

SUGGESTION_LIMIT = 3
SUGGESTION_THRESHOLD = 0.3
SUBSTRING_SCORE = 0.8


def calculate_similarity(a: str, b: str) -> float:
    """Score two keys on a 0..1 scale, case-insensitively."""

    a = a.lower()
    b = b.lower()
    if a == b:
        return 1.0
    if not a or not b:
        return 0.0
    if a in b or b in a:
        return SUBSTRING_SCORE

    a_chars = set(a)
    b_chars = set(b)
    return 2 * len(a_chars & b_chars) / (len(a_chars) + len(b_chars))


def find_similar_keys(
    target: str,
    candidates: Iterable[str],
    limit: int = SUGGESTION_LIMIT,
    threshold: float = SUGGESTION_THRESHOLD,
) -> list[str]:
    """Return up to ``limit`` candidates scoring above ``threshold``, best first.

    Ties keep candidate order. The target itself is never suggested.
    """

    scored: list[tuple[float, int, str]] = []
    seen: set[str] = set()
    for index, candidate in enumerate(candidates):
        if candidate == target or candidate in seen:
            continue
        seen.add(candidate)
        score = calculate_similarity(target, candidate)
        if score > threshold:
            scored.append((score, index, candidate))

    scored.sort(key=lambda item: (-item[0], item[1]))
    return [candidate for _, _, candidate in scored[:limit]]
