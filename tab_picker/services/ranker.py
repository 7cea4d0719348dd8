"""Ranking and filtering of aggregated candidates.

A pure function of (candidates, query): the same inputs always produce
the same list, so handlers that race each other can each recompute
from current state and the last one wins.
"""

from __future__ import annotations

from dataclasses import replace

from rich.markup import escape

from ..models.candidate import Candidate, Provenance
from .fuzzy import SCORE_THRESHOLD, match

# Primary sort key: open tabs before history
PROVENANCE_ORDER = {
    Provenance.LIVE: 0,
    Provenance.HISTORY: 1,
}


def rank(
    candidates: list[Candidate],
    query: str,
    threshold: float = SCORE_THRESHOLD,
) -> list[Candidate]:
    """Score, filter and order candidates for display.

    Args:
        candidates: Aggregated candidates (any order)
        query: Raw query text; surrounding whitespace is ignored
        threshold: Matches scoring below this are dropped

    Returns:
        Live then history candidates, each group by descending score,
        followed by the fallback candidate if one was given.
    """
    needle = query.strip()
    fallback: Candidate | None = None
    survivors: list[Candidate] = []

    for candidate in candidates:
        if candidate.is_fallback:
            fallback = replace(candidate, match_score=0, highlighted_title=escape(candidate.title))
            continue

        if not needle:
            survivors.append(
                replace(candidate, match_score=0, highlighted_title=escape(candidate.title))
            )
            continue

        result = match(needle, candidate.title)
        if result is None or result.score < threshold:
            continue
        survivors.append(
            replace(candidate, match_score=result.score, highlighted_title=result.highlighted)
        )

    # list.sort is stable: equal keys keep aggregator order
    survivors.sort(key=lambda c: (PROVENANCE_ORDER[c.provenance], -c.match_score))

    if fallback is not None:
        survivors.append(fallback)
    return survivors
