"""Candidate aggregation: merge live tabs, history hits and the fallback entry.

No scoring or ordering happens here, only tagging and concatenation.
"""

from __future__ import annotations

import logging
from typing import Iterable
from urllib.parse import quote_plus

from ..models.candidate import FALLBACK_ID, Candidate, Provenance
from ..models.exceptions import InvalidCandidateShapeError
from ..models.messages import ResultItem
from .config import DEFAULT_SEARCH_URL

logger = logging.getLogger(__name__)


def resolve_fallback_url(query: str, search_url: str = DEFAULT_SEARCH_URL) -> str:
    """Turn raw query text into a destination URL.

    - "http..." is used verbatim
    - anything containing "." or ":" gets an https:// prefix
    - everything else becomes a web search
    """
    if query.startswith("http"):
        return query
    if "." in query or ":" in query:
        return f"https://{query}"
    return f"{search_url}{quote_plus(query)}"


def build_fallback(query: str, search_url: str = DEFAULT_SEARCH_URL) -> Candidate:
    """Synthesize the "navigate or search" candidate for the typed text."""
    return Candidate(
        id=FALLBACK_ID,
        provenance=Provenance.FALLBACK,
        title=query,
        url=resolve_fallback_url(query, search_url),
    )


def candidates_from_items(items: Iterable[ResultItem]) -> tuple[list[Candidate], list[Candidate]]:
    """Split directory result items into (live, history) candidates.

    Items without a title are dropped. Fallback items sent by the directory
    are ignored since the fallback is always rebuilt from the query.
    """
    live: list[Candidate] = []
    history: list[Candidate] = []
    seen: set[str] = set()

    for item in items:
        try:
            candidate = Candidate.from_result_item(item)
        except InvalidCandidateShapeError as e:
            logger.debug(f"Dropping result item: {e}")
            continue

        if candidate.id in seen:
            logger.debug(f"Dropping duplicate result item {candidate.id}")
            continue
        seen.add(candidate.id)

        if candidate.provenance is Provenance.LIVE:
            live.append(candidate)
        elif candidate.provenance is Provenance.HISTORY:
            history.append(candidate)

    return live, history


def aggregate(
    live: list[Candidate],
    history: list[Candidate],
    query: str,
    search_url: str = DEFAULT_SEARCH_URL,
) -> list[Candidate]:
    """Merge candidate sources for one list generation.

    Empty query: live tabs only.
    Otherwise: history ++ live ++ [fallback].
    """
    if not query.strip():
        return list(live)
    return [*history, *live, build_fallback(query, search_url)]
