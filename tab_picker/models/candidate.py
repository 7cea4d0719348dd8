"""Candidate model: one selectable destination in the picker."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .exceptions import InvalidCandidateShapeError
from .messages import (
    RESULT_TYPE_HISTORY,
    RESULT_TYPE_LIVE,
    ResultItem,
)

FALLBACK_ID = "new-tab"


class Provenance(Enum):
    """Where a candidate came from."""

    LIVE = "live"  # An open tab
    HISTORY = "history"  # A recently visited page
    FALLBACK = "fallback"  # Synthesized from the typed query

    @property
    def glyph(self) -> str:
        return _GLYPHS[self]


_GLYPHS = {
    Provenance.LIVE: " ",
    Provenance.HISTORY: "◷",
    Provenance.FALLBACK: "⌕",
}


def live_candidate_id(tab_id: int) -> str:
    """Candidate id for an open tab. Stable for the lifetime of the tab."""
    return f"tab-{tab_id}"


def history_candidate_id(entry_id: str) -> str:
    return f"history-{entry_id}"


@dataclass(frozen=True)
class Candidate:
    """A selectable destination.

    Candidates are rebuilt from scratch on every list generation.
    ``match_score`` and ``highlighted_title`` are filled in by the ranker.
    """

    id: str
    provenance: Provenance
    title: str
    url: str
    icon_ref: str | None = None
    match_score: float = 0
    highlighted_title: str = ""
    tab_id: int | None = None

    @property
    def is_live(self) -> bool:
        return self.provenance is Provenance.LIVE

    @property
    def is_fallback(self) -> bool:
        return self.provenance is Provenance.FALLBACK

    @classmethod
    def from_result_item(cls, item: ResultItem) -> "Candidate":
        """Build a candidate from a directory result item.

        Raises:
            InvalidCandidateShapeError: Item has no title or a malformed tab id
        """
        title = item.title.strip()
        if not title:
            raise InvalidCandidateShapeError(f"result item {item.id!r} has no title")

        if item.type == RESULT_TYPE_LIVE:
            try:
                tab_id = int(item.id)
            except ValueError:
                raise InvalidCandidateShapeError(f"tab id is not numeric: {item.id!r}")
            return cls(
                id=live_candidate_id(tab_id),
                provenance=Provenance.LIVE,
                title=title,
                url=item.url,
                icon_ref=item.fav_icon_url,
                tab_id=tab_id,
            )

        if item.type == RESULT_TYPE_HISTORY:
            return cls(
                id=history_candidate_id(item.id),
                provenance=Provenance.HISTORY,
                title=title,
                url=item.url,
                icon_ref=item.fav_icon_url,
            )

        return cls(
            id=FALLBACK_ID,
            provenance=Provenance.FALLBACK,
            title=title,
            url=item.url,
        )
