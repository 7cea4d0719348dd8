"""Fuzzy matching utility for the picker.

Case-insensitive subsequence matching with scoring:
- Perfect (whole-text) match: score 0
- Every penalty makes the score more negative:
  - characters skipped before the first hit
  - gaps between matched characters (contiguous runs are free)
  - hits that don't start on a word boundary
  - unmatched trailing length

Matched spans are wrapped in Rich markup for highlighting.
"""

from __future__ import annotations

from dataclasses import dataclass

from rich.markup import escape

# Matches below this are treated as no match by the ranker.
# Empirical cutoff; overridable through PickerSettings.score_threshold.
SCORE_THRESHOLD = -2000

HIGHLIGHT_OPEN = "[u]"
HIGHLIGHT_CLOSE = "[/u]"

POSITION_PENALTY = 10
GAP_PENALTY = 50
GAP_CHAR_PENALTY = 5
BOUNDARY_PENALTY = 20
LENGTH_PENALTY = 1

_WORD_SEPARATORS = " -_/.:|·—"


@dataclass(frozen=True)
class MatchResult:
    """Outcome of a successful match.

    Attributes:
        score: 0 for a perfect match, negative otherwise
        indexes: Positions in the text that matched query characters
        highlighted: Markup-escaped text with matched spans wrapped
    """

    score: int
    indexes: tuple[int, ...]
    highlighted: str


def match(
    query: str,
    text: str,
    open_tag: str = HIGHLIGHT_OPEN,
    close_tag: str = HIGHLIGHT_CLOSE,
) -> MatchResult | None:
    """Match query against text.

    Returns:
        MatchResult, or None if some query character can't be found in order.

    Raises:
        ValueError: query is empty (callers skip matching instead)
    """
    if not query:
        raise ValueError("empty query; skip matching instead")

    indexes = _find_indexes(_fold(query), _fold(text))
    if indexes is None:
        return None

    return MatchResult(
        score=_score(indexes, text, len(query)),
        indexes=indexes,
        highlighted=highlight(text, indexes, open_tag, close_tag),
    )


def _fold(text: str) -> str:
    """Lowercase text without changing its length."""
    folded = text.lower()
    if len(folded) != len(text):
        # Some characters lowercase to more than one; keep indexes aligned
        folded = "".join(char.lower()[0] for char in text)
    return folded


def _find_indexes(query: str, text: str) -> tuple[int, ...] | None:
    """Locate query characters in text.

    A contiguous occurrence wins, preferring one that starts a word.
    Otherwise the leftmost subsequence is taken.
    """
    start = _best_substring(query, text)
    if start is not None:
        return tuple(range(start, start + len(query)))

    found: list[int] = []
    pos = 0
    for char in query:
        pos = text.find(char, pos)
        if pos == -1:
            return None
        found.append(pos)
        pos += 1
    return tuple(found)


def _best_substring(query: str, text: str) -> int | None:
    first = text.find(query)
    if first == -1:
        return None
    pos = first
    while pos != -1:
        if _is_boundary(text, pos):
            return pos
        pos = text.find(query, pos + 1)
    return first


def _is_boundary(text: str, pos: int) -> bool:
    return pos == 0 or text[pos - 1] in _WORD_SEPARATORS


def _score(indexes: tuple[int, ...], text: str, query_length: int) -> int:
    score = 0
    score -= indexes[0] * POSITION_PENALTY
    if not _is_boundary(text, indexes[0]):
        score -= BOUNDARY_PENALTY

    for prev, cur in zip(indexes, indexes[1:]):
        gap = cur - prev - 1
        if gap:
            score -= GAP_PENALTY + gap * GAP_CHAR_PENALTY

    score -= (len(text) - query_length) * LENGTH_PENALTY
    return score


def highlight(
    text: str,
    indexes: tuple[int, ...],
    open_tag: str = HIGHLIGHT_OPEN,
    close_tag: str = HIGHLIGHT_CLOSE,
) -> str:
    """Wrap runs of matched characters in open/close tags.

    Unmatched text is escaped so titles containing ``[`` render literally.
    """
    hits = set(indexes)
    parts: list[str] = []
    run: list[str] = []
    plain: list[str] = []

    for i, char in enumerate(text):
        if i in hits:
            if plain:
                parts.append(escape("".join(plain)))
                plain = []
            run.append(char)
        else:
            if run:
                parts.append(f"{open_tag}{escape(''.join(run))}{close_tag}")
                run = []
            plain.append(char)

    if run:
        parts.append(f"{open_tag}{escape(''.join(run))}{close_tag}")
    if plain:
        parts.append(escape("".join(plain)))
    return "".join(parts)
