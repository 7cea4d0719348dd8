"""Builders for result items and candidates used across tests."""

from tab_picker.models.candidate import Candidate
from tab_picker.models.messages import ResultItem


def live_item(tab_id: int, title: str, url: str | None = None) -> ResultItem:
    """Result item for an open tab."""
    return ResultItem(type="goTo", id=str(tab_id), title=title, url=url or f"https://{title.lower()}.test/")


def history_item(entry_id: str, title: str, url: str | None = None) -> ResultItem:
    """Result item for a history entry."""
    return ResultItem(type="history", id=entry_id, title=title, url=url or f"https://{title.lower()}.test/")


def live(tab_id: int, title: str) -> Candidate:
    """Live candidate built the same way the engine builds them."""
    return Candidate.from_result_item(live_item(tab_id, title))


def history(entry_id: str, title: str) -> Candidate:
    return Candidate.from_result_item(history_item(entry_id, title))
