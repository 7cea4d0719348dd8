"""TabDirectory: the privileged side that owns real tab and history data.

Executes activate/close/create requests, answers fresh-candidate
queries and broadcasts open/refresh events to the picker. Runs in
process here; the picker only ever talks to it through request and
event objects, so it can be swapped for a remote implementation.
"""

from __future__ import annotations

import json
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Callable

from ..models.exceptions import MissingCollaboratorDataError, ProtocolError
from ..models.messages import (
    RESULT_TYPE_HISTORY,
    RESULT_TYPE_LIVE,
    ActivateRequest,
    CloseRequest,
    CreateTabRequest,
    DirectoryEvent,
    FreshCandidatesEvent,
    OpenEvent,
    QueryFreshCandidatesRequest,
    RefreshEvent,
    Request,
    ResultItem,
    parse_request,
)
from .config import PickerSettings

logger = logging.getLogger(__name__)

Broadcast = Callable[[DirectoryEvent], None]


@dataclass
class Tab:
    """An open tab."""

    id: int
    title: str
    url: str
    fav_icon_url: str | None = None
    loading: bool = False

    def to_result_item(self) -> ResultItem:
        return ResultItem(
            type=RESULT_TYPE_LIVE,
            id=str(self.id),
            title=self.title,
            url=self.url,
            fav_icon_url=self.fav_icon_url,
        )


@dataclass
class HistoryEntry:
    """A visited page."""

    id: str
    title: str
    url: str
    visit_count: int = 1
    last_visit: datetime = field(default_factory=datetime.now)

    def to_result_item(self) -> ResultItem:
        return ResultItem(
            type=RESULT_TYPE_HISTORY,
            id=self.id,
            title=self.title,
            url=self.url,
        )


class TabDirectory:
    """In-process tab and history store."""

    def __init__(
        self,
        settings: PickerSettings | None = None,
        broadcast: Broadcast | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._settings = settings or PickerSettings()
        self._broadcast = broadcast or (lambda event: None)
        self._clock = clock
        self._tabs: list[Tab] = []
        self._history: dict[str, HistoryEntry] = {}
        self._active_id: int | None = None
        self._handlers: dict[type, Callable[[Any], None]] = {
            ActivateRequest: lambda r: self.activate(r.tab_id),
            CloseRequest: lambda r: self.close(r.tab_id),
            CreateTabRequest: lambda r: self.create(r.url),
            QueryFreshCandidatesRequest: lambda r: self.answer_query(r.input),
        }

    def set_broadcast(self, broadcast: Broadcast) -> None:
        self._broadcast = broadcast

    @classmethod
    def from_snapshot(
        cls,
        data: dict[str, Any],
        settings: PickerSettings | None = None,
        broadcast: Broadcast | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> "TabDirectory":
        """Build a directory from a snapshot dict.

        Snapshot shape:
            {"tabs": [{"id": 1, "title": ..., "url": ..., "active": true}],
             "history": [{"id": "h1", "title": ..., "url": ...,
                          "visitCount": 3, "lastVisit": "2024-05-01T10:00:00"}]}
        """
        directory = cls(settings=settings, broadcast=broadcast, clock=clock)
        for raw in data.get("tabs", []):
            tab = Tab(
                id=int(raw["id"]),
                title=raw.get("title", ""),
                url=raw.get("url", ""),
                fav_icon_url=raw.get("favIconUrl"),
            )
            directory._tabs.append(tab)
            if raw.get("active"):
                directory._active_id = tab.id
        if directory._active_id is None and directory._tabs:
            directory._active_id = directory._tabs[0].id

        for raw in data.get("history", []):
            last_visit = raw.get("lastVisit")
            entry = HistoryEntry(
                id=str(raw["id"]),
                title=raw.get("title", ""),
                url=raw.get("url", ""),
                visit_count=int(raw.get("visitCount", 1)),
                last_visit=datetime.fromisoformat(last_visit) if last_visit else directory._clock(),
            )
            directory._history[entry.url] = entry
        return directory

    @classmethod
    def load(
        cls,
        path: Path,
        settings: PickerSettings | None = None,
        broadcast: Broadcast | None = None,
    ) -> "TabDirectory":
        """Build a directory from a snapshot JSON file."""
        data = json.loads(path.read_text())
        return cls.from_snapshot(data, settings=settings, broadcast=broadcast)

    # Queries

    def all_tabs(self) -> list[Tab]:
        return list(self._tabs)

    def get_tab(self, tab_id: int) -> Tab | None:
        for tab in self._tabs:
            if tab.id == tab_id:
                return tab
        return None

    def active_tab(self) -> Tab | None:
        if self._active_id is None:
            return None
        return self.get_tab(self._active_id)

    def require_active_tab(self) -> Tab:
        """Active tab, or raise.

        Raises:
            MissingCollaboratorDataError: No tab is active
        """
        tab = self.active_tab()
        if tab is None:
            raise MissingCollaboratorDataError("no active tab", "open a tab first")
        return tab

    def search_history(self, text: str) -> list[HistoryEntry]:
        """Recent history entries whose title or URL contains text.

        Ordered by visit count (most visited first), capped to history_limit.
        """
        needle = text.strip().lower()
        since = self._clock() - timedelta(days=self._settings.history_lookback_days)
        hits = [
            entry
            for entry in self._history.values()
            if entry.last_visit >= since
            and (needle in entry.title.lower() or needle in entry.url.lower())
        ]
        hits.sort(key=lambda e: e.visit_count, reverse=True)
        return hits[: self._settings.history_limit]

    def result_items(self) -> tuple[ResultItem, ...]:
        return tuple(tab.to_result_item() for tab in self._tabs)

    def is_privileged(self, url: str) -> bool:
        return any(url.startswith(prefix) for prefix in self._settings.privileged_prefixes)

    # Mutations

    def activate(self, tab_id: int) -> bool:
        """Bring a tab to the front. Returns False for unknown ids."""
        tab = self.get_tab(tab_id)
        if tab is None:
            logger.debug(f"Ignoring activate for unknown tab {tab_id}")
            return False
        self._active_id = tab_id
        self._record_visit(tab)
        self._broadcast_refresh()
        return True

    def close(self, tab_id: int) -> bool:
        """Close a tab. Unknown ids are silently ignored."""
        tab = self.get_tab(tab_id)
        if tab is None:
            logger.debug(f"Ignoring close for unknown tab {tab_id}")
            return False

        index = self._tabs.index(tab)
        self._tabs.remove(tab)
        if self._active_id == tab_id:
            # Browser behaviour: focus the right neighbour, else the left one
            if self._tabs:
                self._active_id = self._tabs[min(index, len(self._tabs) - 1)].id
            else:
                self._active_id = None
        self._broadcast_refresh()
        return True

    def create(self, url: str) -> Tab:
        """Open a new tab at url and make it active."""
        tab_id = max((t.id for t in self._tabs), default=0) + 1
        tab = Tab(id=tab_id, title=url, url=url, loading=True)
        self._tabs.append(tab)
        self._active_id = tab_id
        self._broadcast_refresh()
        return tab

    def complete_load(self, tab_id: int, title: str | None = None, url: str | None = None) -> bool:
        """A tab finished loading, possibly with a new title or URL."""
        tab = self.get_tab(tab_id)
        if tab is None:
            return False
        if title is not None:
            tab.title = title
        if url is not None:
            tab.url = url
        tab.loading = False
        self._record_visit(tab)
        self._broadcast_refresh()
        return True

    def _record_visit(self, tab: Tab) -> None:
        if not tab.url or self.is_privileged(tab.url):
            return
        entry = self._history.get(tab.url)
        if entry is None:
            entry = HistoryEntry(
                id=uuid.uuid4().hex[:12],
                title=tab.title,
                url=tab.url,
                visit_count=0,
            )
            self._history[tab.url] = entry
        entry.title = tab.title
        entry.visit_count += 1
        entry.last_visit = self._clock()

    # Messaging

    def receive(self, payload: dict[str, Any]) -> None:
        """Decode a wire request and execute it.

        Raises:
            ProtocolError: Payload is not a known request
        """
        self.handle_request(parse_request(payload))

    def handle_request(self, request: Request) -> None:
        """Execute one request from the picker."""
        handler = self._handlers.get(type(request))
        if handler is None:
            raise ProtocolError(f"no handler for {type(request).__name__}")
        handler(request)

    def toggle_command(self) -> None:
        """The toggle shortcut was pressed.

        Raises:
            MissingCollaboratorDataError: No tab is active
        """
        active = self.require_active_tab()
        self._broadcast(OpenEvent(current_tab_id=active.id, result_items=self.result_items()))

    def answer_query(self, text: str) -> None:
        """Send live tabs, plus history hits when text is long enough."""
        items = list(self.result_items())
        if self._settings.wants_history(text):
            items.extend(entry.to_result_item() for entry in self.search_history(text))
        self._broadcast(FreshCandidatesEvent(result_items=tuple(items)))

    def _broadcast_refresh(self) -> None:
        active = self.active_tab()
        if active is None or self.is_privileged(active.url):
            return
        self._broadcast(RefreshEvent(result_items=self.result_items()))
