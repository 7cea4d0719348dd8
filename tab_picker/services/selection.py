"""Selection state machine: which candidate is highlighted, across regenerations.

States are Closed and Open. All per-session data lives on one
PickerSession object, created on open and dropped on close, so nothing
leaks from one session into the next.

The machine is the source of truth for the selection; views render
from it and never the other way round. Intents that need the tab
directory are returned as request objects for the mediator to send.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

from ..models.candidate import Candidate, live_candidate_id
from ..models.exceptions import PickerStateError, StaleReferenceError
from ..models.messages import (
    ActivateRequest,
    CloseRequest,
    CreateTabRequest,
    QueryFreshCandidatesRequest,
)
from .aggregator import aggregate
from .config import PickerSettings
from .ranker import rank

logger = logging.getLogger(__name__)


class PickerState(Enum):
    """Picker lifecycle state."""

    CLOSED = "closed"
    OPEN = "open"


@dataclass
class PickerSession:
    """Everything one open-to-close lifetime of the picker knows."""

    # Candidate id of the tab that was active when the session opened
    current_id: str | None
    # Keyboard-highlighted candidate id
    selected_id: str | None = None
    query: str = ""
    live: list[Candidate] = field(default_factory=list)
    # History hits from the latest fresh-candidates answer. Sticky: plain
    # refreshes reuse them until the next answer replaces them.
    history: list[Candidate] = field(default_factory=list)
    # Current ranked generation
    candidates: list[Candidate] = field(default_factory=list)
    # Set once the user moves the highlight after the last query change
    navigated: bool = False

    @property
    def ids(self) -> list[str]:
        return [c.id for c in self.candidates]

    def index_of(self, candidate_id: str | None) -> int | None:
        """Position of candidate_id in the current generation, or None."""
        if candidate_id is None:
            return None
        for i, candidate in enumerate(self.candidates):
            if candidate.id == candidate_id:
                return i
        return None


class SelectionStateMachine:
    """Owns the picker session and every transition on it."""

    def __init__(self, settings: PickerSettings | None = None) -> None:
        self._settings = settings or PickerSettings()
        self._session: PickerSession | None = None

    @property
    def state(self) -> PickerState:
        return PickerState.OPEN if self._session is not None else PickerState.CLOSED

    @property
    def is_open(self) -> bool:
        return self._session is not None

    @property
    def session(self) -> PickerSession | None:
        return self._session

    @property
    def candidates(self) -> list[Candidate]:
        """Current ranked generation (empty when closed)."""
        if self._session is None:
            return []
        return list(self._session.candidates)

    @property
    def selected(self) -> Candidate | None:
        """The highlighted candidate.

        Raises:
            StaleReferenceError: The selected id is missing from the list,
                or nothing is selected although the list is non-empty
        """
        session = self._session
        if session is None:
            return None
        if session.selected_id is None:
            if session.candidates:
                raise StaleReferenceError("nothing selected in a non-empty list")
            return None
        index = session.index_of(session.selected_id)
        if index is None:
            raise StaleReferenceError(
                f"selected candidate {session.selected_id!r} is not in the rendered list"
            )
        return session.candidates[index]

    @property
    def current(self) -> Candidate | None:
        """Candidate for the tab active at open, if it survived filtering."""
        session = self._session
        if session is None:
            return None
        index = session.index_of(session.current_id)
        return session.candidates[index] if index is not None else None

    def _require_session(self) -> PickerSession:
        if self._session is None:
            raise PickerStateError("picker is closed", "open it with the toggle shortcut first")
        return self._session

    def _regenerate(self) -> None:
        """Recompute the ranked list from scratch. Never patched in place."""
        session = self._require_session()
        aggregated = aggregate(session.live, session.history, session.query, self._settings.search_url)
        session.candidates = rank(aggregated, session.query, self._settings.score_threshold)

    def _select_first(self) -> None:
        session = self._require_session()
        session.selected_id = session.candidates[0].id if session.candidates else None

    def _carry_selection(self, fallback_index: int) -> None:
        """Keep the selected id if it survived, else clamp fallback_index into range."""
        session = self._require_session()
        if session.index_of(session.selected_id) is not None:
            return
        if not session.candidates:
            session.selected_id = None
            return
        index = min(max(fallback_index, 0), len(session.candidates) - 1)
        session.selected_id = session.candidates[index].id

    # Transitions

    def open(self, current_tab_id: int, live: list[Candidate]) -> PickerSession:
        """Start a session.

        The tab that was active is highlighted when it is listed,
        otherwise the first ranked candidate is.
        """
        if self._session is not None:
            raise PickerStateError("picker is already open")

        session = PickerSession(current_id=live_candidate_id(current_tab_id), live=list(live))
        self._session = session
        self._regenerate()
        if session.index_of(session.current_id) is not None:
            session.selected_id = session.current_id
        else:
            self._select_first()
        logger.debug(f"Session opened on {session.current_id} with {len(live)} tabs")
        return session

    def change_query(self, query: str) -> QueryFreshCandidatesRequest:
        """Recompute for new query text and reset the highlight to the top."""
        session = self._require_session()
        session.query = query
        session.selected_id = None
        session.navigated = False
        self._regenerate()
        self._select_first()
        return QueryFreshCandidatesRequest(input=query)

    def move_down(self) -> str | None:
        return self._move(1)

    def move_up(self) -> str | None:
        return self._move(-1)

    def _move(self, step: int) -> str | None:
        """Move the highlight, wrapping at either end. No-op on an empty list."""
        session = self._require_session()
        if not session.candidates:
            return None
        selected = self.selected
        index = session.index_of(selected.id)
        index = (index + step) % len(session.candidates)
        session.selected_id = session.candidates[index].id
        session.navigated = True
        return session.selected_id

    def close_selected(self) -> CloseRequest | None:
        """Request closing the highlighted open tab.

        The highlight moves to the next sibling (or the previous one at the
        end of the list) before the request goes out, so it is still valid
        once the refresh without the closed tab arrives.
        """
        session = self._require_session()
        selected = self.selected
        if selected is None or not selected.is_live:
            return None

        index = session.index_of(selected.id)
        if index + 1 < len(session.candidates):
            session.selected_id = session.candidates[index + 1].id
        elif index > 0:
            session.selected_id = session.candidates[index - 1].id
        return CloseRequest(tab_id=selected.tab_id, input=session.query)

    def apply_refresh(self, live: list[Candidate]) -> None:
        """Tabs changed outside the picker. Cached history is reused."""
        session = self._require_session()
        previous_index = session.index_of(session.selected_id)
        session.live = list(live)
        self._regenerate()
        self._carry_selection(previous_index if previous_index is not None else 0)

    def apply_fresh(self, live: list[Candidate], history: list[Candidate]) -> None:
        """Answer to a query arrived. Replaces the cached history."""
        session = self._require_session()
        session.live = list(live)
        session.history = list(history)
        self._regenerate()
        if session.navigated:
            self._carry_selection(0)
        else:
            self._select_first()

    def commit(self) -> ActivateRequest | CreateTabRequest | None:
        """Go to the highlighted candidate and end the session.

        Returns None (and stays open) when there is nothing to go to.
        """
        self._require_session()
        selected = self.selected
        if selected is None:
            return None

        if selected.is_live:
            request = ActivateRequest(tab_id=selected.tab_id)
        else:
            request = CreateTabRequest(url=selected.url)
        self._session = None
        return request

    def dismiss(self) -> None:
        """End the session unconditionally."""
        self._session = None
