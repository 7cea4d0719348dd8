"""Picker overlay: query input over the ranked candidate list.

All keys go to the sync mediator; the screen only re-renders when the
event bus reports a new generation or a moved highlight.
"""

from __future__ import annotations

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.widgets import Input, Static

from .base import PickerModalScreen
from ..services.events import EventBus, ListRegeneratedEvent, SelectionMovedEvent
from ..services.mediator import SyncMediator
from ..widgets.candidate_list import CandidateList


class PickerScreen(PickerModalScreen[None]):
    """Searchable tab picker modal."""

    BINDINGS = [
        Binding("escape", "dismiss_modal", "Cancel"),
        Binding("up", "move_up", "Up", show=False),
        Binding("down", "move_down", "Down", show=False),
        Binding("shift+tab", "move_up", "Up", show=False, priority=True),
        Binding("tab", "move_down", "Down", show=False, priority=True),
        Binding("alt+w", "close_tab", "Close tab", priority=True),
    ]

    DEFAULT_CSS = """
    PickerScreen #dialog {
        border: round $primary;
    }

    PickerScreen #picker-input {
        width: 100%;
        margin-bottom: 1;
    }

    PickerScreen #picker-input:focus {
        border: tall $primary;
    }
    """

    def __init__(self, mediator: SyncMediator, bus: EventBus | None = None) -> None:
        super().__init__()
        self._mediator = mediator
        self._bus = bus or EventBus.get()

    def compose(self) -> ComposeResult:
        self.add_class("modal-base", "modal-lg")

        with Vertical(id="dialog"):
            yield Static("tabs", classes="dialog-title")
            yield Input(placeholder="enter a tab...", id="picker-input")
            yield CandidateList(id="results")
            yield Static(
                "↑↓ navigate  enter go  alt+w close tab  esc cancel",
                classes="dialog-hint",
            )

    def on_mount(self) -> None:
        super().on_mount()
        self._bus.subscribe(ListRegeneratedEvent, self._on_list_regenerated)
        self._bus.subscribe(SelectionMovedEvent, self._on_selection_moved)
        self._render_list()
        self.query_one("#picker-input", Input).focus()

    def on_unmount(self) -> None:
        self._bus.unsubscribe(ListRegeneratedEvent, self._on_list_regenerated)
        self._bus.unsubscribe(SelectionMovedEvent, self._on_selection_moved)

    def _on_list_regenerated(self, event: ListRegeneratedEvent) -> None:
        self._render_list()

    def _on_selection_moved(self, event: SelectionMovedEvent) -> None:
        self.query_one("#results", CandidateList).select(event.selected_id)

    def _render_list(self) -> None:
        session = self._mediator.machine.session
        if session is None:
            return
        self.query_one("#results", CandidateList).show(
            list(session.candidates), session.selected_id, session.current_id
        )

    def on_input_changed(self, event: Input.Changed) -> None:
        """Recompute the list as the user types."""
        session = self._mediator.machine.session
        if session is not None and event.value != session.query:
            self._mediator.type_query(event.value)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        """Go to the highlighted candidate."""
        if self._mediator.machine.is_open:
            self._mediator.commit()

    def action_move_down(self) -> None:
        if self._mediator.machine.is_open:
            self._mediator.navigate_down()

    def action_move_up(self) -> None:
        if self._mediator.machine.is_open:
            self._mediator.navigate_up()

    def action_close_tab(self) -> None:
        if self._mediator.machine.is_open:
            self._mediator.close_selected()

    def action_dismiss_modal(self) -> None:
        """Escape ends the session; the app pops this screen."""
        self._mediator.dismiss()
