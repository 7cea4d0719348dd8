"""Sync mediator between the picker and the tab directory.

Inbound directory events become state machine transitions; state
machine intents become outbound requests. Events are applied one at a
time in the order they are handed in. Requests are fire-and-forget:
nothing is retried, and if the directory never answers the picker just
keeps showing its last list.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from ..models.exceptions import CommunicationError, ProtocolError
from ..models.messages import (
    ActivateRequest,
    DirectoryEvent,
    FreshCandidatesEvent,
    OpenEvent,
    RefreshEvent,
    Request,
    parse_event,
)
from .aggregator import candidates_from_items
from .events import (
    CloseReason,
    EventBus,
    ListRegeneratedEvent,
    SelectionMovedEvent,
    SessionClosedEvent,
    SessionOpenedEvent,
)
from .selection import SelectionStateMachine

logger = logging.getLogger(__name__)

# Delivers a request to the directory; may raise CommunicationError
RequestSink = Callable[[Request], None]


class SyncMediator:
    """Routes directory events into the state machine and intents back out."""

    def __init__(
        self,
        machine: SelectionStateMachine,
        send: RequestSink,
        bus: EventBus | None = None,
    ) -> None:
        self._machine = machine
        self._send_request = send
        self._bus = bus or EventBus.get()
        self._handlers: dict[type, Callable[[Any], None]] = {
            OpenEvent: self._on_open,
            RefreshEvent: self._on_refresh,
            FreshCandidatesEvent: self._on_fresh_candidates,
        }

    @property
    def machine(self) -> SelectionStateMachine:
        return self._machine

    # Inbound

    def receive(self, payload: dict[str, Any]) -> None:
        """Decode a wire payload and handle it.

        Raises:
            ProtocolError: Payload is not a known event
        """
        self.handle(parse_event(payload))

    def handle(self, event: DirectoryEvent) -> None:
        """Apply one directory event."""
        handler = self._handlers.get(type(event))
        if handler is None:
            raise ProtocolError(f"no handler for {type(event).__name__}")
        handler(event)

    def _on_open(self, event: OpenEvent) -> None:
        # Toggle: a second open command ends the running session
        if self._machine.is_open:
            self._machine.dismiss()
            self._bus.emit(SessionClosedEvent(reason=CloseReason.DISMISSED))
            return

        if event.current_tab_id is None:
            logger.warning("Open command without an active tab, not opening")
            return
        live, _ = candidates_from_items(event.result_items)
        if not live:
            logger.warning("Open command with no tabs, not opening")
            return

        session = self._machine.open(event.current_tab_id, live)
        self._bus.emit(SessionOpenedEvent(current_id=session.current_id))
        self._emit_regenerated()

    def _on_refresh(self, event: RefreshEvent) -> None:
        if not self._machine.is_open:
            logger.debug("Ignoring refresh while closed")
            return
        live, _ = candidates_from_items(event.result_items)
        if not live:
            logger.warning("Refresh with no tabs, keeping last list")
            return
        self._machine.apply_refresh(live)
        self._emit_regenerated()

    def _on_fresh_candidates(self, event: FreshCandidatesEvent) -> None:
        if not self._machine.is_open:
            logger.debug("Ignoring fresh candidates while closed")
            return
        live, history = candidates_from_items(event.result_items)
        if not live:
            logger.warning("Fresh candidates with no tabs, keeping last list")
            return
        self._machine.apply_fresh(live, history)
        self._emit_regenerated()

    # Outbound intents

    def type_query(self, text: str) -> None:
        request = self._machine.change_query(text)
        self._emit_regenerated()
        self._send(request)

    def navigate_down(self) -> None:
        selected_id = self._machine.move_down()
        self._bus.emit(SelectionMovedEvent(selected_id=selected_id))

    def navigate_up(self) -> None:
        selected_id = self._machine.move_up()
        self._bus.emit(SelectionMovedEvent(selected_id=selected_id))

    def close_selected(self) -> None:
        request = self._machine.close_selected()
        if request is None:
            return
        session = self._machine.session
        self._bus.emit(SelectionMovedEvent(selected_id=session.selected_id if session else None))
        self._send(request)

    def commit(self) -> None:
        selected = self._machine.selected
        request = self._machine.commit()
        if request is None:
            return
        if isinstance(request, ActivateRequest):
            reason = CloseReason.ACTIVATED
        else:
            reason = CloseReason.CREATED
        logger.debug(f"Committing {selected.id} via {request.ACTION}")
        self._bus.emit(SessionClosedEvent(reason=reason))
        self._send(request)

    def dismiss(self) -> None:
        if not self._machine.is_open:
            return
        self._machine.dismiss()
        self._bus.emit(SessionClosedEvent(reason=CloseReason.DISMISSED))

    def _send(self, request: Request) -> None:
        try:
            self._send_request(request)
        except CommunicationError as e:
            logger.warning(f"Could not deliver {request.ACTION} request: {e}")

    def _emit_regenerated(self) -> None:
        session = self._machine.session
        if session is None:
            return
        self._bus.emit(
            ListRegeneratedEvent(size=len(session.candidates), selected_id=session.selected_id)
        )
