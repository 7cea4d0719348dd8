"""Tests for the sync mediator."""

import logging

import pytest

from tab_picker.models.candidate import FALLBACK_ID
from tab_picker.models.exceptions import CommunicationError, ProtocolError
from tab_picker.models.messages import (
    ActivateRequest,
    CloseRequest,
    CreateTabRequest,
    FreshCandidatesEvent,
    OpenEvent,
    QueryFreshCandidatesRequest,
    RefreshEvent,
)
from tab_picker.services.aggregator import aggregate, candidates_from_items
from tab_picker.services.events import (
    CloseReason,
    ListRegeneratedEvent,
    SelectionMovedEvent,
    SessionClosedEvent,
    SessionOpenedEvent,
)
from tab_picker.services.mediator import SyncMediator
from tab_picker.services.ranker import rank

from .helpers import history_item, live_item

ITEMS = (live_item(1, "Inbox"), live_item(2, "Docs"))


def _open(mediator, current=1, items=ITEMS):
    mediator.handle(OpenEvent(current_tab_id=current, result_items=items))


@pytest.fixture
def recorded(bus):
    """Bus events in emission order."""
    events = []
    for event_type in (SessionOpenedEvent, SessionClosedEvent, ListRegeneratedEvent, SelectionMovedEvent):
        bus.subscribe(event_type, events.append)
    return events


class TestOpenEvent:
    """Tests for the open command."""

    def test_opens_session(self, mediator, machine, recorded):
        """Open starts a session on the current tab."""
        _open(mediator)
        assert machine.is_open
        assert machine.session.ids == ["tab-1", "tab-2"]
        assert machine.selected.id == "tab-1"
        assert [type(e) for e in recorded] == [SessionOpenedEvent, ListRegeneratedEvent]
        assert recorded[0].current_id == "tab-1"

    def test_second_open_toggles_closed(self, mediator, machine, recorded):
        """Redundant open ends the session."""
        _open(mediator)
        _open(mediator)
        assert not machine.is_open
        assert isinstance(recorded[-1], SessionClosedEvent)
        assert recorded[-1].reason is CloseReason.DISMISSED

    def test_missing_current_tab_skipped(self, mediator, machine, caplog):
        """Open without an active tab is logged and skipped."""
        with caplog.at_level(logging.WARNING):
            _open(mediator, current=None)
        assert not machine.is_open
        assert "without an active tab" in caplog.text

    def test_no_tabs_skipped(self, mediator, machine):
        """Open with nothing to show is skipped."""
        _open(mediator, items=())
        assert not machine.is_open

    def test_titleless_tabs_skipped(self, mediator, machine):
        """Items without titles don't count as tabs."""
        _open(mediator, items=(live_item(1, " "),))
        assert not machine.is_open


class TestRefreshEvent:
    """Tests for refresh broadcasts."""

    def test_ignored_while_closed(self, mediator, machine):
        mediator.handle(RefreshEvent(result_items=ITEMS))
        assert not machine.is_open

    def test_updates_list(self, mediator, machine):
        """New tabs show up."""
        _open(mediator)
        mediator.handle(RefreshEvent(result_items=ITEMS + (live_item(3, "News"),)))
        assert machine.session.ids == ["tab-1", "tab-2", "tab-3"]

    def test_empty_refresh_keeps_list(self, mediator, machine):
        """Missing data leaves the last list on screen."""
        _open(mediator)
        mediator.handle(RefreshEvent(result_items=()))
        assert machine.session.ids == ["tab-1", "tab-2"]


class TestTyping:
    """Tests for query text and fresh candidates."""

    def test_type_query_sends_request(self, mediator, machine, sent):
        """Each keystroke asks for fresh candidates."""
        _open(mediator)
        mediator.type_query("doc")
        assert sent == [QueryFreshCandidatesRequest(input="doc")]
        assert machine.session.ids == ["tab-2", FALLBACK_ID]

    def test_fresh_adds_history(self, mediator, machine):
        """History from the answer is ranked after open tabs."""
        _open(mediator)
        mediator.type_query("doc")
        mediator.handle(FreshCandidatesEvent(result_items=ITEMS + (history_item("b", "Docstring guide"),)))
        assert machine.session.ids == ["tab-2", "history-b", FALLBACK_ID]

    def test_history_sticks_across_refresh(self, mediator, machine):
        """Plain refreshes reuse the last history hits."""
        _open(mediator)
        mediator.type_query("doc")
        mediator.handle(FreshCandidatesEvent(result_items=ITEMS + (history_item("b", "Docstring guide"),)))
        mediator.handle(RefreshEvent(result_items=ITEMS))
        assert "history-b" in machine.session.ids

    def test_last_event_wins(self, mediator, machine):
        """A refresh racing a fresh answer ends consistent with the final state."""
        _open(mediator)
        mediator.type_query("doc")
        tabs = ITEMS + (live_item(3, "Docker hub"),)
        mediator.handle(RefreshEvent(result_items=tabs))
        assert machine.session.ids == ["tab-2", "tab-3", FALLBACK_ID]

        answer = tabs + (history_item("b", "Docstring guide"),)
        mediator.handle(FreshCandidatesEvent(result_items=answer))
        live, hits = candidates_from_items(answer)
        expected = rank(aggregate(live, hits, "doc"), "doc")
        assert machine.candidates == expected

    def test_fresh_ignored_while_closed(self, mediator, machine):
        mediator.handle(FreshCandidatesEvent(result_items=ITEMS))
        assert not machine.is_open


class TestIntents:
    """Tests for navigation, close and commit."""

    def test_navigation_emits_moves(self, mediator, recorded):
        _open(mediator)
        mediator.navigate_down()
        mediator.navigate_up()
        moves = [e.selected_id for e in recorded if isinstance(e, SelectionMovedEvent)]
        assert moves == ["tab-2", "tab-1"]

    def test_close_selected_sends_request(self, mediator, machine, sent):
        """Closing moves the highlight and asks the directory."""
        _open(mediator)
        mediator.close_selected()
        assert sent == [CloseRequest(tab_id=1, input="")]
        assert machine.selected.id == "tab-2"

    def test_commit_live(self, mediator, machine, sent, recorded):
        """Committing an open tab activates it."""
        _open(mediator)
        mediator.navigate_down()
        mediator.commit()
        assert sent == [ActivateRequest(tab_id=2)]
        assert not machine.is_open
        assert recorded[-1].reason is CloseReason.ACTIVATED

    def test_commit_fallback(self, mediator, sent, recorded):
        """Committing the fallback opens a new tab."""
        _open(mediator)
        mediator.type_query("github.com")
        mediator.commit()
        assert sent[-1] == CreateTabRequest(url="https://github.com")
        assert recorded[-1].reason is CloseReason.CREATED

    def test_dismiss(self, mediator, machine, sent, recorded):
        """Dismiss closes without sending anything."""
        _open(mediator)
        mediator.dismiss()
        assert not machine.is_open
        assert sent == []
        assert recorded[-1].reason is CloseReason.DISMISSED

    def test_dismiss_when_closed_is_noop(self, mediator, recorded):
        mediator.dismiss()
        assert recorded == []


class TestFailures:
    """Tests for protocol and delivery failures."""

    def test_send_failure_logged(self, machine, bus, caplog):
        """Undeliverable requests don't break the session."""

        def failing(request):
            raise CommunicationError("port disconnected")

        mediator = SyncMediator(machine, failing, bus)
        _open(mediator)
        with caplog.at_level(logging.WARNING):
            mediator.type_query("doc")
        assert machine.session.query == "doc"
        assert "port disconnected" in caplog.text

    def test_receive_decodes_payload(self, mediator, machine):
        """Wire dicts are decoded before handling."""
        mediator.receive(OpenEvent(current_tab_id=2, result_items=ITEMS).to_dict())
        assert machine.selected.id == "tab-2"

    def test_receive_unknown_action(self, mediator):
        with pytest.raises(ProtocolError):
            mediator.receive({"action": "explode"})

    def test_receive_bad_tab_id(self, mediator, machine):
        """Malformed ids surface as protocol errors."""
        with pytest.raises(ProtocolError):
            mediator.receive({"action": "open", "currentTabId": "abc", "resultItems": []})
        assert not machine.is_open

    def test_handle_unknown_event(self, mediator):
        with pytest.raises(ProtocolError):
            mediator.handle(object())
