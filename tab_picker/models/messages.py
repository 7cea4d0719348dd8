"""Messages exchanged between the picker and the tab directory.

Requests flow from the picker to the directory, events flow back.
Each variant is a frozen dataclass tagged with its wire ``ACTION`` so
callers can dispatch on the class instead of poking at dict keys.

Wire shapes:
    {"action": "goTo", "options": {"tabId": 3}}
    {"action": "refresh", "resultItems": [{"type": "goTo", ...}]}
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Union

from .exceptions import ProtocolError

RESULT_TYPE_LIVE = "goTo"
RESULT_TYPE_HISTORY = "history"
RESULT_TYPE_NEW = "new"

RESULT_TYPES = (RESULT_TYPE_LIVE, RESULT_TYPE_HISTORY, RESULT_TYPE_NEW)


@dataclass(frozen=True)
class ResultItem:
    """One tab, history entry or synthesized destination as sent over the wire."""

    type: str
    id: str
    title: str
    url: str
    fuzzy_score: float = -1
    fav_icon_url: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "id": self.id,
            "title": self.title,
            "url": self.url,
            "fuzzyScore": self.fuzzy_score,
            "favIconUrl": self.fav_icon_url,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ResultItem":
        if not isinstance(data, dict):
            raise ProtocolError(f"result item is not an object: {data!r}")
        item_type = data.get("type")
        if item_type not in RESULT_TYPES:
            raise ProtocolError(f"unknown result item type: {item_type!r}")
        if "id" not in data:
            raise ProtocolError("result item without id")
        return cls(
            type=item_type,
            id=str(data["id"]),
            title=data.get("title") or "",
            url=data.get("url") or "",
            fuzzy_score=data.get("fuzzyScore", -1),
            fav_icon_url=data.get("favIconUrl") or None,
        )


def _items_to_dicts(items: tuple[ResultItem, ...]) -> list[dict[str, Any]]:
    return [item.to_dict() for item in items]


def _items_from_payload(payload: dict[str, Any]) -> tuple[ResultItem, ...]:
    raw = payload.get("resultItems")
    if not isinstance(raw, list):
        raise ProtocolError(f"{payload.get('action')!r} event without resultItems")
    return tuple(ResultItem.from_dict(item) for item in raw)


def _tab_id(value: Any, key: str) -> int:
    # bool is an int subclass; reject it like any other non-id
    if isinstance(value, bool):
        raise ProtocolError(f"{key} is not a tab id: {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ProtocolError(f"{key} is not a tab id: {value!r}") from e


def _option(payload: dict[str, Any], key: str) -> Any:
    options = payload.get("options")
    if not isinstance(options, dict) or key not in options:
        raise ProtocolError(f"{payload.get('action')!r} request missing option {key!r}")
    return options[key]


# Requests (picker -> directory)


@dataclass(frozen=True)
class ActivateRequest:
    """Bring an open tab to the front."""

    ACTION: ClassVar[str] = "goTo"

    tab_id: int

    def to_dict(self) -> dict[str, Any]:
        return {"action": self.ACTION, "options": {"tabId": self.tab_id}}


@dataclass(frozen=True)
class CloseRequest:
    """Close an open tab; ``input`` is the query text at the time of closing."""

    ACTION: ClassVar[str] = "close"

    tab_id: int
    input: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"action": self.ACTION, "options": {"tabId": self.tab_id, "input": self.input}}


@dataclass(frozen=True)
class CreateTabRequest:
    """Open a new tab at ``url``."""

    ACTION: ClassVar[str] = "newTab"

    url: str

    def to_dict(self) -> dict[str, Any]:
        return {"action": self.ACTION, "options": {"url": self.url}}


@dataclass(frozen=True)
class QueryFreshCandidatesRequest:
    """Ask for live tabs plus history hits for the typed text."""

    ACTION: ClassVar[str] = "getFreshTabs"

    input: str

    def to_dict(self) -> dict[str, Any]:
        return {"action": self.ACTION, "options": {"input": self.input}}


Request = Union[ActivateRequest, CloseRequest, CreateTabRequest, QueryFreshCandidatesRequest]


# Events (directory -> picker)


@dataclass(frozen=True)
class OpenEvent:
    """Toggle shortcut pressed; carries the active tab and all live tabs."""

    ACTION: ClassVar[str] = "open"

    current_tab_id: int | None
    result_items: tuple[ResultItem, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {
            "action": self.ACTION,
            "currentTabId": self.current_tab_id,
            "resultItems": _items_to_dicts(self.result_items),
        }


@dataclass(frozen=True)
class RefreshEvent:
    """Tabs changed outside the picker; carries all live tabs."""

    ACTION: ClassVar[str] = "refresh"

    result_items: tuple[ResultItem, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {"action": self.ACTION, "resultItems": _items_to_dicts(self.result_items)}


@dataclass(frozen=True)
class FreshCandidatesEvent:
    """Answer to a QueryFreshCandidatesRequest: live tabs plus history hits."""

    ACTION: ClassVar[str] = "getFreshTabs"

    result_items: tuple[ResultItem, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {"action": self.ACTION, "resultItems": _items_to_dicts(self.result_items)}


DirectoryEvent = Union[OpenEvent, RefreshEvent, FreshCandidatesEvent]


def parse_request(payload: dict[str, Any]) -> Request:
    """Decode a request dict into its tagged variant.

    Raises:
        ProtocolError: Unknown action or missing options
    """
    if not isinstance(payload, dict):
        raise ProtocolError(f"request is not an object: {payload!r}")
    action = payload.get("action")
    if action == ActivateRequest.ACTION:
        return ActivateRequest(tab_id=_tab_id(_option(payload, "tabId"), "tabId"))
    if action == CloseRequest.ACTION:
        return CloseRequest(
            tab_id=_tab_id(_option(payload, "tabId"), "tabId"),
            input=payload["options"].get("input", ""),
        )
    if action == CreateTabRequest.ACTION:
        return CreateTabRequest(url=_option(payload, "url"))
    if action == QueryFreshCandidatesRequest.ACTION:
        return QueryFreshCandidatesRequest(input=_option(payload, "input"))
    raise ProtocolError(f"unknown request action: {action!r}")


def parse_event(payload: dict[str, Any]) -> DirectoryEvent:
    """Decode an event dict into its tagged variant.

    Raises:
        ProtocolError: Unknown action or missing result items
    """
    if not isinstance(payload, dict):
        raise ProtocolError(f"event is not an object: {payload!r}")
    action = payload.get("action")
    if action == OpenEvent.ACTION:
        current = payload.get("currentTabId")
        return OpenEvent(
            current_tab_id=_tab_id(current, "currentTabId") if current is not None else None,
            result_items=_items_from_payload(payload),
        )
    if action == RefreshEvent.ACTION:
        return RefreshEvent(result_items=_items_from_payload(payload))
    if action == FreshCandidatesEvent.ACTION:
        return FreshCandidatesEvent(result_items=_items_from_payload(payload))
    raise ProtocolError(f"unknown event action: {action!r}")
