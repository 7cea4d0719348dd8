"""EventBus: Decoupled engine-to-UI communication.

The mediator emits picker lifecycle events after every transition;
screens subscribe and re-render from the state machine.

Usage:
    # In the mediator (emit events)
    bus = EventBus.get()
    bus.emit(ListRegeneratedEvent(selected_id="tab-3"))

    # In screens (subscribe to events)
    bus = EventBus.get()
    bus.subscribe(ListRegeneratedEvent, self._on_regenerated)

    # Cleanup on unmount
    bus.unsubscribe(ListRegeneratedEvent, self._on_regenerated)
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable, TypeVar
import logging
import weakref

logger = logging.getLogger(__name__)

# Event type variable for generic typing
E = TypeVar("E", bound="Event")


@dataclass
class Event:
    """Base class for all picker events."""

    timestamp: datetime = field(default_factory=datetime.now)


class CloseReason(Enum):
    """Why a picker session ended."""

    DISMISSED = "dismissed"  # Escape, or redundant toggle
    ACTIVATED = "activated"  # Switched to an open tab
    CREATED = "created"  # Opened a history entry or typed destination


@dataclass
class SessionOpenedEvent(Event):
    """Emitted when a picker session starts."""

    current_id: str | None = None


@dataclass
class SessionClosedEvent(Event):
    """Emitted when a picker session ends."""

    reason: CloseReason = CloseReason.DISMISSED


@dataclass
class ListRegeneratedEvent(Event):
    """Emitted when the ranked list has been recomputed."""

    size: int = 0
    selected_id: str | None = None


@dataclass
class SelectionMovedEvent(Event):
    """Emitted when only the highlighted entry changed."""

    selected_id: str | None = None


# Type alias for event handlers
EventHandler = Callable[[Event], None]


class EventBus:
    """Process-wide pub/sub between the picker engine and its views.

    One bus per application (see get()). Handlers subscribed with
    weak=True are dropped once their owner is garbage collected.
    """

    _instance: "EventBus | None" = None

    def __init__(self) -> None:
        self._strong: dict[type[Event], list[EventHandler]] = {}
        self._weak: dict[type[Event], list[weakref.WeakMethod]] = {}

    @classmethod
    def get(cls) -> "EventBus":
        """Get the singleton event bus instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset the singleton (for testing)."""
        cls._instance = None

    def subscribe(
        self,
        event_type: type[E],
        handler: Callable[[E], None],
        weak: bool = False,
    ) -> None:
        """Register handler for event_type. Registering twice is a no-op.

        Args:
            event_type: The event class to subscribe to
            handler: Called with each emitted event of that class
            weak: Hold only a weak reference; handler must be a bound method
        """
        if handler in self.handlers(event_type):
            return
        if weak:
            self._weak.setdefault(event_type, []).append(weakref.WeakMethod(handler))
        else:
            self._strong.setdefault(event_type, []).append(handler)

    def unsubscribe(self, event_type: type[E], handler: Callable[[E], None]) -> None:
        """Remove handler. Unknown handlers are ignored."""
        strong = self._strong.get(event_type, [])
        if handler in strong:
            strong.remove(handler)
        if event_type in self._weak:
            self._weak[event_type] = [
                ref for ref in self._weak[event_type]
                if ref() is not None and ref() != handler
            ]

    def handlers(self, event_type: type[Event]) -> list[EventHandler]:
        """Live handlers for event_type, strong ones first."""
        refs = self._weak.get(event_type, [])
        alive = [ref for ref in refs if ref() is not None]
        if len(alive) != len(refs):
            self._weak[event_type] = alive
        return list(self._strong.get(event_type, [])) + [ref() for ref in alive]

    def emit(self, event: Event) -> None:
        """Deliver event to every handler of its exact type.

        A failing handler is logged and the rest still run.
        """
        for handler in self.handlers(type(event)):
            self._dispatch(handler, event)

    def _dispatch(self, handler: EventHandler, event: Event) -> None:
        try:
            handler(event)
        except Exception as e:
            logger.error(f"Event handler error for {type(event).__name__}: {e}")

    def subscriber_count(self, event_type: type[Event]) -> int:
        return len(self.handlers(event_type))

    def clear(self) -> None:
        """Clear all subscribers (for testing)."""
        self._strong.clear()
        self._weak.clear()
