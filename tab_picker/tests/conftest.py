"""Shared test fixtures for Tab Picker."""

from datetime import datetime

import pytest

from tab_picker.services.config import PickerSettings
from tab_picker.services.directory import TabDirectory
from tab_picker.services.events import EventBus
from tab_picker.services.mediator import SyncMediator
from tab_picker.services.selection import SelectionStateMachine

NOW = datetime(2024, 5, 10, 12, 0, 0)


@pytest.fixture
def bus():
    """Fresh event bus for each test."""
    EventBus.reset()
    yield EventBus.get()
    EventBus.reset()


@pytest.fixture
def settings() -> PickerSettings:
    return PickerSettings()


@pytest.fixture
def machine(settings: PickerSettings) -> SelectionStateMachine:
    return SelectionStateMachine(settings)


@pytest.fixture
def sent() -> list:
    """Requests captured from the mediator."""
    return []


@pytest.fixture
def mediator(machine: SelectionStateMachine, sent: list, bus: EventBus) -> SyncMediator:
    return SyncMediator(machine, sent.append, bus)


@pytest.fixture
def broadcasts() -> list:
    """Events captured from the directory."""
    return []


@pytest.fixture
def directory(settings: PickerSettings, broadcasts: list) -> TabDirectory:
    """Directory with three tabs and some history, clock frozen at NOW."""
    data = {
        "tabs": [
            {"id": 1, "title": "Inbox", "url": "https://mail.test/inbox", "active": True},
            {"id": 2, "title": "Docs", "url": "https://docs.test/"},
            {"id": 3, "title": "News", "url": "https://news.test/"},
        ],
        "history": [
            {"id": "a", "title": "Docker docs", "url": "https://docker.test/", "visitCount": 2,
             "lastVisit": "2024-05-09T09:00:00"},
            {"id": "b", "title": "Docstring guide", "url": "https://pep257.test/", "visitCount": 9,
             "lastVisit": "2024-05-08T09:00:00"},
            {"id": "c", "title": "Old docs", "url": "https://old.test/", "visitCount": 50,
             "lastVisit": "2024-04-01T09:00:00"},
        ],
    }
    return TabDirectory.from_snapshot(
        data, settings=settings, broadcast=broadcasts.append, clock=lambda: NOW
    )
