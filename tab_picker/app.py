"""Tab Picker: a keyboard-driven quick switcher.

Main Textual application. The tab directory plays the browser; the
picker overlay opens and closes with one global shortcut.
"""

import argparse
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import urlparse

from textual.app import App
from textual.binding import Binding

from tab_picker.models.events import DirectoryEventReceived
from tab_picker.models.exceptions import MissingCollaboratorDataError
from tab_picker.models.messages import CreateTabRequest, DirectoryEvent, Request
from tab_picker.screens.main import MainScreen
from tab_picker.screens.picker import PickerScreen
from tab_picker.services.config import ConfigManager, PickerSettings
from tab_picker.services.directory import TabDirectory
from tab_picker.services.events import EventBus, SessionClosedEvent, SessionOpenedEvent
from tab_picker.services.mediator import SyncMediator
from tab_picker.services.selection import SelectionStateMachine
from tab_picker.styles import BASE_CSS

logger = logging.getLogger(__name__)

DEBUG_ENV = "TAB_PICKER_DEBUG"
DEBUG_PATH_ENV = "TAB_PICKER_DEBUG_PATH"
DEFAULT_DEBUG_PATH = os.path.expanduser("~/.cache/tab-picker-debug.log")

# Seconds before a newly created tab reports load completion
LOAD_DELAY = 0.3

DEMO_SNAPSHOT = {
    "tabs": [
        {"id": 1, "title": "Inbox", "url": "https://mail.example.com/inbox", "active": True},
        {"id": 2, "title": "Docs", "url": "https://docs.python.org/3/"},
        {"id": 3, "title": "Textual - Guide", "url": "https://textual.textualize.io/guide/"},
        {"id": 4, "title": "GitHub - pull requests", "url": "https://github.com/pulls"},
    ],
    "history": [
        {"id": "1", "title": "Python Package Index", "url": "https://pypi.org/", "visitCount": 12},
        {"id": "2", "title": "pytest documentation", "url": "https://docs.pytest.org/", "visitCount": 7},
        {"id": "3", "title": "Rich documentation", "url": "https://rich.readthedocs.io/", "visitCount": 3},
    ],
}


@dataclass
class Services:
    """Application service container for dependency injection."""

    config: ConfigManager
    settings: PickerSettings
    directory: TabDirectory
    machine: SelectionStateMachine
    bus: EventBus

    @classmethod
    def create(
        cls,
        config: ConfigManager | None = None,
        snapshot_path: Path | None = None,
    ) -> "Services":
        """Wire up all services.

        Args:
            config: Config manager (defaults to ~/.config/tab-picker)
            snapshot_path: Tab/history snapshot overriding the configured one

        Returns:
            Services container; the directory falls back to demo data
        """
        config = config or ConfigManager()
        settings = config.settings
        if snapshot_path is not None:
            settings = settings.merge_with({"snapshot_path": snapshot_path})

        snapshot_path = settings.snapshot_path
        if snapshot_path is not None and snapshot_path.exists():
            directory = TabDirectory.load(snapshot_path, settings=settings)
        else:
            if snapshot_path is not None:
                logger.warning(f"Snapshot {snapshot_path} not found, using demo tabs")
            directory = TabDirectory.from_snapshot(DEMO_SNAPSHOT, settings=settings)

        return cls(
            config=config,
            settings=settings,
            directory=directory,
            machine=SelectionStateMachine(settings),
            bus=EventBus.get(),
        )


def _title_for(url: str) -> str:
    """Page title a freshly loaded URL gets."""
    parsed = urlparse(url)
    return parsed.netloc or url


class TabPickerApp(App):
    """The main Tab Picker application."""

    TITLE = "Tab Picker"
    CSS = BASE_CSS + """
    Screen {
        background: $background;
    }
    """

    BINDINGS = [
        Binding("ctrl+o", "toggle_picker", "Pick tab", priority=True),
        Binding("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, services: Services | None = None, **kwargs):
        """Initialize the app with injected services.

        Args:
            services: Service container (created if not provided)
            **kwargs: Additional Textual app arguments
        """
        super().__init__(**kwargs)
        self.services = services or Services.create()
        self.services.directory.set_broadcast(self._broadcast)
        self.mediator = SyncMediator(self.services.machine, self._send, self.services.bus)

    def on_mount(self) -> None:
        bus = self.services.bus
        bus.subscribe(SessionOpenedEvent, self._on_session_opened)
        bus.subscribe(SessionClosedEvent, self._on_session_closed)
        self.push_screen(MainScreen())
        self.call_after_refresh(self._refresh_tabs)

    def on_unmount(self) -> None:
        bus = self.services.bus
        bus.unsubscribe(SessionOpenedEvent, self._on_session_opened)
        bus.unsubscribe(SessionClosedEvent, self._on_session_closed)

    # Directory -> picker

    def _broadcast(self, event: DirectoryEvent) -> None:
        """Queue a directory event; the message queue keeps broadcast order."""
        self.post_message(DirectoryEventReceived(event))

    def on_directory_event_received(self, message: DirectoryEventReceived) -> None:
        self.mediator.handle(message.event)

    # Picker -> directory

    def _send(self, request: Request) -> None:
        """Fire-and-forget: the directory runs on a later turn of the loop."""
        self.call_later(self._deliver, request)

    def _deliver(self, request: Request) -> None:
        directory = self.services.directory
        if isinstance(request, CreateTabRequest):
            tab = directory.create(request.url)
            self.set_timer(
                LOAD_DELAY,
                lambda: self._complete_load(tab.id, _title_for(request.url)),
            )
        else:
            directory.receive(request.to_dict())
        self._refresh_tabs()

    def _complete_load(self, tab_id: int, title: str) -> None:
        self.services.directory.complete_load(tab_id, title=title)
        self._refresh_tabs()

    # Screens

    def _on_session_opened(self, event: SessionOpenedEvent) -> None:
        self.push_screen(PickerScreen(self.mediator, self.services.bus))

    def _on_session_closed(self, event: SessionClosedEvent) -> None:
        if isinstance(self.screen, PickerScreen):
            self.pop_screen()

    def _refresh_tabs(self) -> None:
        directory = self.services.directory
        active = directory.active_tab()
        for screen in self.screen_stack:
            if isinstance(screen, MainScreen):
                screen.show_tabs(directory.all_tabs(), active.id if active else None)

    def action_toggle_picker(self) -> None:
        """Global shortcut: open the picker, or close it when open."""
        try:
            self.services.directory.toggle_command()
        except MissingCollaboratorDataError as e:
            self.notify(str(e), severity="warning")


def debug_enabled() -> bool:
    return os.environ.get(DEBUG_ENV, "").strip() not in {"", "0", "false", "False"}


def _configure_logging() -> None:
    """Log to a file when debugging; the terminal belongs to the UI."""
    if not debug_enabled():
        return
    path = Path(os.environ.get(DEBUG_PATH_ENV, DEFAULT_DEBUG_PATH)).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        filename=path,
        level=logging.DEBUG,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main(argv: list[str] | None = None):
    """Run the Tab Picker application."""
    parser = argparse.ArgumentParser(prog="tab-picker", description=__doc__.splitlines()[0])
    parser.add_argument("--snapshot", type=Path, help="JSON file with tabs and history")
    args = parser.parse_args(argv)

    _configure_logging()
    services = Services.create(snapshot_path=args.snapshot)
    TabPickerApp(services=services).run()


if __name__ == "__main__":
    main()
