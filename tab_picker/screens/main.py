"""Main screen: the open tabs, as the tab directory sees them."""

from rich.markup import escape
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.screen import Screen
from textual.widgets import Footer, Static

from ..services.directory import Tab


class MainScreen(Screen):
    """Lists open tabs and marks the active one."""

    DEFAULT_CSS = """
    MainScreen #tabs {
        padding: 1 2;
    }

    MainScreen .empty-list {
        color: $text-disabled;
        padding: 2;
        text-align: center;
    }
    """

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Static("open tabs", classes="dialog-title")
            yield Static("", id="tabs")
        yield Footer()

    def show_tabs(self, tabs: list[Tab], active_id: int | None) -> None:
        """Redraw the tab list."""
        tabs_view = self.query_one("#tabs", Static)
        if not tabs:
            tabs_view.update("[dim]no open tabs[/dim]")
            return

        lines = []
        for tab in tabs:
            marker = "●" if tab.id == active_id else "○"
            state = "  [dim]loading[/dim]" if tab.loading else ""
            lines.append(f"{marker} {escape(tab.title)}  [dim]{escape(tab.url)}[/dim]{state}")
        tabs_view.update("\n".join(lines))
