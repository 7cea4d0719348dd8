"""CandidateList widget: renders one ranked generation.

The list holds no selection state of its own. It is handed the
candidates, the selected id and the current id by the picker screen,
which reads them from the selection state machine.
"""

from rich.markup import escape
from textual.containers import VerticalScroll
from textual.widgets import Static

from ..models.candidate import Candidate


class CandidateItem(Static):
    """A single candidate row: marker, highlighted title, dimmed URL."""

    DEFAULT_CSS = """
    CandidateItem {
        width: 100%;
        height: 1;
        padding: 0 1;
    }

    CandidateItem.selected {
        background: $surface-lighten-1;
        color: $accent;
    }

    CandidateItem.current {
        text-style: bold;
    }

    CandidateItem.fallback {
        color: $success;
    }
    """

    def __init__(self, candidate: Candidate, selected: bool = False, current: bool = False) -> None:
        super().__init__(self._line(candidate, current))
        self.candidate = candidate
        self.add_class(candidate.provenance.value)
        if selected:
            self.add_class("selected")
        if current:
            self.add_class("current")

    @staticmethod
    def _line(candidate: Candidate, current: bool) -> str:
        marker = "›" if current else candidate.provenance.glyph
        title = candidate.highlighted_title or escape(candidate.title)
        return f"{marker} {title}  [dim]{escape(candidate.url)}[/dim]"

    def set_selected(self, selected: bool) -> None:
        if selected:
            self.add_class("selected")
        else:
            self.remove_class("selected")


class CandidateList(VerticalScroll, can_focus=False):
    """Scrollable list of candidate rows."""

    DEFAULT_CSS = """
    CandidateList {
        height: auto;
        max-height: 60vh;
        min-height: 3;
    }

    CandidateList .empty-list {
        color: $text-disabled;
        text-align: center;
        padding: 1;
    }
    """

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._items: dict[str, CandidateItem] = {}

    def show(
        self,
        candidates: list[Candidate],
        selected_id: str | None,
        current_id: str | None,
    ) -> None:
        """Rebuild the rows for a new generation."""
        self.remove_children()
        self._items = {}

        if not candidates:
            self.mount(Static("no matching tabs", classes="empty-list"))
            return

        items = []
        for candidate in candidates:
            item = CandidateItem(
                candidate,
                selected=candidate.id == selected_id,
                current=candidate.id == current_id,
            )
            self._items[candidate.id] = item
            items.append(item)
        self.mount(*items)
        self._scroll_to(selected_id)

    def select(self, selected_id: str | None) -> None:
        """Move the highlight without rebuilding rows."""
        for candidate_id, item in self._items.items():
            item.set_selected(candidate_id == selected_id)
        self._scroll_to(selected_id)

    def _scroll_to(self, selected_id: str | None) -> None:
        item = self._items.get(selected_id) if selected_id else None
        if item is not None:
            self.call_after_refresh(self.scroll_to_widget, item, animate=False)

    @property
    def rendered_ids(self) -> list[str]:
        return list(self._items)
