"""Base screen classes."""

from typing import Generic, TypeVar

from textual.screen import ModalScreen

# Type variable for modal return types
ModalResultType = TypeVar("ModalResultType", covariant=True)


class PickerModalScreen(ModalScreen[ModalResultType], Generic[ModalResultType]):
    """Modal that keeps keyboard focus inside itself.

    Subclasses lay out a Vertical#dialog using the modal-base/modal-lg
    classes from styles.base and call super().on_mount().
    """

    def on_mount(self) -> None:
        self.trap_focus = True
