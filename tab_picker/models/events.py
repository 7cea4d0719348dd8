"""Custom Textual Message events for Tab Picker UI.

Note: Picker lifecycle events (SessionOpened, ListRegenerated, etc.) are in
services/events.py and use the EventBus pattern.
"""

from textual.message import Message

from .messages import DirectoryEvent


class DirectoryEventReceived(Message):
    """Fired when the tab directory broadcasts an event to the picker.

    Posting through the message queue delivers events one at a time,
    in the order they were broadcast.
    """

    def __init__(self, event: DirectoryEvent) -> None:
        self.event = event
        super().__init__()
