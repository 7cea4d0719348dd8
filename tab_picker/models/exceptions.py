"""Exception hierarchy for Tab Picker.

Internal invariant violations are loud; gaps in data supplied by the
tab directory are logged and skipped by the callers that see them.
"""


class PickerError(Exception):
    """Base exception for all Tab Picker errors.

    All domain-specific exceptions inherit from this base class,
    enabling consistent error handling across the application.
    """

    def __init__(self, message: str, suggestion: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.suggestion = suggestion

    def __str__(self) -> str:
        if self.suggestion:
            return f"{self.message} ({self.suggestion})"
        return self.message


class StaleReferenceError(PickerError):
    """Selected candidate id is not part of the rendered list."""

    pass


class PickerStateError(PickerError):
    """Picker is in an invalid state for the operation."""

    pass


class MissingCollaboratorDataError(PickerError):
    """Tab directory has no active tab or no tabs at all."""

    pass


class CommunicationError(PickerError):
    """A request could not be delivered to the tab directory."""

    pass


class InvalidCandidateShapeError(PickerError):
    """Result item cannot become a candidate (e.g. it has no title)."""

    pass


class ProtocolError(PickerError):
    """Message payload is malformed or of an unknown kind."""

    pass
