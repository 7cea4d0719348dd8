"""Data models for Tab Picker."""

from .candidate import (
    FALLBACK_ID,
    Candidate,
    Provenance,
    history_candidate_id,
    live_candidate_id,
)
from .messages import (
    ActivateRequest,
    CloseRequest,
    CreateTabRequest,
    DirectoryEvent,
    FreshCandidatesEvent,
    OpenEvent,
    QueryFreshCandidatesRequest,
    RefreshEvent,
    Request,
    ResultItem,
    parse_event,
    parse_request,
)
from .exceptions import (
    PickerError,
    StaleReferenceError,
    PickerStateError,
    MissingCollaboratorDataError,
    CommunicationError,
    InvalidCandidateShapeError,
    ProtocolError,
)

__all__ = [
    # Candidates
    "FALLBACK_ID",
    "Candidate",
    "Provenance",
    "history_candidate_id",
    "live_candidate_id",
    # Messages
    "ActivateRequest",
    "CloseRequest",
    "CreateTabRequest",
    "DirectoryEvent",
    "FreshCandidatesEvent",
    "OpenEvent",
    "QueryFreshCandidatesRequest",
    "RefreshEvent",
    "Request",
    "ResultItem",
    "parse_event",
    "parse_request",
    # Exceptions
    "PickerError",
    "StaleReferenceError",
    "PickerStateError",
    "MissingCollaboratorDataError",
    "CommunicationError",
    "InvalidCandidateShapeError",
    "ProtocolError",
]
