"""Services for Tab Picker."""

from tab_picker.services.aggregator import aggregate, build_fallback, resolve_fallback_url
from tab_picker.services.config import ConfigManager, PickerSettings
from tab_picker.services.directory import TabDirectory
from tab_picker.services.fuzzy import SCORE_THRESHOLD, MatchResult, match
from tab_picker.services.mediator import SyncMediator
from tab_picker.services.ranker import rank
from tab_picker.services.selection import PickerSession, PickerState, SelectionStateMachine

__all__ = [
    "aggregate",
    "build_fallback",
    "resolve_fallback_url",
    "ConfigManager",
    "PickerSettings",
    "TabDirectory",
    "SCORE_THRESHOLD",
    "MatchResult",
    "match",
    "SyncMediator",
    "rank",
    "PickerSession",
    "PickerState",
    "SelectionStateMachine",
]
