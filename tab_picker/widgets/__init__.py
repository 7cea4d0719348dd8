"""Widgets for Tab Picker."""

from tab_picker.widgets.candidate_list import CandidateItem, CandidateList

__all__ = [
    "CandidateItem",
    "CandidateList",
]
