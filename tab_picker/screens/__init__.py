"""Screens for Tab Picker."""

from tab_picker.screens.main import MainScreen
from tab_picker.screens.picker import PickerScreen

__all__ = ["MainScreen", "PickerScreen"]
