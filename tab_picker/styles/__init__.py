"""Styles for Tab Picker."""

from tab_picker.styles.base import BASE_CSS

__all__ = ["BASE_CSS"]
