"""Tab Picker: a keyboard-driven quick switcher for tabs, history and new destinations."""

__version__ = "0.1.0"
