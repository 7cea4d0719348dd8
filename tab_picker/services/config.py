"""Configuration management for Tab Picker.

Single JSON file at ~/.config/tab-picker/config.json, edited by hand. Missing or
corrupted files fall back to defaults; unknown keys are ignored.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

from .fuzzy import SCORE_THRESHOLD

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_URL = "https://www.google.com/search?q="
DEFAULT_PRIVILEGED_PREFIXES = ["chrome://"]


def _typed(data: dict, key: str, kind: type | tuple[type, ...], default):
    """Return data[key] if it has the expected type, else default."""
    value = data.get(key, default)
    # bool is an int subclass; don't let True pass as a number
    if isinstance(value, bool) and kind is not bool:
        return default
    if not isinstance(value, kind):
        logger.warning(f"Ignoring config value for {key!r}: {value!r}")
        return default
    return value


@dataclass
class PickerSettings:
    """Tunable behaviour of the picker and the tab directory."""

    # Prefix for the fallback search URL (query text is appended)
    search_url: str = DEFAULT_SEARCH_URL
    # Fuzzy matches scoring below this are dropped
    score_threshold: int = SCORE_THRESHOLD
    # History is only searched for queries at least this long
    history_min_query_length: int = 3
    # Directory caps history hits to this many (by visit count)
    history_limit: int = 5
    history_lookback_days: int = 7
    # Active tabs with these URL prefixes never receive broadcasts
    privileged_prefixes: list[str] = field(
        default_factory=lambda: list(DEFAULT_PRIVILEGED_PREFIXES)
    )
    # Optional JSON file seeding the in-process tab directory
    snapshot_path: Path | None = None

    def to_dict(self) -> dict:
        result: dict = {
            "search_url": self.search_url,
            "score_threshold": self.score_threshold,
            "history_min_query_length": self.history_min_query_length,
            "history_limit": self.history_limit,
            "history_lookback_days": self.history_lookback_days,
            "privileged_prefixes": list(self.privileged_prefixes),
        }
        if self.snapshot_path is not None:
            result["snapshot_path"] = str(self.snapshot_path)
        return result

    @classmethod
    def from_dict(cls, data: dict) -> "PickerSettings":
        defaults = cls()
        prefixes = _typed(data, "privileged_prefixes", list, defaults.privileged_prefixes)
        snapshot = data.get("snapshot_path")
        return cls(
            search_url=_typed(data, "search_url", str, defaults.search_url),
            score_threshold=_typed(data, "score_threshold", (int, float), defaults.score_threshold),
            history_min_query_length=_typed(
                data, "history_min_query_length", int, defaults.history_min_query_length
            ),
            history_limit=_typed(data, "history_limit", int, defaults.history_limit),
            history_lookback_days=_typed(
                data, "history_lookback_days", int, defaults.history_lookback_days
            ),
            privileged_prefixes=[p for p in prefixes if isinstance(p, str)],
            snapshot_path=Path(snapshot).expanduser() if isinstance(snapshot, (str, Path)) and snapshot else None,
        )

    def merge_with(self, override: dict) -> "PickerSettings":
        """Return new settings with override values taking precedence."""
        data = self.to_dict()
        data.update(override)
        return PickerSettings.from_dict(data)

    def wants_history(self, query: str) -> bool:
        """Whether a query is long enough to search history."""
        return len(query) >= self.history_min_query_length


class ConfigManager:
    """Loads and saves picker settings."""

    def __init__(self, config_dir: Path | None = None):
        if config_dir is None:
            config_dir = Path.home() / ".config" / "tab-picker"
        self._config_dir = config_dir
        self._config_file = config_dir / "config.json"
        self._settings: PickerSettings | None = None

    @property
    def config_file(self) -> Path:
        return self._config_file

    @property
    def settings(self) -> PickerSettings:
        if self._settings is None:
            self._settings = self._load_settings()
        return self._settings

    def _load_settings(self) -> PickerSettings:
        """Load settings from disk."""
        if self._config_file.exists():
            try:
                data = json.loads(self._config_file.read_text())
                if isinstance(data, dict):
                    return PickerSettings.from_dict(data)
                logger.warning(f"Config file {self._config_file} is not an object, using defaults")
            except (json.JSONDecodeError, OSError) as e:
                logger.warning(f"Failed to load config, using defaults: {e}")
        return PickerSettings()
