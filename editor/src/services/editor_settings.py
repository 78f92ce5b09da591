"""Persistent editor settings (JSON in the user's home directory)."""

import json
import logging
import os
from dataclasses import dataclass, field, fields
from typing import Optional

from models.theme import UiTheme
from constants import (
    CONFIG_DIR_NAME, CONFIG_FILE_NAME,
    DEFAULT_PRESET_INDEX, DEFAULT_GRID_INDEX, DEFAULT_SNAP_ENABLED,
    DEFAULT_SNAP_THRESHOLD, DEFAULT_SNAP_CAPTURE_RATIO, DEFAULT_ANIMATION_DURATION,
)

logger = logging.getLogger(__name__)


def default_config_dir():
    return os.path.join(os.path.expanduser("~"), CONFIG_DIR_NAME)


def default_config_path():
    return os.path.join(default_config_dir(), CONFIG_FILE_NAME)


@dataclass
class EditorSettings:
    """Toolbar state, snapping tuning and theme defaults."""
    preset_index: int = DEFAULT_PRESET_INDEX
    grid_index: int = DEFAULT_GRID_INDEX
    smart_align: bool = DEFAULT_SNAP_ENABLED
    snap_threshold: float = DEFAULT_SNAP_THRESHOLD
    snap_capture_ratio: float = DEFAULT_SNAP_CAPTURE_RATIO
    default_theme: Optional[UiTheme] = None
    default_font: Optional[str] = None
    animation_duration: float = DEFAULT_ANIMATION_DURATION
    enable_shadows: bool = True
    extra: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        data = {}
        for item in fields(self):
            if item.name == 'extra':
                continue
            value = getattr(self, item.name)
            if isinstance(value, UiTheme):
                value = value.to_dict()
            data[item.name] = value
        return data

    @classmethod
    def from_dict(cls, data: dict) -> 'EditorSettings':
        """Build settings from parsed JSON. Unknown keys are ignored."""
        settings = cls()
        known = {item.name for item in fields(cls)} - {'extra'}
        for key, value in data.items():
            if key not in known:
                logger.debug("Ignoring unknown setting '%s'", key)
                continue
            if key == 'default_theme' and value is not None:
                value = UiTheme.from_dict(value)
            setattr(settings, key, value)
        return settings

    @classmethod
    def load(cls, path=None) -> 'EditorSettings':
        """Read settings from ``path``; a missing file gives defaults.

        Raises:
            OSError, ValueError: unreadable file or malformed JSON
        """
        path = path or default_config_path()
        if not os.path.exists(path):
            return cls()
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Settings file {path} does not contain a JSON object")
        return cls.from_dict(data)

    def save(self, path=None):
        path = path or default_config_path()
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(self.to_dict(), f, indent=2)
        logger.debug("Saved settings to %s", path)
