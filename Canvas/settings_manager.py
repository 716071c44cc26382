"""
Settings Management Module
Loads and saves the brickyard settings file (JSON) merged over built-in defaults
"""

import json
import logging
import math
import os
from typing import Any, Dict, Optional

from Forest.keywords import CAPTURE_RADIUS

logger = logging.getLogger(__name__)

SETTINGS_FILENAME = "brickyard_settings.json"

DEFAULT_SETTINGS: Dict[str, Any] = {
    'capture_radius': CAPTURE_RADIUS,
    'log_level': 'INFO',
    'window_width': 1200,
    'window_height': 800,
    'show_available_sockets': True,
    'zoom_min': 0.3,
    'zoom_max': 3.0,
}


def default_settings_dir() -> str:
    return os.path.join(os.path.expanduser("~"), ".brickyard")


class SettingsManager:
    """Manages the settings dictionary and its file."""

    def __init__(self, settings_dir: Optional[str] = None):
        """
        Initialize the settings manager.

        Args:
            settings_dir: Directory holding the settings file (defaults to ~/.brickyard)
        """
        self.settings_dir = settings_dir or default_settings_dir()
        self.settings_file = os.path.join(self.settings_dir, SETTINGS_FILENAME)
        self.settings: Dict[str, Any] = dict(DEFAULT_SETTINGS)

    def __getitem__(self, key: str) -> Any:
        return self.settings[key]

    def get(self, key: str, default: Any = None) -> Any:
        return self.settings.get(key, default)

    def load_settings(self) -> Dict[str, Any]:
        """Load settings from the settings file. A missing or corrupt file leaves the defaults."""
        try:
            with open(self.settings_file, 'r', encoding='utf-8') as f:
                settings = json.load(f)
        except FileNotFoundError:
            return self.settings
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Ignoring unreadable settings file %s: %s", self.settings_file, e)
            return self.settings
        if not isinstance(settings, dict):
            logger.warning("Ignoring settings file %s: expected a JSON object", self.settings_file)
            return self.settings
        for key, value in settings.items():
            if key in DEFAULT_SETTINGS:
                self.settings[key] = value
        self.settings['capture_radius'] = self.capture_radius()
        return self.settings

    def save_settings(self) -> bool:
        """Save settings to the settings file."""
        try:
            os.makedirs(self.settings_dir, exist_ok=True)
            with open(self.settings_file, 'w', encoding='utf-8') as f:
                json.dump(self.settings, f, indent=4)
        except OSError as e:
            logger.error("Error saving settings: %s", e)
            return False
        return True

    def capture_radius(self) -> float:
        try:
            radius = float(self.settings.get('capture_radius', CAPTURE_RADIUS))
        except (TypeError, ValueError):
            radius = CAPTURE_RADIUS
        if not math.isfinite(radius) or radius <= 0:
            logger.warning("capture_radius must be positive, using %s", CAPTURE_RADIUS)
            radius = CAPTURE_RADIUS
        return radius

    def log_level(self) -> int:
        level = logging.getLevelName(str(self.settings.get('log_level', 'INFO')).upper())
        return level if isinstance(level, int) else logging.INFO
