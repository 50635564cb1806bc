"""Constants file."""

import os
import sys
from pathlib import Path

APP_NAME = "Pocket Card Browser"


def _default_base_dir() -> Path:
    """Return the writable base directory for config/cache/logging."""
    if getattr(sys, "frozen", False):
        local_appdata = os.getenv("LOCALAPPDATA")
        if local_appdata:
            return Path(local_appdata) / APP_NAME
        return Path.home() / ".pocket_card_browser"
    return Path(__file__).resolve().parent.parent


BASE_DATA_DIR = _default_base_dir()
CONFIG_DIR = BASE_DATA_DIR / "config"
CACHE_DIR = BASE_DATA_DIR / "cache"
LOGS_DIR = BASE_DATA_DIR / "logs"
IMAGE_CACHE_DIR = CACHE_DIR / "card_images"


def ensure_base_dirs() -> None:
    """Ensure base config/cache/log directories exist without importing side effects."""
    BASE_DATA_DIR.mkdir(parents=True, exist_ok=True)
    for path in (CONFIG_DIR, CACHE_DIR, LOGS_DIR, IMAGE_CACHE_DIR):
        path.mkdir(parents=True, exist_ok=True)


CARD_LIST_SETTINGS_FILE = CONFIG_DIR / "card_list_settings.json"
CARDS_CACHE_FILE = CACHE_DIR / "cards.json"

CARDS_JSON_URL = "https://noutetu.github.io/PokeDeckCards/output.json"
REQUEST_TIMEOUT = 30  # Seconds

__all__ = [
    "APP_NAME",
    "BASE_DATA_DIR",
    "CONFIG_DIR",
    "CACHE_DIR",
    "LOGS_DIR",
    "IMAGE_CACHE_DIR",
    "CARD_LIST_SETTINGS_FILE",
    "CARDS_CACHE_FILE",
    "CARDS_JSON_URL",
    "REQUEST_TIMEOUT",
    "ensure_base_dirs",
]
