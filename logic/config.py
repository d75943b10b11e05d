"""
Configuration management module.

This module provides the static application settings (PIN, session and upload
limits, map defaults, data paths) read from the environment at startup, and
prepares the on-disk data layout.

Author: Matthew Picone (mail@matthewpicone.com)
Date: 2025-12-17
"""

import os
from typing import List

from dotenv import load_dotenv

load_dotenv()

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


def _get_list(name: str, default: str) -> List[str]:
    """Read a comma separated environment variable as a list of lowercase values."""
    raw = os.getenv(name, default)
    return [item.strip().lower() for item in raw.split(",") if item.strip()]


# Application
APP_NAME = os.getenv("APP_NAME", "Weesp Area Interactive Map")
APP_VERSION = os.getenv("APP_VERSION", "2.0")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# File paths
DATA_DIR = os.getenv("DATA_DIR", os.path.join(BASE_DIR, "data"))
UPLOADS_DIR = os.path.join(DATA_DIR, "uploads")
MARKERS_FILE = os.path.join(DATA_DIR, "markers.json")
SESSIONS_FILE = os.path.join(DATA_DIR, "sessions.json")

# Authentication
ADMIN_PIN = os.getenv("ADMIN_PIN", "1234")
SESSION_DURATION = int(os.getenv("SESSION_DURATION", "3600"))  # seconds
LOGIN_FAILURE_DELAY = float(os.getenv("LOGIN_FAILURE_DELAY", "1"))  # seconds

# Uploads
MAX_FILE_SIZE = int(os.getenv("MAX_FILE_SIZE", str(5 * 1024 * 1024)))
ALLOWED_EXTENSIONS = _get_list("ALLOWED_EXTENSIONS", "jpg,jpeg,png,gif")
MAX_PHOTOS_PER_MARKER = int(os.getenv("MAX_PHOTOS_PER_MARKER", "2"))

# Map
DEFAULT_LAT = float(os.getenv("DEFAULT_LAT", "52.3086"))
DEFAULT_LNG = float(os.getenv("DEFAULT_LNG", "5.0408"))
DEFAULT_ZOOM = int(os.getenv("DEFAULT_ZOOM", "13"))

# CORS
ALLOWED_ORIGINS = [o.strip() for o in os.getenv("ALLOWED_ORIGINS", "*").split(",") if o.strip()]


def set_data_dir(path: str):
    """Point every data path at a new data directory.

    Args:
        path: Directory holding markers.json, sessions.json and uploads/.
    """
    global DATA_DIR, UPLOADS_DIR, MARKERS_FILE, SESSIONS_FILE
    DATA_DIR = path
    UPLOADS_DIR = os.path.join(path, "uploads")
    MARKERS_FILE = os.path.join(path, "markers.json")
    SESSIONS_FILE = os.path.join(path, "sessions.json")


def init_data_dirs():
    """Create the data directory tree and seed empty documents.

    Existing documents are left untouched.
    """
    from logic.markers import empty_collection
    from logic.store import save_json

    os.makedirs(UPLOADS_DIR, exist_ok=True)

    if not os.path.exists(MARKERS_FILE):
        save_json(MARKERS_FILE, empty_collection())

    if not os.path.exists(SESSIONS_FILE):
        save_json(SESSIONS_FILE, {"active_sessions": []})
