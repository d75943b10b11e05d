"""
Basic API routes.

This module contains the fundamental endpoints for serving the map page and
the client configuration.

Author: Matthew Picone (mail@matthewpicone.com)
Date: 2025-12-17
"""

import os

from fastapi import APIRouter
from fastapi.responses import FileResponse, HTMLResponse

from logic import config

router = APIRouter()

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


@router.get("/", response_class=HTMLResponse)
def index():
    """Serve the main HTML page.

    Returns:
        HTML page from static/index.html.
    """
    return FileResponse(os.path.join(BASE_DIR, "static", "index.html"))


@router.get("/api/config")
def get_client_config():
    """Get the settings the map page needs.

    Returns:
        Dictionary with the application name and version, the initial map
        view and the upload limits.
    """
    return {
        "app_name": config.APP_NAME,
        "version": config.APP_VERSION,
        "map": {
            "lat": config.DEFAULT_LAT,
            "lng": config.DEFAULT_LNG,
            "zoom": config.DEFAULT_ZOOM,
        },
        "uploads": {
            "max_photos": config.MAX_PHOTOS_PER_MARKER,
            "max_file_size": config.MAX_FILE_SIZE,
            "allowed_extensions": config.ALLOWED_EXTENSIONS,
        },
    }


@router.get("/health")
def health():
    return {"ok": True}
