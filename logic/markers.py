"""
Marker collection management module.

This module provides utilities for loading, saving, and manipulating the
marker collection stored in markers.json.

Author: Matthew Picone (mail@matthewpicone.com)
Date: 2025-12-17
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from logic import config
from logic.store import load_json, save_json


def empty_collection() -> Dict[str, Any]:
    """Get the empty marker collection.

    Returns:
        Collection with a zero counter and no markers.
    """
    return {"counter": 0, "markers": []}


def load_markers() -> Dict[str, Any]:
    """Load the marker collection from markers.json.

    Returns:
        Marker collection with all required fields ensured. A missing or
        malformed document yields the empty collection.
    """
    data = load_json(config.MARKERS_FILE)
    if data is None:
        data = empty_collection()
    return ensure_collection_fields(data)


def save_markers(data: Dict[str, Any]) -> bool:
    """Save the marker collection to markers.json.

    Args:
        data: Marker collection to save.

    Returns:
        True if the collection was persisted.
    """
    return save_json(config.MARKERS_FILE, data)


def ensure_collection_fields(data: Dict[str, Any]) -> Dict[str, Any]:
    """Ensure all required fields are present in the collection.

    Args:
        data: Collection dictionary to update.

    Returns:
        Updated collection dictionary.
    """
    data.setdefault("counter", 0)
    data.setdefault("markers", [])

    if not isinstance(data["markers"], list):
        data["markers"] = []

    for marker in data["markers"]:
        ensure_marker_fields(marker)

    # The counter must never fall behind an existing id
    numeric_ids = [m["id"] for m in data["markers"] if isinstance(m.get("id"), int)]
    if numeric_ids and data["counter"] < max(numeric_ids):
        data["counter"] = max(numeric_ids)

    return data


def ensure_marker_fields(marker: Dict[str, Any]):
    """Ensure a marker has all required fields with appropriate defaults.

    Args:
        marker: Marker dictionary to update.
    """
    defaults = {
        "id": "",
        "lat": 0.0,
        "lng": 0.0,
        "created_at": "",
        "photos": [],
    }

    for key, default in defaults.items():
        marker.setdefault(key, default)

    if not isinstance(marker["photos"], list):
        marker["photos"] = []


def reserve_marker_id(data: Dict[str, Any]) -> int:
    """Increment the collection counter and return the new marker id.

    The increment is only persisted when the collection is saved.

    Args:
        data: Marker collection.

    Returns:
        The reserved marker id.
    """
    data["counter"] = int(data.get("counter", 0)) + 1
    return data["counter"]


def new_marker(marker_id: int, lat: float, lng: float, photos: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Build a marker record.

    Args:
        marker_id: Reserved marker id.
        lat: Latitude.
        lng: Longitude.
        photos: Saved photo records.

    Returns:
        Marker dictionary ready to be appended to the collection.
    """
    return {
        "id": marker_id,
        "lat": lat,
        "lng": lng,
        "created_at": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
        "photos": photos,
    }


def find_marker(data: Dict[str, Any], marker_id: Any) -> Tuple[Optional[int], Optional[Dict[str, Any]]]:
    """Find the first marker with the given id.

    Ids are compared as text so "3" matches 3.

    Args:
        data: Marker collection.
        marker_id: Id to look for.

    Returns:
        Tuple of (index, marker), or (None, None) if not found.
    """
    wanted = str(marker_id).strip()
    for index, marker in enumerate(data.get("markers", [])):
        if str(marker.get("id")) == wanted:
            return index, marker
    return None, None
