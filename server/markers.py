"""
Marker management API routes.

This module contains the endpoints for listing, creating and deleting map
markers together with their photos.

Author: Matthew Picone (mail@matthewpicone.com)
Date: 2025-12-17
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from starlette.datastructures import UploadFile

from logic import config
from logic.markers import (
    empty_collection,
    ensure_collection_fields,
    find_marker,
    load_markers,
    new_marker,
    reserve_marker_id,
    save_markers,
)
from logic.store import load_json
from logic.uploads import delete_marker_photos, save_upload, with_photo_urls
from logic.validation import sanitise_coordinates
from server.auth import require_auth

logger = logging.getLogger(__name__)

router = APIRouter()

PHOTO_FIELDS = ("photos[]", "photos")


def _collect_photos(form) -> List[UploadFile]:
    photos = []
    for field in PHOTO_FIELDS:
        for item in form.getlist(field):
            if isinstance(item, UploadFile) and item.filename:
                photos.append(item)
    return photos


@router.get("/api/markers")
def get_markers():
    """Get every marker.

    Returns:
        Dictionary with the id counter and all markers, each photo carrying
        its retrieval url.
    """
    data = load_markers()

    return {
        "counter": data["counter"],
        "markers": [with_photo_urls(m) for m in data["markers"]],
    }


@router.post("/api/markers", status_code=201)
async def create_marker(request: Request, token: str = Depends(require_auth)):
    """Create a marker with up to MAX_PHOTOS_PER_MARKER photos.

    Expects a multipart form with ``lat``, ``lng`` and ``photos[]``. Photos
    that fail validation are reported as warnings as long as at least one
    photo was stored.

    Returns:
        Dictionary with the created marker and optional warnings.

    Raises:
        HTTPException: If coordinates are invalid, too many photos are sent,
            every photo upload fails, or the marker cannot be saved.
    """
    form = await request.form()

    lat, lng = sanitise_coordinates(form.get("lat"), form.get("lng"))

    photos = _collect_photos(form)
    if len(photos) > config.MAX_PHOTOS_PER_MARKER:
        raise HTTPException(
            400, f"Maximum {config.MAX_PHOTOS_PER_MARKER} photos allowed per marker"
        )

    data = load_markers()
    marker_id = reserve_marker_id(data)

    saved = []
    upload_errors: List[str] = []

    for photo in photos:
        result = save_upload(photo, marker_id)
        if result["success"]:
            saved.append(
                {
                    "filename": result["filename"],
                    "original_name": result["original_name"],
                    "size": result["size"],
                }
            )
        else:
            upload_errors.extend(result["errors"])

    if upload_errors and not saved:
        raise HTTPException(400, "Photo upload failed: " + ", ".join(upload_errors))

    marker = new_marker(marker_id, lat, lng, saved)
    data["markers"].append(marker)

    if not save_markers(data):
        raise HTTPException(500, "Failed to save marker data")

    logger.info("Created marker %s with %d photo(s)", marker_id, len(saved))

    response = {
        "success": True,
        "marker": with_photo_urls(marker),
        "message": "Marker created successfully",
    }

    if upload_errors:
        response["warnings"] = upload_errors

    return response


@router.delete("/api/markers")
def delete_markers(
    id: Optional[str] = None,
    all: Optional[str] = None,
    token: str = Depends(require_auth),
):
    """Delete one marker (``?id=``) or every marker (``?all=1``).

    Returns:
        Success message.

    Raises:
        HTTPException: 404 if the marker does not exist, 400 if neither
            parameter is given, 500 if the collection cannot be saved.
    """
    raw = load_json(config.MARKERS_FILE)
    if raw is None:
        return {"success": True, "message": "No markers to delete"}

    data = ensure_collection_fields(raw)

    if all == "1":
        for marker in data["markers"]:
            delete_marker_photos(marker)

        if not save_markers(empty_collection()):
            raise HTTPException(500, "Failed to clear markers data")

        logger.info("Cleared all %d marker(s)", len(data["markers"]))
        return {"success": True, "message": "All markers cleared successfully"}

    if id is not None and id.strip():
        index, marker = find_marker(data, id)
        if marker is None:
            raise HTTPException(404, "Marker not found")

        delete_marker_photos(marker)
        del data["markers"][index]

        if not save_markers(data):
            raise HTTPException(500, "Failed to delete marker")

        logger.info("Deleted marker %s", marker.get("id"))
        return {"success": True, "message": "Marker deleted successfully"}

    raise HTTPException(400, "Missing marker ID or all parameter")
