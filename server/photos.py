"""
Photo API routes.

This module serves stored marker photos with long-lived cache headers and
accepts standalone photo uploads for a marker.

Author: Matthew Picone (mail@matthewpicone.com)
Date: 2025-12-17
"""

import os
from email.utils import parsedate_to_datetime
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile
from fastapi.responses import FileResponse, Response

from logic.uploads import CONTENT_TYPES, get_extension, photo_url, resolve_photo_path, save_upload
from logic.validation import sanitise_int
from server.auth import require_auth

router = APIRouter()

CACHE_CONTROL = "public, max-age=31536000"


def _not_modified(request: Request, mtime: float) -> bool:
    header = request.headers.get("If-Modified-Since")
    if not header:
        return False
    try:
        since = parsedate_to_datetime(header)
    except (TypeError, ValueError, IndexError):
        return False
    if since is None:
        return False
    return since.timestamp() >= int(mtime)


@router.get("/api/photos")
def get_photo(request: Request, file: Optional[str] = None):
    """Serve a stored photo.

    Args:
        request: FastAPI request object.
        file: Store-relative photo name.

    Returns:
        The image, or an empty 304 response if the client copy is current.

    Raises:
        HTTPException: 400 if no file is named, 404 if it does not resolve
            to a photo inside the uploads directory.
    """
    if not file:
        raise HTTPException(400, "Missing file parameter")

    path = resolve_photo_path(file)
    if path is None:
        raise HTTPException(404, "File not found")

    stat_result = os.stat(path)

    if _not_modified(request, stat_result.st_mtime):
        return Response(status_code=304, headers={"Cache-Control": CACHE_CONTROL})

    media_type = CONTENT_TYPES.get(get_extension(path.name), "application/octet-stream")

    return FileResponse(
        path,
        media_type=media_type,
        stat_result=stat_result,
        headers={"Cache-Control": CACHE_CONTROL},
    )


@router.post("/api/photos", status_code=201)
def upload_photo(
    photo: Optional[UploadFile] = File(None),
    marker_id: Optional[str] = Form(None),
    token: str = Depends(require_auth),
):
    """Upload a single photo for a marker.

    Args:
        photo: Uploaded image.
        marker_id: Id of the marker the photo belongs to.

    Returns:
        Dictionary with the stored photo record and its url.

    Raises:
        HTTPException: If a field is missing, the marker id is not an integer
            or the upload fails validation.
    """
    if photo is None or not photo.filename:
        raise HTTPException(400, "No photo uploaded")

    if not marker_id or not marker_id.strip():
        raise HTTPException(400, "Missing marker_id parameter")

    try:
        marker_id_value = sanitise_int(marker_id.strip())
    except HTTPException:
        raise HTTPException(400, "Invalid marker_id")
    if marker_id_value < 1:
        raise HTTPException(400, "Invalid marker_id")

    result = save_upload(photo, marker_id_value)
    if not result["success"]:
        raise HTTPException(400, "Upload failed: " + ", ".join(result["errors"]))

    return {
        "success": True,
        "photo": {
            "filename": result["filename"],
            "original_name": result["original_name"],
            "size": result["size"],
            "url": photo_url(result["filename"]),
        },
        "message": "Photo uploaded successfully",
    }
