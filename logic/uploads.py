"""
Photo upload validation and storage.

This module validates uploaded images, stores them under a per-marker
directory inside the uploads root, resolves stored photos for serving without
ever leaving the uploads root, and removes a marker's photos.

Author: Matthew Picone (mail@matthewpicone.com)
Date: 2026-01-05
"""

import logging
import os
import shutil
import time
import uuid
from pathlib import Path
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from fastapi import UploadFile
from PIL import Image

from logic import config

logger = logging.getLogger(__name__)

CONTENT_TYPES = {
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "webp": "image/webp",
}

PHOTO_URL_PREFIX = "/api/photos?file="


def get_extension(filename: Optional[str]) -> str:
    """Get the lowercase extension of a filename, without the dot."""
    return os.path.splitext(filename or "")[1].lstrip(".").lower()


def _upload_size(upload: UploadFile) -> int:
    f = upload.file
    f.seek(0, os.SEEK_END)
    size = f.tell()
    f.seek(0)
    return size


def _is_image(upload: UploadFile) -> bool:
    try:
        with Image.open(upload.file) as img:
            width, height = img.size
            img.verify()
        return width > 0 and height > 0
    except (OSError, SyntaxError, ValueError, Image.DecompressionBombError):
        return False
    finally:
        upload.file.seek(0)


def validate_upload(upload: Optional[UploadFile]) -> List[str]:
    """Validate an uploaded photo.

    A missing upload short-circuits; every other check is collected.

    Args:
        upload: Uploaded file.

    Returns:
        List of error messages, empty if the upload is valid.
    """
    if upload is None or not upload.filename:
        return ["No file was uploaded"]

    errors = []

    size = _upload_size(upload)
    if size > config.MAX_FILE_SIZE:
        max_mb = config.MAX_FILE_SIZE / 1024 / 1024
        errors.append(f"File is too large (max {max_mb:g}MB)")

    extension = get_extension(upload.filename)
    if extension not in config.ALLOWED_EXTENSIONS:
        errors.append("Invalid file type. Allowed: " + ", ".join(config.ALLOWED_EXTENSIONS))

    allowed_types = {CONTENT_TYPES[ext] for ext in config.ALLOWED_EXTENSIONS if ext in CONTENT_TYPES}
    content_type = (upload.content_type or "").split(";")[0].strip().lower()
    if content_type and content_type != "application/octet-stream" and content_type not in allowed_types:
        errors.append("Invalid content type")

    if not _is_image(upload):
        errors.append("File is not a valid image")

    return errors


def save_upload(upload: UploadFile, marker_id: Any) -> Dict[str, Any]:
    """Validate and store an uploaded photo for a marker.

    The stored filename is generated from the marker id, a timestamp and a
    random suffix; the client supplied name is only kept for display.

    Args:
        upload: Uploaded file.
        marker_id: Id of the owning marker.

    Returns:
        ``{"success": True, "filename", "original_name", "size"}`` or
        ``{"success": False, "errors": [...]}``.
    """
    errors = validate_upload(upload)
    if errors:
        logger.info("Rejected upload %r for marker %s: %s", upload.filename if upload else None,
                    marker_id, "; ".join(errors))
        return {"success": False, "errors": errors}

    marker_dir = os.path.join(config.UPLOADS_DIR, str(marker_id))
    extension = get_extension(upload.filename)
    filename = f"photo_{marker_id}_{int(time.time())}_{uuid.uuid4().hex[:13]}.{extension}"
    filepath = os.path.join(marker_dir, filename)

    try:
        os.makedirs(marker_dir, exist_ok=True)
        upload.file.seek(0)
        with open(filepath, "wb") as out:
            shutil.copyfileobj(upload.file, out)
    except OSError as e:
        logger.error("Failed to store upload for marker %s: %s", marker_id, e)
        if os.path.exists(filepath):
            os.remove(filepath)
        return {"success": False, "errors": ["Failed to save file"]}

    return {
        "success": True,
        "filename": f"{marker_id}/{filename}",
        "original_name": upload.filename,
        "size": os.path.getsize(filepath),
    }


def _uploads_root() -> Optional[Path]:
    root = Path(config.UPLOADS_DIR)
    if not root.is_dir():
        return None
    return root.resolve()


def _is_inside(path: Path, root: Path) -> bool:
    return path == root or str(path).startswith(str(root) + os.sep)


def resolve_photo_path(name: Optional[str]) -> Optional[Path]:
    """Resolve a stored photo name to a file inside the uploads root.

    Each ``/`` separated segment is stripped of ``..`` and backslashes; empty
    segments (absolute paths, bare parent references) are rejected, and the
    real path must lie inside the real uploads root.

    Args:
        name: Store-relative photo name, e.g. ``"3/photo_3_1700000000_ab12.jpg"``.

    Returns:
        The resolved file path, or None if it is missing or outside the root.
    """
    if not name or "\x00" in name:
        return None

    root = _uploads_root()
    if root is None:
        return None

    segments = []
    for segment in name.split("/"):
        cleaned = segment.replace("..", "").replace("\\", "")
        if not cleaned:
            return None
        segments.append(cleaned)

    candidate = root.joinpath(*segments).resolve()
    if not _is_inside(candidate, root) or candidate == root:
        return None
    if not candidate.is_file():
        return None

    return candidate


def photo_url(filename: str) -> str:
    """Get the retrieval URL of a stored photo."""
    return PHOTO_URL_PREFIX + quote(filename, safe="")


def with_photo_urls(marker: Dict[str, Any]) -> Dict[str, Any]:
    """Return a copy of a marker with a url on every photo."""
    result = dict(marker)
    result["photos"] = [
        {**photo, "url": photo_url(photo.get("filename", ""))}
        for photo in marker.get("photos", [])
    ]
    return result


def delete_marker_photos(marker: Dict[str, Any]):
    """Delete a marker's photo files and its directory if left empty.

    Only files listed on the marker are removed; a directory that still holds
    other files is kept.

    Args:
        marker: Marker whose photos should be removed.
    """
    root = _uploads_root()
    if root is None:
        return

    photos = marker.get("photos")
    if not isinstance(photos, list):
        photos = []

    for photo in photos:
        path = (root / str(photo.get("filename", ""))).resolve()
        if not _is_inside(path, root) or not path.is_file():
            continue
        try:
            path.unlink()
        except OSError as e:
            logger.warning("Could not delete photo %s: %s", path, e)

    marker_dir = (root / str(marker.get("id", ""))).resolve()
    if marker_dir == root or not _is_inside(marker_dir, root) or not marker_dir.is_dir():
        return

    try:
        if not any(marker_dir.iterdir()):
            marker_dir.rmdir()
    except OSError as e:
        logger.warning("Could not remove marker directory %s: %s", marker_dir, e)
