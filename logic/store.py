"""
JSON document store.

This module loads and saves the JSON documents that act as the application's
database (markers.json, sessions.json). Reads take a shared file lock; writes
go to a locked temporary sibling which is then renamed over the target, so a
reader only ever sees the complete old or the complete new document. The
previous version is kept as a .bak sibling.

Author: Matthew Picone (mail@matthewpicone.com)
Date: 2026-01-05
"""

import fcntl
import json
import logging
import os
import shutil
import threading
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

# Serialises writers inside this process; file locks arbitrate between processes.
_write_lock = threading.Lock()


def load_json(path: str) -> Optional[Dict[str, Any]]:
    """Load a JSON document under a shared lock.

    Args:
        path: Path of the document.

    Returns:
        The decoded document, or None if the file is missing or malformed.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            fcntl.flock(f, fcntl.LOCK_SH)
            try:
                content = f.read()
            finally:
                fcntl.flock(f, fcntl.LOCK_UN)
    except FileNotFoundError:
        return None
    except OSError as e:
        logger.warning("Could not read %s: %s", path, e)
        return None

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        logger.warning("Malformed JSON in %s: %s", path, e)
        return None

    if not isinstance(data, dict):
        logger.warning("Unexpected document type in %s: %s", path, type(data).__name__)
        return None

    return data


def save_json(path: str, data: Dict[str, Any]) -> bool:
    """Atomically save a JSON document.

    The existing file is copied to ``<path>.bak``, the new content is written
    to ``<path>.tmp`` under an exclusive lock and then renamed over ``path``.

    Args:
        path: Path of the document.
        data: Document to save.

    Returns:
        True if the document was saved, False otherwise. On failure ``path``
        is left untouched.
    """
    try:
        content = json.dumps(data, indent=4, ensure_ascii=False)
    except (TypeError, ValueError) as e:
        logger.error("Could not serialise document for %s: %s", path, e)
        return False

    temp_path = path + ".tmp"

    with _write_lock:
        try:
            parent = os.path.dirname(path)
            if parent:
                os.makedirs(parent, exist_ok=True)

            if os.path.exists(path):
                shutil.copyfile(path, path + ".bak")

            with open(temp_path, "w", encoding="utf-8") as f:
                fcntl.flock(f, fcntl.LOCK_EX)
                try:
                    f.write(content)
                    f.flush()
                    os.fsync(f.fileno())
                finally:
                    fcntl.flock(f, fcntl.LOCK_UN)

            os.replace(temp_path, path)
            return True
        except OSError as e:
            logger.error("Failed to save %s: %s", path, e)
            if os.path.exists(temp_path):
                try:
                    os.remove(temp_path)
                except OSError:
                    logger.warning("Could not remove temporary file %s", temp_path)
            return False
