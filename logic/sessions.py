"""
Session management module.

This module issues opaque bearer tokens after a successful PIN check and keeps
them, with their expiry, in sessions.json. Expired sessions are swept whenever
a token is validated.

Author: Matthew Picone (mail@matthewpicone.com)
Date: 2025-12-17
"""

import logging
import re
import secrets
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from starlette.requests import Request

from logic import config
from logic.store import load_json, save_json

logger = logging.getLogger(__name__)

EXPIRES_FORMAT = "%Y-%m-%d %H:%M:%S"
TOKEN_HEADER = "X-Session-Token"
TOKEN_PARAM = "session_token"

_bearer_re = re.compile(r"^Bearer\s+(.+)$", re.IGNORECASE)


def generate_token(length: int = 32) -> str:
    """Generate a secure random token.

    Args:
        length: Number of random bytes.

    Returns:
        Hex encoded token (two characters per byte).
    """
    return secrets.token_hex(length)


def _load_sessions() -> List[Dict[str, Any]]:
    data = load_json(config.SESSIONS_FILE)
    if not data:
        return []
    sessions = data.get("active_sessions", [])
    if not isinstance(sessions, list):
        return []
    return [s for s in sessions if isinstance(s, dict)]


def _save_sessions(sessions: List[Dict[str, Any]]) -> bool:
    return save_json(config.SESSIONS_FILE, {"active_sessions": sessions})


def _is_live(session: Dict[str, Any], now: datetime) -> bool:
    try:
        expires = datetime.strptime(str(session.get("expires", "")), EXPIRES_FORMAT)
    except ValueError:
        return False
    return expires > now


def create_session() -> Optional[str]:
    """Create a new session.

    Returns:
        The new token, or None if the session could not be persisted.
    """
    token = generate_token()
    expires = datetime.now() + timedelta(seconds=config.SESSION_DURATION)

    sessions = _load_sessions()
    sessions.append({"token": token, "expires": expires.strftime(EXPIRES_FORMAT)})

    if not _save_sessions(sessions):
        logger.error("Failed to persist new session")
        return None

    return token


def validate_session(token: Optional[str]) -> bool:
    """Check whether a token belongs to a live session.

    Expired sessions are removed from the store as a side effect.

    Args:
        token: Session token to check.

    Returns:
        True if the token exists and has not expired.
    """
    if not token:
        return False

    sessions = _load_sessions()
    if not sessions:
        return False

    now = datetime.now()
    live = [s for s in sessions if _is_live(s, now)]

    if len(live) != len(sessions):
        logger.info("Swept %d expired session(s)", len(sessions) - len(live))
        _save_sessions(live)

    wanted = token.encode("utf-8")
    return any(secrets.compare_digest(str(s.get("token", "")).encode("utf-8"), wanted) for s in live)


def remove_session(token: Optional[str]) -> bool:
    """Remove a session.

    Removing an unknown token, or removing from an empty store, is a success.

    Args:
        token: Session token to remove.

    Returns:
        True unless persisting the filtered list failed.
    """
    if not token:
        return True

    sessions = _load_sessions()
    if not sessions:
        return True

    remaining = [s for s in sessions if s.get("token") != token]

    if len(remaining) != len(sessions):
        return _save_sessions(remaining)

    return True


def purge_expired_sessions() -> int:
    """Remove every expired session.

    Returns:
        Number of sessions removed.
    """
    sessions = _load_sessions()
    now = datetime.now()
    live = [s for s in sessions if _is_live(s, now)]
    removed = len(sessions) - len(live)
    if removed:
        _save_sessions(live)
    return removed


async def extract_token(request: Request) -> Optional[str]:
    """Get the session token from a request.

    Looks at the Authorization bearer header, then the X-Session-Token
    header, then the session_token query parameter, then the session_token
    form field. The first match wins.

    Args:
        request: Incoming request.

    Returns:
        The token, or None if the request carries none.
    """
    authorization = request.headers.get("Authorization")
    if authorization:
        match = _bearer_re.match(authorization.strip())
        if match:
            return match.group(1).strip()

    header_token = request.headers.get(TOKEN_HEADER)
    if header_token:
        return header_token

    query_token = request.query_params.get(TOKEN_PARAM)
    if query_token:
        return query_token

    content_type = request.headers.get("content-type", "")
    if content_type.startswith(("multipart/form-data", "application/x-www-form-urlencoded")):
        form = await request.form()
        form_token = form.get(TOKEN_PARAM)
        if isinstance(form_token, str) and form_token:
            return form_token

    return None
