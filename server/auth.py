"""PIN authentication module.

This module handles operator login with the shared PIN, logout and session
checks, and provides the ``require_auth`` dependency used by protected
endpoints. Failed logins are throttled with a fixed delay.
"""

import asyncio
import hmac
import json
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request

from logic import config
from logic.sessions import create_session, extract_token, remove_session, validate_session

logger = logging.getLogger(__name__)

router = APIRouter()


async def get_session_token(request: Request) -> Optional[str]:
    """Dependency returning the session token carried by the request, if any."""
    return await extract_token(request)


async def require_auth(token: Optional[str] = Depends(get_session_token)) -> str:
    """Dependency for endpoints that need a valid session.

    Args:
        token: Session token extracted from the request.

    Returns:
        The validated token.

    Raises:
        HTTPException: If the token is missing, unknown or expired.
    """
    if not validate_session(token):
        raise HTTPException(status_code=401, detail="Authentication required")
    return token


async def _read_pin(request: Request) -> str:
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(("multipart/form-data", "application/x-www-form-urlencoded")):
        form = await request.form()
        pin = form.get("pin")
    else:
        body = await request.body()
        try:
            payload = json.loads(body) if body else {}
        except (json.JSONDecodeError, UnicodeDecodeError):
            payload = {}
        pin = payload.get("pin") if isinstance(payload, dict) else None

    if pin is None or not isinstance(pin, (str, int)):
        return ""
    return str(pin).strip()


async def throttle_failed_login():
    """Delay the answer to a failed login to slow down PIN guessing."""
    await asyncio.sleep(config.LOGIN_FAILURE_DELAY)


def pin_matches(pin: str) -> bool:
    """Compare a PIN with the configured PIN in constant time."""
    return hmac.compare_digest(pin.encode("utf-8"), config.ADMIN_PIN.encode("utf-8"))


@router.post("/api/auth")
async def login(request: Request):
    """Authenticate with the PIN and create a session.

    Returns:
        Dictionary with the session token and its lifetime in seconds.

    Raises:
        HTTPException: 400 if no PIN is given, 401 on a wrong PIN, 500 if the
            session cannot be stored.
    """
    pin = await _read_pin(request)

    if not pin:
        raise HTTPException(400, "PIN is required")

    if not pin_matches(pin):
        client = request.client.host if request.client else "unknown"
        logger.warning("Failed login attempt from %s", client)
        await throttle_failed_login()
        raise HTTPException(401, "Invalid PIN")

    token = create_session()
    if not token:
        raise HTTPException(500, "Failed to create session")

    logger.info("Login successful")

    return {
        "success": True,
        "token": token,
        "expires_in": config.SESSION_DURATION,
        "message": "Authentication successful",
    }


@router.delete("/api/auth")
async def logout(token: Optional[str] = Depends(get_session_token)):
    """Log out by removing the session. Always succeeds."""
    if token:
        if remove_session(token):
            logger.info("Logout")
        else:
            logger.warning("Could not persist session removal on logout")

    return {"success": True, "message": "Logged out successfully"}


@router.get("/api/auth")
async def check_auth(token: Optional[str] = Depends(get_session_token)):
    """Report whether the request carries a valid session token."""
    if not token:
        return {"authenticated": False, "message": "No session token provided"}

    is_valid = validate_session(token)

    return {
        "authenticated": is_valid,
        "message": "Session is valid" if is_valid else "Session is invalid or expired",
    }
