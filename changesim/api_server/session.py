"""
Session cookie for grouping runs per browser session.

A missing cookie means a new session: a UUID is issued and the cache lookup
is skipped since no runs can exist for it yet.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass

from fastapi import Request
from starlette.responses import Response

from changesim.config.settings import SESSION_COOKIE_NAME, SESSION_ID_MAX_LENGTH
from changesim.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class SessionInfo:
    session_id: str
    is_new: bool


def get_session(request: Request) -> SessionInfo:
    """
    FastAPI dependency: existing session from cookie, or a fresh one.

    Cookies longer than the stored session_id column are replaced with a new
    session rather than passed on to the run store.
    """
    sid = (request.cookies.get(SESSION_COOKIE_NAME) or "").strip()
    if len(sid) > SESSION_ID_MAX_LENGTH:
        logger.warning("session_cookie_reissued", length=len(sid))
        sid = ""
    if sid:
        return SessionInfo(session_id=sid, is_new=False)
    return SessionInfo(session_id=str(uuid.uuid4()), is_new=True)


def apply_session_cookie(response: Response, session: SessionInfo) -> None:
    """Set the session cookie on new sessions (browser-session lifetime)."""
    if session.is_new:
        response.set_cookie(
            SESSION_COOKIE_NAME,
            session.session_id,
            httponly=True,
            samesite="lax",
            path="/",
        )
