"""
Per-session contact storage for the API service.

Each browser session (X-Session-Id header) owns one ContactSession. The
store lives on the app instance and is lost on restart.
"""

import logging
from typing import Dict

from fastapi import Header, Request

from src.services.contact_upload_service import ContactSession

logger = logging.getLogger(__name__)

DEFAULT_SESSION_ID = "default"


class SessionStore:
    """In-memory map of session id to ContactSession."""

    def __init__(self):
        self._sessions: Dict[str, ContactSession] = {}

    def get(self, session_id: str) -> ContactSession:
        """Return the session, creating an empty one on first use."""
        session = self._sessions.get(session_id)
        if session is None:
            logger.debug(f"Creating contact session {session_id[:8]}")
            session = self._sessions[session_id] = ContactSession()
        return session

    def drop(self, session_id: str) -> bool:
        return self._sessions.pop(session_id, None) is not None

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions


def get_session_id(x_session_id: str = Header(default=DEFAULT_SESSION_ID)) -> str:
    return x_session_id.strip() or DEFAULT_SESSION_ID


def get_session_store(request: Request) -> SessionStore:
    return request.app.state.sessions
