"""Best-effort lookup of the caller's login session."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import httpx

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SessionInfo:
    email: Optional[str]
    role: Optional[str]


class SessionClient:
    """Reads the session endpoint with the caller's cookies forwarded.

    The result is only used for diagnostic logging, so every failure
    resolves to ``None`` instead of raising.
    """

    def __init__(self, session_url: str | None, timeout: float = 2.0) -> None:
        self.session_url = str(session_url) if session_url else None
        self.timeout = timeout

    async def get_session(self, cookie_header: str | None) -> Optional[SessionInfo]:
        if not self.session_url or not cookie_header:
            return None

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(self.session_url, headers={"Cookie": cookie_header})
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.debug("Session lookup failed: %s", exc)
            return None

        user = data.get("user") if isinstance(data, dict) else None
        if not isinstance(user, dict):
            return None
        return SessionInfo(email=user.get("email"), role=user.get("role"))
