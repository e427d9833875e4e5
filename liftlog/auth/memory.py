"""Simulated magic-link provider for local runs without Supabase."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Mapping
from urllib.parse import urlencode
from uuid import uuid4

from liftlog.auth.exceptions import InvalidEmailError
from liftlog.auth.provider import AuthOutcome, AuthSession, normalize_email

logger = logging.getLogger(__name__)

DEFAULT_REDIRECT = "http://127.0.0.1:8080/auth/callback"


@dataclass
class _PendingLink:
    email: str
    metadata: dict[str, Any] = field(default_factory=dict)


class SimulatedAuth:
    """Keeps issued links in memory and logs them instead of emailing."""

    def __init__(self, session_ttl_sec: int = 3600, max_pending_links: int = 20) -> None:
        self._session_ttl_sec = session_ttl_sec
        self._max_pending_links = max_pending_links
        self._pending: dict[str, _PendingLink] = {}
        self._users: dict[str, str] = {}
        self._session: AuthSession | None = None
        self.last_link: str | None = None
        self.last_metadata: dict[str, Any] = {}

    async def request_passwordless_login(
        self,
        email: str,
        metadata: Mapping[str, Any] | None = None,
        redirect_to: str | None = None,
    ) -> AuthOutcome:
        try:
            address = normalize_email(email)
        except InvalidEmailError as exc:
            return AuthOutcome(ok=False, message=str(exc))

        token_hash = uuid4().hex
        self._pending[token_hash] = _PendingLink(email=address, metadata=dict(metadata or {}))
        while len(self._pending) > self._max_pending_links:
            self._pending.pop(next(iter(self._pending)))
        query = urlencode({"token_hash": token_hash, "type": "magiclink"})
        self.last_link = f"{redirect_to or DEFAULT_REDIRECT}?{query}"
        self.last_metadata = dict(metadata or {})
        logger.info("Simulated magic link for %s: %s", address, self.last_link)
        return AuthOutcome(ok=True, message="Check your email for a magic link to log in!")

    async def resolve_session_from_callback(self, params: Mapping[str, str]) -> AuthOutcome:
        token_hash = params.get("token_hash")
        if not token_hash:
            if self._session is not None:
                return AuthOutcome(ok=True, message="Authentication successful! Redirecting...")
            return AuthOutcome(ok=False, message="No sign-in link found in this address.")

        pending = self._pending.pop(token_hash, None)
        if pending is None:
            return AuthOutcome(ok=False, message="Sign-in link is invalid or has expired")

        user_id = self._users.setdefault(pending.email, uuid4().hex)
        self._session = AuthSession(
            user_id=user_id,
            email=pending.email,
            access_token=uuid4().hex,
            expires_at=datetime.now(timezone.utc) + timedelta(seconds=self._session_ttl_sec),
        )
        return AuthOutcome(ok=True, message="Authentication successful! Redirecting...")

    async def get_current_session(self) -> AuthSession | None:
        if self._session is not None and self._session.is_expired:
            self._session = None
        return self._session

    async def end_session(self) -> None:
        self._session = None
