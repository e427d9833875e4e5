"""Identity provider contract used by the web UI."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Mapping, Protocol

from liftlog.auth.exceptions import InvalidEmailError

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


@dataclass(frozen=True)
class AuthOutcome:
    ok: bool
    message: str


@dataclass(frozen=True)
class AuthSession:
    user_id: str
    email: str | None
    access_token: str
    refresh_token: str | None = None
    expires_at: datetime | None = None

    @property
    def is_expired(self) -> bool:
        if self.expires_at is None:
            return False
        return datetime.now(timezone.utc) >= self.expires_at


class IdentityProvider(Protocol):
    async def request_passwordless_login(
        self,
        email: str,
        metadata: Mapping[str, Any] | None = None,
        redirect_to: str | None = None,
    ) -> AuthOutcome: ...

    async def resolve_session_from_callback(self, params: Mapping[str, str]) -> AuthOutcome: ...

    async def get_current_session(self) -> AuthSession | None: ...

    async def end_session(self) -> None: ...


def normalize_email(email: str) -> str:
    cleaned = (email or "").strip()
    if not _EMAIL_RE.match(cleaned):
        raise InvalidEmailError("Please enter a valid email address")
    return cleaned.lower()
