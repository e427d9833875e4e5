"""Supabase (GoTrue) passwordless authentication over REST."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Mapping

import httpx

from liftlog.auth.exceptions import (
    AuthError,
    InvalidEmailError,
    ProviderError,
    SessionExpiredError,
)
from liftlog.auth.provider import AuthOutcome, AuthSession, normalize_email

logger = logging.getLogger(__name__)

MAGIC_LINK_SENT = "Check your email for a magic link to log in!"
SIGNED_IN = "Authentication successful! Redirecting..."
NO_CALLBACK = "No sign-in link found in this address."


class SupabaseAuth:
    """Magic-link sign-in against a Supabase project's auth endpoints."""

    def __init__(
        self,
        url: str,
        anon_key: str,
        *,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = url.rstrip("/") + "/auth/v1"
        self._anon_key = anon_key
        self._timeout = timeout
        self._transport = transport
        self._session: AuthSession | None = None

    @property
    def session(self) -> AuthSession | None:
        return self._session

    async def request_passwordless_login(
        self,
        email: str,
        metadata: Mapping[str, Any] | None = None,
        redirect_to: str | None = None,
    ) -> AuthOutcome:
        try:
            address = normalize_email(email)
            payload: dict[str, Any] = {"email": address, "create_user": True}
            if metadata:
                payload["data"] = dict(metadata)
            params = {"redirect_to": redirect_to} if redirect_to else None
            await self._request("POST", "/otp", json=payload, params=params)
        except InvalidEmailError as exc:
            return AuthOutcome(ok=False, message=str(exc))
        except (AuthError, httpx.HTTPError) as exc:
            logger.warning("Magic link request failed: %s", exc)
            return AuthOutcome(ok=False, message=_describe(exc, "Failed to send magic link"))

        logger.info("Magic link requested")
        return AuthOutcome(ok=True, message=MAGIC_LINK_SENT)

    async def resolve_session_from_callback(self, params: Mapping[str, str]) -> AuthOutcome:
        if params.get("error") or params.get("error_description"):
            message = params.get("error_description") or params.get("error") or "Sign-in failed"
            return AuthOutcome(ok=False, message=message.replace("+", " "))

        try:
            if params.get("token_hash"):
                data = await self._request(
                    "POST",
                    "/verify",
                    json={
                        "type": params.get("type") or "magiclink",
                        "token_hash": params["token_hash"],
                    },
                )
                self._session = _session_from_payload(data)
            elif params.get("access_token"):
                user = await self._request(
                    "GET",
                    "/user",
                    headers={"Authorization": f"Bearer {params['access_token']}"},
                )
                self._session = _session_from_payload({**params, "user": user})
            else:
                if self._session is not None:
                    return AuthOutcome(ok=True, message=SIGNED_IN)
                return AuthOutcome(ok=False, message=NO_CALLBACK)
        except (AuthError, httpx.HTTPError, KeyError, ValueError) as exc:
            logger.warning("Magic link callback failed: %s", exc)
            return AuthOutcome(ok=False, message=_describe(exc, "Sign-in link is invalid or has expired"))

        logger.info("Signed in user %s", self._session.user_id)
        return AuthOutcome(ok=True, message=SIGNED_IN)

    async def get_current_session(self) -> AuthSession | None:
        if self._session is None:
            return None
        if not self._session.is_expired:
            return self._session
        try:
            await self._refresh()
        except (AuthError, httpx.HTTPError) as exc:
            logger.info("Session refresh failed: %s", exc)
            self._session = None
        return self._session

    async def end_session(self) -> None:
        session = self._session
        self._session = None
        if session is None:
            return
        try:
            await self._request(
                "POST",
                "/logout",
                headers={"Authorization": f"Bearer {session.access_token}"},
            )
        except (AuthError, httpx.HTTPError) as exc:
            logger.warning("Sign-out request failed, local session cleared anyway: %s", exc)

    async def _refresh(self) -> None:
        if self._session is None or not self._session.refresh_token:
            raise SessionExpiredError("No refresh token available")
        data = await self._request(
            "POST",
            "/token",
            params={"grant_type": "refresh_token"},
            json={"refresh_token": self._session.refresh_token},
        )
        self._session = _session_from_payload(data)

    async def _request(
        self,
        method: str,
        path: str,
        *,
        headers: Mapping[str, str] | None = None,
        **kwargs: Any,
    ) -> dict[str, Any]:
        merged = {"apikey": self._anon_key, "Authorization": f"Bearer {self._anon_key}"}
        merged.update(headers or {})
        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            response = await client.request(
                method,
                f"{self._base_url}{path}",
                headers=merged,
                **kwargs,
            )

        if response.status_code >= 400:
            raise ProviderError(_error_message(response), status_code=response.status_code)
        if not response.content:
            return {}
        return response.json()


def _session_from_payload(data: Mapping[str, Any]) -> AuthSession:
    user = data.get("user") or {}
    access_token = data["access_token"]
    expires_at: datetime | None = None
    if data.get("expires_at"):
        expires_at = datetime.fromtimestamp(int(data["expires_at"]), tz=timezone.utc)
    elif data.get("expires_in"):
        expires_at = datetime.now(timezone.utc) + timedelta(seconds=int(data["expires_in"]))
    return AuthSession(
        user_id=str(user["id"]),
        email=user.get("email"),
        access_token=access_token,
        refresh_token=data.get("refresh_token"),
        expires_at=expires_at,
    )


def _error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    for key in ("error_description", "msg", "message", "error"):
        value = data.get(key) if isinstance(data, dict) else None
        if value:
            return str(value)
    return f"HTTP {response.status_code}"


def _describe(exc: Exception, fallback: str) -> str:
    if isinstance(exc, ProviderError):
        return str(exc) or fallback
    return fallback
