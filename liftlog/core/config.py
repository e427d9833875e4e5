"""Runtime configuration for the web app."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from typing import Any, Mapping

logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    """Raised when the configuration cannot start the app."""


@dataclass(frozen=True)
class AppConfig:
    supabase_url: str = ""
    supabase_anon_key: str = ""
    site_url: str = "http://127.0.0.1:8080"
    storage_secret: str = "liftlog-dev-secret"
    host: str = "127.0.0.1"
    port: int = 8080
    simulate_auth: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> AppConfig:
        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            supabase_url=env.get("SUPABASE_URL", "").strip(),
            supabase_anon_key=env.get("SUPABASE_ANON_KEY", "").strip(),
            site_url=env.get("LIFTLOG_SITE_URL", defaults.site_url).strip().rstrip("/"),
            storage_secret=env.get("LIFTLOG_STORAGE_SECRET", defaults.storage_secret),
            log_level=env.get("LIFTLOG_LOG_LEVEL", defaults.log_level).upper(),
        )

    def with_overrides(self, **overrides: Any) -> AppConfig:
        values = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **values)

    @property
    def has_supabase(self) -> bool:
        return bool(self.supabase_url and self.supabase_anon_key)

    @property
    def callback_url(self) -> str:
        return f"{self.site_url.rstrip('/')}/auth/callback"

    def validate(self) -> None:
        if self.port <= 0 or self.port > 65535:
            raise ConfigError(f"Invalid port {self.port}")
        if logging.getLevelName(self.log_level) == f"Level {self.log_level}":
            raise ConfigError(f"Unknown log level '{self.log_level}'")
        if not self.has_supabase:
            logger.warning(
                "Supabase URL or anon key is missing. Auth functionality will not work correctly."
            )
            if not self.simulate_auth:
                raise ConfigError(
                    "Set SUPABASE_URL and SUPABASE_ANON_KEY, or run with --debug-sim-auth"
                )
