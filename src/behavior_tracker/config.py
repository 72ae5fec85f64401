"""Application configuration read from the environment."""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

DEFAULT_APP_TITLE = "Student Management"


class ConfigError(ValueError):
    """Raised when required configuration is missing or malformed."""


@dataclass(frozen=True)
class AppConfig:
    """Connection settings for the hosted data/auth gateway."""

    supabase_url: str
    anon_key: str
    # None means no local timeout; the gateway's own limits apply
    timeout: Optional[float] = None
    app_title: str = DEFAULT_APP_TITLE
    # Refresh the access token on a background timer before it expires
    auto_refresh_token: bool = True

    @classmethod
    def from_env(cls, load_env_file: bool = True) -> "AppConfig":
        """Create configuration from environment variables.

        Args:
            load_env_file: Read a ``.env`` file from the working directory first.

        Raises:
            ConfigError: If the gateway URL or key is missing, or the timeout
                is not a number.
        """
        if load_env_file:
            load_dotenv()

        url = os.environ.get("SUPABASE_URL", "").strip()
        anon_key = os.environ.get("SUPABASE_ANON_KEY", "").strip()

        if not url:
            raise ConfigError("SUPABASE_URL environment variable is required")
        if not anon_key:
            raise ConfigError("SUPABASE_ANON_KEY environment variable is required")
        if not url.startswith(("http://", "https://")):
            raise ConfigError(f"SUPABASE_URL must be an http(s) URL, got {url!r}")

        timeout: Optional[float] = None
        raw_timeout = os.environ.get("GATEWAY_TIMEOUT", "").strip()
        if raw_timeout:
            try:
                timeout = float(raw_timeout)
            except ValueError as e:
                raise ConfigError(f"GATEWAY_TIMEOUT must be a number, got {raw_timeout!r}") from e

        return cls(
            supabase_url=url.rstrip("/"),
            anon_key=anon_key,
            timeout=timeout,
            app_title=os.environ.get("APP_TITLE", DEFAULT_APP_TITLE),
            auto_refresh_token=_parse_bool(os.environ.get("GATEWAY_AUTO_REFRESH", "true")),
        )


def _parse_bool(value: str) -> bool:
    return value.strip().lower() not in ("0", "false", "no", "off")
