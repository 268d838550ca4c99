"""
Environment-driven settings for InstantSeek2Api.

Settings are resolved once, before the server starts, and stay immutable for
the life of the process:

    AUTH_TOKEN                  Bearer token clients must present (unset = open access)
    INSTANTSEEK_UPSTREAM_URL    Upstream chat endpoint
    INSTANTSEEK_TIMEOUT         Upstream request timeout in seconds
"""

import os
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict

AUTH_TOKEN_ENV = "AUTH_TOKEN"
UPSTREAM_URL_ENV = "INSTANTSEEK_UPSTREAM_URL"
TIMEOUT_ENV = "INSTANTSEEK_TIMEOUT"

DEFAULT_UPSTREAM_URL = "https://instantseek.org/api/chat"
DEFAULT_TIMEOUT = 60.0


class Settings(BaseModel):
    """Process-wide gateway configuration."""

    model_config = ConfigDict(frozen=True)

    auth_token: Optional[str] = None
    upstream_url: str = DEFAULT_UPSTREAM_URL
    timeout: float = DEFAULT_TIMEOUT

    @property
    def auth_enabled(self) -> bool:
        return bool(self.auth_token)


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from the process environment.

    Empty values count as unset, so ``AUTH_TOKEN=`` disables auth the same
    way a missing variable does.

    Args:
        environ: Mapping to read instead of ``os.environ`` (used by tests).

    Returns:
        Settings: The resolved, frozen configuration.
    """
    if environ is None:
        environ = os.environ

    return Settings(
        auth_token=environ.get(AUTH_TOKEN_ENV) or None,
        upstream_url=environ.get(UPSTREAM_URL_ENV) or DEFAULT_UPSTREAM_URL,
        timeout=environ.get(TIMEOUT_ENV) or DEFAULT_TIMEOUT,
    )
