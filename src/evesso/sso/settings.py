from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..domain.constants import DEFAULT_JWKS_URI, LIVE_SERVER


@dataclass(frozen=True, slots=True)
class SSOSettings:
    """
    Credentials and connection settings for one SSO application.

    Host code decides how to construct this (env, config file, etc.).
    """
    client_id: str
    secret_key: str
    redirect_uri: str
    server: str = LIVE_SERVER

    jwks_uri: str = DEFAULT_JWKS_URI
    # None keeps fetched keys until the cache is invalidated
    jwks_cache_ttl_seconds: Optional[float] = None
    timeout_seconds: Optional[float] = 30.0
    verify_ssl: bool = True

    @property
    def server_url(self) -> str:
        return self.server.strip().rstrip("/")
