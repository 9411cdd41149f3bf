from __future__ import annotations

import os
from typing import Optional

from ..domain.constants import DEFAULT_JWKS_URI, LIVE_SERVER, TEST_SERVER
from .settings import SSOSettings

_SERVER_ALIASES = {
    "live": LIVE_SERVER,
    "tranquility": LIVE_SERVER,
    "test": TEST_SERVER,
    "singularity": TEST_SERVER,
}


def settings_from_env() -> SSOSettings:
    """
    Build SSOSettings from EVE_SSO_* environment variables.

    Opt-in helper for hosts that configure through the environment; nothing
    else in the package reads it.
    """
    def _bool(key: str, default: bool = True) -> bool:
        raw = os.getenv(key)
        if raw is None:
            return default
        return str(raw).strip().lower() in {"1", "true", "yes", "on"}

    def _float(key: str, default: Optional[float]) -> Optional[float]:
        raw = os.getenv(key)
        if raw is None or not raw.strip():
            return default
        try:
            return float(raw)
        except ValueError as exc:
            raise RuntimeError(f"{key} must be a number, got {raw!r}") from exc

    client_id = os.getenv("EVE_SSO_CLIENT_ID")
    secret_key = os.getenv("EVE_SSO_SECRET_KEY")
    redirect_uri = os.getenv("EVE_SSO_REDIRECT_URI")
    if not all([client_id, secret_key, redirect_uri]):
        missing = [
            n
            for n, v in [
                ("EVE_SSO_CLIENT_ID", client_id),
                ("EVE_SSO_SECRET_KEY", secret_key),
                ("EVE_SSO_REDIRECT_URI", redirect_uri),
            ]
            if not v
        ]
        raise RuntimeError(f"Missing EVE SSO settings: {', '.join(missing)}")

    server = (os.getenv("EVE_SSO_SERVER") or "").strip()
    server = _SERVER_ALIASES.get(server.lower(), server) or LIVE_SERVER

    return SSOSettings(
        client_id=client_id,
        secret_key=secret_key,
        redirect_uri=redirect_uri,
        server=server,
        jwks_uri=os.getenv("EVE_SSO_JWKS_URI") or DEFAULT_JWKS_URI,
        jwks_cache_ttl_seconds=_float("EVE_SSO_JWKS_CACHE_TTL", None),
        timeout_seconds=_float("EVE_SSO_TIMEOUT", 30.0),
        verify_ssl=_bool("EVE_SSO_VERIFY_SSL", True),
    )
