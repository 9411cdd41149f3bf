from __future__ import annotations

from typing import Optional

from ..adapters.eve.jwt_decoder import JWTTokenDecoder
from ..adapters.eve.key_set import KeySetCache
from ..adapters.http.httpx_transport import HttpxTransport
from ..adapters.http.requests_transport import RequestsTransport
from ..domain.constants import EVE_ISSUERS
from ..domain.ports import HttpTransport
from ..sso.client import LegacySingleSignOn, SingleSignOn
from ..sso.settings import SSOSettings


def _build_transport(settings: SSOSettings, use_httpx: bool) -> HttpTransport:
    if use_httpx:
        return HttpxTransport(
            timeout_seconds=settings.timeout_seconds,
            verify_ssl=settings.verify_ssl,
        )
    return RequestsTransport(
        timeout_seconds=settings.timeout_seconds,
        verify_ssl=settings.verify_ssl,
    )


def create_single_sign_on(
        settings: SSOSettings,
        *,
        transport: Optional[HttpTransport] = None,
        use_httpx: bool = False,
        verify_expiry: bool = True,
        verify_issuer: bool = False,
        verify_audience: bool = False,
        leeway_seconds: float = 0,
) -> SingleSignOn:
    """
    High-level factory: SSOSettings -> SingleSignOn.

    - builds a transport (requests by default, httpx on request)
    - builds a KeySetCache owned by this client
    - wires a JWTTokenDecoder with the requested checks

    `verify_audience` checks that the token was issued to
    `settings.client_id`.
    """
    transport = transport or _build_transport(settings, use_httpx)

    key_set = KeySetCache(
        transport,
        settings.jwks_uri,
        ttl_seconds=settings.jwks_cache_ttl_seconds,
    )
    decoder = JWTTokenDecoder(
        key_set,
        issuers=EVE_ISSUERS if verify_issuer else None,
        audience=settings.client_id if verify_audience else None,
        verify_expiry=verify_expiry,
        leeway_seconds=leeway_seconds,
    )

    return SingleSignOn(
        settings,
        transport,
        key_set=key_set,
        token_decoder=decoder,
    )


def create_legacy_single_sign_on(
        settings: SSOSettings,
        *,
        transport: Optional[HttpTransport] = None,
        use_httpx: bool = False,
) -> LegacySingleSignOn:
    """SSOSettings -> LegacySingleSignOn (v1 endpoints + verify call)."""
    return LegacySingleSignOn(settings, transport or _build_transport(settings, use_httpx))
