from __future__ import annotations

import logging
import urllib.parse
from typing import ClassVar, Iterable, Optional

from ..adapters.eve.jwt_decoder import JWTTokenDecoder
from ..adapters.eve.key_set import KeySetCache
from ..adapters.http.requests_transport import RequestsTransport
from ..application.use_cases.authenticate import AuthenticateTokenUseCase
from ..domain.constants import Endpoint
from ..domain.entities import TokenExchange, TokenResponse, VerifiedIdentity, VerifyResponse
from ..domain.ports import HttpTransport, TokenDecoder
from ..domain.value_objects import normalize_scope
from .helpers import _basic_auth_header, _bearer_auth_header, _token_form
from .settings import SSOSettings

logger = logging.getLogger(__name__)


class _BaseSingleSignOn:
    """
    Shared plumbing for both SSO flavours: redirect URLs and token requests.
    """

    authorize_endpoint: ClassVar[Endpoint]
    token_endpoint: ClassVar[Endpoint]

    def __init__(self, settings: SSOSettings, transport: Optional[HttpTransport] = None) -> None:
        self.s = settings
        self._transport = transport or RequestsTransport(
            timeout_seconds=settings.timeout_seconds,
            verify_ssl=settings.verify_ssl,
        )

    @property
    def transport(self) -> HttpTransport:
        return self._transport

    def _url(self, endpoint: Endpoint) -> str:
        return self.s.server_url + endpoint.value

    # ------------------------------------------------------------------ #
    # redirect
    # ------------------------------------------------------------------ #

    def redirect_url(self, state: str, scope: str | Iterable[str] | None = None) -> str:
        """
        Build the authorization URL the user's browser is sent to.

        `state` is echoed back on the callback and must be checked by the
        caller. `scope` may be a space-delimited string or an iterable of
        scopes; None leaves it out of the query.
        """
        if not state:
            raise ValueError("state must be a non-empty string")

        params = [
            ("response_type", "code"),
            ("client_id", self.s.client_id),
            ("redirect_uri", self.s.redirect_uri),
            ("state", state),
        ]
        scope_value = normalize_scope(scope)
        if scope_value is not None:
            params.append(("scope", scope_value))

        return f"{self._url(self.authorize_endpoint)}?{urllib.parse.urlencode(params)}"

    # ------------------------------------------------------------------ #
    # token endpoint
    # ------------------------------------------------------------------ #

    def _request_tokens(self, code: str, refresh: bool) -> TokenResponse:
        if not code:
            raise ValueError("code must be a non-empty string")

        logger.debug(
            "Requesting tokens from %s (grant=%s)",
            self.s.server_url,
            "refresh_token" if refresh else "authorization_code",
        )
        payload = self._transport.request(
            "POST",
            self._url(self.token_endpoint),
            headers=_basic_auth_header(self.s.client_id, self.s.secret_key),
            form=_token_form(code, refresh=refresh),
        )
        return TokenResponse.from_payload(payload)


class SingleSignOn(_BaseSingleSignOn):
    """
    Client for the v2 SSO endpoints.

    Access tokens are JWTs; they are verified locally against the server's
    published keys and the character identity is read from their claims.
    """

    authorize_endpoint = Endpoint.AUTHORIZE_V2
    token_endpoint = Endpoint.TOKEN_V2

    def __init__(
        self,
        settings: SSOSettings,
        transport: Optional[HttpTransport] = None,
        *,
        key_set: Optional[KeySetCache] = None,
        token_decoder: Optional[TokenDecoder] = None,
    ) -> None:
        super().__init__(settings, transport)
        self._key_set = key_set or KeySetCache(
            self._transport,
            settings.jwks_uri,
            ttl_seconds=settings.jwks_cache_ttl_seconds,
        )
        self._authenticate = AuthenticateTokenUseCase(
            token_decoder=token_decoder or JWTTokenDecoder(self._key_set),
        )

    @property
    def key_set(self) -> KeySetCache:
        return self._key_set

    def exchange_token(self, code: str, refresh: bool = False) -> TokenExchange:
        """
        Exchange an authorization code (or, with `refresh=True`, a refresh
        token) for tokens, and verify the returned access token.

        Raises:
            ValueError if `code` is empty
            ProviderError when the server reports an error
            TransportError / DecodingError
            TokenExpiredError / InvalidTokenError if the access token does not verify
        """
        tokens = self._request_tokens(code, refresh)
        identity = self._authenticate.execute(tokens.access_token)
        return TokenExchange(tokens=tokens, identity=identity)

    def refresh(self, refresh_token: str) -> TokenExchange:
        return self.exchange_token(refresh_token, refresh=True)

    def decode_token(self, access_token: str) -> VerifiedIdentity:
        """Verify an access token the caller already holds."""
        return self._authenticate.execute(access_token)


class LegacySingleSignOn(_BaseSingleSignOn):
    """
    Client for the older (v1) SSO endpoints.

    Tokens are opaque here; identity comes from the server's verify endpoint.
    """

    authorize_endpoint = Endpoint.AUTHORIZE
    token_endpoint = Endpoint.TOKEN

    def exchange_token(self, code: str, refresh: bool = False) -> TokenResponse:
        return self._request_tokens(code, refresh)

    def refresh(self, refresh_token: str) -> TokenResponse:
        return self.exchange_token(refresh_token, refresh=True)

    def verify_token(self, token: str) -> VerifyResponse:
        """
        Ask the server who `token` belongs to.

        Raises:
            ValueError if `token` is empty
            ProviderError when the server reports an error
            TransportError / DecodingError
        """
        if not token:
            raise ValueError("token must be a non-empty string")

        payload = self._transport.request(
            "GET",
            self._url(Endpoint.VERIFY),
            headers=_bearer_auth_header(token),
        )
        return VerifyResponse.from_payload(payload)
