"""
evesso

OAuth2 authorization-code client for the EVE Online SSO: redirect URLs,
code / refresh-token exchange and local verification of the signed
access token.
"""

__version__ = "0.1.0"

from .domain.constants import LIVE_SERVER, TEST_SERVER, GrantType
from .domain.entities import TokenExchange, TokenResponse, VerifiedIdentity, VerifyResponse
from .domain.exceptions import (
    SSOError,
    TransportError,
    DecodingError,
    ProviderError,
    AuthenticationError,
    TokenExpiredError,
    InvalidTokenError,
    KeyNotFoundError,
    KeyMaterialError,
    ClaimError,
)
from .domain.value_objects import CharacterSubject
from .domain.claims import CharacterClaimsDecoder
from .domain.ports import HttpTransport, TokenDecoder

from .application.use_cases.authenticate import AuthenticateTokenUseCase
from .application.factory import create_single_sign_on, create_legacy_single_sign_on

from .adapters.http.requests_transport import RequestsTransport
from .adapters.http.httpx_transport import HttpxTransport
from .adapters.eve.key_set import KeySetCache
from .adapters.eve.jwt_decoder import JWTTokenDecoder

from .sso import SSOSettings, SingleSignOn, LegacySingleSignOn, settings_from_env

__all__ = [
    "__version__",
    # domain core
    "LIVE_SERVER",
    "TEST_SERVER",
    "GrantType",
    "TokenResponse",
    "TokenExchange",
    "VerifiedIdentity",
    "VerifyResponse",
    "CharacterSubject",
    "CharacterClaimsDecoder",
    "HttpTransport",
    "TokenDecoder",
    # exceptions
    "SSOError",
    "TransportError",
    "DecodingError",
    "ProviderError",
    "AuthenticationError",
    "TokenExpiredError",
    "InvalidTokenError",
    "KeyNotFoundError",
    "KeyMaterialError",
    "ClaimError",
    # use cases
    "AuthenticateTokenUseCase",
    "create_single_sign_on",
    "create_legacy_single_sign_on",
    # adapters
    "RequestsTransport",
    "HttpxTransport",
    "KeySetCache",
    "JWTTokenDecoder",
    # clients
    "SSOSettings",
    "SingleSignOn",
    "LegacySingleSignOn",
    "settings_from_env",
]
