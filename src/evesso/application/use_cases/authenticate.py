from __future__ import annotations

from dataclasses import dataclass, field

from ...domain.claims import CharacterClaimsDecoder
from ...domain.entities import VerifiedIdentity
from ...domain.exceptions import (
    AuthenticationError,
    DecodingError,
    InvalidTokenError,
    TokenExpiredError,
    TransportError,
)
from ...domain.ports import TokenDecoder


@dataclass(slots=True)
class AuthenticateTokenUseCase:
    """
    Application use case:
    - Verify a token via TokenDecoder port
    - Map the verified claims -> VerifiedIdentity

    Claims are only read after the decoder has checked the signature.
    """

    token_decoder: TokenDecoder
    claims_decoder: CharacterClaimsDecoder = field(default_factory=CharacterClaimsDecoder)

    def execute(self, token: str) -> VerifiedIdentity:
        """
        Authenticate a token and return the character it belongs to.

        Raises:
            TokenExpiredError
            InvalidTokenError (incl. KeyNotFoundError, ClaimError)
            TransportError / DecodingError when the key set cannot be fetched
            AuthenticationError
        """
        if not token:
            raise InvalidTokenError("Token is empty")

        try:
            claims = self.token_decoder.decode(token)
        except (TokenExpiredError, InvalidTokenError, TransportError, DecodingError):
            # let callers distinguish these explicitly
            raise
        except Exception as exc:
            # Wrap unexpected errors in a generic AuthenticationError
            raise AuthenticationError(f"Token validation failed: {exc}") from exc

        return self.claims_decoder.decode(claims)
