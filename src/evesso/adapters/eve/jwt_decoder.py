import json
from typing import Any, Mapping, Optional, Sequence

import jwt
from jwt.exceptions import (
    DecodeError,
    ExpiredSignatureError,
    InvalidKeyError,
    InvalidSignatureError,
    InvalidTokenError as JWTInvalidTokenError,
)

from ...domain.exceptions import ClaimError, InvalidTokenError, KeyMaterialError, TokenExpiredError
from ...domain.ports import TokenDecoder
from .key_set import KeySetCache


class JWTTokenDecoder(TokenDecoder):
    """
    Adapter implementing TokenDecoder port using PyJWT and the SSO JWKS.

    Infrastructure layer:
    - Knows about JWT structure and verification.
    - Gets signing keys from a KeySetCache owned by the caller.
    """

    def __init__(
        self,
        key_set: KeySetCache,
        algorithms: Sequence[str] = ("RS256",),
        issuers: Optional[Sequence[str]] = None,
        audience: Optional[str] = None,
        verify_expiry: bool = True,
        leeway_seconds: float = 0,
    ) -> None:
        self._key_set = key_set
        self._algorithms = list(algorithms)
        self._issuers = tuple(issuers) if issuers else None
        self._audience = audience
        self._verify_expiry = verify_expiry
        self._leeway = leeway_seconds

    # ------------------------------------------------------------------ #
    # Port implementation
    # ------------------------------------------------------------------ #

    def decode(self, token: str) -> Mapping[str, Any]:
        """
        Decode and validate JWT token.

        Returns:
            Mapping of token claims (dict-like). Nothing is returned unless
            the signature checks out.

        Raises:
            TokenExpiredError
            InvalidTokenError (KeyNotFoundError, KeyMaterialError, ClaimError)
        """
        try:
            headers = jwt.get_unverified_header(token)
        except JWTInvalidTokenError as exc:
            raise InvalidTokenError(f"Invalid token header: {exc}") from exc

        kid = headers.get("kid")
        if not isinstance(kid, str):
            raise ClaimError("kid", "token header field is missing or not a string")

        key = self._key_set.lookup(kid)
        try:
            public_key = jwt.algorithms.RSAAlgorithm.from_jwk(json.dumps(key))
        except (InvalidKeyError, ValueError, KeyError, TypeError) as exc:
            raise KeyMaterialError(f"JWKS key {kid!r} is not a usable RSA key: {exc}") from exc

        try:
            # Issuer and audience are checked by hand below
            payload = jwt.decode(
                token,
                public_key,
                algorithms=self._algorithms,
                leeway=self._leeway,
                options={
                    "verify_aud": False,
                    "verify_iss": False,
                    "verify_exp": self._verify_expiry,
                },
            )
        except ExpiredSignatureError as exc:
            raise TokenExpiredError("Token has expired") from exc
        except (InvalidSignatureError, DecodeError, JWTInvalidTokenError) as exc:
            raise InvalidTokenError(f"Invalid token: {exc}") from exc

        if self._issuers is not None and payload.get("iss") not in self._issuers:
            raise InvalidTokenError(
                f"Invalid issuer: expected one of {list(self._issuers)}, got {payload.get('iss')!r}"
            )

        if self._audience is not None:
            # EVE sends a list (client id + "EVE Online"), but accept a string too
            aud_claim = payload.get("aud")
            if isinstance(aud_claim, str):
                aud_list = [aud_claim]
            elif isinstance(aud_claim, list):
                aud_list = aud_claim
            else:
                aud_list = []

            if self._audience not in aud_list:
                raise InvalidTokenError(
                    f"Invalid audience: expected {self._audience}, got {aud_list}"
                )

        return payload
