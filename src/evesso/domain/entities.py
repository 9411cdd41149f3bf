from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping, Optional, Tuple

from .exceptions import DecodingError, ProviderError


def raise_for_provider_error(payload: Any) -> Mapping[str, Any]:
    """
    Check a decoded response body for the SSO error convention.

    The server reports failures in the body (`error` / `error_description`),
    often with a 200 or 400 status, so every response goes through here
    before any other field is read.
    """
    if not isinstance(payload, Mapping):
        raise DecodingError(f"Expected a JSON object, got {type(payload).__name__}")

    error = payload.get("error")
    if error:
        raise ProviderError(str(error), payload.get("error_description"))
    return payload


def _required_str(payload: Mapping[str, Any], key: str) -> str:
    value = payload.get(key)
    if not isinstance(value, str):
        raise DecodingError(f"Response field {key!r} is missing or not a string")
    return value


def _optional_str(payload: Mapping[str, Any], key: str) -> Optional[str]:
    value = payload.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise DecodingError(f"Response field {key!r} is not a string")
    return value


@dataclass(frozen=True, slots=True)
class TokenResponse:
    """
    Tokens returned by the token endpoint.
    """
    access_token: str
    refresh_token: Optional[str] = None
    token_type: Optional[str] = None
    expires_in: Optional[int] = None

    @classmethod
    def from_payload(cls, payload: Any) -> "TokenResponse":
        body = raise_for_provider_error(payload)

        expires_in = body.get("expires_in")
        if expires_in is not None and (
            isinstance(expires_in, bool) or not isinstance(expires_in, int)
        ):
            raise DecodingError("Response field 'expires_in' is not an integer")

        return cls(
            access_token=_required_str(body, "access_token"),
            refresh_token=_optional_str(body, "refresh_token"),
            token_type=_optional_str(body, "token_type"),
            expires_in=expires_in,
        )


@dataclass(frozen=True, slots=True)
class VerifiedIdentity:
    """
    Identity asserted by a verified access token.
    Only ever built from claims whose signature has been checked.
    """
    character_id: int
    character_name: str
    expires_at: datetime

    owner_hash: Optional[str] = None
    scopes: Tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True, slots=True)
class TokenExchange:
    """
    Result of a code / refresh-token exchange against the v2 endpoints:
    the raw tokens plus the identity decoded from the access token.
    """
    tokens: TokenResponse
    identity: VerifiedIdentity

    @property
    def access_token(self) -> str:
        return self.tokens.access_token

    @property
    def refresh_token(self) -> Optional[str]:
        return self.tokens.refresh_token

    @property
    def character_id(self) -> int:
        return self.identity.character_id

    @property
    def character_name(self) -> str:
        return self.identity.character_name

    @property
    def expires_at(self) -> datetime:
        return self.identity.expires_at


@dataclass(frozen=True, slots=True)
class VerifyResponse:
    """
    Body of the legacy `/oauth/verify` endpoint.
    """
    character_id: int
    character_name: str
    expires_on: str
    scopes: str
    token_type: str
    character_owner_hash: str

    @classmethod
    def from_payload(cls, payload: Any) -> "VerifyResponse":
        body = raise_for_provider_error(payload)

        character_id = body.get("CharacterID")
        if isinstance(character_id, bool) or not isinstance(character_id, int):
            raise DecodingError("Response field 'CharacterID' is missing or not an integer")

        return cls(
            character_id=character_id,
            character_name=_required_str(body, "CharacterName"),
            expires_on=_required_str(body, "ExpiresOn"),
            scopes=_optional_str(body, "Scopes") or "",
            token_type=_required_str(body, "TokenType"),
            character_owner_hash=_required_str(body, "CharacterOwnerHash"),
        )
