from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Mapping, Tuple

from .entities import VerifiedIdentity
from .exceptions import ClaimError
from .value_objects import CharacterSubject


def _require_str(claims: Mapping[str, Any], name: str) -> str:
    if name not in claims:
        raise ClaimError(name, "claim is missing")
    value = claims[name]
    if not isinstance(value, str):
        raise ClaimError(name, f"expected a string, got {type(value).__name__}")
    return value


def _require_timestamp(claims: Mapping[str, Any], name: str) -> datetime:
    if name not in claims:
        raise ClaimError(name, "claim is missing")
    value = claims[name]
    # bool is an int subclass, but never a timestamp
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ClaimError(name, f"expected a numeric timestamp, got {type(value).__name__}")
    try:
        return datetime.fromtimestamp(value, tz=timezone.utc)
    except (OverflowError, OSError, ValueError) as exc:
        raise ClaimError(name, f"timestamp out of range: {value!r}") from exc


def _optional_scopes(claims: Mapping[str, Any]) -> Tuple[str, ...]:
    # single-scope tokens carry a plain string instead of a list
    raw = claims.get("scp")
    if isinstance(raw, str):
        return (raw,)
    if isinstance(raw, list):
        return tuple(s for s in raw if isinstance(s, str))
    return ()


@dataclass(frozen=True, slots=True)
class CharacterClaimsDecoder:
    """
    Typed view over a verified, untyped claim set.

    Each required claim is checked on its own and the first bad one raises a
    ClaimError naming it:
      - sub:  "<issuer>:<kind>:<character id>"
      - name: character name
      - exp:  seconds since epoch
    `owner` and `scp` are optional and only kept when well-formed.
    """

    def decode(self, claims: Mapping[str, Any]) -> VerifiedIdentity:
        sub = _require_str(claims, "sub")
        try:
            subject = CharacterSubject.parse(sub)
        except ValueError as exc:
            raise ClaimError("sub", str(exc)) from exc

        name = _require_str(claims, "name")
        expires_at = _require_timestamp(claims, "exp")

        owner = claims.get("owner")

        return VerifiedIdentity(
            character_id=subject.character_id,
            character_name=name,
            expires_at=expires_at,
            owner_hash=owner if isinstance(owner, str) else None,
            scopes=_optional_scopes(claims),
        )
