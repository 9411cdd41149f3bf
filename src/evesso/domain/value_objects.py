# src/evesso/domain/value_objects.py

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable

_CHARACTER_ID = re.compile(r"[+-]?[0-9]+")


@dataclass(frozen=True, slots=True)
class CharacterSubject:
    """
    Represents the SSO subject (`sub` claim), e.g. "CHARACTER:EVE:95465499".

    Kept as a separate type so the raw subject string is never mistaken for
    the numeric character ID.
    """
    issuer: str
    kind: str
    character_id: int

    @classmethod
    def parse(cls, value: str) -> "CharacterSubject":
        parts = value.split(":", 2)
        if len(parts) != 3:
            raise ValueError(f"Expected '<issuer>:<kind>:<id>', got {value!r}")

        issuer, kind, raw_id = parts
        # digits only, with an optional sign
        if not _CHARACTER_ID.fullmatch(raw_id):
            raise ValueError(f"Character ID is not an integer: {raw_id!r}")
        character_id = int(raw_id)

        return cls(issuer=issuer, kind=kind, character_id=character_id)

    def __str__(self) -> str:
        return f"{self.issuer}:{self.kind}:{self.character_id}"


def normalize_scope(scope: str | Iterable[str] | None) -> str | None:
    """
    Normalize a scope argument into the space-delimited form the SSO expects.
    If a plain string is passed, it is used as-is. An empty scope is
    treated as no scope, so it is left out of the request.
    """
    if scope is None:
        return None
    if isinstance(scope, str):
        return scope or None
    return " ".join(scope) or None
