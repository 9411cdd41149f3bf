# tests/conftest.py
from __future__ import annotations

import json
import threading
from typing import Any, Callable, Dict, List, Mapping, Optional

import jwt
import pytest
from cryptography.hazmat.primitives.asymmetric import rsa

from evesso.domain.constants import DEFAULT_JWKS_URI, TEST_SERVER
from evesso.sso.settings import SSOSettings

KID = "JWT-Signature-Key"


class FakeTransport:
    """
    In-memory HttpTransport: answers by URL and records every call.
    """

    def __init__(self) -> None:
        self.routes: Dict[str, Callable[[], Any]] = {}
        self.calls: List[Dict[str, Any]] = []
        self._lock = threading.Lock()

    def add(self, url: str, body: Any) -> None:
        self.routes[url] = lambda: body

    def add_error(self, url: str, exc: Exception) -> None:
        def _raise() -> Any:
            raise exc
        self.routes[url] = _raise

    def count(self, url: str) -> int:
        return sum(1 for c in self.calls if c["url"] == url)

    def request(
        self,
        method: str,
        url: str,
        *,
        headers: Optional[Mapping[str, str]] = None,
        form: Optional[Mapping[str, str]] = None,
    ) -> Any:
        with self._lock:
            self.calls.append(
                {"method": method, "url": url, "headers": dict(headers or {}), "form": form}
            )
        return self.routes[url]()


def _new_key() -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def private_key() -> rsa.RSAPrivateKey:
    return _new_key()


@pytest.fixture(scope="session")
def other_private_key() -> rsa.RSAPrivateKey:
    return _new_key()


def public_jwk(key: rsa.RSAPrivateKey, kid: str = KID) -> Dict[str, Any]:
    jwk = json.loads(jwt.algorithms.RSAAlgorithm.to_jwk(key.public_key()))
    jwk.update({"kid": kid, "alg": "RS256", "use": "sig"})
    return jwk


@pytest.fixture
def jwks(private_key) -> Dict[str, Any]:
    # EVE also publishes an ES256 key; it must not confuse the lookup
    return {
        "keys": [
            public_jwk(private_key),
            {"kty": "EC", "crv": "P-256", "kid": "JWT-Signature-Key-ES", "alg": "ES256",
             "x": "ITcDYJ8WVpDO4QtZ169xXUt7GB1Y6-oMKIwJ3nK1tFU",
             "y": "ZkDj6yhaU_6kpLJvYv8cK7rgDdkbHMPgxBsRuxyjWBs"},
        ],
        "SkipUnresolvedJsonWebKeys": True,
    }


@pytest.fixture
def make_token(private_key) -> Callable[..., str]:
    def _make(
        claims: Optional[Dict[str, Any]] = None,
        *,
        key: Optional[rsa.RSAPrivateKey] = None,
        kid: Any = KID,
        **overrides: Any,
    ) -> str:
        payload = {
            "sub": "CHARACTER:EVE:95465499",
            "name": "CCP Bartender",
            "exp": 4102444800,  # 2100-01-01
            "iss": "https://login.eveonline.com",
            "aud": ["my-client-id", "EVE Online"],
            "owner": "8PmzCeTKb4VFUDrHLc/AeZXDSWM=",
            "scp": ["esi-skills.read_skills.v1", "esi-wallet.read_character_wallet.v1"],
        }
        if claims is not None:
            payload = claims
        payload.update(overrides)
        headers = {"kid": kid} if kid is not None else {}
        return jwt.encode(payload, key or private_key, algorithm="RS256", headers=headers)

    return _make


@pytest.fixture
def settings() -> SSOSettings:
    return SSOSettings(
        client_id="my-client-id",
        secret_key="s3cr3t",
        redirect_uri="https://app.example.com/callback?x=1&y=2",
        server=TEST_SERVER,
    )


@pytest.fixture
def transport(jwks) -> FakeTransport:
    t = FakeTransport()
    t.add(DEFAULT_JWKS_URI, jwks)
    return t
