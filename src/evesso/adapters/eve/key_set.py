from __future__ import annotations

import logging
import threading
import time
from typing import Any, Callable, Dict, List, Optional

from ...domain.exceptions import DecodingError, KeyNotFoundError
from ...domain.ports import HttpTransport

logger = logging.getLogger(__name__)


class KeySetCache:
    """
    In-memory cache of the SSO server's published signing keys (JWKS).

    - Keys are fetched lazily on first use, through the given transport.
    - With `ttl_seconds=None` they are kept until `invalidate()` is called;
      otherwise they are refetched once older than the TTL.
    - A failed fetch raises and leaves the cache untouched.
    - Concurrent callers on a cold cache trigger a single fetch; the others
      wait on the lock and reuse its result.
    """

    def __init__(
        self,
        transport: HttpTransport,
        jwks_uri: str,
        ttl_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._transport = transport
        self._jwks_uri = jwks_uri
        self._ttl = ttl_seconds
        self._clock = clock

        self._lock = threading.Lock()
        self._keys: Optional[List[Dict[str, Any]]] = None
        self._fetched_at: float = 0.0

    @property
    def jwks_uri(self) -> str:
        return self._jwks_uri

    def keys(self) -> List[Dict[str, Any]]:
        """Return the cached key set, fetching it if absent or stale."""
        keys = self._fresh_keys()
        if keys is not None:
            return keys

        with self._lock:
            keys = self._fresh_keys()
            if keys is not None:
                return keys

            keys = self._fetch()
            self._keys = keys
            self._fetched_at = self._clock()
            return keys

    def lookup(self, kid: str) -> Dict[str, Any]:
        """
        Return the single key whose `kid` matches.

        Raises:
            KeyNotFoundError if no key, or more than one key, matches.
        """
        matches = [k for k in self.keys() if k.get("kid") == kid]
        if len(matches) != 1:
            raise KeyNotFoundError(
                f"Expected exactly one JWKS key with kid {kid!r}, found {len(matches)}"
            )
        return matches[0]

    def invalidate(self) -> None:
        """Drop the cached keys; the next lookup refetches them."""
        with self._lock:
            self._keys = None
            self._fetched_at = 0.0
        logger.debug("JWKS cache for %s invalidated", self._jwks_uri)

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    def _fresh_keys(self) -> Optional[List[Dict[str, Any]]]:
        keys = self._keys
        if keys is None:
            return None
        if self._ttl is not None and (self._clock() - self._fetched_at) >= self._ttl:
            return None
        return keys

    def _fetch(self) -> List[Dict[str, Any]]:
        logger.debug("Fetching JWKS from %s", self._jwks_uri)
        body = self._transport.request("GET", self._jwks_uri)

        keys = body.get("keys") if isinstance(body, dict) else None
        if not isinstance(keys, list) or not all(isinstance(k, dict) for k in keys):
            raise DecodingError(f"JWKS document from {self._jwks_uri} has no 'keys' list")
        return keys
