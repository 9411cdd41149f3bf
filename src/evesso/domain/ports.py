from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol


class HttpTransport(Protocol):
    """
    Port for performing one HTTP request and decoding its JSON body.

    Implementations live in the adapters layer (requests, httpx).
    """

    def request(
        self,
        method: str,
        url: str,
        *,
        headers: Optional[Mapping[str, str]] = None,
        form: Optional[Mapping[str, str]] = None,
    ) -> Any:
        """
        Send the request and return the decoded JSON body.

        The body is decoded whatever the HTTP status, since the SSO server
        reports errors inside it.
        Raises:
          - TransportError if the request could not be performed
          - DecodingError if the body is not valid JSON
        """
        ...


class TokenDecoder(Protocol):
    """
    Port for decoding an access token into claims.
    """

    def decode(self, token: str) -> Mapping[str, Any]:
        """
        Decode and verify the given token.

        Should:
          - resolve the signing key
          - verify signature (and expiry, unless disabled)
        Raises:
          - TokenExpiredError
          - InvalidTokenError (or a subclass)
        """
        ...
