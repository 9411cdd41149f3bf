from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

import httpx

from ...domain.constants import FORM_CONTENT_TYPE
from ...domain.exceptions import DecodingError, TransportError
from ...domain.ports import HttpTransport

logger = logging.getLogger(__name__)


class HttpxTransport(HttpTransport):
    """
    HttpTransport backed by a synchronous httpx.Client.

    Pass `client` to share a configured client, or `transport` to plug in
    e.g. an httpx.MockTransport.
    """

    def __init__(
        self,
        client: Optional[httpx.Client] = None,
        *,
        timeout_seconds: Optional[float] = 30.0,
        verify_ssl: bool = True,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._client = client or httpx.Client(
            timeout=timeout_seconds,
            verify=verify_ssl,
            transport=transport,
        )

    def request(
        self,
        method: str,
        url: str,
        *,
        headers: Optional[Mapping[str, str]] = None,
        form: Optional[Mapping[str, str]] = None,
    ) -> Any:
        send_headers = dict(headers or {})
        if form is not None:
            send_headers["Content-Type"] = FORM_CONTENT_TYPE

        logger.debug("%s %s", method, url)
        try:
            resp = self._client.request(
                method,
                url,
                headers=send_headers,
                data=dict(form) if form is not None else None,
            )
        except httpx.HTTPError as exc:
            raise TransportError(f"{method} {url} failed: {exc}") from exc

        try:
            return resp.json()
        except ValueError as exc:
            raise DecodingError(
                f"{method} {url} returned a non-JSON body (status {resp.status_code})"
            ) from exc

    def close(self) -> None:
        self._client.close()
