import logging
from typing import Any, Mapping, Optional

import requests
from requests import Session

from ...domain.constants import FORM_CONTENT_TYPE
from ...domain.exceptions import DecodingError, TransportError
from ...domain.ports import HttpTransport

logger = logging.getLogger(__name__)


class RequestsTransport(HttpTransport):
    """
    Adapter implementing HttpTransport port using a requests Session.

    Infrastructure layer:
    - Knows how to send a request and decode its JSON body.
    - Knows nothing about OAuth; status codes are left to the caller.
    """

    def __init__(
        self,
        session: Optional[Session] = None,
        timeout_seconds: Optional[float] = 30.0,
        verify_ssl: bool = True,
    ) -> None:
        self._session = session or Session()
        self._timeout = timeout_seconds
        self._verify = verify_ssl

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
            response = self._session.request(
                method,
                url,
                headers=send_headers,
                data=dict(form) if form is not None else None,
                timeout=self._timeout,
                verify=self._verify,
            )
        except requests.RequestException as exc:
            raise TransportError(f"{method} {url} failed: {exc}") from exc

        try:
            return response.json()
        except ValueError as exc:
            raise DecodingError(
                f"{method} {url} returned a non-JSON body (status {response.status_code})"
            ) from exc

    def close(self) -> None:
        self._session.close()
