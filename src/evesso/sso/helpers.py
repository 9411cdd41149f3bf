from __future__ import annotations

import base64

from ..domain.constants import GrantType


def _basic_auth_header(client_id: str, secret_key: str) -> dict[str, str]:
    raw = f"{client_id}:{secret_key}".encode("utf-8")
    return {"Authorization": "Basic " + base64.b64encode(raw).decode("ascii")}


def _bearer_auth_header(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def _token_form(code: str, *, refresh: bool) -> dict[str, str]:
    if refresh:
        return {"grant_type": GrantType.REFRESH_TOKEN.value, "refresh_token": code}
    return {"grant_type": GrantType.AUTHORIZATION_CODE.value, "code": code}
