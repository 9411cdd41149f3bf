# tests/test_sso_client.py
import base64
from datetime import datetime, timezone
from urllib.parse import parse_qs, urlsplit

import pytest

from evesso.domain.constants import DEFAULT_JWKS_URI, LIVE_SERVER, TEST_SERVER
from evesso.domain.entities import TokenResponse
from evesso.domain.exceptions import DecodingError, InvalidTokenError, ProviderError, TransportError
from evesso.sso.client import LegacySingleSignOn, SingleSignOn
from evesso.sso.settings import SSOSettings

TOKEN_URL = f"{TEST_SERVER}/v2/oauth/token"
LEGACY_TOKEN_URL = f"{TEST_SERVER}/oauth/token"
VERIFY_URL = f"{TEST_SERVER}/oauth/verify"


@pytest.fixture
def sso(settings, transport):
    return SingleSignOn(settings, transport)


@pytest.fixture
def legacy(settings, transport):
    return LegacySingleSignOn(settings, transport)


# ---------------------------------------------------------------------- #
# redirect
# ---------------------------------------------------------------------- #


def test_redirect_url_round_trips(sso, settings):
    state = "a b&c=d/é?"
    url = sso.redirect_url(state, "esi-skills.read_skills.v1 esi-wallet.read_character_wallet.v1")

    parts = urlsplit(url)
    assert f"{parts.scheme}://{parts.netloc}{parts.path}" == f"{TEST_SERVER}/v2/oauth/authorize"
    assert parse_qs(parts.query, keep_blank_values=True) == {
        "response_type": ["code"],
        "client_id": [settings.client_id],
        "redirect_uri": [settings.redirect_uri],
        "state": [state],
        "scope": ["esi-skills.read_skills.v1 esi-wallet.read_character_wallet.v1"],
    }
    assert "&c=d" not in parts.query


def test_redirect_url_without_scope(sso):
    query = parse_qs(urlsplit(sso.redirect_url("xyz")).query)
    assert "scope" not in query
    assert query["state"] == ["xyz"]


def test_redirect_url_scope_list(sso):
    query = parse_qs(urlsplit(sso.redirect_url("xyz", ["a", "b"])).query)
    assert query["scope"] == ["a b"]


def test_redirect_url_empty_scope_is_omitted(sso):
    for scope in ([], ""):
        url = sso.redirect_url("xyz", scope)
        assert "scope" not in parse_qs(urlsplit(url).query, keep_blank_values=True)


def test_redirect_url_requires_state(sso):
    with pytest.raises(ValueError):
        sso.redirect_url("")


def test_legacy_redirect_path(legacy):
    assert urlsplit(legacy.redirect_url("s")).path == "/oauth/authorize"


def test_redirect_makes_no_requests(sso, transport):
    sso.redirect_url("s", "scope")
    assert transport.calls == []


def test_trailing_slash_in_server_is_ignored(transport):
    sso = SingleSignOn(SSOSettings("id", "secret", "https://cb", server=LIVE_SERVER + "/"), transport)
    assert sso.redirect_url("s").startswith(f"{LIVE_SERVER}/v2/oauth/authorize?")


# ---------------------------------------------------------------------- #
# token exchange (v2)
# ---------------------------------------------------------------------- #


def test_exchange_code(sso, transport, make_token):
    access_token = make_token()
    transport.add(TOKEN_URL, {"access_token": access_token, "refresh_token": "rt", "expires_in": 1199})

    result = sso.exchange_token("the-code")

    assert result.access_token == access_token
    assert result.refresh_token == "rt"
    assert result.character_id == 95465499
    assert result.character_name == "CCP Bartender"
    assert result.expires_at == datetime(2100, 1, 1, tzinfo=timezone.utc)

    call = transport.calls[0]
    assert call["method"] == "POST"
    assert call["url"] == TOKEN_URL
    assert call["form"] == {"grant_type": "authorization_code", "code": "the-code"}
    expected = base64.b64encode(b"my-client-id:s3cr3t").decode()
    assert call["headers"]["Authorization"] == f"Basic {expected}"


def test_exchange_refresh_token(sso, transport, make_token):
    transport.add(TOKEN_URL, {"access_token": make_token(), "refresh_token": "rt2"})

    result = sso.refresh("rt1")

    assert result.refresh_token == "rt2"
    assert transport.calls[0]["form"] == {"grant_type": "refresh_token", "refresh_token": "rt1"}


def test_exchange_requires_code(sso, transport):
    with pytest.raises(ValueError):
        sso.exchange_token("")
    assert transport.calls == []


def test_provider_error_message_is_description(sso, transport, make_token):
    transport.add(
        TOKEN_URL,
        {
            "error": "invalid_grant",
            "error_description": "Authorization code not found.",
            "access_token": make_token(),
        },
    )
    with pytest.raises(ProviderError) as exc_info:
        sso.exchange_token("stale-code")

    assert str(exc_info.value) == "Authorization code not found."
    # no verification is attempted on an error response
    assert transport.count(DEFAULT_JWKS_URI) == 0


def test_bad_access_token_fails_whole_exchange(sso, transport, make_token, other_private_key):
    transport.add(TOKEN_URL, {"access_token": make_token(key=other_private_key)})
    with pytest.raises(InvalidTokenError):
        sso.exchange_token("code")


def test_transport_and_decoding_errors_surface(sso, transport):
    transport.add_error(TOKEN_URL, TransportError("timed out"))
    with pytest.raises(TransportError, match="timed out"):
        sso.exchange_token("code")

    transport.add(TOKEN_URL, "<html>oops</html>")
    with pytest.raises(DecodingError):
        sso.exchange_token("code")


def test_decode_token_and_cache_invalidation(sso, transport, make_token):
    assert sso.decode_token(make_token()).character_id == 95465499
    sso.decode_token(make_token())
    assert transport.count(DEFAULT_JWKS_URI) == 1

    sso.key_set.invalidate()
    sso.decode_token(make_token())
    assert transport.count(DEFAULT_JWKS_URI) == 2


def test_clients_do_not_share_key_cache(settings, transport, make_token):
    SingleSignOn(settings, transport).decode_token(make_token())
    SingleSignOn(settings, transport).decode_token(make_token())
    assert transport.count(DEFAULT_JWKS_URI) == 2


# ---------------------------------------------------------------------- #
# legacy (v1)
# ---------------------------------------------------------------------- #


def test_legacy_exchange_returns_tokens_only(legacy, transport):
    transport.add(LEGACY_TOKEN_URL, {"access_token": "opaque", "refresh_token": "rt"})

    assert legacy.exchange_token("code") == TokenResponse("opaque", "rt")
    assert transport.calls[0]["url"] == LEGACY_TOKEN_URL
    assert transport.count(DEFAULT_JWKS_URI) == 0


def test_legacy_verify(legacy, transport):
    transport.add(
        VERIFY_URL,
        {
            "CharacterID": 95465499,
            "CharacterName": "CCP Bartender",
            "ExpiresOn": "2017-07-05T14:34:16.5857101",
            "Scopes": "esi-skills.read_skills.v1",
            "TokenType": "Character",
            "CharacterOwnerHash": "hash",
        },
    )

    resp = legacy.verify_token("opaque")

    assert resp.character_id == 95465499
    call = transport.calls[0]
    assert call["method"] == "GET"
    assert call["headers"] == {"Authorization": "Bearer opaque"}
    assert call["form"] is None


def test_legacy_verify_error(legacy, transport):
    transport.add(VERIFY_URL, {"error": "invalid_token", "error_description": "The token is expired."})
    with pytest.raises(ProviderError, match="The token is expired."):
        legacy.verify_token("opaque")


def test_legacy_verify_requires_token(legacy):
    with pytest.raises(ValueError):
        legacy.verify_token("")
