from enum import Enum

LIVE_SERVER = "https://login.eveonline.com"
TEST_SERVER = "https://sisilogin.testeveonline.com"

DEFAULT_JWKS_URI = "https://login.eveonline.com/oauth/jwks"

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

# Values seen in the `iss` claim of tokens issued by the live server.
EVE_ISSUERS = ("login.eveonline.com", "https://login.eveonline.com")


class GrantType(Enum):
    AUTHORIZATION_CODE = "authorization_code"
    REFRESH_TOKEN = "refresh_token"


class Endpoint(Enum):
    AUTHORIZE = "/oauth/authorize"
    TOKEN = "/oauth/token"
    VERIFY = "/oauth/verify"
    AUTHORIZE_V2 = "/v2/oauth/authorize"
    TOKEN_V2 = "/v2/oauth/token"
