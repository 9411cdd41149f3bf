"""
evesso.sso

Clients for the EVE Online SSO:

- SSOSettings: credentials + connection settings for one application.
- SingleSignOn: v2 endpoints, access tokens verified locally as JWTs.
- LegacySingleSignOn: v1 endpoints, tokens checked via /oauth/verify.
- settings_from_env: convenience wrapper for env-driven hosts.
"""

from __future__ import annotations

from .client import LegacySingleSignOn, SingleSignOn
from .env import settings_from_env
from .settings import SSOSettings

__all__ = [
    "SSOSettings",
    "SingleSignOn",
    "LegacySingleSignOn",
    "settings_from_env",
]
