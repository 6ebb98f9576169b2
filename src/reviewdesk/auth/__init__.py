"""Authentication module for ReviewDesk.

Provides Stytch B2B email/password authentication with a mock client for
demo mode and tests. Roles are application-defined and live on the
profile record, see ``reviewdesk.db``.

Usage:
    from reviewdesk.auth import build_auth_client

    client = build_auth_client(get_settings())
    result = await client.sign_in("teacher@example.com", "secret")
"""

from __future__ import annotations

from reviewdesk.auth.factory import build_auth_client
from reviewdesk.auth.models import (
    DEFAULT_ROLE,
    INVALID_CONFIGURATION,
    INVALID_CREDENTIAL,
    USER_ROLES,
    AuthResult,
    SessionResult,
    UserRole,
    UserSession,
)
from reviewdesk.auth.protocol import AuthClientProtocol

__all__ = [
    "DEFAULT_ROLE",
    "INVALID_CONFIGURATION",
    "INVALID_CREDENTIAL",
    "USER_ROLES",
    "AuthClientProtocol",
    "AuthResult",
    "SessionResult",
    "UserRole",
    "UserSession",
    "build_auth_client",
]
