"""Mock auth client for demo mode and tests.

This module provides an in-memory implementation of the AuthClientProtocol
used when Stytch credentials are not configured. It knows a fixed set of
demo users with a shared password.
"""

from __future__ import annotations

import hashlib

from reviewdesk.auth.models import INVALID_CREDENTIAL, AuthResult, SessionResult

MOCK_PASSWORD = "demo-password"

# email -> role, for seeding demo profiles
MOCK_USERS: dict[str, str] = {
    "teacher@example.com": "teacher",
    "student@example.com": "student",
}


def email_to_user_id(email: str) -> str:
    """Generate a deterministic user ID from an email."""
    return f"mock-member-{hashlib.md5(email.encode()).hexdigest()[:8]}"


def _email_to_session_token(email: str) -> str:
    """Generate a deterministic session token from an email."""
    return f"mock-session-{hashlib.md5(email.encode()).hexdigest()[:12]}"


class MockAuthClient:
    """Mock implementation of AuthClientProtocol.

    Any email in ``users`` signs in with ``password``; everything else is
    rejected as an invalid credential. Session tokens are email-specific
    for multi-user testing.
    """

    def __init__(
        self,
        users: dict[str, str] | None = None,
        password: str = MOCK_PASSWORD,
    ) -> None:
        self._users = dict(MOCK_USERS if users is None else users)
        self._password = password
        # Track active sessions: session_token -> email
        self._active_sessions: dict[str, str] = {}

    @property
    def users(self) -> dict[str, str]:
        """Known demo users mapped to their seeded role."""
        return dict(self._users)

    async def sign_in(self, email: str, password: str) -> AuthResult:
        """Mock password sign-in."""
        email = email.strip().lower()
        if email not in self._users or password != self._password:
            return AuthResult(success=False, error=INVALID_CREDENTIAL)

        session_token = _email_to_session_token(email)
        self._active_sessions[session_token] = email
        return AuthResult(
            success=True,
            session_token=session_token,
            session_jwt=f"mock-jwt-{email}",
            user_id=email_to_user_id(email),
            email=email,
        )

    async def validate_session(self, session_token: str) -> SessionResult:
        """Valid if the token came from sign_in and was not signed out."""
        email = self._active_sessions.get(session_token)
        if email is None:
            return SessionResult(valid=False, error="session_not_found")
        return SessionResult(valid=True, user_id=email_to_user_id(email), email=email)

    async def sign_out(self, session_token: str) -> None:
        self._active_sessions.pop(session_token, None)
