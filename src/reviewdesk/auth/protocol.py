"""Protocol defining the auth client interface.

Both StytchB2BClient and MockAuthClient implement this protocol,
allowing them to be used interchangeably.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from reviewdesk.auth.models import AuthResult, SessionResult


class AuthClientProtocol(Protocol):
    """Protocol for identity provider clients.

    This defines the interface that both the real Stytch client
    and the mock client must implement.
    """

    async def sign_in(self, email: str, password: str) -> AuthResult:
        """Authenticate with email and password.

        Args:
            email: The user's email address.
            password: The user's password.

        Returns:
            AuthResult with session info if successful.
        """
        ...

    async def validate_session(self, session_token: str) -> SessionResult:
        """Validate an existing session token.

        Args:
            session_token: The session token to validate.

        Returns:
            SessionResult indicating if the session is valid.
        """
        ...

    async def sign_out(self, session_token: str) -> None:
        """Revoke a session. Unknown tokens are ignored."""
        ...
