"""Stytch B2B client wrapper for email/password authentication.

This module provides a wrapper around the Stytch B2B SDK that implements
the AuthClientProtocol. Stytch errors are expected outcomes (wrong
password, unknown member) and are returned as failed results, never raised.
"""

from __future__ import annotations

import logging

from stytch import B2BClient
from stytch.core.response_base import StytchError

from reviewdesk.auth.models import (
    INVALID_CONFIGURATION,
    INVALID_CREDENTIAL,
    AuthResult,
    SessionResult,
)

logger = logging.getLogger(__name__)

SESSION_DURATION_MINUTES = 60 * 24 * 7  # 1 week

# Stytch error types collapsed into the two failure modes the login form shows
_CREDENTIAL_ERRORS = frozenset(
    {
        "unauthorized_credentials",
        "member_not_found",
        "member_password_not_found",
        "email_not_found",
        "invalid_email",
    }
)
_CONFIGURATION_ERRORS = frozenset(
    {
        "unauthorized_project",
        "project_id_not_found",
        "organization_not_found",
        "invalid_organization_id",
        "invalid_secret_authentication",
    }
)


def _map_error(error_type: str) -> str:
    """Collapse a Stytch error type into the login form's failure modes."""
    if error_type in _CREDENTIAL_ERRORS:
        return INVALID_CREDENTIAL
    if error_type in _CONFIGURATION_ERRORS:
        return INVALID_CONFIGURATION
    return error_type


class StytchB2BClient:
    """Wrapper around Stytch B2BClient for password sign-in and sessions.

    This class implements the AuthClientProtocol. All members sign in to
    the single organization configured for the deployment.
    """

    def __init__(
        self,
        project_id: str,
        secret: str,
        organization_id: str,
        *,
        environment: str = "test",
    ) -> None:
        """Initialize the Stytch client.

        Args:
            project_id: Stytch project ID.
            secret: Stytch secret key.
            organization_id: Organization all members authenticate into.
            environment: Either "test" or "live".
        """
        self._client = B2BClient(
            project_id=project_id,
            secret=secret,
            environment=environment,
        )
        self._organization_id = organization_id

    async def sign_in(self, email: str, password: str) -> AuthResult:
        """Authenticate with email and password.

        Args:
            email: The user's email address.
            password: The user's password.

        Returns:
            AuthResult with session info if successful.
        """
        try:
            response = await self._client.passwords.authenticate_async(
                organization_id=self._organization_id,
                email_address=email,
                password=password,
                session_duration_minutes=SESSION_DURATION_MINUTES,
            )

            # Check if MFA is required
            if not response.member_authenticated:
                logger.info("MFA required for member %s", response.member_id)
                return AuthResult(
                    success=False,
                    error="mfa_required",
                )

            return AuthResult(
                success=True,
                session_token=response.session_token,
                session_jwt=response.session_jwt,
                user_id=response.member_id,
                email=response.member.email_address,
            )
        except StytchError as e:
            logger.warning(
                "Password sign-in failed",
                extra={"email": email, "error_type": e.details.error_type},
            )
            return AuthResult(
                success=False,
                error=_map_error(e.details.error_type),
            )

    async def validate_session(self, session_token: str) -> SessionResult:
        """Validate an existing session token.

        Args:
            session_token: The session token to validate.

        Returns:
            SessionResult indicating if the session is valid.
        """
        try:
            response = await self._client.sessions.authenticate_async(
                session_token=session_token,
            )
            return SessionResult(
                valid=True,
                user_id=response.member_session.member_id,
                email=response.member.email_address,
            )
        except StytchError as e:
            logger.debug(
                "Session validation failed",
                extra={"error_type": e.details.error_type},
            )
            return SessionResult(
                valid=False,
                error=e.details.error_type,
            )

    async def sign_out(self, session_token: str) -> None:
        """Revoke a session token at Stytch."""
        try:
            await self._client.sessions.revoke_async(session_token=session_token)
        except StytchError as e:
            logger.debug(
                "Session revoke failed",
                extra={"error_type": e.details.error_type},
            )
