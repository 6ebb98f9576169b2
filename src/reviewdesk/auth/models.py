"""Data models for authentication results.

These dataclasses represent the outcomes of identity provider operations,
providing a consistent interface between the real Stytch client and mock.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, get_args

UserRole = Literal["teacher", "student"]
USER_ROLES: tuple[str, ...] = get_args(UserRole)
DEFAULT_ROLE: UserRole = "student"

# Error types surfaced to the login form
INVALID_CREDENTIAL = "invalid_credential"
INVALID_CONFIGURATION = "invalid_configuration"


@dataclass(frozen=True)
class AuthResult:
    """Result of an email/password sign-in.

    Attributes:
        success: Whether authentication succeeded.
        session_token: The session token for subsequent requests.
        session_jwt: Short-lived JWT for client-side validation.
        user_id: Stable identity-provider user identifier.
        email: The user's email address.
        error: Error type if authentication failed.
    """

    success: bool
    session_token: str | None = None
    session_jwt: str | None = None
    user_id: str | None = None
    email: str | None = None
    error: str | None = None


@dataclass(frozen=True)
class SessionResult:
    """Result of validating an existing session.

    Attributes:
        valid: Whether the session is still valid.
        user_id: The user identifier associated with the session.
        email: The user's email address.
        error: Error type if validation failed.
    """

    valid: bool
    user_id: str | None = None
    email: str | None = None
    error: str | None = None


@dataclass(frozen=True)
class UserSession:
    """The signed-in user as the pages see it.

    ``role`` is application-defined and comes from the profile record,
    not from the identity provider.
    """

    user_id: str
    email: str
    role: UserRole
    session_token: str

    @property
    def is_teacher(self) -> bool:
        return self.role == "teacher"

    def to_storage(self) -> dict[str, Any]:
        """Serialise for ``app.storage.user``."""
        return {
            "user_id": self.user_id,
            "email": self.email,
            "role": self.role,
            "session_token": self.session_token,
        }

    @classmethod
    def from_storage(cls, data: dict[str, Any] | None) -> UserSession | None:
        if not data or not data.get("user_id"):
            return None
        role = data.get("role")
        return cls(
            user_id=str(data["user_id"]),
            email=str(data.get("email", "")),
            role=role if role in USER_ROLES else DEFAULT_ROLE,
            session_token=str(data.get("session_token", "")),
        )


def check_role(role: str) -> None:
    """Raise ValueError unless ``role`` is a known application role."""
    if role not in USER_ROLES:
        msg = f"Unknown role {role!r}; expected one of {', '.join(USER_ROLES)}"
        raise ValueError(msg)
