"""Session storage helpers shared by every page.

The signed-in user lives in ``app.storage.user["auth_user"]`` as the dict
form of ``UserSession``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from nicegui import app, ui

from reviewdesk.auth import UserSession

if TYPE_CHECKING:
    from reviewdesk.services import Services

logger = logging.getLogger(__name__)


def get_session_user() -> UserSession | None:
    """Get the current user from session storage."""
    return UserSession.from_storage(app.storage.user.get("auth_user"))


def set_session_user(user: UserSession) -> None:
    """Store the authenticated user in session storage."""
    logger.info("Login successful: email=%s, role=%s", user.email, user.role)
    app.storage.user["auth_user"] = user.to_storage()


def clear_session() -> None:
    """Clear the current session."""
    app.storage.user.pop("auth_user", None)


async def require_user(services: Services) -> UserSession | None:
    """Return the signed-in user, or redirect to /login and return None.

    The session token is re-validated with the identity provider on every
    page load.
    """
    user = get_session_user()
    if user is None:
        ui.navigate.to("/login")
        return None

    result = await services.auth.validate_session(user.session_token)
    if not result.valid:
        logger.info("Session expired or invalid: %s", result.error)
        clear_session()
        ui.navigate.to("/login")
        return None
    return user
