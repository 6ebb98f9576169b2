"""Authentication pages for ReviewDesk.

Email/password sign-in against the configured identity provider, and
logout. The application role comes from the profile record, created with
the default role on first sign-in.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from nicegui import ui

from reviewdesk.auth import (
    INVALID_CONFIGURATION,
    INVALID_CREDENTIAL,
    UserSession,
)
from reviewdesk.auth.mock import MOCK_PASSWORD
from reviewdesk.pages.registry import page_route
from reviewdesk.pages.session import clear_session, get_session_user, set_session_user

if TYPE_CHECKING:
    from reviewdesk.services import Services

logger = logging.getLogger(__name__)

_ERROR_MESSAGES = {
    INVALID_CREDENTIAL: "Invalid email or password",
    INVALID_CONFIGURATION: (
        "Sign-in is not configured correctly. Please contact your administrator."
    ),
}


def login_error_message(error: str | None) -> str:
    """Form-level message for a failed sign-in."""
    if error in _ERROR_MESSAGES:
        return _ERROR_MESSAGES[error]
    return f"Sign-in failed: {error or 'unknown error'}"


def _build_demo_hint(services: Services) -> None:
    """Show the seeded demo accounts when the mock client is active."""
    users = getattr(services.auth, "users", {})
    with ui.card().classes("w-96 p-4 bg-yellow-50 border-yellow-200"):
        ui.label("Demo accounts").classes("text-lg font-semibold text-yellow-800")
        for email, role in users.items():
            ui.label(f"{email} ({role})").classes("text-sm text-yellow-700")
        ui.label(f"Password: {MOCK_PASSWORD}").classes("text-sm text-yellow-700")


def register(services: Services) -> None:
    """Register /login and /logout."""

    @page_route(
        "/login", title="Login", icon="login", category="auth", requires_auth=False
    )
    async def login_page() -> None:
        """Email and password sign-in form."""
        if get_session_user():
            ui.navigate.to("/")
            return

        with ui.column().classes("w-full items-center q-mt-xl gap-4"):
            ui.label("Sign in to ReviewDesk").classes("text-2xl font-bold")

            with ui.card().classes("w-96 p-4"):
                email_input = (
                    ui.input(label="Email address", placeholder="you@example.com")
                    .props('data-testid="email-input"')
                    .classes("w-full")
                )
                password_input = (
                    ui.input(
                        label="Password", password=True, password_toggle_button=True
                    )
                    .props('data-testid="password-input"')
                    .classes("w-full")
                )
                error_label = (
                    ui.label("")
                    .classes("text-negative text-sm")
                    .props('data-testid="login-error"')
                )
                error_label.set_visibility(False)

                async def sign_in() -> None:
                    email = (email_input.value or "").strip()
                    password = password_input.value or ""
                    if not email or not password:
                        ui.notify("Enter your email and password", type="warning")
                        return

                    result = await services.auth.sign_in(email, password)
                    if not result.success or not result.user_id:
                        logger.warning("Sign-in failed for %s: %s", email, result.error)
                        error_label.set_text(login_error_message(result.error))
                        error_label.set_visibility(True)
                        return

                    try:
                        profile = await services.store.ensure_profile(
                            result.user_id, result.email or email
                        )
                    except Exception:
                        logger.exception("Failed to load profile for %s", email)
                        ui.notify("Could not load your profile", type="negative")
                        return

                    set_session_user(
                        UserSession(
                            user_id=result.user_id,
                            email=profile.email,
                            role=profile.role,  # type: ignore[arg-type]
                            session_token=result.session_token or "",
                        )
                    )
                    ui.navigate.to("/")

                password_input.on("keydown.enter", sign_in)
                ui.button("Sign in", on_click=sign_in).props(
                    'data-testid="sign-in-btn"'
                ).classes("w-full mt-2")

            if services.demo_auth:
                _build_demo_hint(services)

    @page_route("/logout", title="Logout", icon="logout", category="hidden")
    async def logout_page() -> None:
        """Revoke the session and redirect to login."""
        user = get_session_user()
        if user and user.session_token:
            await services.auth.sign_out(user.session_token)
        clear_session()
        ui.navigate.to("/login")
