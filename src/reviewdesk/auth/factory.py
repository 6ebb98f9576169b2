"""Auth client factory.

Provides a factory function to build the appropriate auth client
based on configuration (real Stytch or mock for demo mode).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from reviewdesk.auth.protocol import AuthClientProtocol
    from reviewdesk.config import Settings

logger = logging.getLogger(__name__)


def build_auth_client(settings: Settings) -> AuthClientProtocol:
    """Build the auth client for these settings.

    Returns MockAuthClient if DEV__DEMO_MODE=true or Stytch credentials are
    missing, otherwise StytchB2BClient. Called once at startup; the mock
    keeps its sessions for the life of the process.

    Returns:
        An auth client implementing AuthClientProtocol.
    """
    stytch = settings.stytch
    if settings.dev.demo_mode or not stytch.configured:
        if not settings.dev.demo_mode:
            logger.warning(
                "STYTCH__PROJECT_ID/STYTCH__SECRET not set; "
                "using demo sign-in with seeded users"
            )
        from reviewdesk.auth.mock import MockAuthClient

        return MockAuthClient()

    from reviewdesk.auth.client import StytchB2BClient

    return StytchB2BClient(
        project_id=stytch.project_id,
        secret=stytch.secret.get_secret_value(),
        organization_id=stytch.organization_id,
        environment=stytch.environment,
    )
