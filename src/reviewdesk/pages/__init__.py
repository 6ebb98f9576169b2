"""NiceGUI pages for ReviewDesk.

Call ``register_pages(services)`` once at startup to register every route.
Each page module exposes ``register(services)``, which closes its
``@page_route`` handlers over the service container.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from reviewdesk.pages import auth, dashboard, feedback, review, submissions

if TYPE_CHECKING:
    from reviewdesk.services import Services

__all__ = ["register_pages"]

_PAGES = (auth, dashboard, submissions, feedback, review)


def register_pages(services: Services) -> None:
    """Register every page route against ``services``."""
    for module in _PAGES:
        module.register(services)
