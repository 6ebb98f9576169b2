"""Page registration system for data-driven navigation.

Provides a decorator for registering pages with metadata, so the layout
can build the navigation drawer from what the current user may open.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

from nicegui import ui

if TYPE_CHECKING:
    from collections.abc import Callable

    from reviewdesk.auth import UserSession

Category = Literal["main", "auth", "hidden"]


@dataclass
class PageMeta:
    """Metadata for a registered page."""

    route: str
    title: str
    icon: str
    category: Category = "main"
    requires_auth: bool = True
    requires_teacher: bool = False
    order: int = field(default=100)


# Global registry of all pages
_page_registry: dict[str, PageMeta] = {}


def page_route(
    route: str,
    *,
    title: str,
    icon: str,
    category: Category = "main",
    requires_auth: bool = True,
    requires_teacher: bool = False,
    order: int = 100,
) -> Callable:
    """Decorator to register a page with navigation metadata.

    Usage:
        @page_route("/submissions", title="Submissions", icon="upload", order=20)
        async def submissions_page():
            ...

    Args:
        route: URL path for the page.
        title: Display title in navigation.
        icon: Material icon name.
        category: Navigation section (main, auth, hidden).
        requires_auth: Whether page requires a signed-in user.
        requires_teacher: Whether page is only listed for teachers.
        order: Sort order within category (lower = higher).

    Returns:
        Decorated function registered with NiceGUI and the page registry.
    """

    def decorator(func: Callable) -> Callable:
        _page_registry[route] = PageMeta(
            route=route,
            title=title,
            icon=icon,
            category=category,
            requires_auth=requires_auth,
            requires_teacher=requires_teacher,
            order=order,
        )
        return ui.page(route)(func)

    return decorator


def get_visible_pages(user: UserSession | None) -> list[PageMeta]:
    """Navigation entries for ``user``, sorted by order.

    Hidden pages (parameterised routes, logout) are never listed.
    """
    visible = [
        meta
        for meta in _page_registry.values()
        if meta.category == "main"
        and (user is not None or not meta.requires_auth)
        and (not meta.requires_teacher or (user is not None and user.is_teacher))
    ]
    visible.sort(key=lambda p: p.order)
    return visible
