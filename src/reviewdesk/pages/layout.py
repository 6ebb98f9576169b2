"""Shared layout components for ReviewDesk.

Provides consistent header, navigation drawer, and page structure.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING

from nicegui import ui

from reviewdesk.pages.registry import get_visible_pages

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Iterator

    from reviewdesk.auth import UserSession
    from reviewdesk.db import Document

STATUS_COLOURS = {"pending": "orange", "graded": "positive"}


def _nav_item(label: str, route: str, icon: str | None = None) -> None:
    """Create a navigation item in the drawer."""
    with ui.item(on_click=lambda: ui.navigate.to(route)).classes("w-full"):
        if icon:
            with ui.item_section().props("avatar"):
                ui.icon(icon)
        with ui.item_section():
            ui.item_label(label)


def status_badge(status: str) -> None:
    ui.badge(status.capitalize(), color=STATUS_COLOURS.get(status, "grey")).props(
        'data-testid="status-badge"'
    )


def empty_state(message: str) -> None:
    with ui.card().classes("w-full h-40 items-center justify-center"):
        ui.label(message).classes("text-grey-7")


@contextmanager
def page_layout(title: str, user: UserSession | None) -> Iterator[None]:
    """Context manager for consistent page layout with header and nav drawer.

    Usage:
        @page_route("/my-page", title="My Page", icon="star")
        async def my_page():
            with page_layout("My Page", user):
                ui.label("Page content here")

    Args:
        title: Page title shown in header.
        user: The signed-in user, or None on public pages.

    Yields:
        Context for page content.
    """
    with ui.header().classes("bg-primary items-center q-py-xs"):
        menu_btn = ui.button(icon="menu").props("flat color=white")
        ui.label(title).classes("text-h6 text-white q-ml-sm")

        ui.element("div").classes("flex-grow")

        if user:
            ui.label(user.email).classes("text-white text-body2 q-mr-sm")
            ui.badge(user.role).props("color=white text-color=primary").classes(
                "q-mr-md"
            )
            ui.button(icon="logout", on_click=lambda: ui.navigate.to("/logout")).props(
                "flat color=white"
            ).tooltip("Logout")

    with ui.left_drawer().classes("bg-grey-2") as drawer:
        ui.label("ReviewDesk").classes("text-h6 q-pa-md")
        ui.separator()

        with ui.list().props("padding"):
            for page in get_visible_pages(user):
                _nav_item(page.title, page.route, page.icon)

    menu_btn.on("click", drawer.toggle)

    with ui.element("div").classes("q-pa-md w-full"):
        yield


def document_card(
    document: Document,
    *,
    on_delete: Callable[[Document], Awaitable[None]] | None = None,
) -> None:
    """Card for one submission, linking to its review page."""
    review_label = "View Feedback" if document.status == "graded" else "Review"
    with ui.card().classes("w-full").props('data-testid="document-card"'):
        with ui.row().classes("w-full items-center justify-between"):
            with ui.column().classes("gap-0"):
                ui.label(document.title).classes("text-lg font-semibold")
                ui.label(f"Student: {document.student_name}").classes(
                    "text-sm text-grey-7"
                )
            with ui.row().classes("gap-2 items-center"):
                status_badge(document.status)
                ui.button(
                    review_label,
                    icon="visibility",
                    on_click=lambda: ui.navigate.to(f"/review/{document.id}"),
                ).props("outline size=sm")
                if on_delete is not None:

                    async def delete() -> None:
                        await on_delete(document)

                    ui.button(icon="delete", on_click=delete).props(
                        'outline size=sm color=negative data-testid="delete-btn"'
                    ).tooltip("Delete")
        ui.label(f"Submitted: {document.created_at:%d %b %Y}").classes(
            "text-xs text-grey-6"
        )
