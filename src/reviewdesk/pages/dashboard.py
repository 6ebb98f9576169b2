"""Dashboard: pending and completed reviews for the signed-in user."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from nicegui import ui

from reviewdesk.pages.layout import document_card, empty_state, page_layout
from reviewdesk.pages.registry import page_route
from reviewdesk.pages.session import require_user

if TYPE_CHECKING:
    from reviewdesk.services import Services

logger = logging.getLogger(__name__)


def register(services: Services) -> None:
    """Register the dashboard at /."""

    @page_route("/", title="Dashboard", icon="dashboard", order=10)
    async def dashboard_page() -> None:
        user = await require_user(services)
        if user is None:
            return

        with page_layout("Dashboard", user):
            with ui.row().classes("w-full items-center justify-between"):
                with ui.column().classes("gap-0"):
                    ui.label("Dashboard").classes("text-h5")
                    ui.label(f"Welcome back, {user.email}").classes("text-grey-7")
                if user.is_teacher:
                    ui.button(
                        "New Submission",
                        icon="upload",
                        on_click=lambda: ui.navigate.to("/submissions"),
                    )

            try:
                documents = await services.submissions.documents_for(user)
            except Exception:
                logger.exception("Failed to load documents for %s", user.email)
                ui.notify("Could not load submissions", type="negative")
                return

            pending = [d for d in documents if d.status == "pending"]
            graded = [d for d in documents if d.status == "graded"]

            with ui.tabs() as tabs:
                pending_tab = ui.tab(f"Pending ({len(pending)})", icon="schedule")
                graded_tab = ui.tab(f"Completed ({len(graded)})", icon="check_circle")
            with ui.tab_panels(tabs, value=pending_tab).classes("w-full"):
                with ui.tab_panel(pending_tab):
                    for document in pending:
                        document_card(document)
                    if not pending:
                        empty_state("No pending reviews")
                with ui.tab_panel(graded_tab):
                    for document in graded:
                        document_card(document)
                    if not graded:
                        empty_state("No completed reviews")
