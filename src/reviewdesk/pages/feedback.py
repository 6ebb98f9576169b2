"""Feedback page: every stored review the signed-in user can see.

Route: /feedback
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

from nicegui import ui

from reviewdesk.pages.layout import empty_state, page_layout
from reviewdesk.pages.registry import page_route
from reviewdesk.pages.session import require_user
from reviewdesk.review import stored_feedback

if TYPE_CHECKING:
    from reviewdesk.db import Document
    from reviewdesk.feedback import FeedbackResult
    from reviewdesk.services import Services

logger = logging.getLogger(__name__)

SOURCE_LABELS = {"teacher": "Teacher Feedback", "ai": "AI Feedback"}
SOURCE_COLOURS = {"teacher": "blue", "ai": "purple"}

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


@dataclass(frozen=True)
class FeedbackEntry:
    """A graded document paired with its parsed feedback."""

    document: Document
    feedback: FeedbackResult

    @property
    def summary(self) -> str:
        return self.feedback.overall


def feedback_entries(
    documents: list[Document], source: Literal["ai", "teacher"] | None = None
) -> list[FeedbackEntry]:
    """Graded documents with feedback, optionally limited to one source."""
    entries = []
    for document in documents:
        if document.status != "graded":
            continue
        feedback = stored_feedback(document)
        if feedback is None:
            continue
        if source is not None and feedback.source != source:
            continue
        entries.append(FeedbackEntry(document, feedback))
    return entries


def feedback_export(entry: FeedbackEntry) -> str:
    """Plain-text copy of one document's feedback."""
    document, feedback = entry.document, entry.feedback
    lines = [
        document.title,
        f"Student: {document.student_name}",
        f"Submitted: {document.created_at:%d %b %Y}",
        SOURCE_LABELS[feedback.source],
        "",
    ]
    for label, text in feedback.sections():
        lines += [label, text, ""]
    lines += ["Overall", feedback.overall]
    if feedback.improvements:
        lines += ["", "Suggested improvements"]
        lines += [f"- {item}" for item in feedback.improvements]
    return "\n".join(lines) + "\n"


def export_filename(document: Document) -> str:
    safe = _UNSAFE_FILENAME_CHARS.sub("-", document.title).strip("-.") or "document"
    return f"{safe}-feedback.txt"


def _feedback_card(entry: FeedbackEntry) -> None:
    document, source = entry.document, entry.feedback.source
    with ui.card().classes("w-full").props('data-testid="feedback-card"'):
        with ui.row().classes("w-full items-center justify-between"):
            with ui.column().classes("gap-0"):
                ui.label(document.title).classes("text-lg font-semibold")
                ui.label(f"Student: {document.student_name}").classes(
                    "text-sm text-grey-7"
                )
            with ui.row().classes("gap-2"):
                ui.button(
                    "View",
                    icon="description",
                    on_click=lambda: ui.navigate.to(f"/review/{document.id}"),
                ).props("outline size=sm")
                ui.button(
                    icon="download",
                    on_click=lambda: ui.download.content(
                        feedback_export(entry),
                        export_filename(document),
                        "text/plain",
                    ),
                ).props("outline size=sm").tooltip("Download")
        with ui.row().classes("w-full items-center justify-between"):
            with ui.row().classes("items-center gap-1"):
                ui.icon("event").classes("text-grey-6")
                ui.label(f"{document.created_at:%d %b %Y}").classes(
                    "text-sm text-grey-7"
                )
            ui.badge(SOURCE_LABELS[source], color=SOURCE_COLOURS[source])
        ui.label(entry.summary).classes("text-sm")


def _feedback_list(entries: list[FeedbackEntry], empty_message: str) -> None:
    for entry in entries:
        _feedback_card(entry)
    if not entries:
        empty_state(empty_message)


def register(services: Services) -> None:
    """Register the feedback overview at /feedback."""

    @page_route("/feedback", title="Feedback", icon="rate_review", order=30)
    async def feedback_page() -> None:
        user = await require_user(services)
        if user is None:
            return

        with page_layout("Feedback", user):
            ui.label("Feedback").classes("text-h5")
            ui.label("View and manage feedback for student writing").classes(
                "text-grey-7"
            )

            try:
                documents = await services.submissions.documents_for(user)
                every = feedback_entries(documents)
                teacher = feedback_entries(documents, "teacher")
                ai = feedback_entries(documents, "ai")
            except Exception:
                logger.exception("Failed to load feedback for %s", user.email)
                ui.notify("Could not load feedback", type="negative")
                return

            with ui.tabs() as tabs:
                all_tab = ui.tab("All Feedback")
                teacher_tab = ui.tab("Teacher Feedback")
                ai_tab = ui.tab("AI Feedback")
            with ui.tab_panels(tabs, value=all_tab).classes("w-full"):
                with ui.tab_panel(all_tab):
                    _feedback_list(every, "No feedback found")
                with ui.tab_panel(teacher_tab):
                    _feedback_list(teacher, "No teacher feedback found")
                with ui.tab_panel(ai_tab):
                    _feedback_list(ai, "No AI feedback found")
