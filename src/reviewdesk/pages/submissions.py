"""Submissions page: upload student writing and manage submitted documents.

Route: /submissions
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from nicegui import ui

from reviewdesk.ingest import ACCEPTED_EXTENSIONS, UnsupportedDocumentError
from reviewdesk.pages.layout import document_card, empty_state, page_layout
from reviewdesk.pages.registry import page_route
from reviewdesk.pages.session import require_user
from reviewdesk.submissions import SubmissionError

if TYPE_CHECKING:
    from reviewdesk.auth import UserSession
    from reviewdesk.db import Document
    from reviewdesk.services import Services

logger = logging.getLogger(__name__)


def _build_upload_form(
    services: Services, user: UserSession, on_created: Any
) -> None:
    """Upload card: metadata fields plus file, URL, or pasted text."""
    # Per-page upload state: the file picked but not yet submitted
    pending: dict[str, Any] = {"name": None, "data": None}

    with ui.card().classes("w-full"):
        ui.label("Upload New Document").classes("text-h6")
        ui.label(f"Supported formats: {ACCEPTED_EXTENSIONS}").classes(
            "text-sm text-grey-7"
        )

        with ui.row().classes("w-full gap-4"):
            title_input = ui.input("Document title").classes("flex-grow").props(
                'data-testid="title-input"'
            )
            student_input = ui.input("Student name").classes("flex-grow").props(
                'data-testid="student-input"'
            )
            email_input = ui.input("Student email (optional)").classes("flex-grow")

        with ui.tabs(value="file") as source_tabs:
            file_tab = ui.tab("file", label="File", icon="upload_file")
            url_tab = ui.tab("url", label="URL", icon="link")
            text_tab = ui.tab("text", label="Paste text", icon="content_paste")

        with ui.tab_panels(source_tabs, value="file").classes("w-full"):
            with ui.tab_panel(file_tab):

                async def handle_upload(e) -> None:
                    data = await e.file.read()
                    if len(data) > services.submissions.max_upload_bytes:
                        ui.notify("File too large", type="negative")
                        return
                    pending.update(name=e.file.name, data=data)
                    file_label.set_text(f"Selected: {e.file.name}")

                ui.upload(
                    label="Drop a document here",
                    on_upload=handle_upload,
                    auto_upload=True,
                ).classes("w-full").props(f'accept="{ACCEPTED_EXTENSIONS}"')
                file_label = ui.label("No file selected").classes("text-sm")
            with ui.tab_panel(url_tab):
                url_input = ui.input(
                    "Document URL", placeholder="https://example.com/essay.html"
                ).classes("w-full")
            with ui.tab_panel(text_tab):
                text_input = ui.textarea("Document text").classes("w-full").props(
                    "autogrow"
                )
                link_input = ui.input("Link to original (optional)").classes("w-full")

        async def submit() -> None:
            fields = {
                "title": title_input.value or "",
                "student_name": student_input.value or "",
                "student_email": (email_input.value or "").strip() or None,
            }
            submissions = services.submissions
            try:
                if source_tabs.value == "url":
                    document = await submissions.submit_url(
                        user, url=url_input.value or "", **fields
                    )
                elif source_tabs.value == "text":
                    document = await submissions.submit_text(
                        user,
                        text=text_input.value or "",
                        link=(link_input.value or "").strip() or None,
                        **fields,
                    )
                else:
                    if pending["data"] is None:
                        ui.notify("Choose a file to upload", type="warning")
                        return
                    document = await submissions.submit_file(
                        user, filename=pending["name"], data=pending["data"], **fields
                    )
            except (SubmissionError, UnsupportedDocumentError) as e:
                ui.notify(str(e), type="warning")
                return
            except Exception:
                logger.exception("Upload failed for %s", user.email)
                ui.notify("Upload failed", type="negative")
                return

            ui.notify(f"Uploaded {document.title}", type="positive")
            pending.update(name=None, data=None)
            file_label.set_text("No file selected")
            for element in (title_input, student_input, email_input, url_input):
                element.set_value("")
            text_input.set_value("")
            link_input.set_value("")
            on_created()

        ui.button("Upload Document", icon="upload", on_click=submit).props(
            'data-testid="upload-btn"'
        )


def register(services: Services) -> None:
    """Register /submissions."""

    @page_route("/submissions", title="Submissions", icon="description", order=20)
    async def submissions_page() -> None:
        user = await require_user(services)
        if user is None:
            return

        async def confirm_delete(document: Document) -> None:
            with ui.dialog() as dialog, ui.card():
                ui.label(f"Delete {document.title}?").classes("text-lg")
                ui.label("Its annotations and feedback are deleted too.").classes(
                    "text-sm text-grey-7"
                )
                with ui.row():
                    ui.button("Cancel", on_click=lambda: dialog.submit(False)).props(
                        "flat"
                    )
                    ui.button("Delete", on_click=lambda: dialog.submit(True)).props(
                        "color=negative"
                    )
            if not await dialog:
                return
            try:
                await services.submissions.delete(user, document)
            except Exception:
                logger.exception("Delete failed for document %s", document.id)
                ui.notify("Could not delete document", type="negative")
                return
            ui.notify("Document deleted", type="positive")
            submission_list.refresh()

        @ui.refreshable
        async def submission_list() -> None:
            try:
                documents = await services.submissions.documents_for(user)
            except Exception:
                logger.exception("Failed to load documents for %s", user.email)
                ui.notify("Could not load submissions", type="negative")
                return

            on_delete = confirm_delete if user.is_teacher else None
            groups = {
                "All": documents,
                "Pending": [d for d in documents if d.status == "pending"],
                "Graded": [d for d in documents if d.status == "graded"],
            }
            with ui.tabs(value="All") as tabs:
                tab_for = {name: ui.tab(name) for name in groups}
            with ui.tab_panels(tabs, value="All").classes("w-full"):
                for name, group in groups.items():
                    with ui.tab_panel(tab_for[name]):
                        for document in group:
                            document_card(document, on_delete=on_delete)
                        if not group:
                            empty_state("No submissions found")

        with page_layout("Submissions", user):
            ui.label("Submissions").classes("text-h5")
            ui.label(
                "Manage student submissions"
                if user.is_teacher
                else "View your submitted documents"
            ).classes("text-grey-7")

            if user.is_teacher:
                _build_upload_form(services, user, submission_list.refresh)

            await submission_list()
