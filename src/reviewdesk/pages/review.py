"""Review page: annotated document viewer, annotation list, and feedback.

Route: /review/{document_id}

Teachers select text in the viewer and add annotations; students see the
same view read-only. The viewer markup comes from the splice renderer and
every selection is translated back to plain-text offsets server-side.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any
from uuid import UUID

from nicegui import ui

from reviewdesk.annotation import (
    CATEGORIES,
    InvalidAnnotationError,
    OverlappingAnnotationError,
    annotation_for_click,
    requires_comment,
)
from reviewdesk.feedback import DIMENSION_LABELS, DIMENSIONS, FeedbackError
from reviewdesk.pages.layout import page_layout, status_badge
from reviewdesk.pages.registry import page_route
from reviewdesk.pages.session import require_user
from reviewdesk.review import stored_feedback
from reviewdesk.submissions import can_view

if TYPE_CHECKING:
    from nicegui.events import GenericEventArguments

    from reviewdesk.annotation import Annotation
    from reviewdesk.auth import UserSession
    from reviewdesk.db import Document
    from reviewdesk.services import Services

logger = logging.getLogger(__name__)

CATEGORY_COLOURS = {
    "highlight": "amber",
    "comment": "blue",
    "suggestion": "green",
    "issue": "red",
}

MAX_QUOTE_LENGTH = 80


def _quote(text: str) -> str:
    if len(text) > MAX_QUOTE_LENGTH:
        return f"“{text[:MAX_QUOTE_LENGTH]}…”"
    return f"“{text}”"


def _category_badge(category: str) -> None:
    ui.badge(category.capitalize(), color=CATEGORY_COLOURS.get(category, "grey"))


def _document_header(document: Document) -> None:
    with ui.row().classes("w-full items-center justify-between"):
        with ui.column().classes("gap-0"):
            ui.label(document.title).classes("text-h5")
            ui.label(f"Student: {document.student_name}").classes("text-grey-7")
        with ui.row().classes("items-center gap-2"):
            status_badge(document.status)
            if document.download_url:
                ui.link("Original", document.download_url, new_tab=True)


def _feedback_view(document: Document) -> None:
    feedback = stored_feedback(document)
    if feedback is None:
        ui.label("No feedback yet").classes("text-grey-7")
        return

    source = "Teacher Feedback" if feedback.source == "teacher" else "AI Feedback"
    ui.badge(source, color="blue" if feedback.source == "teacher" else "purple")
    for label, text in feedback.sections():
        ui.label(label).classes("text-subtitle1 font-semibold q-mt-sm")
        ui.label(text).classes("text-body2")
    ui.label("Overall").classes("text-subtitle1 font-semibold q-mt-sm")
    ui.label(feedback.overall).classes("text-body2")
    if feedback.improvements:
        ui.label("Suggested improvements").classes(
            "text-subtitle1 font-semibold q-mt-sm"
        )
        with ui.list().props("dense"):
            for improvement in feedback.improvements:
                with ui.item(), ui.item_section():
                    ui.item_label(f"• {improvement}")


class ReviewView:
    """Per-client state and widgets for one review page."""

    def __init__(self, services: Services, user: UserSession, document: Document):
        self.services = services
        self.user = user
        self.document = document
        self.annotations: list[Annotation] = []
        self.markup = ""
        self.viewer: Any = None
        self.detail: Any = None

    async def load_annotations(self) -> None:
        review = self.services.review
        self.annotations = await review.annotations_for(self.document)
        self.markup = review.render(self.document, self.annotations)

    async def refresh_viewer(self) -> None:
        await self.load_annotations()
        self.viewer.set_content(self.markup)
        self.annotation_list.refresh()
        ui.run_javascript(f"reviewDesk.attach(getHtmlElement({self.viewer.id}))")

    # -- annotation creation ------------------------------------------------

    async def add_annotation(self, category: str, comment: str | None) -> bool:
        selection = await ui.run_javascript(
            f"reviewDesk.captureSelection(getHtmlElement({self.viewer.id}))"
        )
        selection = selection or {}
        text_range = self.services.review.selection_range(
            self.markup, selection.get("start"), selection.get("end")
        )
        if text_range is None:
            ui.notify("Select some text in the document first", type="warning")
            return False
        if requires_comment(category) and not comment:
            ui.notify(f"A {category} needs a comment", type="warning")
            return False

        try:
            await self.services.review.annotate(
                self.document,
                self.user.user_id,
                text_range.start,
                text_range.end,
                category,  # type: ignore[arg-type]
                comment,
            )
        except OverlappingAnnotationError:
            ui.notify("That text overlaps an existing annotation", type="warning")
            return False
        except InvalidAnnotationError as e:
            ui.notify(str(e), type="warning")
            return False
        except Exception:
            logger.exception("Failed to save annotation on %s", self.document.id)
            ui.notify("Could not save annotation", type="negative")
            return False

        await self.refresh_viewer()
        ui.notify("Annotation added", type="positive")
        return True

    async def delete_annotation(self, annotation: Annotation) -> None:
        try:
            await self.services.review.remove_annotation(annotation.id)
        except Exception:
            logger.exception("Failed to delete annotation %s", annotation.id)
            ui.notify("Could not delete annotation", type="negative")
            return
        self.show_detail(None)
        await self.refresh_viewer()

    # -- selection and click -------------------------------------------------

    def show_detail(self, annotation: Annotation | None) -> None:
        self.detail.clear()
        if annotation is None:
            return
        with self.detail, ui.card().classes("w-full bg-blue-50"):
            with ui.row().classes("items-center gap-2"):
                _category_badge(annotation.category)
                ui.label(_quote(annotation.text)).classes("italic")
            if annotation.comment:
                ui.label(annotation.comment).classes("text-body2")

    def handle_click(self, e: GenericEventArguments) -> None:
        attributes = e.args.get("attributes") if isinstance(e.args, dict) else None
        annotation = annotation_for_click(self.annotations, attributes or {})
        self.show_detail(annotation)

    def focus(self, annotation: Annotation) -> None:
        self.show_detail(annotation)
        ui.run_javascript(
            f"reviewDesk.focusAnnotation(getHtmlElement({self.viewer.id}), "
            f"{annotation.id!r})"
        )

    # -- widgets ------------------------------------------------------------

    def build_toolbar(self) -> None:
        with ui.row().classes("w-full items-end gap-2"):
            category = ui.select(
                {c: c.capitalize() for c in CATEGORIES},
                value="highlight",
                label="Category",
            ).classes("w-40")
            comment = ui.input("Comment").classes("flex-grow").props(
                'data-testid="comment-input"'
            )

            async def submit() -> None:
                added = await self.add_annotation(
                    category.value, (comment.value or "").strip() or None
                )
                if added:
                    comment.set_value("")

            ui.button("Add annotation", icon="add_comment", on_click=submit).props(
                'data-testid="add-annotation-btn"'
            )

    @ui.refreshable_method
    def annotation_list(self) -> None:
        if not self.annotations:
            ui.label("No annotations yet").classes("text-grey-7")
            return
        with ui.list().props("separator").classes("w-full"):
            for annotation in self.annotations:
                with ui.item(on_click=lambda a=annotation: self.focus(a)):
                    with ui.item_section():
                        with ui.row().classes("items-center gap-2"):
                            _category_badge(annotation.category)
                            ui.item_label(_quote(annotation.text)).classes("italic")
                        if annotation.comment:
                            ui.item_label(annotation.comment).props("caption")
                    if self.user.is_teacher:
                        with ui.item_section().props("side"):

                            async def delete(a: Annotation = annotation) -> None:
                                await self.delete_annotation(a)

                            ui.button(icon="delete", on_click=delete).props(
                                "flat round size=sm color=negative"
                            )

    @ui.refreshable_method
    def feedback_panel(self) -> None:
        _feedback_view(self.document)
        if not self.user.is_teacher:
            return

        ui.separator().classes("q-my-md")
        ui.label("Generate AI feedback").classes("text-subtitle1 font-semibold")
        checks = {d: ui.checkbox(DIMENSION_LABELS[d], value=True) for d in DIMENSIONS}

        async def generate() -> None:
            dimensions = [d for d, box in checks.items() if box.value]
            if not dimensions:
                ui.notify("Select at least one dimension", type="warning")
                return
            button.props("loading")
            try:
                await self.services.review.generate_feedback(
                    self.document,
                    dimensions,  # type: ignore[arg-type]
                )
            except FeedbackError:
                logger.exception("Unusable feedback reply for %s", self.document.id)
                ui.notify("Feedback could not be generated", type="negative")
                return
            except Exception:
                logger.exception("Feedback request failed for %s", self.document.id)
                ui.notify("Feedback service unavailable", type="negative")
                return
            finally:
                button.props(remove="loading")
            await self.reload_document()

        button = ui.button("Generate", icon="auto_awesome", on_click=generate).props(
            'data-testid="generate-feedback-btn"'
        )

        with ui.expansion("Write feedback", icon="edit").classes("w-full q-mt-md"):
            overall = ui.textarea("Overall feedback").classes("w-full")
            improvements = ui.textarea(
                "Suggested improvements (one per line)"
            ).classes("w-full")

            async def save() -> None:
                if not (overall.value or "").strip():
                    ui.notify("Write some overall feedback first", type="warning")
                    return
                try:
                    await self.services.review.save_written_feedback(
                        self.document,
                        overall.value,
                        (improvements.value or "").splitlines(),
                    )
                except Exception:
                    logger.exception("Failed to save feedback on %s", self.document.id)
                    ui.notify("Could not save feedback", type="negative")
                    return
                await self.reload_document()

            ui.button("Save feedback", icon="save", on_click=save)

    async def reload_document(self) -> None:
        document = await self.services.store.get_document(self.document.id)
        if document is not None:
            self.document = document
        ui.notify("Feedback saved", type="positive")
        self.feedback_panel.refresh()

    async def build(self) -> None:
        await self.load_annotations()
        _document_header(self.document)

        with ui.row().classes("w-full gap-4 q-mt-md no-wrap items-start"):
            with ui.card().classes("w-2/3"):
                if self.user.is_teacher:
                    self.build_toolbar()
                # Markup is produced by the splice renderer, which escapes all
                # document text and attribute values.
                self.viewer = (
                    ui.html(self.markup, sanitize=False)
                    .classes("document-viewer w-full")
                    .props('data-testid="document-viewer"')
                )
                self.detail = ui.column().classes("w-full")

            with ui.card().classes("w-1/3"):
                with ui.tabs(value="annotations") as tabs:
                    ui.tab("annotations", label="Annotations", icon="comment")
                    ui.tab("feedback", label="Feedback", icon="grading")
                with ui.tab_panels(tabs, value="annotations").classes("w-full"):
                    with ui.tab_panel("annotations"):
                        self.annotation_list()
                    with ui.tab_panel("feedback"):
                        self.feedback_panel()

        ui.on("annotation_click", self.handle_click)


async def _load_document(
    services: Services, user: UserSession, document_id: str
) -> Document | None:
    try:
        doc_uuid = UUID(document_id)
    except ValueError:
        return None
    document = await services.store.get_document(doc_uuid)
    if document is None or not can_view(user, document):
        return None
    return document


def register(services: Services) -> None:
    """Register /review/{document_id}."""

    @page_route(
        "/review/{document_id}", title="Review", icon="rate_review", category="hidden"
    )
    async def review_page(document_id: str) -> None:
        user = await require_user(services)
        if user is None:
            return

        ui.add_head_html('<link rel="stylesheet" href="/static/annotations.css">')
        ui.add_head_html('<script src="/static/review.js"></script>')

        with page_layout("Review", user):
            try:
                document = await _load_document(services, user, document_id)
            except Exception:
                logger.exception("Failed to load document %s", document_id)
                ui.notify("Could not load document", type="negative")
                return
            if document is None:
                ui.label("Document not found").classes("text-h5 text-red-500")
                ui.button("Go Home", on_click=lambda: ui.navigate.to("/")).classes(
                    "mt-4"
                )
                return

            view = ReviewView(services, user, document)
            try:
                await view.build()
            except Exception:
                logger.exception("Failed to render document %s", document_id)
                ui.notify("Could not load annotations", type="negative")
                return

        await ui.context.client.connected()
        ui.run_javascript(f"reviewDesk.attach(getHtmlElement({view.viewer.id}))")
