"""Review workflow: annotate documents, render them, attach feedback.

The store is CRUD only. This service owns the rules that sit between the
page and the store: ranges are validated against the document text and new
annotations may not overlap existing ones.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from reviewdesk.annotation import (
    AnnotationDraft,
    DomPoint,
    check_no_overlap,
    render_annotations,
    translate_selection,
)
from reviewdesk.feedback import FeedbackRequest, FeedbackResult

if TYPE_CHECKING:
    from reviewdesk.annotation import Annotation, Category, TextRange
    from reviewdesk.db import Document, DocumentStoreProtocol
    from reviewdesk.feedback import Dimension, FeedbackGeneratorProtocol

logger = logging.getLogger(__name__)


def renderable(document_text: str, annotations: list[Annotation]) -> list[Annotation]:
    """Pick the annotations that can be drawn over ``document_text``.

    Stale annotations (the text at their range changed) are skipped. Two
    concurrent writers can still produce an overlapping pair; the one with
    the lower start wins and the other is skipped.
    """
    kept: list[Annotation] = []
    for annotation in sorted(annotations, key=lambda a: (a.start_index, a.end_index)):
        if annotation.is_stale(document_text):
            logger.warning("Skipping stale annotation %s", annotation.id)
            continue
        if kept and kept[-1].range.overlaps(annotation.range):
            logger.warning(
                "Skipping annotation %s: overlaps %s", annotation.id, kept[-1].id
            )
            continue
        kept.append(annotation)
    return kept


class ReviewService:
    """Annotation and feedback operations for one store and generator."""

    def __init__(
        self,
        store: DocumentStoreProtocol,
        feedback: FeedbackGeneratorProtocol,
    ) -> None:
        self._store = store
        self._feedback = feedback

    async def annotations_for(self, document: Document) -> list[Annotation]:
        return await self._store.list_annotations(document.id)

    def render(self, document: Document, annotations: list[Annotation]) -> str:
        """Markup for the document viewer with every drawable annotation."""
        return render_annotations(
            document.content, renderable(document.content, annotations)
        )

    def selection_range(
        self,
        rendered_markup: str,
        start: dict | None,
        end: dict | None,
    ) -> TextRange | None:
        """Translate a selection payload from the page into a text range."""
        return translate_selection(
            rendered_markup, DomPoint.from_payload(start), DomPoint.from_payload(end)
        )

    async def annotate(
        self,
        document: Document,
        author_id: str,
        start_index: int,
        end_index: int,
        category: Category,
        comment: str | None = None,
    ) -> Annotation:
        """Validate and persist a new annotation.

        Raises:
            InvalidRangeError: If the range is empty or outside the document.
            InvalidAnnotationError: If the category is unknown.
            OverlappingAnnotationError: If it overlaps an existing annotation.
        """
        draft = AnnotationDraft.from_selection(
            document.content, start_index, end_index, category, comment
        )
        existing = await self._store.list_annotations(document.id)
        check_no_overlap(draft.range, existing)
        annotation = await self._store.create_annotation(document.id, author_id, draft)
        logger.info(
            "Annotated document %s [%d, %d) as %s",
            document.id,
            start_index,
            end_index,
            category,
        )
        return annotation

    async def remove_annotation(self, annotation_id: str) -> bool:
        removed = await self._store.delete_annotation(annotation_id)
        if not removed:
            logger.warning("Annotation %s was already gone", annotation_id)
        return removed

    async def generate_feedback(
        self, document: Document, dimensions: list[Dimension]
    ) -> FeedbackResult:
        """Generate AI feedback and store it, marking the document graded.

        Raises:
            pydantic.ValidationError: If no dimension is selected.
            FeedbackError: If the generator reply cannot be parsed.
        """
        request = FeedbackRequest(document_text=document.content, dimensions=dimensions)
        result = await self._feedback.generate(request)
        await self._store.save_feedback(document.id, result.model_dump())
        return result

    async def save_written_feedback(
        self,
        document: Document,
        overall: str,
        improvements: list[str] | None = None,
    ) -> FeedbackResult:
        """Store feedback written by the teacher, marking the document graded."""
        result = FeedbackResult(
            overall=overall.strip(),
            improvements=[i.strip() for i in improvements or [] if i.strip()],
            source="teacher",
        )
        await self._store.save_feedback(document.id, result.model_dump())
        return result


def stored_feedback(document: Document) -> FeedbackResult | None:
    """The feedback saved on a document, if any."""
    if not document.feedback:
        return None
    return FeedbackResult.model_validate(document.feedback)
