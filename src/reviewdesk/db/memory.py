"""In-memory document store for demo mode and tests."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any
from uuid import UUID, uuid4

from reviewdesk.annotation import Annotation
from reviewdesk.auth.models import check_role
from reviewdesk.db.models import Document, Profile

if TYPE_CHECKING:
    from reviewdesk.annotation import AnnotationDraft

logger = logging.getLogger(__name__)


class MemoryDocumentStore:
    """DocumentStoreProtocol held in dictionaries.

    State lives for the life of the process. Ordering matches
    SqlDocumentStore so pages behave the same in demo mode.
    """

    def __init__(self) -> None:
        self._documents: dict[UUID, Document] = {}
        # annotation id -> (document id, annotation, created_at)
        self._annotations: dict[str, tuple[UUID, Annotation, datetime]] = {}
        self._profiles: dict[str, Profile] = {}

    # -- documents ---------------------------------------------------------

    async def create_document(
        self,
        *,
        owner_id: str,
        title: str,
        student_name: str,
        content: str,
        source_kind: str = "file",
        source_ref: str = "",
        student_email: str | None = None,
        download_url: str | None = None,
    ) -> Document:
        document = Document(
            owner_id=owner_id,
            title=title,
            student_name=student_name,
            student_email=student_email.lower() if student_email else None,
            source_kind=source_kind,
            source_ref=source_ref,
            download_url=download_url,
            content=content,
        )
        self._documents[document.id] = document
        return document

    async def get_document(self, document_id: UUID) -> Document | None:
        return self._documents.get(document_id)

    def _newest_first(self, documents: list[Document]) -> list[Document]:
        return sorted(documents, key=lambda d: d.created_at, reverse=True)

    async def list_documents_by_owner(self, owner_id: str) -> list[Document]:
        return self._newest_first(
            [d for d in self._documents.values() if d.owner_id == owner_id]
        )

    async def list_documents_for_student(self, email: str) -> list[Document]:
        email = email.lower()
        return self._newest_first(
            [d for d in self._documents.values() if d.student_email == email]
        )

    async def delete_document(self, document_id: UUID) -> bool:
        if self._documents.pop(document_id, None) is None:
            return False
        stale = [
            key
            for key, (doc_id, _, _) in self._annotations.items()
            if doc_id == document_id
        ]
        for annotation_id in stale:
            del self._annotations[annotation_id]
        return True

    async def save_feedback(
        self, document_id: UUID, feedback: dict[str, Any]
    ) -> Document | None:
        document = self._documents.get(document_id)
        if document is None:
            return None
        document.feedback = feedback
        document.status = "graded"
        return document

    # -- annotations -------------------------------------------------------

    async def create_annotation(
        self, document_id: UUID, author_id: str, draft: AnnotationDraft
    ) -> Annotation:
        if document_id not in self._documents:
            msg = f"Document {document_id} does not exist"
            raise LookupError(msg)
        annotation = Annotation(
            id=str(uuid4()),
            start_index=draft.start_index,
            end_index=draft.end_index,
            category=draft.category,
            text=draft.text,
            comment=draft.comment,
        )
        self._annotations[annotation.id] = (document_id, annotation, datetime.now(UTC))
        logger.debug("Annotation %s by %s", annotation.id, author_id)
        return annotation

    async def list_annotations(self, document_id: UUID) -> list[Annotation]:
        rows = [
            (annotation, created_at)
            for doc_id, annotation, created_at in self._annotations.values()
            if doc_id == document_id
        ]
        rows.sort(key=lambda row: (row[0].start_index, row[1]))
        return [annotation for annotation, _ in rows]

    async def delete_annotation(self, annotation_id: str) -> bool:
        return self._annotations.pop(annotation_id, None) is not None

    # -- profiles ----------------------------------------------------------

    async def get_profile(self, user_id: str) -> Profile | None:
        return self._profiles.get(user_id)

    async def get_profile_by_email(self, email: str) -> Profile | None:
        email = email.lower()
        return next((p for p in self._profiles.values() if p.email == email), None)

    async def ensure_profile(
        self, user_id: str, email: str, role: str = "student"
    ) -> Profile:
        check_role(role)
        profile = self._profiles.get(user_id)
        if profile is None:
            profile = Profile(user_id=user_id, email=email.lower(), role=role)
            self._profiles[user_id] = profile
        else:
            profile.email = email.lower()
        return profile

    async def set_role(self, user_id: str, role: str) -> Profile | None:
        check_role(role)
        profile = self._profiles.get(user_id)
        if profile is not None:
            profile.role = role
        return profile

    async def list_profiles(self) -> list[Profile]:
        return sorted(self._profiles.values(), key=lambda p: p.email)
