"""Protocol defining the document store interface.

Both SqlDocumentStore and MemoryDocumentStore implement this protocol,
allowing them to be used interchangeably. The store is CRUD only: range
and overlap rules live in ``reviewdesk.review``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from uuid import UUID

    from reviewdesk.annotation import Annotation, AnnotationDraft
    from reviewdesk.db.models import Document, Profile


class DocumentStoreProtocol(Protocol):
    """Protocol for persisting documents, annotations and profiles."""

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
        """Persist a new document with status ``pending``."""
        ...

    async def get_document(self, document_id: UUID) -> Document | None: ...

    async def list_documents_by_owner(self, owner_id: str) -> list[Document]:
        """Documents submitted by ``owner_id``, newest first."""
        ...

    async def list_documents_for_student(self, email: str) -> list[Document]:
        """Documents whose student email matches ``email``, newest first."""
        ...

    async def delete_document(self, document_id: UUID) -> bool:
        """Delete a document and all of its annotations.

        Returns:
            True if the document existed.
        """
        ...

    async def save_feedback(
        self, document_id: UUID, feedback: dict[str, Any]
    ) -> Document | None:
        """Store feedback on the document and mark it ``graded``."""
        ...

    # -- annotations -------------------------------------------------------

    async def create_annotation(
        self, document_id: UUID, author_id: str, draft: AnnotationDraft
    ) -> Annotation:
        """Persist ``draft`` and return it with its new identifier."""
        ...

    async def list_annotations(self, document_id: UUID) -> list[Annotation]:
        """Annotations on a document, ordered by start_index."""
        ...

    async def delete_annotation(self, annotation_id: str) -> bool:
        """Delete exactly one annotation. Returns False for unknown ids."""
        ...

    # -- profiles ----------------------------------------------------------

    async def get_profile(self, user_id: str) -> Profile | None: ...

    async def get_profile_by_email(self, email: str) -> Profile | None: ...

    async def ensure_profile(
        self, user_id: str, email: str, role: str = "student"
    ) -> Profile:
        """Return the profile for ``user_id``, creating it with ``role`` if absent.

        An existing profile keeps its role; only the email is refreshed.
        """
        ...

    async def set_role(self, user_id: str, role: str) -> Profile | None: ...

    async def list_profiles(self) -> list[Profile]: ...
