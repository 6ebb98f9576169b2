"""SQL implementation of the document store.

Each operation runs in its own session from ``Database.session()``, which
commits on success and rolls back on error.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any
from uuid import UUID

from sqlalchemy import delete
from sqlmodel import col, select

from reviewdesk.auth.models import check_role
from reviewdesk.db.models import AnnotationRecord, Document, Profile

if TYPE_CHECKING:
    from reviewdesk.annotation import Annotation, AnnotationDraft
    from reviewdesk.db.engine import Database

logger = logging.getLogger(__name__)


def _parse_uuid(value: str) -> UUID | None:
    try:
        return UUID(value)
    except ValueError:
        return None


class SqlDocumentStore:
    """DocumentStoreProtocol backed by SQLModel tables."""

    def __init__(self, database: Database) -> None:
        self._db = database

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
        async with self._db.session() as session:
            session.add(document)
            await session.flush()
            await session.refresh(document)
        logger.info("Created document %s for owner %s", document.id, owner_id)
        return document

    async def get_document(self, document_id: UUID) -> Document | None:
        async with self._db.session() as session:
            return await session.get(Document, document_id)

    async def list_documents_by_owner(self, owner_id: str) -> list[Document]:
        async with self._db.session() as session:
            result = await session.exec(
                select(Document)
                .where(Document.owner_id == owner_id)
                .order_by(col(Document.created_at).desc())
            )
            return list(result.all())

    async def list_documents_for_student(self, email: str) -> list[Document]:
        async with self._db.session() as session:
            result = await session.exec(
                select(Document)
                .where(Document.student_email == email.lower())
                .order_by(col(Document.created_at).desc())
            )
            return list(result.all())

    async def delete_document(self, document_id: UUID) -> bool:
        async with self._db.session() as session:
            document = await session.get(Document, document_id)
            if document is None:
                return False
            # Explicit so the cascade also holds where FKs are not enforced
            await session.execute(
                delete(AnnotationRecord).where(
                    col(AnnotationRecord.document_id) == document_id
                )
            )
            await session.delete(document)
        logger.info("Deleted document %s", document_id)
        return True

    async def save_feedback(
        self, document_id: UUID, feedback: dict[str, Any]
    ) -> Document | None:
        async with self._db.session() as session:
            document = await session.get(Document, document_id)
            if document is None:
                return None
            document.feedback = feedback
            document.status = "graded"
            session.add(document)
            await session.flush()
            await session.refresh(document)
            return document

    # -- annotations -------------------------------------------------------

    async def create_annotation(
        self, document_id: UUID, author_id: str, draft: AnnotationDraft
    ) -> Annotation:
        record = AnnotationRecord(
            document_id=document_id,
            author_id=author_id,
            start_index=draft.start_index,
            end_index=draft.end_index,
            category=draft.category,
            text=draft.text,
            comment=draft.comment,
        )
        async with self._db.session() as session:
            session.add(record)
            await session.flush()
            await session.refresh(record)
        return record.to_annotation()

    async def list_annotations(self, document_id: UUID) -> list[Annotation]:
        async with self._db.session() as session:
            result = await session.exec(
                select(AnnotationRecord)
                .where(AnnotationRecord.document_id == document_id)
                .order_by(
                    col(AnnotationRecord.start_index),
                    col(AnnotationRecord.created_at),
                )
            )
            return [record.to_annotation() for record in result.all()]

    async def delete_annotation(self, annotation_id: str) -> bool:
        record_id = _parse_uuid(annotation_id)
        if record_id is None:
            return False
        async with self._db.session() as session:
            record = await session.get(AnnotationRecord, record_id)
            if record is None:
                return False
            await session.delete(record)
        return True

    # -- profiles ----------------------------------------------------------

    async def get_profile(self, user_id: str) -> Profile | None:
        async with self._db.session() as session:
            return await session.get(Profile, user_id)

    async def get_profile_by_email(self, email: str) -> Profile | None:
        async with self._db.session() as session:
            result = await session.exec(
                select(Profile).where(Profile.email == email.lower())
            )
            return result.first()

    async def ensure_profile(
        self, user_id: str, email: str, role: str = "student"
    ) -> Profile:
        check_role(role)
        async with self._db.session() as session:
            profile = await session.get(Profile, user_id)
            if profile is None:
                profile = Profile(user_id=user_id, email=email.lower(), role=role)
                logger.info("Created %s profile for %s", role, email)
            else:
                profile.email = email.lower()
            session.add(profile)
            await session.flush()
            await session.refresh(profile)
            return profile

    async def set_role(self, user_id: str, role: str) -> Profile | None:
        check_role(role)
        async with self._db.session() as session:
            profile = await session.get(Profile, user_id)
            if profile is None:
                return None
            profile.role = role
            session.add(profile)
            await session.flush()
            await session.refresh(profile)
            return profile

    async def list_profiles(self) -> list[Profile]:
        async with self._db.session() as session:
            result = await session.exec(select(Profile).order_by(col(Profile.email)))
            return list(result.all())
