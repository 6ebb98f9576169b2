"""Submission intake: upload, fetch, list and delete student documents."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING
from uuid import uuid4

from reviewdesk.ingest import fetch_url, ingest_bytes, normalise_text

if TYPE_CHECKING:
    from reviewdesk.auth import UserSession
    from reviewdesk.blobs import BlobStorageProtocol
    from reviewdesk.db import Document, DocumentStoreProtocol

logger = logging.getLogger(__name__)

_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


class SubmissionError(ValueError):
    """Raised for a submission the form should reject."""


def blob_key(owner_id: str, filename: str) -> str:
    """Unique object key ``{owner_id}/{hex}-{filename}`` with a safe filename."""
    safe = _UNSAFE_KEY_CHARS.sub("_", filename).strip("._") or "upload"
    return f"{owner_id}/{uuid4().hex}-{safe}"


def can_view(user: UserSession, document: Document) -> bool:
    """Owners see their submissions; students see documents addressed to them."""
    if document.owner_id == user.user_id:
        return True
    return bool(
        document.student_email and document.student_email == user.email.lower()
    )


def _required(value: str, label: str) -> str:
    value = value.strip()
    if not value:
        raise SubmissionError(f"{label} is required")
    return value


def _optional_email(value: str | None) -> str | None:
    return (value or "").strip() or None


class SubmissionService:
    """Turns form input into stored documents.

    Uploading and deleting are teacher operations; callers check the role.
    """

    def __init__(
        self,
        store: DocumentStoreProtocol,
        blobs: BlobStorageProtocol,
        *,
        max_upload_bytes: int = 10 * 1024 * 1024,
    ) -> None:
        self._store = store
        self._blobs = blobs
        self.max_upload_bytes = max_upload_bytes

    async def submit_file(
        self,
        owner: UserSession,
        *,
        title: str,
        student_name: str,
        filename: str,
        data: bytes,
        student_email: str | None = None,
    ) -> Document:
        """Extract text from an upload, store the original, create the document.

        Raises:
            SubmissionError: For missing fields or an oversized file.
            UnsupportedDocumentError: If the file cannot be read as text.
        """
        title = _required(title, "Title")
        student_name = _required(student_name, "Student name")
        if len(data) > self.max_upload_bytes:
            msg = (
                f"{filename} is {len(data)} bytes; "
                f"the limit is {self.max_upload_bytes} bytes"
            )
            raise SubmissionError(msg)

        ingested = ingest_bytes(filename, data)
        blob = await self._blobs.upload(
            blob_key(owner.user_id, filename), data, ingested.content_type
        )
        try:
            return await self._store.create_document(
                owner_id=owner.user_id,
                title=title,
                student_name=student_name,
                student_email=_optional_email(student_email),
                content=ingested.content,
                source_kind="file",
                source_ref=blob.key,
                download_url=blob.download_url,
            )
        except Exception:
            logger.exception("Document insert failed, removing blob %s", blob.key)
            await self._blobs.delete(blob.key)
            raise

    async def submit_url(
        self,
        owner: UserSession,
        *,
        title: str,
        student_name: str,
        url: str,
        student_email: str | None = None,
    ) -> Document:
        """Fetch a web page or file and create a document from its text.

        Raises:
            SubmissionError: For missing fields.
            UnsupportedDocumentError: If the URL cannot be fetched or read.
        """
        title = _required(title, "Title")
        student_name = _required(student_name, "Student name")
        url = _required(url, "URL")
        ingested = await fetch_url(url)
        return await self._store.create_document(
            owner_id=owner.user_id,
            title=title,
            student_name=student_name,
            student_email=_optional_email(student_email),
            content=ingested.content,
            source_kind="url",
            source_ref=url,
            download_url=url,
        )

    async def submit_text(
        self,
        owner: UserSession,
        *,
        title: str,
        student_name: str,
        text: str,
        link: str | None = None,
        student_email: str | None = None,
    ) -> Document:
        """Create a document from pasted text, optionally linking its original.

        Raises:
            SubmissionError: For missing fields or empty text.
        """
        title = _required(title, "Title")
        student_name = _required(student_name, "Student name")
        content = _required(normalise_text(text), "Document text")
        return await self._store.create_document(
            owner_id=owner.user_id,
            title=title,
            student_name=student_name,
            student_email=_optional_email(student_email),
            content=content,
            source_kind="link",
            source_ref=link or "",
            download_url=link or None,
        )

    async def documents_for(self, user: UserSession) -> list[Document]:
        """Submissions a user may see: their own uploads or those addressed to them."""
        if user.is_teacher:
            return await self._store.list_documents_by_owner(user.user_id)
        return await self._store.list_documents_for_student(user.email)

    async def delete(self, user: UserSession, document: Document) -> None:
        """Delete a document, its annotations, and its stored original.

        Raises:
            PermissionError: If ``user`` did not submit the document.
        """
        if document.owner_id != user.user_id:
            msg = f"{user.email} cannot delete document {document.id}"
            raise PermissionError(msg)
        await self._store.delete_document(document.id)
        if document.source_kind == "file" and document.source_ref:
            await self._blobs.delete(document.source_ref)
        logger.info("Deleted submission %s (%s)", document.id, document.title)
