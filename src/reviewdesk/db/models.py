"""SQLModel database models for ReviewDesk.

These models define the schema for user profiles, submitted documents,
and the annotations placed on them.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any
from uuid import UUID, uuid4

import sqlalchemy as sa
from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Uuid
from sqlmodel import Field, SQLModel

from reviewdesk.annotation import Annotation


def _utcnow() -> datetime:
    """Return current UTC time as timezone-aware datetime."""
    return datetime.now(UTC)


def _timestamptz_column() -> Any:
    """Create a TIMESTAMP WITH TIME ZONE column."""
    return Column(DateTime(timezone=True), nullable=False)


def _cascade_fk_column(target: str) -> Any:
    """Create a UUID foreign key column with CASCADE DELETE."""
    return Column(Uuid(), ForeignKey(target, ondelete="CASCADE"), nullable=False)


class Profile(SQLModel, table=True):
    """Application profile for an identity-provider user.

    Attributes:
        user_id: Identity-provider user identifier (Stytch member id).
        email: Email address at last sign-in.
        role: Application role, ``teacher`` or ``student``.
        created_at: Timestamp when the profile was created.
    """

    user_id: str = Field(primary_key=True, max_length=255)
    email: str = Field(index=True, max_length=255)
    role: str = Field(default="student", max_length=20)
    created_at: datetime = Field(
        default_factory=_utcnow, sa_column=_timestamptz_column()
    )

    __table_args__ = (
        CheckConstraint("role IN ('teacher', 'student')", name="ck_profile_role"),
    )


class Document(SQLModel, table=True):
    """A piece of student writing submitted for review.

    ``content`` is the plain text every annotation range indexes into.

    Attributes:
        id: Primary key UUID, auto-generated.
        owner_id: User id of the teacher who submitted it.
        title: Assignment title.
        student_name: Name of the student who wrote it.
        student_email: Optional; lets that student view the review.
        source_kind: ``file``, ``link`` or ``url``.
        source_ref: Blob key, external link, or fetched URL.
        download_url: Public URL of the original upload, if any.
        content: Normalised plain text of the document.
        status: ``pending`` until feedback is saved, then ``graded``.
        feedback: Stored feedback payload.
        created_at: Timestamp when the document was submitted.
    """

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    owner_id: str = Field(index=True, max_length=255)
    title: str = Field(max_length=200)
    student_name: str = Field(max_length=200)
    student_email: str | None = Field(default=None, index=True, max_length=255)
    source_kind: str = Field(default="file", max_length=10)
    source_ref: str = Field(default="", sa_column=Column(sa.Text(), nullable=False))
    download_url: str | None = Field(
        default=None, sa_column=Column(sa.Text(), nullable=True)
    )
    content: str = Field(sa_column=Column(sa.Text(), nullable=False))
    status: str = Field(default="pending", max_length=20)
    feedback: dict[str, Any] | None = Field(
        default=None, sa_column=Column(sa.JSON(), nullable=True)
    )
    created_at: datetime = Field(
        default_factory=_utcnow, sa_column=_timestamptz_column()
    )

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'graded')", name="ck_document_status"
        ),
        CheckConstraint(
            "source_kind IN ('file', 'link', 'url')", name="ck_document_source_kind"
        ),
    )


class AnnotationRecord(SQLModel, table=True):
    """Persisted annotation over a document's plain text.

    Rows are never updated; an edit is a delete followed by a create.
    """

    __tablename__ = "annotation"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    document_id: UUID = Field(sa_column=_cascade_fk_column("document.id"))
    author_id: str = Field(max_length=255)
    start_index: int
    end_index: int
    category: str = Field(max_length=20)
    text: str = Field(sa_column=Column(sa.Text(), nullable=False))
    comment: str | None = Field(
        default=None, sa_column=Column(sa.Text(), nullable=True)
    )
    created_at: datetime = Field(
        default_factory=_utcnow, sa_column=_timestamptz_column()
    )

    __table_args__ = (
        CheckConstraint("start_index >= 0", name="ck_annotation_start"),
        CheckConstraint("end_index > start_index", name="ck_annotation_range"),
    )

    def to_annotation(self) -> Annotation:
        return Annotation(
            id=str(self.id),
            start_index=self.start_index,
            end_index=self.end_index,
            category=self.category,  # type: ignore[arg-type]
            text=self.text,
            comment=self.comment,
        )
