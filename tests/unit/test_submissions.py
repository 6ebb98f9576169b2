"""Tests for submission intake and access rules."""

from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import AsyncMock, patch

import pytest

from reviewdesk.ingest import IngestedDocument, UnsupportedDocumentError
from reviewdesk.submissions import SubmissionError, blob_key, can_view

if TYPE_CHECKING:
    from reviewdesk.auth import UserSession
    from reviewdesk.blobs import MemoryBlobStorage
    from reviewdesk.db import MemoryDocumentStore
    from reviewdesk.submissions import SubmissionService


class TestBlobKey:
    """Tests for blob_key."""

    def test_key_is_scoped_to_owner(self) -> None:
        key = blob_key("teacher-1", "essay.txt")
        assert key.startswith("teacher-1/")
        assert key.endswith("-essay.txt")

    def test_unsafe_characters_replaced(self) -> None:
        key = blob_key("t", "../my essay (final).docx")
        assert "/" not in key.split("/", 1)[1]
        assert " " not in key
        assert key.endswith("my_essay_final_.docx")

    def test_keys_are_unique(self) -> None:
        assert blob_key("t", "a.txt") != blob_key("t", "a.txt")


class TestSubmitFile:
    """Tests for SubmissionService.submit_file."""

    async def test_creates_document_and_blob(
        self,
        submission_service: SubmissionService,
        teacher: UserSession,
        blobs: MemoryBlobStorage,
    ) -> None:
        document = await submission_service.submit_file(
            teacher,
            title="Essay",
            student_name="Sam",
            student_email="Student@Example.com",
            filename="essay.txt",
            data=b"Line one\r\nLine two\r\n",
        )

        assert document.content == "Line one\nLine two"
        assert document.source_kind == "file"
        assert document.student_email == "student@example.com"
        assert blobs.objects[document.source_ref] == (
            b"Line one\r\nLine two\r\n",
            "text/plain",
        )
        assert document.download_url == f"memory://{document.source_ref}"

    async def test_missing_title_rejected(
        self, submission_service: SubmissionService, teacher: UserSession
    ) -> None:
        with pytest.raises(SubmissionError, match="Title"):
            await submission_service.submit_file(
                teacher,
                title="  ",
                student_name="Sam",
                filename="essay.txt",
                data=b"text",
            )

    async def test_oversized_file_rejected(
        self,
        submission_service: SubmissionService,
        teacher: UserSession,
        blobs: MemoryBlobStorage,
    ) -> None:
        with pytest.raises(SubmissionError, match="limit"):
            await submission_service.submit_file(
                teacher,
                title="Essay",
                student_name="Sam",
                filename="essay.txt",
                data=b"x" * 2048,
            )
        assert blobs.objects == {}

    async def test_unsupported_type_rejected(
        self, submission_service: SubmissionService, teacher: UserSession
    ) -> None:
        with pytest.raises(UnsupportedDocumentError):
            await submission_service.submit_file(
                teacher,
                title="Essay",
                student_name="Sam",
                filename="essay.exe",
                data=b"MZ",
            )

    async def test_blob_removed_when_insert_fails(
        self,
        submission_service: SubmissionService,
        teacher: UserSession,
        memory_store: MemoryDocumentStore,
        blobs: MemoryBlobStorage,
    ) -> None:
        with (
            patch.object(
                memory_store,
                "create_document",
                AsyncMock(side_effect=RuntimeError("db down")),
            ),
            pytest.raises(RuntimeError, match="db down"),
        ):
            await submission_service.submit_file(
                teacher,
                title="Essay",
                student_name="Sam",
                filename="essay.txt",
                data=b"text",
            )
        assert blobs.objects == {}


class TestSubmitUrlAndText:
    """Tests for URL and pasted-text submissions."""

    async def test_submit_url(
        self, submission_service: SubmissionService, teacher: UserSession
    ) -> None:
        fetched = IngestedDocument(
            content="Fetched text", kind="html", content_type="text/html"
        )
        with patch(
            "reviewdesk.submissions.fetch_url", AsyncMock(return_value=fetched)
        ) as mock_fetch:
            document = await submission_service.submit_url(
                teacher,
                title="Web essay",
                student_name="Sam",
                url="https://example.com/essay",
            )

        mock_fetch.assert_awaited_once_with("https://example.com/essay")
        assert document.content == "Fetched text"
        assert document.source_kind == "url"
        assert document.download_url == "https://example.com/essay"

    async def test_submit_text_with_link(
        self, submission_service: SubmissionService, teacher: UserSession
    ) -> None:
        document = await submission_service.submit_text(
            teacher,
            title="Pasted",
            student_name="Sam",
            text="Para one.\r\n\r\n\r\nPara two.\n",
            link="https://docs.example.com/d/1",
        )

        assert document.content == "Para one.\n\nPara two."
        assert document.source_kind == "link"
        assert document.source_ref == "https://docs.example.com/d/1"
        assert document.download_url == "https://docs.example.com/d/1"

    async def test_submit_text_without_link(
        self, submission_service: SubmissionService, teacher: UserSession
    ) -> None:
        document = await submission_service.submit_text(
            teacher, title="Pasted", student_name="Sam", text="Hello."
        )
        assert document.source_ref == ""
        assert document.download_url is None

    async def test_empty_text_rejected(
        self, submission_service: SubmissionService, teacher: UserSession
    ) -> None:
        with pytest.raises(SubmissionError, match="Document text"):
            await submission_service.submit_text(
                teacher, title="Pasted", student_name="Sam", text=" \n\n "
            )


class TestAccess:
    """Tests for listing, viewing, and deleting."""

    async def test_documents_for_teacher_and_student(
        self,
        submission_service: SubmissionService,
        teacher: UserSession,
        student: UserSession,
    ) -> None:
        mine = await submission_service.submit_text(
            teacher,
            title="For Sam",
            student_name="Sam",
            student_email="student@example.com",
            text="Hello.",
        )
        await submission_service.submit_text(
            teacher, title="For someone else", student_name="Alex", text="Hi."
        )

        teacher_docs = await submission_service.documents_for(teacher)
        student_docs = await submission_service.documents_for(student)

        assert len(teacher_docs) == 2
        assert [d.id for d in student_docs] == [mine.id]

    async def test_can_view(
        self,
        submission_service: SubmissionService,
        teacher: UserSession,
        student: UserSession,
    ) -> None:
        addressed = await submission_service.submit_text(
            teacher,
            title="For Sam",
            student_name="Sam",
            student_email="STUDENT@example.com",
            text="Hello.",
        )
        other = await submission_service.submit_text(
            teacher, title="Other", student_name="Alex", text="Hi."
        )

        assert can_view(teacher, addressed)
        assert can_view(student, addressed)
        assert not can_view(student, other)

    @pytest.mark.parametrize(
        "pasted", [" student@example.com ", "\tStudent@Example.com\n"]
    )
    async def test_student_email_whitespace_stripped(
        self,
        submission_service: SubmissionService,
        teacher: UserSession,
        student: UserSession,
        pasted: str,
    ) -> None:
        document = await submission_service.submit_text(
            teacher,
            title="For Sam",
            student_name="Sam",
            student_email=pasted,
            text="Hello.",
        )

        assert document.student_email == "student@example.com"
        assert can_view(student, document)
        student_docs = await submission_service.documents_for(student)
        assert [d.id for d in student_docs] == [document.id]

    async def test_blank_student_email_stored_as_none(
        self, submission_service: SubmissionService, teacher: UserSession
    ) -> None:
        document = await submission_service.submit_text(
            teacher, title="Pasted", student_name="Sam", student_email="  ", text="Hi."
        )
        assert document.student_email is None

    async def test_delete_removes_document_and_blob(
        self,
        submission_service: SubmissionService,
        teacher: UserSession,
        memory_store: MemoryDocumentStore,
        blobs: MemoryBlobStorage,
    ) -> None:
        document = await submission_service.submit_file(
            teacher,
            title="Essay",
            student_name="Sam",
            filename="essay.txt",
            data=b"text",
        )

        await submission_service.delete(teacher, document)

        assert await memory_store.get_document(document.id) is None
        assert blobs.objects == {}

    async def test_only_owner_can_delete(
        self,
        submission_service: SubmissionService,
        teacher: UserSession,
        student: UserSession,
        memory_store: MemoryDocumentStore,
    ) -> None:
        document = await submission_service.submit_text(
            teacher,
            title="For Sam",
            student_name="Sam",
            student_email="student@example.com",
            text="Hello.",
        )

        with pytest.raises(PermissionError):
            await submission_service.delete(student, document)
        assert await memory_store.get_document(document.id) is not None
