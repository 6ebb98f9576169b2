"""Shared pytest fixtures for ReviewDesk tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
import pytest_asyncio

from reviewdesk.auth import UserSession
from reviewdesk.blobs import MemoryBlobStorage
from reviewdesk.db import Database, MemoryDocumentStore, SqlDocumentStore
from reviewdesk.feedback import MockFeedbackGenerator
from reviewdesk.review import ReviewService
from reviewdesk.submissions import SubmissionService

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

SAMPLE_TEXT = "The cat sat on the mat.\n\nIt was a sunny day."


@pytest.fixture
def teacher() -> UserSession:
    return UserSession(
        user_id="teacher-1",
        email="teacher@example.com",
        role="teacher",
        session_token="tok-teacher",
    )


@pytest.fixture
def student() -> UserSession:
    return UserSession(
        user_id="student-1",
        email="student@example.com",
        role="student",
        session_token="tok-student",
    )


@pytest.fixture
def memory_store() -> MemoryDocumentStore:
    return MemoryDocumentStore()


@pytest.fixture
def blobs() -> MemoryBlobStorage:
    return MemoryBlobStorage()


@pytest.fixture
def feedback_generator() -> MockFeedbackGenerator:
    return MockFeedbackGenerator()


@pytest.fixture
def review_service(
    memory_store: MemoryDocumentStore, feedback_generator: MockFeedbackGenerator
) -> ReviewService:
    return ReviewService(memory_store, feedback_generator)


@pytest.fixture
def submission_service(
    memory_store: MemoryDocumentStore, blobs: MemoryBlobStorage
) -> SubmissionService:
    return SubmissionService(memory_store, blobs, max_upload_bytes=1024)


@pytest_asyncio.fixture
async def database() -> AsyncIterator[Database]:
    """Fresh in-memory SQLite database with the schema created."""
    db = Database("sqlite+aiosqlite:///:memory:")
    await db.create_schema()
    try:
        yield db
    finally:
        await db.close()


@pytest.fixture
def sql_store(database: Database) -> SqlDocumentStore:
    return SqlDocumentStore(database)
