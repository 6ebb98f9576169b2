"""Service container: every provider built once at startup.

``build_services`` picks the live or demo implementation of each capability
from settings. Pages receive the container explicitly; nothing reads
module-level singletons.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from reviewdesk.auth import build_auth_client
from reviewdesk.auth.mock import MockAuthClient, email_to_user_id
from reviewdesk.blobs import MemoryBlobStorage
from reviewdesk.db import Database, MemoryDocumentStore, SqlDocumentStore
from reviewdesk.feedback import MockFeedbackGenerator
from reviewdesk.review import ReviewService
from reviewdesk.submissions import SubmissionService

if TYPE_CHECKING:
    from reviewdesk.auth import AuthClientProtocol
    from reviewdesk.blobs import BlobStorageProtocol
    from reviewdesk.config import Settings
    from reviewdesk.db import DocumentStoreProtocol
    from reviewdesk.feedback import FeedbackGeneratorProtocol

logger = logging.getLogger(__name__)


@dataclass
class Services:
    """Providers and the workflow services built on them."""

    auth: AuthClientProtocol
    store: DocumentStoreProtocol
    blobs: BlobStorageProtocol
    feedback: FeedbackGeneratorProtocol
    review: ReviewService
    submissions: SubmissionService
    database: Database | None = None

    @property
    def demo_auth(self) -> bool:
        return isinstance(self.auth, MockAuthClient)

    async def startup(self) -> None:
        """Create tables for a SQL store and seed demo profiles."""
        if self.database is not None:
            await self.database.create_schema()
        if isinstance(self.auth, MockAuthClient):
            await seed_demo_profiles(self.store, self.auth)

    async def shutdown(self) -> None:
        if self.database is not None:
            await self.database.close()


async def seed_demo_profiles(
    store: DocumentStoreProtocol, auth: MockAuthClient
) -> None:
    """Give every demo user a profile with their seeded role."""
    for email, role in auth.users.items():
        await store.ensure_profile(email_to_user_id(email), email, role)
    logger.info("Seeded %d demo profiles", len(auth.users))


def _build_store(
    settings: Settings,
) -> tuple[DocumentStoreProtocol, Database | None]:
    if settings.dev.demo_mode or not settings.database.url:
        if not settings.dev.demo_mode:
            logger.warning("DATABASE__URL not set; documents are kept in memory")
        return MemoryDocumentStore(), None
    database = Database(settings.database.url, echo=settings.database.echo)
    return SqlDocumentStore(database), database


def _build_blobs(settings: Settings) -> BlobStorageProtocol:
    storage = settings.storage
    if settings.dev.demo_mode or not storage.configured:
        if not settings.dev.demo_mode:
            logger.warning(
                "STORAGE__SUPABASE_URL/STORAGE__SUPABASE_KEY not set; "
                "uploads are kept in memory"
            )
        return MemoryBlobStorage()

    from reviewdesk.blobs.supabase_storage import SupabaseBlobStorage

    return SupabaseBlobStorage(
        storage.supabase_url,
        storage.supabase_key.get_secret_value(),
        storage.bucket,
    )


def _build_feedback(settings: Settings) -> FeedbackGeneratorProtocol:
    llm = settings.llm
    api_key = llm.api_key.get_secret_value()
    if settings.dev.demo_mode or not api_key:
        if not settings.dev.demo_mode:
            logger.warning("LLM__API_KEY not set; AI feedback returns canned text")
        return MockFeedbackGenerator()

    from reviewdesk.feedback.client import ClaudeFeedbackGenerator

    return ClaudeFeedbackGenerator(
        api_key=api_key, model=llm.model, max_tokens=llm.max_tokens
    )


def build_services(settings: Settings) -> Services:
    """Build every provider for ``settings``.

    A provider with missing credentials falls back to its demo
    implementation with a logged warning; ``DEV__DEMO_MODE`` forces all of
    them.
    """
    if settings.dev.demo_mode:
        logger.info("Demo mode: all providers use in-memory implementations")

    store, database = _build_store(settings)
    blobs = _build_blobs(settings)
    feedback = _build_feedback(settings)
    return Services(
        auth=build_auth_client(settings),
        store=store,
        blobs=blobs,
        feedback=feedback,
        review=ReviewService(store, feedback),
        submissions=SubmissionService(
            store, blobs, max_upload_bytes=settings.app.max_upload_bytes
        ),
        database=database,
    )

