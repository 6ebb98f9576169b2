"""Supabase Storage implementation of BlobStorageProtocol.

supabase-py's storage client is synchronous; calls run in a worker thread
so they do not block the NiceGUI event loop.
"""

from __future__ import annotations

import asyncio
import logging

from supabase import Client, create_client

from reviewdesk.blobs.models import StoredBlob

logger = logging.getLogger(__name__)


class SupabaseBlobStorage:
    """Stores uploads in a public Supabase Storage bucket."""

    def __init__(self, url: str, key: str, bucket: str) -> None:
        self._client: Client = create_client(url, key)
        self.bucket = bucket

    def _upload(self, key: str, data: bytes, content_type: str) -> str:
        bucket = self._client.storage.from_(self.bucket)
        bucket.upload(
            key,
            data,
            file_options={"content-type": content_type, "upsert": "true"},
        )
        return bucket.get_public_url(key)

    async def upload(self, key: str, data: bytes, content_type: str) -> StoredBlob:
        download_url = await asyncio.to_thread(self._upload, key, data, content_type)
        logger.info("Uploaded %s (%d bytes) to bucket %s", key, len(data), self.bucket)
        return StoredBlob(key=key, download_url=download_url)

    async def delete(self, key: str) -> None:
        await asyncio.to_thread(self._client.storage.from_(self.bucket).remove, [key])
        logger.info("Removed %s from bucket %s", key, self.bucket)
