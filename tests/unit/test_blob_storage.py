"""Tests for blob storage implementations."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from reviewdesk.blobs import MemoryBlobStorage


class TestMemoryBlobStorage:
    """Tests for MemoryBlobStorage."""

    async def test_upload_and_delete(self) -> None:
        storage = MemoryBlobStorage()

        blob = await storage.upload("t/1-essay.txt", b"text", "text/plain")

        assert blob.key == "t/1-essay.txt"
        assert blob.download_url == "memory://t/1-essay.txt"
        assert storage.objects["t/1-essay.txt"] == (b"text", "text/plain")

        await storage.delete("t/1-essay.txt")
        await storage.delete("t/1-essay.txt")
        assert storage.objects == {}


class TestSupabaseBlobStorage:
    """Tests for SupabaseBlobStorage with a mocked client."""

    @pytest.fixture
    def mock_bucket(self):
        with patch("reviewdesk.blobs.supabase_storage.create_client") as create:
            bucket = MagicMock()
            bucket.get_public_url.return_value = "https://cdn.example.com/t/essay.txt"
            create.return_value.storage.from_.return_value = bucket
            yield bucket

    async def test_upload(self, mock_bucket: MagicMock) -> None:
        from reviewdesk.blobs.supabase_storage import SupabaseBlobStorage

        storage = SupabaseBlobStorage("https://x.supabase.co", "key", "submissions")
        blob = await storage.upload("t/essay.txt", b"text", "text/plain")

        assert blob.download_url == "https://cdn.example.com/t/essay.txt"
        mock_bucket.upload.assert_called_once_with(
            "t/essay.txt",
            b"text",
            file_options={"content-type": "text/plain", "upsert": "true"},
        )

    async def test_delete(self, mock_bucket: MagicMock) -> None:
        from reviewdesk.blobs.supabase_storage import SupabaseBlobStorage

        storage = SupabaseBlobStorage("https://x.supabase.co", "key", "submissions")
        await storage.delete("t/essay.txt")

        mock_bucket.remove.assert_called_once_with(["t/essay.txt"])
