"""In-memory blob storage for demo mode and tests."""

from __future__ import annotations

from reviewdesk.blobs.models import StoredBlob


class MemoryBlobStorage:
    """Keeps uploads in a dict. Download URLs are ``memory://`` placeholders."""

    def __init__(self) -> None:
        self.objects: dict[str, tuple[bytes, str]] = {}

    async def upload(self, key: str, data: bytes, content_type: str) -> StoredBlob:
        self.objects[key] = (data, content_type)
        return StoredBlob(key=key, download_url=f"memory://{key}")

    async def delete(self, key: str) -> None:
        self.objects.pop(key, None)
