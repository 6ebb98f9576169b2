"""Protocol defining the blob storage interface.

SupabaseBlobStorage and MemoryBlobStorage both implement it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from reviewdesk.blobs.models import StoredBlob


class BlobStorageProtocol(Protocol):
    """Protocol for storing uploaded source files."""

    async def upload(self, key: str, data: bytes, content_type: str) -> StoredBlob:
        """Store ``data`` under ``key``, replacing any existing object."""
        ...

    async def delete(self, key: str) -> None:
        """Remove the object. Missing keys are not an error."""
        ...
