"""Storage for uploaded source files."""

from __future__ import annotations

from reviewdesk.blobs.memory import MemoryBlobStorage
from reviewdesk.blobs.models import StoredBlob
from reviewdesk.blobs.protocol import BlobStorageProtocol

__all__ = ["BlobStorageProtocol", "MemoryBlobStorage", "StoredBlob"]
