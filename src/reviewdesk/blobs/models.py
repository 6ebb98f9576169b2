"""Result type for blob storage operations."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class StoredBlob:
    """An uploaded object.

    Attributes:
        key: Object key within the bucket, e.g. ``{owner_id}/{uuid}-essay.pdf``.
        download_url: URL the browser can fetch the original from.
    """

    key: str
    download_url: str
