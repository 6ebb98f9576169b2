"""Persistence for ReviewDesk.

``SqlDocumentStore`` (SQLModel over an async engine) and
``MemoryDocumentStore`` both implement ``DocumentStoreProtocol``.
"""

from __future__ import annotations

from reviewdesk.db.documents import SqlDocumentStore
from reviewdesk.db.engine import Database
from reviewdesk.db.memory import MemoryDocumentStore
from reviewdesk.db.models import AnnotationRecord, Document, Profile
from reviewdesk.db.protocol import DocumentStoreProtocol

__all__ = [
    "AnnotationRecord",
    "Database",
    "Document",
    "DocumentStoreProtocol",
    "MemoryDocumentStore",
    "Profile",
    "SqlDocumentStore",
]
