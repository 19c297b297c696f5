"""
Kernel Data Models

SQLAlchemy models backing the document store.
"""

from fluentpath.kernel.models.base import Base, TimestampMixin, generate_document_id
from fluentpath.kernel.models.document import StoredDocument

__all__ = [
    "Base",
    "TimestampMixin",
    "generate_document_id",
    "StoredDocument",
]
