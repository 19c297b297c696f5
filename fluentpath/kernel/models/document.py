"""
Stored document model - one JSON document per (collection, id).
"""

from typing import Any, Dict

from sqlalchemy import JSON, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from fluentpath.kernel.models.base import Base, TimestampMixin


class StoredDocument(Base, TimestampMixin):
    """
    A keyed JSON document.

    `version` increases by one on every write; transactional writers commit
    with a compare-and-swap on the version they read.
    """

    __tablename__ = "documents"
    __table_args__ = (Index("ix_documents_collection_created", "collection", "created_at"),)

    collection: Mapped[str] = mapped_column(String(128), primary_key=True)
    doc_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    data: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
