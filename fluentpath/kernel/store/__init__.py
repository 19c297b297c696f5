"""
Document Store - keyed JSON documents with optimistic transactions.
"""

from fluentpath.kernel.store.document_store import DocumentSnapshot, DocumentStore, Transaction
from fluentpath.kernel.store.errors import (
    DocumentNotFoundError,
    DocumentStoreError,
    WriteConflictError,
)

__all__ = [
    "DocumentSnapshot",
    "DocumentStore",
    "Transaction",
    "DocumentStoreError",
    "DocumentNotFoundError",
    "WriteConflictError",
]
