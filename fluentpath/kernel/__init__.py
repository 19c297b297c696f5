"""
Kernel Layer

Foundational components the engines build on:
- Document store (keyed JSON documents, optimistic transactions)
- Identity (learner id from the identity provider's bearer token)
"""

from fluentpath.kernel.models import Base, StoredDocument
from fluentpath.kernel.store import (
    DocumentNotFoundError,
    DocumentSnapshot,
    DocumentStore,
    Transaction,
    WriteConflictError,
)

__all__ = [
    "Base",
    "StoredDocument",
    "DocumentStore",
    "DocumentSnapshot",
    "Transaction",
    "DocumentNotFoundError",
    "WriteConflictError",
]
