"""
Document store errors.
"""


class DocumentStoreError(Exception):
    """Base class for document store failures."""


class DocumentNotFoundError(DocumentStoreError):
    """The referenced document does not exist. Terminal, never retried."""

    def __init__(self, collection: str, doc_id: str):
        self.collection = collection
        self.doc_id = doc_id
        super().__init__(f"Document {collection}/{doc_id} not found")


class WriteConflictError(DocumentStoreError):
    """A concurrent writer changed a document read by the transaction. Retryable."""

    def __init__(self, collection: str, doc_id: str, attempts: int = 1):
        self.collection = collection
        self.doc_id = doc_id
        self.attempts = attempts
        super().__init__(
            f"Write conflict on {collection}/{doc_id} after {attempts} attempt(s)"
        )
