"""
Document store - keyed JSON documents with optimistic transactions.

Exposes the small surface the rest of the application needs from a
document database:

- keyed get / set (optionally merging) / update / delete, and collection listing
- `run_transaction` for atomic read-modify-write against one or more documents

Every stored document carries a version. A transaction remembers the version
of each document it read and commits with a compare-and-swap on it; if any
document moved underneath, the commit fails with WriteConflictError and the
transaction function is re-run from scratch, up to a bounded number of
attempts. Merges are shallow: top-level keys of the new data replace those of
the stored document.
"""

import asyncio
import copy
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple, TypeVar

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from fluentpath.kernel.models.base import generate_document_id
from fluentpath.kernel.models.document import StoredDocument
from fluentpath.kernel.store.errors import DocumentNotFoundError, WriteConflictError
from fluentpath.logging_config import get_logger

logger = get_logger(__name__)

T = TypeVar("T")
DocKey = Tuple[str, str]


@dataclass(frozen=True)
class DocumentSnapshot:
    """Point-in-time view of one document. `data` is None when it does not exist."""

    collection: str
    doc_id: str
    data: Optional[Dict[str, Any]]
    version: int = 0
    created_at: Optional[datetime] = None

    @property
    def exists(self) -> bool:
        return self.data is not None

    def to_dict(self) -> Dict[str, Any]:
        """Deep copy of the document data (empty dict for a missing document)."""
        return copy.deepcopy(self.data) if self.data is not None else {}


def _is_lock_contention(exc: OperationalError) -> bool:
    """SQLite reports a lost write race as 'database is locked'."""
    message = str(exc.orig if exc.orig is not None else exc).lower()
    return "locked" in message or "busy" in message


async def _fetch(session: AsyncSession, collection: str, doc_id: str) -> DocumentSnapshot:
    result = await session.execute(
        select(StoredDocument.data, StoredDocument.version, StoredDocument.created_at).where(
            StoredDocument.collection == collection,
            StoredDocument.doc_id == doc_id,
        )
    )
    row = result.one_or_none()
    if row is None:
        return DocumentSnapshot(collection=collection, doc_id=doc_id, data=None)
    return DocumentSnapshot(
        collection=collection,
        doc_id=doc_id,
        data=dict(row.data or {}),
        version=row.version,
        created_at=row.created_at,
    )


class Transaction:
    """
    Read-then-write unit of work handed to `DocumentStore.run_transaction`.

    All reads must happen before the first write. Writes are buffered and
    applied on commit, each guarded by the version observed at read time.
    """

    def __init__(self, session: AsyncSession):
        self._session = session
        self._reads: Dict[DocKey, DocumentSnapshot] = {}
        self._writes: Dict[DocKey, Dict[str, Any]] = {}

    async def get(self, collection: str, doc_id: str) -> DocumentSnapshot:
        """Read a document inside the transaction."""
        if self._writes:
            raise RuntimeError("Transaction reads must happen before writes")
        key = (collection, doc_id)
        if key not in self._reads:
            self._reads[key] = await _fetch(self._session, collection, doc_id)
        return self._reads[key]

    def set(self, collection: str, doc_id: str, data: Dict[str, Any], merge: bool = False) -> None:
        """Replace (or with merge=True, shallow-merge into) a document."""
        key = (collection, doc_id)
        base = self._current(key, require_existing=False) if merge else {}
        self._writes[key] = {**base, **copy.deepcopy(data)}

    def update(self, collection: str, doc_id: str, fields: Dict[str, Any]) -> None:
        """Shallow-merge fields into an existing document previously read."""
        key = (collection, doc_id)
        current = self._current(key, require_existing=True)
        self._writes[key] = {**current, **copy.deepcopy(fields)}

    def _current(self, key: DocKey, require_existing: bool) -> Dict[str, Any]:
        if key in self._writes:
            return dict(self._writes[key])
        snapshot = self._reads.get(key)
        if snapshot is None:
            raise RuntimeError(f"Document {key[0]}/{key[1]} must be read before it is merged or updated")
        if not snapshot.exists:
            if require_existing:
                raise DocumentNotFoundError(*key)
            return {}
        return snapshot.to_dict()

    async def commit(self) -> None:
        """Apply buffered writes with a compare-and-swap on each read version."""
        for (collection, doc_id), data in self._writes.items():
            snapshot = self._reads.get((collection, doc_id))
            try:
                if snapshot is None:
                    await self._blind_write(collection, doc_id, data)
                elif snapshot.exists:
                    result = await self._session.execute(
                        update(StoredDocument)
                        .where(
                            StoredDocument.collection == collection,
                            StoredDocument.doc_id == doc_id,
                            StoredDocument.version == snapshot.version,
                        )
                        .values(data=data, version=snapshot.version + 1)
                        .execution_options(synchronize_session=False)
                    )
                    if result.rowcount != 1:
                        raise WriteConflictError(collection, doc_id)
                else:
                    # Read as missing: someone else creating it first is a conflict
                    await self._session.execute(
                        insert(StoredDocument).values(
                            collection=collection, doc_id=doc_id, data=data, version=1
                        )
                    )
            except IntegrityError as exc:
                raise WriteConflictError(collection, doc_id) from exc

    async def _blind_write(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        result = await self._session.execute(
            update(StoredDocument)
            .where(
                StoredDocument.collection == collection,
                StoredDocument.doc_id == doc_id,
            )
            .values(data=data, version=StoredDocument.version + 1)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            await self._session.execute(
                insert(StoredDocument).values(
                    collection=collection, doc_id=doc_id, data=data, version=1
                )
            )


class DocumentStore:
    """
    Keyed document store over a SQLAlchemy async session factory.

    Usage:
        store = DocumentStore(async_session_maker)
        snapshot = await store.get("userProgress", learner_id)

        async def award(txn: Transaction) -> None:
            doc = await txn.get("userProgress", learner_id)
            txn.update("userProgress", learner_id, {"points": doc.data["points"] + 10})

        await store.run_transaction(award)
    """

    def __init__(
        self,
        session_maker: async_sessionmaker[AsyncSession],
        max_attempts: int = 5,
        retry_backoff_seconds: float = 0.01,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._session_maker = session_maker
        self.max_attempts = max_attempts
        self.retry_backoff_seconds = retry_backoff_seconds

    async def run_transaction(
        self,
        fn: Callable[[Transaction], Awaitable[T]],
        *,
        max_attempts: Optional[int] = None,
    ) -> T:
        """
        Run `fn` as an atomic read-modify-write.

        WriteConflictError (and SQLite lock contention) re-runs `fn` with fresh
        reads; any other exception raised by `fn` aborts immediately with no
        writes applied. After the last attempt the conflict is re-raised.
        """
        attempts = max_attempts or self.max_attempts
        last_conflict: Optional[WriteConflictError] = None

        for attempt in range(1, attempts + 1):
            try:
                async with self._session_maker() as session:
                    async with session.begin():
                        txn = Transaction(session)
                        result = await fn(txn)
                        await txn.commit()
                return result
            except WriteConflictError as exc:
                last_conflict = exc
            except OperationalError as exc:
                if not _is_lock_contention(exc):
                    raise
                last_conflict = WriteConflictError("*", "*")

            logger.info(
                "Transaction write conflict",
                extra={
                    "attempt": attempt,
                    "max_attempts": attempts,
                    "collection": last_conflict.collection,
                    "doc_id": last_conflict.doc_id,
                },
            )
            if attempt < attempts:
                await asyncio.sleep(self.retry_backoff_seconds * attempt)

        raise WriteConflictError(
            last_conflict.collection, last_conflict.doc_id, attempts=attempts
        ) from last_conflict

    async def get(self, collection: str, doc_id: str) -> DocumentSnapshot:
        """Read one document."""
        async with self._session_maker() as session:
            return await _fetch(session, collection, doc_id)

    async def set(
        self,
        collection: str,
        doc_id: str,
        data: Dict[str, Any],
        *,
        merge: bool = False,
    ) -> None:
        """Create or overwrite a document; merge=True keeps unmentioned top-level keys."""

        async def _write(txn: Transaction) -> None:
            if merge:
                await txn.get(collection, doc_id)
            txn.set(collection, doc_id, data, merge=merge)

        await self.run_transaction(_write)

    async def update(self, collection: str, doc_id: str, fields: Dict[str, Any]) -> None:
        """Merge fields into an existing document. Raises DocumentNotFoundError if absent."""

        async def _write(txn: Transaction) -> None:
            await txn.get(collection, doc_id)
            txn.update(collection, doc_id, fields)

        await self.run_transaction(_write)

    async def add(self, collection: str, data: Dict[str, Any]) -> str:
        """Create a document under a generated id and return the id."""
        doc_id = generate_document_id()
        await self.set(collection, doc_id, data)
        return doc_id

    async def delete(self, collection: str, doc_id: str) -> bool:
        """Delete a document. Returns False if it did not exist."""
        async with self._session_maker() as session:
            async with session.begin():
                result = await session.execute(
                    delete(StoredDocument).where(
                        StoredDocument.collection == collection,
                        StoredDocument.doc_id == doc_id,
                    )
                )
        return result.rowcount > 0

    async def list(self, collection: str) -> List[DocumentSnapshot]:
        """All documents of a collection, newest first."""
        async with self._session_maker() as session:
            result = await session.execute(
                select(StoredDocument)
                .where(StoredDocument.collection == collection)
                .order_by(StoredDocument.created_at.desc(), StoredDocument.doc_id)
            )
            rows = result.scalars().all()
        return [
            DocumentSnapshot(
                collection=row.collection,
                doc_id=row.doc_id,
                data=dict(row.data or {}),
                version=row.version,
                created_at=row.created_at,
            )
            for row in rows
        ]
