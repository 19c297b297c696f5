"""
Syllabus service - projects stored syllabus content against a learner's progress.

Syllabus documents live in the `syllabus` collection keyed by path
(e.g. "grammar", "vocabulary-a1"). The syllabus and the learner's completed
ids are independent reads and are fetched concurrently. Nothing derived here
is ever stored.
"""

import asyncio
from typing import Any, Dict, List, Optional, Set, Tuple

from fluentpath.engines.progress import ProgressLedger
from fluentpath.engines.syllabus.models import AnnotatedNode, LeafStatus, LessonView
from fluentpath.engines.syllabus.projector import (
    build_hierarchy,
    compute_linear_status,
    find_node,
    iter_leaves,
    neighbours,
    parse_syllabus,
)
from fluentpath.kernel.store import DocumentStore
from fluentpath.logging_config import get_logger

logger = get_logger(__name__)

SYLLABUS_COLLECTION = "syllabus"


class SyllabusService:
    """Read-side view of a syllabus for one learner."""

    def __init__(self, store: DocumentStore, ledger: ProgressLedger):
        self.store = store
        self.ledger = ledger

    async def get_document(self, syllabus_path: str) -> Optional[Dict[str, Any]]:
        """Raw syllabus document, or None when the path has no content."""
        snapshot = await self.store.get(SYLLABUS_COLLECTION, syllabus_path)
        if not snapshot.exists:
            logger.info("Syllabus not found", extra={"syllabus_path": syllabus_path})
            return None
        return snapshot.to_dict()

    async def get_learning_path(
        self, learner_id: str, syllabus_path: str
    ) -> Tuple[Optional[Dict[str, Any]], Set[str]]:
        """Syllabus document and the learner's completed ids for it, read concurrently."""
        document, completed = await asyncio.gather(
            self.get_document(syllabus_path),
            self.ledger.completed_chapter_ids(learner_id, syllabus_path),
        )
        return document, completed

    async def get_lessons(self, learner_id: str, syllabus_path: str) -> List[LeafStatus]:
        """Every lesson of the syllabus in learning order with its status."""
        document, completed = await self.get_learning_path(learner_id, syllabus_path)
        leaves = list(iter_leaves(parse_syllabus(document)))
        return compute_linear_status(leaves, completed)

    async def get_hierarchy(self, learner_id: str, syllabus_path: str) -> List[AnnotatedNode]:
        """The syllabus tree with lesson status and derived part/section status."""
        document, completed = await self.get_learning_path(learner_id, syllabus_path)
        nodes = parse_syllabus(document)
        statuses = compute_linear_status(list(iter_leaves(nodes)), completed)
        return build_hierarchy(nodes, {entry.leaf.id: entry.status for entry in statuses})

    async def get_lesson(
        self, learner_id: str, syllabus_path: str, chapter_id: str
    ) -> Optional[LessonView]:
        """
        One lesson with the learner's status and its previous / next lessons.

        Returns None when the id is unknown or names a part/section rather
        than a lesson.
        """
        document, completed = await self.get_learning_path(learner_id, syllabus_path)
        nodes = parse_syllabus(document)
        node = find_node(nodes, chapter_id)
        if node is None or not node.is_leaf:
            return None

        leaves = list(iter_leaves(nodes))
        status_by_id = {entry.leaf.id: entry.status for entry in compute_linear_status(leaves, completed)}
        previous, following = neighbours(leaves, chapter_id)
        return LessonView(
            lesson=node,
            status=status_by_id[chapter_id],
            previous=previous,
            next=following,
        )
