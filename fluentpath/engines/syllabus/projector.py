"""
Syllabus Projector - lesson order and unlock status for flat and nested syllabi.

Two document shapes are stored under `syllabus/{path}`:

- nested: {"chapters": [node, ...]} where nodes recursively hold `children`
- flat:   {"<lesson id>": {...lesson data...}, ...}

Linear progression: lessons are completed in projection order, the first
lesson not yet completed is `in_progress` and everything after it is
`locked`. Parts and sections never carry their own completion; their status
is derived from their children.

Everything here is pure. Bad content never raises: a malformed document
projects to an empty syllabus and bad nodes are skipped.
"""

import re
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Set, Tuple

from pydantic import ValidationError

from fluentpath.engines.syllabus.models import (
    AnnotatedNode,
    LeafStatus,
    LessonStatus,
    SyllabusNode,
)
from fluentpath.logging_config import get_logger

logger = get_logger(__name__)

NESTED_KEY = "chapters"

_DIGITS = re.compile(r"(\d+)")


def natural_sort_key(value: str) -> Tuple[Any, ...]:
    """
    Case-insensitive key that compares digit runs numerically ("ch-2" < "ch-10").

    re.split with a capturing group alternates text / digits, so positions
    always hold the same type and part tuples stay comparable. The raw id
    breaks ties between ids that differ only in case.
    """
    parts = _DIGITS.split(value)
    return tuple(int(part) if i % 2 else part.casefold() for i, part in enumerate(parts)), value


def is_nested(document: Mapping[str, Any]) -> bool:
    return isinstance(document.get(NESTED_KEY), list)


def _node_fields(raw: Mapping[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in raw.items() if k != "children"}


def _parse_nodes(raw_nodes: Iterable[Any], seen: Set[str]) -> Tuple[SyllabusNode, ...]:
    """Pre-order parse. `seen` spans the whole document, so later copies of an id are dropped."""
    nodes: List[SyllabusNode] = []
    for raw in raw_nodes:
        if not isinstance(raw, Mapping) or raw.get("id") in (None, ""):
            logger.warning("Skipping syllabus node without id")
            continue
        node_id = str(raw["id"])
        if node_id in seen:
            logger.warning("Skipping syllabus node with a duplicate id", extra={"node_id": node_id})
            continue
        seen.add(node_id)

        children: Optional[Tuple[SyllabusNode, ...]] = None
        raw_children = raw.get("children")
        if isinstance(raw_children, list):
            children = _parse_nodes(raw_children, seen)

        try:
            node = SyllabusNode.model_validate({**_node_fields(raw), "id": node_id, "children": children})
        except ValidationError:
            logger.warning("Skipping malformed syllabus node", extra={"node_id": node_id}, exc_info=True)
            continue
        nodes.append(node)
    return tuple(nodes)


def _parse_flat(document: Mapping[str, Any]) -> Tuple[SyllabusNode, ...]:
    leaves: List[SyllabusNode] = []
    for key in sorted((k for k in document.keys() if isinstance(k, str)), key=natural_sort_key):
        raw = document[key]
        if not isinstance(raw, Mapping):
            continue
        try:
            # Flat lessons are leaves whatever their data says
            leaves.append(SyllabusNode.model_validate({**_node_fields(raw), "id": key, "children": None}))
        except ValidationError:
            logger.warning("Skipping malformed lesson", extra={"node_id": key}, exc_info=True)
    return tuple(leaves)


def parse_syllabus(document: Any) -> Tuple[SyllabusNode, ...]:
    """
    Top-level nodes of a syllabus document, in learning order.

    Flat documents yield their lessons sorted by natural id order. Missing or
    malformed documents yield an empty tuple. Ids are unique: only the first
    node carrying an id is kept.
    """
    if not isinstance(document, Mapping) or not document:
        return ()
    if NESTED_KEY in document:
        if not is_nested(document):
            logger.warning("Syllabus 'chapters' is not a list; treating as empty")
            return ()
        return _parse_nodes(document[NESTED_KEY], set())
    return _parse_flat(document)


def iter_leaves(nodes: Iterable[SyllabusNode]) -> Iterable[SyllabusNode]:
    """Pre-order, left-to-right leaves. Internal nodes are never yielded."""
    for node in nodes:
        if node.is_leaf:
            yield node
        else:
            yield from iter_leaves(node.children or ())


def flatten_leaves(document: Any) -> List[SyllabusNode]:
    """Ordered lessons of a flat or nested syllabus document."""
    return list(iter_leaves(parse_syllabus(document)))


def compute_linear_status(
    ordered_leaves: Sequence[SyllabusNode],
    completed_ids: Set[str],
) -> List[LeafStatus]:
    """
    Single forward pass: completed ids are `completed`, the first other
    lesson is `in_progress`, all later ones are `locked`.
    """
    in_progress_assigned = False
    result: List[LeafStatus] = []
    for leaf in ordered_leaves:
        if leaf.id in completed_ids:
            status = LessonStatus.COMPLETED
        elif not in_progress_assigned:
            status = LessonStatus.IN_PROGRESS
            in_progress_assigned = True
        else:
            status = LessonStatus.LOCKED
        result.append(LeafStatus(leaf, status))
    return result


def derive_parent_status(child_statuses: Sequence[LessonStatus]) -> LessonStatus:
    """All children completed -> completed; any started -> in_progress; else locked."""
    if child_statuses and all(s == LessonStatus.COMPLETED for s in child_statuses):
        return LessonStatus.COMPLETED
    if any(s in (LessonStatus.IN_PROGRESS, LessonStatus.COMPLETED) for s in child_statuses):
        return LessonStatus.IN_PROGRESS
    return LessonStatus.LOCKED


def build_hierarchy(
    nodes: Sequence[SyllabusNode],
    leaf_status: Mapping[str, LessonStatus],
) -> List[AnnotatedNode]:
    """
    Annotate a node tree bottom-up.

    Lessons take their status from `leaf_status` (locked when absent); parts
    and sections derive theirs from their already-annotated children.
    """
    annotated: List[AnnotatedNode] = []
    for node in nodes:
        if node.is_leaf:
            annotated.append(
                AnnotatedNode(
                    id=node.id,
                    title=node.title,
                    description=node.description,
                    status=leaf_status.get(node.id, LessonStatus.LOCKED),
                )
            )
            continue
        children = build_hierarchy(node.children or (), leaf_status)
        annotated.append(
            AnnotatedNode(
                id=node.id,
                title=node.title,
                description=node.description,
                status=derive_parent_status([child.status for child in children]),
                children=children,
            )
        )
    return annotated


def find_node(nodes: Iterable[SyllabusNode], node_id: str) -> Optional[SyllabusNode]:
    """First node with `node_id` in pre-order, at any depth."""
    for node in nodes:
        if node.id == node_id:
            return node
        if node.children:
            found = find_node(node.children, node_id)
            if found is not None:
                return found
    return None


def neighbours(
    ordered_leaves: Sequence[SyllabusNode],
    node_id: str,
) -> Tuple[Optional[SyllabusNode], Optional[SyllabusNode]]:
    """(previous, next) lessons around `node_id` in learning order."""
    for index, leaf in enumerate(ordered_leaves):
        if leaf.id == node_id:
            previous = ordered_leaves[index - 1] if index > 0 else None
            following = ordered_leaves[index + 1] if index + 1 < len(ordered_leaves) else None
            return previous, following
    return None, None
