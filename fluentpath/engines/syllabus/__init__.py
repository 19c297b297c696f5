"""
Syllabus Engine - learning order and unlock status.

Syllabi are either flat (lesson id -> lesson, ordered by natural id order)
or nested (`chapters` list of parts/sections/lessons). Only lessons are
completed; parts and sections derive their status from their children.
"""

from fluentpath.engines.syllabus.models import (
    AnnotatedNode,
    LeafStatus,
    LessonStatus,
    LessonView,
    QuizQuestion,
    SyllabusNode,
)
from fluentpath.engines.syllabus.projector import (
    build_hierarchy,
    compute_linear_status,
    derive_parent_status,
    find_node,
    flatten_leaves,
    natural_sort_key,
    neighbours,
    parse_syllabus,
)
from fluentpath.engines.syllabus.service import SYLLABUS_COLLECTION, SyllabusService

__all__ = [
    "AnnotatedNode",
    "LeafStatus",
    "LessonStatus",
    "LessonView",
    "QuizQuestion",
    "SyllabusNode",
    "build_hierarchy",
    "compute_linear_status",
    "derive_parent_status",
    "find_node",
    "flatten_leaves",
    "natural_sort_key",
    "neighbours",
    "parse_syllabus",
    "SYLLABUS_COLLECTION",
    "SyllabusService",
]
