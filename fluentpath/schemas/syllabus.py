"""
Pydantic schemas for syllabus API.
"""

from typing import List, Optional

from pydantic import BaseModel

from fluentpath.engines.syllabus import AnnotatedNode, LessonStatus, QuizQuestion, SyllabusNode


class LessonSummary(BaseModel):
    """A lesson in learning order with its unlock status."""

    id: str
    title: str
    description: str
    status: LessonStatus


class LearningPathResponse(BaseModel):
    syllabus_path: str
    lessons: List[LessonSummary]
    completed_count: int
    total_count: int


class SyllabusTreeResponse(BaseModel):
    syllabus_path: str
    nodes: List[AnnotatedNode]


class LessonLink(BaseModel):
    id: str
    title: str

    @classmethod
    def from_node(cls, node: Optional[SyllabusNode]) -> Optional["LessonLink"]:
        return cls(id=node.id, title=node.title) if node is not None else None


class LessonDetailResponse(BaseModel):
    """Lesson content with status and previous / next navigation."""

    syllabus_path: str
    id: str
    title: str
    description: str
    content: Optional[str] = None
    quiz: List[QuizQuestion] = []
    status: LessonStatus
    previous: Optional[LessonLink] = None
    next: Optional[LessonLink] = None
