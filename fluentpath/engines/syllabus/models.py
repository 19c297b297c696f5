"""
Syllabus models - content-managed lesson trees and their derived status.
"""

from enum import Enum
from typing import Any, List, NamedTuple, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class LessonStatus(str, Enum):
    """Unlock state of a syllabus node for one learner."""
    LOCKED = "locked"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class QuizQuestion(BaseModel):
    """Multiple-choice mastery question attached to a lesson."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    question: str
    options: List[str] = Field(default_factory=list)
    correct_answer: str = Field(default="", alias="correctAnswer")

    @field_validator("options", mode="before")
    @classmethod
    def _split_options(cls, v: Any) -> List[str]:
        # Editors have stored options as one comma-separated string
        if isinstance(v, str):
            return [opt.strip() for opt in v.split(",") if opt.strip()]
        if isinstance(v, list):
            return [str(opt) for opt in v]
        return []


class SyllabusNode(BaseModel):
    """
    One node of a syllabus.

    A node with at least one child is a Part/Section; a node without children
    (absent or an empty list) is a Lesson, the unit of completion.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    title: str = ""
    description: str = ""
    content: Optional[str] = None
    quiz: Tuple[QuizQuestion, ...] = ()
    children: Optional[Tuple["SyllabusNode", ...]] = None

    @field_validator("title", "description", mode="before")
    @classmethod
    def _text_or_empty(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @field_validator("quiz", mode="before")
    @classmethod
    def _keep_wellformed_questions(cls, v: Any) -> List[Any]:
        if not isinstance(v, list):
            return []
        return [q for q in v if isinstance(q, QuizQuestion) or (isinstance(q, dict) and q.get("question"))]

    @property
    def is_leaf(self) -> bool:
        return not self.children


class LeafStatus(NamedTuple):
    """A lesson paired with its linear-progression status."""

    leaf: SyllabusNode
    status: LessonStatus


class AnnotatedNode(BaseModel):
    """A syllabus node with derived status, rebuilt on every request."""

    id: str
    title: str
    description: str
    status: LessonStatus
    children: Optional[List["AnnotatedNode"]] = None


class LessonView(BaseModel):
    """A single lesson with the learner's status and its neighbours in learning order."""

    lesson: SyllabusNode
    status: LessonStatus
    previous: Optional[SyllabusNode] = None
    next: Optional[SyllabusNode] = None
