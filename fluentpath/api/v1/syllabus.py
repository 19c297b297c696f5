"""
Syllabus endpoints - learning path, tree and lesson views for the current learner.
"""

from fastapi import APIRouter, HTTPException, status

from fluentpath.api.deps import CurrentLearner, Syllabus
from fluentpath.engines.syllabus import LessonStatus
from fluentpath.schemas.common import ErrorResponse
from fluentpath.schemas.syllabus import (
    LearningPathResponse,
    LessonDetailResponse,
    LessonLink,
    LessonSummary,
    SyllabusTreeResponse,
)

router = APIRouter()


@router.get("/{syllabus_path}/lessons", response_model=LearningPathResponse)
async def get_learning_path(syllabus_path: str, learner: CurrentLearner, syllabus: Syllabus):
    """Every lesson in learning order with its locked / in_progress / completed status."""
    entries = await syllabus.get_lessons(learner.sub, syllabus_path)
    lessons = [
        LessonSummary(
            id=entry.leaf.id,
            title=entry.leaf.title,
            description=entry.leaf.description,
            status=entry.status,
        )
        for entry in entries
    ]
    return LearningPathResponse(
        syllabus_path=syllabus_path,
        lessons=lessons,
        completed_count=sum(1 for lesson in lessons if lesson.status == LessonStatus.COMPLETED),
        total_count=len(lessons),
    )


@router.get("/{syllabus_path}/tree", response_model=SyllabusTreeResponse)
async def get_syllabus_tree(syllabus_path: str, learner: CurrentLearner, syllabus: Syllabus):
    """Parts, sections and lessons with derived status."""
    nodes = await syllabus.get_hierarchy(learner.sub, syllabus_path)
    return SyllabusTreeResponse(syllabus_path=syllabus_path, nodes=nodes)


@router.get(
    "/{syllabus_path}/lessons/{chapter_id}",
    response_model=LessonDetailResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_lesson(
    syllabus_path: str,
    chapter_id: str,
    learner: CurrentLearner,
    syllabus: Syllabus,
):
    """Lesson content and quiz with previous / next navigation."""
    view = await syllabus.get_lesson(learner.sub, syllabus_path, chapter_id)
    if view is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Lesson not found",
        )
    lesson = view.lesson
    return LessonDetailResponse(
        syllabus_path=syllabus_path,
        id=lesson.id,
        title=lesson.title,
        description=lesson.description,
        content=lesson.content,
        quiz=list(lesson.quiz),
        status=view.status,
        previous=LessonLink.from_node(view.previous),
        next=LessonLink.from_node(view.next),
    )
