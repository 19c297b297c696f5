"""
Pydantic schemas for progress API.
"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from fluentpath.engines.progress import AwardOutcome, LearnerProfile


class ProgressResponse(BaseModel):
    """A learner's points, level and streak."""

    learner_id: str
    points: int
    level: int
    daily_streak: int
    last_completed_date: Optional[datetime] = None
    completed_chapters: Dict[str, List[str]] = {}
    completed_videos: List[str] = []

    @classmethod
    def from_profile(cls, learner_id: str, profile: LearnerProfile) -> "ProgressResponse":
        return cls(
            learner_id=learner_id,
            points=profile.points,
            level=profile.level,
            daily_streak=profile.daily_streak,
            last_completed_date=profile.last_completed_date,
            completed_chapters=profile.completed_chapters,
            completed_videos=profile.completed_videos,
        )


class ChapterCompletionRequest(BaseModel):
    """Mastered chapter, submitted once its quiz is passed."""

    syllabus_path: str = Field(min_length=1, max_length=255)
    chapter_id: str = Field(min_length=1, max_length=255)


class AwardResponse(BaseModel):
    """Result of an award, with the learner's progress afterwards."""

    awarded: bool
    points_awarded: int
    message: str
    progress: ProgressResponse

    @classmethod
    def from_outcome(cls, learner_id: str, outcome: AwardOutcome) -> "AwardResponse":
        return cls(
            awarded=outcome.awarded,
            points_awarded=outcome.points_awarded,
            message=outcome.message,
            progress=ProgressResponse.from_profile(learner_id, outcome.profile),
        )


class LeaderboardItem(BaseModel):
    learner_id: str
    points: int
    level: int
    daily_streak: int


class LeaderboardResponse(BaseModel):
    """All learners, highest points first."""

    learners: List[LeaderboardItem]
    total: int
