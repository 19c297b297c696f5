"""
Learner profile - the per-learner points, level, streak and completed sets.

Persisted as a `userProgress` document with camelCase keys. `level` is
written for readers of the raw document but always recomputed from points;
a stored level is never trusted.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Set

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from fluentpath.engines.progress.rules import level_for_points

PROFILE_COLLECTION = "userProgress"


def _unique(ids: List[Any]) -> List[str]:
    seen: Set[str] = set()
    out: List[str] = []
    for item in ids:
        if item is None:
            continue
        value = str(item)
        if value not in seen:
            seen.add(value)
            out.append(value)
    return out


class LearnerProfile(BaseModel):
    """Mutable progression state of one learner."""

    model_config = ConfigDict(populate_by_name=True)

    points: int = Field(default=0, ge=0)
    daily_streak: int = Field(default=0, ge=0, alias="dailyStreak")
    last_completed_date: Optional[datetime] = Field(default=None, alias="lastCompletedDate")
    completed_chapters: Dict[str, List[str]] = Field(default_factory=dict, alias="completedChapters")
    completed_videos: List[str] = Field(default_factory=list, alias="completedVideos")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def level(self) -> int:
        return level_for_points(self.points)

    @field_validator("points", "daily_streak", mode="before")
    @classmethod
    def _missing_counter_is_zero(cls, v: Any) -> Any:
        return 0 if v is None else v

    @field_validator("last_completed_date")
    @classmethod
    def _assume_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @field_validator("completed_chapters", mode="before")
    @classmethod
    def _normalise_chapters(cls, v: Any) -> Dict[str, List[str]]:
        if not isinstance(v, dict):
            return {}
        return {
            str(path): _unique(ids if isinstance(ids, list) else [])
            for path, ids in v.items()
        }

    @field_validator("completed_videos", mode="before")
    @classmethod
    def _normalise_videos(cls, v: Any) -> List[str]:
        return _unique(v) if isinstance(v, list) else []

    @classmethod
    def from_document(cls, data: Optional[Dict[str, Any]]) -> "LearnerProfile":
        """Build from a stored document; a missing document yields the defaults."""
        return cls.model_validate(data or {})

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")

    @property
    def has_completions(self) -> bool:
        return self.last_completed_date is not None

    def completed_for_path(self, syllabus_path: str) -> Set[str]:
        return set(self.completed_chapters.get(syllabus_path, []))

    def has_completed_chapter(self, syllabus_path: str, chapter_id: str) -> bool:
        return chapter_id in self.completed_chapters.get(syllabus_path, [])

    def has_completed_video(self, video_id: str) -> bool:
        return video_id in self.completed_videos


class LeaderboardEntry(BaseModel):
    """One learner's standing, for the admin overview."""

    learner_id: str
    points: int
    level: int
    daily_streak: int
