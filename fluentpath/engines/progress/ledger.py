"""
Progress Ledger - awards credit for completed chapters and videos (document-store backed).

Every award is one optimistic transaction against the learner's profile
document, so concurrent submissions for the same learner cannot double-award
or lose an update. Different learners never contend.
"""

from datetime import datetime, timezone, tzinfo
from typing import Callable, List, Optional

from pydantic import BaseModel, ValidationError

from fluentpath.engines.progress.errors import (
    AlreadyCompletedError,
    AwardConflictError,
    MalformedInputError,
    ProfileNotFoundError,
    ProfileUnreadableError,
)
from fluentpath.engines.progress.profile import (
    PROFILE_COLLECTION,
    LeaderboardEntry,
    LearnerProfile,
)
from fluentpath.engines.progress.rules import next_streak
from fluentpath.kernel.store import DocumentStore, Transaction, WriteConflictError
from fluentpath.logging_config import get_logger

logger = get_logger(__name__)


class AwardOutcome(BaseModel):
    """Result of an award operation."""

    awarded: bool
    points_awarded: int = 0
    message: str
    profile: LearnerProfile


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _require(**identifiers: Optional[str]) -> None:
    for name, value in identifiers.items():
        if not isinstance(value, str) or not value.strip():
            raise MalformedInputError(name)


class ProgressLedger:
    """
    Owns learner profiles and the rules for awarding credit.

    Rewards:
    - Chapter (quiz mastered): 10 points, once per (syllabus path, chapter)
    - Video watched: 20 points, once per video
    Level = points // 100 + 1. Each award also advances the daily streak.
    """

    CHAPTER_COMPLETION_POINTS = 10
    VIDEO_COMPLETION_POINTS = 20

    def __init__(
        self,
        store: DocumentStore,
        tz: tzinfo = timezone.utc,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.store = store
        self.tz = tz
        self._clock = clock

    async def create_profile(self, learner_id: str) -> LearnerProfile:
        """Create the zero-valued profile for a newly registered learner (idempotent)."""
        _require(learner_id=learner_id)

        async def _create(txn: Transaction) -> LearnerProfile:
            snapshot = await txn.get(PROFILE_COLLECTION, learner_id)
            if snapshot.exists:
                return await self._load_for_update(txn, learner_id)
            profile = LearnerProfile()
            txn.set(PROFILE_COLLECTION, learner_id, profile.to_document())
            return profile

        profile = await self._run(learner_id, _create)
        logger.info("Progress profile ready", extra={"learner_id": learner_id})
        return profile

    async def read_profile(self, learner_id: str) -> LearnerProfile:
        """Current profile, or the documented defaults when the learner has none."""
        if not learner_id:
            return LearnerProfile()
        snapshot = await self.store.get(PROFILE_COLLECTION, learner_id)
        if not snapshot.exists:
            logger.debug("No progress profile, using defaults", extra={"learner_id": learner_id})
            return LearnerProfile()
        try:
            return LearnerProfile.from_document(snapshot.data)
        except ValidationError:
            logger.warning(
                "Unreadable progress profile, using defaults",
                extra={"learner_id": learner_id},
                exc_info=True,
            )
            return LearnerProfile()

    async def award_chapter_completion(
        self,
        learner_id: str,
        syllabus_path: str,
        chapter_id: str,
    ) -> AwardOutcome:
        """
        Credit a mastered chapter.

        Already-completed chapters are a successful no-op: no points, no
        streak change, `awarded` is False.

        Raises:
            MalformedInputError: a required identifier is blank
            ProfileNotFoundError: the learner has no profile
            ProfileUnreadableError: the stored profile is not valid progress data
            AwardConflictError: the retry budget was exhausted
        """
        _require(learner_id=learner_id, syllabus_path=syllabus_path, chapter_id=chapter_id)
        points = self.CHAPTER_COMPLETION_POINTS

        async def _award(txn: Transaction) -> AwardOutcome:
            profile = await self._load_for_update(txn, learner_id)
            if profile.has_completed_chapter(syllabus_path, chapter_id):
                return AwardOutcome(
                    awarded=False,
                    message="Chapter already completed. No points awarded.",
                    profile=profile,
                )

            chapters = {path: list(ids) for path, ids in profile.completed_chapters.items()}
            chapters[syllabus_path] = chapters.get(syllabus_path, []) + [chapter_id]
            updated = self._credit(profile, points).model_copy(update={"completed_chapters": chapters})
            txn.update(PROFILE_COLLECTION, learner_id, updated.to_document())
            return AwardOutcome(
                awarded=True,
                points_awarded=points,
                message="Progress updated successfully!",
                profile=updated,
            )

        outcome = await self._run(learner_id, _award)
        logger.info(
            "Chapter completion processed",
            extra={
                "learner_id": learner_id,
                "syllabus_path": syllabus_path,
                "chapter_id": chapter_id,
                "awarded": outcome.awarded,
                "points": outcome.profile.points,
            },
        )
        return outcome

    async def award_video_completion(self, learner_id: str, video_id: str) -> AwardOutcome:
        """
        Credit a watched video.

        Raises:
            MalformedInputError: a required identifier is blank
            ProfileNotFoundError: the learner has no profile
            ProfileUnreadableError: the stored profile is not valid progress data
            AlreadyCompletedError: points for this video were already earned
            AwardConflictError: the retry budget was exhausted
        """
        _require(learner_id=learner_id, video_id=video_id)
        points = self.VIDEO_COMPLETION_POINTS

        async def _award(txn: Transaction) -> AwardOutcome:
            profile = await self._load_for_update(txn, learner_id)
            if profile.has_completed_video(video_id):
                raise AlreadyCompletedError("video", video_id)

            updated = self._credit(profile, points).model_copy(
                update={"completed_videos": profile.completed_videos + [video_id]}
            )
            txn.update(PROFILE_COLLECTION, learner_id, updated.to_document())
            return AwardOutcome(
                awarded=True,
                points_awarded=points,
                message=f"Video marked as complete! +{points} points.",
                profile=updated,
            )

        try:
            outcome = await self._run(learner_id, _award)
        except AlreadyCompletedError:
            logger.info(
                "Video already completed",
                extra={"learner_id": learner_id, "video_id": video_id},
            )
            raise
        logger.info(
            "Video completion processed",
            extra={"learner_id": learner_id, "video_id": video_id, "points": outcome.profile.points},
        )
        return outcome

    async def completed_chapter_ids(self, learner_id: str, syllabus_path: str) -> set[str]:
        """Completed leaf ids for one syllabus; empty for an unknown learner."""
        profile = await self.read_profile(learner_id)
        return profile.completed_for_path(syllabus_path)

    async def list_profiles(self) -> List[LeaderboardEntry]:
        """All learners ordered by points, highest first."""
        entries: List[LeaderboardEntry] = []
        for snapshot in await self.store.list(PROFILE_COLLECTION):
            try:
                profile = LearnerProfile.from_document(snapshot.data)
            except ValidationError:
                logger.warning("Skipping unreadable profile", extra={"learner_id": snapshot.doc_id})
                continue
            entries.append(
                LeaderboardEntry(
                    learner_id=snapshot.doc_id,
                    points=profile.points,
                    level=profile.level,
                    daily_streak=profile.daily_streak,
                )
            )
        entries.sort(key=lambda e: (-e.points, e.learner_id))
        return entries

    async def _load_for_update(self, txn: Transaction, learner_id: str) -> LearnerProfile:
        snapshot = await txn.get(PROFILE_COLLECTION, learner_id)
        if not snapshot.exists:
            raise ProfileNotFoundError(learner_id)
        try:
            return LearnerProfile.from_document(snapshot.data)
        except ValidationError as exc:
            logger.error("Unreadable progress profile, award refused", extra={"learner_id": learner_id})
            raise ProfileUnreadableError(learner_id) from exc

    def _credit(self, profile: LearnerProfile, points: int) -> LearnerProfile:
        """Add points and advance the streak; level follows from points."""
        now = self._clock()
        return profile.model_copy(
            update={
                "points": profile.points + points,
                "daily_streak": next_streak(
                    profile.daily_streak, profile.last_completed_date, now, self.tz
                ),
                "last_completed_date": now,
            }
        )

    async def _run(self, learner_id: str, fn):
        try:
            return await self.store.run_transaction(fn)
        except WriteConflictError as exc:
            logger.error(
                "Award transaction gave up after write conflicts",
                extra={"learner_id": learner_id, "attempts": exc.attempts},
            )
            raise AwardConflictError(learner_id, exc.attempts) from exc
