"""
Progress Engine - points, levels and daily streaks.

Rewards:
- Chapter mastered (quiz passed): 10 points, once per chapter
- Video watched: 20 points, once per video

Levels: every 100 points is one level (0-99 -> 1, 100-199 -> 2, ...).
Streak: consecutive calendar days with at least one completion.
"""

from fluentpath.engines.progress.errors import (
    AlreadyCompletedError,
    AwardConflictError,
    MalformedInputError,
    ProfileNotFoundError,
    ProfileUnreadableError,
    ProgressError,
)
from fluentpath.engines.progress.ledger import AwardOutcome, ProgressLedger
from fluentpath.engines.progress.profile import (
    PROFILE_COLLECTION,
    LeaderboardEntry,
    LearnerProfile,
)
from fluentpath.engines.progress.rules import level_for_points, next_streak, resolve_timezone

__all__ = [
    "ProgressError",
    "MalformedInputError",
    "ProfileNotFoundError",
    "ProfileUnreadableError",
    "AlreadyCompletedError",
    "AwardConflictError",
    "AwardOutcome",
    "ProgressLedger",
    "PROFILE_COLLECTION",
    "LeaderboardEntry",
    "LearnerProfile",
    "level_for_points",
    "next_streak",
    "resolve_timezone",
]
