"""
Progress ledger errors.

Each error carries a stable `code` so API clients can tell failures apart
without parsing messages.
"""

from typing import Optional


class ProgressError(Exception):
    """Base class for award and profile failures."""

    code = "progress_error"


class MalformedInputError(ProgressError, ValueError):
    """A required identifier is missing or blank. Raised before any store access."""

    code = "malformed_input"

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"{field} is required")


class ProfileNotFoundError(ProgressError):
    """Award attempted for a learner without a progress profile."""

    code = "profile_not_found"

    def __init__(self, learner_id: str):
        self.learner_id = learner_id
        super().__init__(f"Progress profile not found for learner {learner_id}")


class ProfileUnreadableError(ProgressError):
    """The stored profile document does not hold valid progress data."""

    code = "profile_unreadable"

    def __init__(self, learner_id: str):
        self.learner_id = learner_id
        super().__init__(f"Progress profile for learner {learner_id} is unreadable")


class AlreadyCompletedError(ProgressError):
    """Credit for this item was already awarded; nothing was changed."""

    code = "already_completed"

    def __init__(self, item_type: str, item_id: str, message: Optional[str] = None):
        self.item_type = item_type
        self.item_id = item_id
        super().__init__(message or f"You have already earned points for this {item_type}.")


class AwardConflictError(ProgressError):
    """Concurrent updates kept invalidating the award transaction."""

    code = "award_conflict"

    def __init__(self, learner_id: str, attempts: int):
        self.learner_id = learner_id
        self.attempts = attempts
        super().__init__(
            f"Could not save progress for learner {learner_id} after {attempts} attempts"
        )
