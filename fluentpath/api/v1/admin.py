"""
Admin endpoints - learner overview.
"""

from fastapi import APIRouter

from fluentpath.api.deps import AdminLearner, Ledger
from fluentpath.schemas.progress import LeaderboardItem, LeaderboardResponse

router = APIRouter()


@router.get("/learners", response_model=LeaderboardResponse)
async def list_learners(admin: AdminLearner, ledger: Ledger):
    """Every learner's points, level and streak, highest points first."""
    entries = await ledger.list_profiles()
    return LeaderboardResponse(
        learners=[LeaderboardItem(**entry.model_dump()) for entry in entries],
        total=len(entries),
    )
