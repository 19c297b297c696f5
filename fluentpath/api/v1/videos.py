"""
Video endpoints - the video library.
"""

from fastapi import APIRouter

from fluentpath.api.deps import CurrentLearner, Videos
from fluentpath.schemas.videos import VideoListResponse

router = APIRouter()


@router.get("", response_model=VideoListResponse)
async def list_videos(learner: CurrentLearner, catalog: Videos):
    """All videos, newest first, flagged when the learner has completed them."""
    videos = await catalog.list_for_learner(learner.sub)
    return VideoListResponse(videos=videos, total=len(videos))
