"""
Progress endpoints - profile creation, reads and awards.
"""

from fastapi import APIRouter, status

from fluentpath.api.deps import CurrentLearner, Ledger
from fluentpath.api.errors import CodedHTTPException
from fluentpath.engines.progress import (
    AlreadyCompletedError,
    AwardConflictError,
    MalformedInputError,
    ProfileNotFoundError,
    ProfileUnreadableError,
    ProgressError,
)
from fluentpath.schemas.common import ErrorResponse
from fluentpath.schemas.progress import AwardResponse, ChapterCompletionRequest, ProgressResponse

router = APIRouter()

_AWARD_ERRORS = {
    404: {"model": ErrorResponse, "description": "Learner has no progress profile"},
    409: {"model": ErrorResponse, "description": "Already credited, concurrent update failure or unreadable profile; see `code`"},
}


def _award_http_error(exc: ProgressError) -> CodedHTTPException:
    """Map a ledger failure to its HTTP status; the body carries the error code."""
    if isinstance(exc, MalformedInputError):
        status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    elif isinstance(exc, ProfileNotFoundError):
        status_code = status.HTTP_404_NOT_FOUND
    elif isinstance(exc, (AlreadyCompletedError, AwardConflictError, ProfileUnreadableError)):
        status_code = status.HTTP_409_CONFLICT
    else:
        status_code = status.HTTP_400_BAD_REQUEST
    return CodedHTTPException(status_code=status_code, detail=str(exc), code=exc.code)


@router.post("/learners/me", response_model=ProgressResponse, status_code=status.HTTP_201_CREATED)
async def create_my_profile(learner: CurrentLearner, ledger: Ledger):
    """Registration hook: create the learner's zero-valued progress profile (idempotent)."""
    try:
        profile = await ledger.create_profile(learner.sub)
    except ProgressError as exc:
        raise _award_http_error(exc) from exc
    return ProgressResponse.from_profile(learner.sub, profile)


@router.get("/progress/me", response_model=ProgressResponse)
async def get_my_progress(learner: CurrentLearner, ledger: Ledger):
    """Points, level and streak; defaults when the learner has no profile yet."""
    profile = await ledger.read_profile(learner.sub)
    return ProgressResponse.from_profile(learner.sub, profile)


@router.post("/progress/chapters", response_model=AwardResponse, responses=_AWARD_ERRORS)
async def complete_chapter(body: ChapterCompletionRequest, learner: CurrentLearner, ledger: Ledger):
    """Credit a mastered chapter. Repeats succeed with `awarded: false`."""
    try:
        outcome = await ledger.award_chapter_completion(learner.sub, body.syllabus_path, body.chapter_id)
    except ProgressError as exc:
        raise _award_http_error(exc) from exc
    return AwardResponse.from_outcome(learner.sub, outcome)


@router.post("/progress/videos/{video_id}", response_model=AwardResponse, responses=_AWARD_ERRORS)
async def complete_video(video_id: str, learner: CurrentLearner, ledger: Ledger):
    """Credit a watched video. Repeats answer 409."""
    try:
        outcome = await ledger.award_video_completion(learner.sub, video_id)
    except ProgressError as exc:
        raise _award_http_error(exc) from exc
    return AwardResponse.from_outcome(learner.sub, outcome)
