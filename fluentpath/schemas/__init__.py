"""
Pydantic schemas for API request/response validation.
"""

from fluentpath.schemas.common import ErrorResponse, HealthResponse
from fluentpath.schemas.progress import (
    AwardResponse,
    ChapterCompletionRequest,
    LeaderboardItem,
    LeaderboardResponse,
    ProgressResponse,
)
from fluentpath.schemas.syllabus import (
    LearningPathResponse,
    LessonDetailResponse,
    LessonLink,
    LessonSummary,
    SyllabusTreeResponse,
)
from fluentpath.schemas.videos import VideoListResponse
from fluentpath.schemas.ai import (
    GenerateRequest,
    GenerateResponse,
    PromptsResponse,
    PronunciationCheckRequest,
    PronunciationCheckResponse,
    ToolRequest,
    ToolResponse,
)
from fluentpath.schemas.settings import ApiKeysResponse, ApiKeysUpdateRequest

__all__ = [
    "ErrorResponse",
    "HealthResponse",
    "AwardResponse",
    "ChapterCompletionRequest",
    "LeaderboardItem",
    "LeaderboardResponse",
    "ProgressResponse",
    "LearningPathResponse",
    "LessonDetailResponse",
    "LessonLink",
    "LessonSummary",
    "SyllabusTreeResponse",
    "VideoListResponse",
    "GenerateRequest",
    "GenerateResponse",
    "PromptsResponse",
    "PronunciationCheckRequest",
    "PronunciationCheckResponse",
    "ToolRequest",
    "ToolResponse",
    "ApiKeysResponse",
    "ApiKeysUpdateRequest",
]
