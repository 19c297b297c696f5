"""
Pydantic schemas for video API.
"""

from typing import List

from pydantic import BaseModel

from fluentpath.engines.videos import VideoEntry


class VideoListResponse(BaseModel):
    videos: List[VideoEntry]
    total: int
