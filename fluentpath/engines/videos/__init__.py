"""
Video Engine - lesson video library.
"""

from fluentpath.engines.videos.catalog import (
    VIDEO_COLLECTION,
    VideoCatalog,
    VideoEntry,
    youtube_video_id,
)

__all__ = ["VIDEO_COLLECTION", "VideoCatalog", "VideoEntry", "youtube_video_id"]
