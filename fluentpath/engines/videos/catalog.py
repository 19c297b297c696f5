"""
Video catalog - the lesson video library with per-learner completion flags.
"""

from typing import List, Optional
from urllib.parse import parse_qs, urlparse

from pydantic import BaseModel

from fluentpath.engines.progress import ProgressLedger
from fluentpath.kernel.store import DocumentStore
from fluentpath.logging_config import get_logger

logger = get_logger(__name__)

VIDEO_COLLECTION = "videos"
THUMBNAIL_FALLBACK = "https://via.placeholder.com/480x360.png?text=Video"


def youtube_video_id(url: str) -> Optional[str]:
    """Video id from a youtu.be or youtube.com/watch?v= URL, else None."""
    try:
        parsed = urlparse(url)
    except ValueError:
        return None
    host = (parsed.hostname or "").lower()
    if host == "youtu.be":
        return parsed.path.lstrip("/") or None
    if "youtube.com" in host:
        values = parse_qs(parsed.query).get("v")
        return values[0] if values else None
    return None


class VideoEntry(BaseModel):
    """A catalog video as shown to one learner."""

    id: str
    title: str
    youtube_url: str
    youtube_id: Optional[str] = None
    thumbnail_url: str = THUMBNAIL_FALLBACK
    completed: bool = False


class VideoCatalog:
    """Lists `videos` documents newest first."""

    def __init__(self, store: DocumentStore, ledger: ProgressLedger):
        self.store = store
        self.ledger = ledger

    async def list_for_learner(self, learner_id: str) -> List[VideoEntry]:
        snapshots = await self.store.list(VIDEO_COLLECTION)
        profile = await self.ledger.read_profile(learner_id)

        entries: List[VideoEntry] = []
        for snapshot in snapshots:
            data = snapshot.data or {}
            url = data.get("youtubeUrl")
            if not data.get("title") or not isinstance(url, str):
                logger.warning("Skipping incomplete video document", extra={"video_id": snapshot.doc_id})
                continue
            video_id = youtube_video_id(url)
            entries.append(
                VideoEntry(
                    id=snapshot.doc_id,
                    title=str(data["title"]),
                    youtube_url=url,
                    youtube_id=video_id,
                    thumbnail_url=(
                        f"https://img.youtube.com/vi/{video_id}/hqdefault.jpg"
                        if video_id
                        else THUMBNAIL_FALLBACK
                    ),
                    completed=profile.has_completed_video(snapshot.doc_id),
                )
            )
        # createdAt is the editor-facing timestamp; fall back to store order
        snapshots_by_id = {s.doc_id: s for s in snapshots}
        entries.sort(key=lambda e: _created_at_key(snapshots_by_id[e.id]), reverse=True)
        return entries


def _created_at_key(snapshot) -> str:
    value = (snapshot.data or {}).get("createdAt")
    if isinstance(value, str) and value:
        return value
    return snapshot.created_at.isoformat() if snapshot.created_at else ""
