"""Integration tests for the video library listing."""

import pytest

from fluentpath.engines.videos import VIDEO_COLLECTION, VideoCatalog


@pytest.mark.asyncio
async def test_newest_first_with_completion_flags(store, ledger, learner):
    await store.set(
        VIDEO_COLLECTION,
        "old",
        {"title": "Articles", "youtubeUrl": "https://youtu.be/aaa111", "createdAt": "2026-01-01T10:00:00"},
    )
    await store.set(
        VIDEO_COLLECTION,
        "new",
        {
            "title": "Phrasal verbs",
            "youtubeUrl": "https://www.youtube.com/watch?v=bbb222",
            "createdAt": "2026-02-01T10:00:00",
        },
    )
    await ledger.award_video_completion(learner, "old")

    videos = await VideoCatalog(store, ledger).list_for_learner(learner)
    assert [v.id for v in videos] == ["new", "old"]
    assert [v.completed for v in videos] == [False, True]
    assert videos[0].youtube_id == "bbb222"
    assert videos[0].thumbnail_url == "https://img.youtube.com/vi/bbb222/hqdefault.jpg"


@pytest.mark.asyncio
async def test_incomplete_documents_are_skipped(store, ledger, learner):
    await store.set(VIDEO_COLLECTION, "untitled", {"youtubeUrl": "https://youtu.be/x"})
    await store.set(VIDEO_COLLECTION, "no-url", {"title": "Lost"})
    await store.set(VIDEO_COLLECTION, "external", {"title": "Elsewhere", "youtubeUrl": "https://vimeo.com/1"})

    videos = await VideoCatalog(store, ledger).list_for_learner(learner)
    assert [v.id for v in videos] == ["external"]
    assert videos[0].youtube_id is None
    assert videos[0].completed is False


@pytest.mark.asyncio
async def test_empty_library(store, ledger):
    assert await VideoCatalog(store, ledger).list_for_learner("anyone") == []
