"""Load syllabus, video and prompt content from a JSON file into the document store.

Usage: python scripts/seed_content.py [content.json]

File layout:
    {
      "syllabus": {"<path>": {...flat or {"chapters": [...]}...}},
      "videos": [{"title": "...", "youtubeUrl": "..."}],
      "prompts": {"<promptName>": "template"}
    }
"""
import asyncio
import json
import sys
from datetime import datetime, timezone
from pathlib import Path

from fluentpath.ai.prompts import PromptLibrary
from fluentpath.config import get_settings
from fluentpath.database import async_session_maker, close_db, init_db
from fluentpath.engines.syllabus import SYLLABUS_COLLECTION, flatten_leaves
from fluentpath.engines.videos import VIDEO_COLLECTION
from fluentpath.kernel.store import DocumentStore

DEFAULT_FILE = Path(__file__).with_name("sample_content.json")


async def seed(path: Path) -> None:
    content = json.loads(path.read_text(encoding="utf-8"))
    await init_db()
    store = DocumentStore(async_session_maker, max_attempts=get_settings().transaction_max_attempts)

    for syllabus_path, document in content.get("syllabus", {}).items():
        await store.set(SYLLABUS_COLLECTION, syllabus_path, document)
        print(f"Syllabus {syllabus_path}: {len(flatten_leaves(document))} lessons")

    existing = {
        (snapshot.data or {}).get("youtubeUrl") for snapshot in await store.list(VIDEO_COLLECTION)
    }
    for video in content.get("videos", []):
        if video.get("youtubeUrl") in existing:
            print(f"Video already present: {video.get('title')}")
            continue
        doc_id = await store.add(
            VIDEO_COLLECTION,
            {
                "title": video["title"],
                "youtubeUrl": video["youtubeUrl"],
                "createdAt": datetime.now(timezone.utc).isoformat(),
            },
        )
        print(f"Video {doc_id}: {video['title']}")

    prompts = PromptLibrary(store)
    for name, text in content.get("prompts", {}).items():
        await prompts.save(name, text)
        print(f"Prompt {name} saved")

    await close_db()


if __name__ == "__main__":
    target = Path(sys.argv[1]) if len(sys.argv) > 1 else DEFAULT_FILE
    asyncio.run(seed(target))
    print("\nDone!")
