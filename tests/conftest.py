"""
Pytest fixtures for FluentPath tests.

Every test gets its own SQLite file so document-store transactions run
against a real database with real concurrent connections.
"""

import os
import tempfile
from datetime import datetime, timezone
from typing import AsyncGenerator, Dict, List, Optional

# Settings are read once; point them at a throwaway database before any import
_tmp = tempfile.NamedTemporaryFile(suffix=".db", delete=False)
_tmp.close()
TEST_DB_PATH = _tmp.name
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{TEST_DB_PATH}"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SECRET_KEY"] = "test-secret-key-for-fluentpath-suite-0123456789"
os.environ["GEMINI_API_KEY"] = ""
os.environ["OPENROUTER_API_KEY"] = ""

from fluentpath.config import get_settings  # noqa: E402

get_settings.cache_clear()

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402

from fluentpath.ai import GenerationResult, Provider, TextGenerator  # noqa: E402
from fluentpath.database import build_engine, build_session_maker  # noqa: E402
from fluentpath.engines.progress import PROFILE_COLLECTION, ProgressLedger  # noqa: E402
from fluentpath.kernel.identity import ROLE_LEARNER, create_access_token  # noqa: E402
from fluentpath.kernel.models import Base  # noqa: E402
from fluentpath.kernel.store import DocumentStore  # noqa: E402


class FixedClock:
    """Settable clock for streak tests."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


class FakeGenerator(TextGenerator):
    """Records prompts and answers with a canned reply."""

    def __init__(self, provider: Provider, reply: Optional[str] = "ok", error: Optional[str] = None):
        self.provider = provider
        self.reply = reply
        self.error = error
        self.calls: List[Dict[str, str]] = []

    async def generate(self, api_key: str, model: str, prompt: str) -> GenerationResult:
        self.calls.append({"api_key": api_key, "model": model, "prompt": prompt})
        if self.error:
            return GenerationResult.failed(self.error, self.provider, model)
        return GenerationResult(success=True, text=self.reply, provider=self.provider, model=model)


@pytest_asyncio.fixture
async def db_engine(tmp_path):
    """Fresh SQLite database with the documents table."""
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'store.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(db_engine):
    return build_session_maker(db_engine)


@pytest.fixture
def store(session_maker) -> DocumentStore:
    return DocumentStore(session_maker, max_attempts=5, retry_backoff_seconds=0)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(datetime(2026, 3, 10, 9, 30, tzinfo=timezone.utc))


@pytest.fixture
def ledger(store, clock) -> ProgressLedger:
    return ProgressLedger(store, clock=clock)


@pytest_asyncio.fixture
async def learner(ledger) -> str:
    """A learner with a fresh zero-valued profile."""
    await ledger.create_profile("learner-1")
    return "learner-1"


@pytest.fixture
def fake_generators() -> Dict[Provider, FakeGenerator]:
    return {
        Provider.GEMINI: FakeGenerator(Provider.GEMINI),
        Provider.OPENROUTER: FakeGenerator(Provider.OPENROUTER),
    }


def auth_headers(learner_id: str, role: str = ROLE_LEARNER) -> Dict[str, str]:
    token, _ = create_access_token(learner_id, role=role)
    return {"Authorization": f"Bearer {token}"}


async def seed_profile(store: DocumentStore, learner_id: str, **fields) -> None:
    """Write a raw profile document (camelCase keys, as stored)."""
    document = {
        "points": 0,
        "level": 1,
        "dailyStreak": 0,
        "lastCompletedDate": None,
        "completedChapters": {},
        "completedVideos": [],
    }
    document.update(fields)
    await store.set(PROFILE_COLLECTION, learner_id, document)


def pytest_sessionfinish(session, exitstatus):
    """Clean up temp DB file after test run."""
    if os.path.exists(TEST_DB_PATH):
        os.unlink(TEST_DB_PATH)
