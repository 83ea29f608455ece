import asyncio
import os
import tempfile
from pathlib import Path

# Must be set before the app modules read them at import time.
_DB_DIR = Path(tempfile.mkdtemp(prefix="shadowing-tests-"))
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_DB_DIR / 'app.db'}"
os.environ["SUPABASE_JWT_SECRET"] = "test-secret"
os.environ.pop("SCORING_CONFIG_PATH", None)

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

import models  # noqa: F401  register tables
from core.db_base import Base
from database import get_db
from main import app


SAMPLE_LESSON = {
    "story": {
        "title": {"japanese": "公園", "english": "The Park"},
        "japanese": "私は公園に行きます。猫がいます。",
        "english": "I go to the park. There is a cat.",
    },
    "shadowingSegments": [
        {"japanese": "私は公園に行きます。", "english": "I go to the park."},
        {"japanese": "猫がいます。", "english": "There is a cat."},
    ],
    "speakingPrompts": [
        {
            "question": {"japanese": "どこに行きますか？", "english": "Where do you go?"},
            "modelAnswer": {"japanese": "公園に行きます。", "english": "I go to the park."},
        }
    ],
}


class FakeRecognizer:
    def __init__(self, transcript: str = "", error: Exception | None = None) -> None:
        self.transcript = transcript
        self.error = error
        self.calls = []

    def transcribe(self, audio_bytes, *, filename="recording.webm", language="ja"):
        self.calls.append({"audio": audio_bytes, "filename": filename, "language": language})
        if self.error is not None:
            raise self.error
        return self.transcript


def make_token(learner_id: str, secret: str = "test-secret", audience: str = "authenticated") -> str:
    return jwt.encode({"sub": learner_id, "aud": audience}, secret, algorithm="HS256")


def auth_headers(learner_id: str) -> dict:
    return {"Authorization": f"Bearer {make_token(learner_id)}"}


async def _create_tables(engine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


@pytest.fixture
def client(tmp_path):
    """TestClient backed by a fresh SQLite database per test."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool)
    asyncio.run(_create_tables(engine))
    session_factory = async_sessionmaker(engine, expire_on_commit=False)

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
    asyncio.run(engine.dispose())
