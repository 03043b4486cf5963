import os
import tempfile
import uuid
from datetime import UTC, datetime
from pathlib import Path

# Point the app at a throwaway database before anything imports db.py
_TMP_DIR = tempfile.mkdtemp(prefix="score-ledger-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{Path(_TMP_DIR) / 'test.db'}"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["JWT_SECRET"] = "test-secret"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

import models  # noqa: E402,F401
from db import Base, SessionLocal, engine  # noqa: E402
from main import app  # noqa: E402
from models import ScoreAttempt, Song  # noqa: E402

Base.metadata.create_all(engine)


@pytest.fixture
def make_player():
    """Register a fresh user; each player gets its own client so cookies don't mix."""

    def _make(display_name=None):
        client = TestClient(app)
        email = f"player-{uuid.uuid4().hex[:12]}@example.com"
        r = client.post(
            "/api/auth/register",
            json={"email": email, "password": "correct-horse", "displayName": display_name},
        )
        assert r.status_code == 201, r.text
        return client, r.json()["user"]

    return _make


@pytest.fixture
def make_song():
    def _make(owner_id, title="Uploaded tune"):
        with SessionLocal() as db:
            song = Song(user_id=owner_id, title=title, file_name="tune.mid")
            db.add(song)
            db.commit()
            return song.id

    return _make


@pytest.fixture
def add_attempt():
    """Insert an attempt directly so tests control played_at."""

    def _add(
        user_id,
        *,
        builtin=None,
        song_id=None,
        combined=0,
        accuracy=0,
        max_streak=0,
        played_at=None,
    ):
        with SessionLocal() as db:
            a = ScoreAttempt(
                session_key=str(uuid.uuid4()),
                user_id=user_id,
                uploaded_song_id=song_id,
                builtin_song_id=builtin,
                perfect=0,
                good=0,
                missed=0,
                errors=0,
                accuracy=accuracy,
                combined=combined,
                max_streak=max_streak,
                played_duration=0,
                total_duration=0,
                played_at=played_at or datetime.now(UTC),
            )
            db.add(a)
            db.commit()
            return a.id

    return _add


@pytest.fixture
def score():
    """Build a submission body; pass a key=None to drop it."""

    def _score(**overrides):
        body = {
            "builtinSongId": "song-42",
            "perfect": 50,
            "good": 10,
            "missed": 0,
            "errors": 1,
            "accuracy": 95,
            "combined": 1000,
            "maxStreak": 40,
            "playedDuration": 60000,
            "totalDuration": 90000,
        }
        body.update(overrides)
        return {k: v for k, v in body.items() if v is not None}

    return _score


@pytest.fixture
def builtin_id():
    return f"builtin-{uuid.uuid4().hex[:8]}"
