from datetime import UTC, datetime, timedelta

from db import SessionLocal
from models import ScoreAttempt

T0 = datetime(2026, 6, 1, 8, 0, tzinfo=UTC)


def test_attempts_for_song_newest_first(make_player, add_attempt, builtin_id):
    client, user = make_player()
    ids = [
        add_attempt(user["id"], builtin=builtin_id, combined=c, played_at=T0 + timedelta(minutes=i))
        for i, c in enumerate([300, 900, 100])
    ]

    r = client.get(f"/api/scores/song/{builtin_id}", params={"limit": 2})
    assert r.status_code == 200
    body = r.json()
    assert [a["id"] for a in body["attempts"]] == [ids[2], ids[1]]
    assert body["best"]["id"] == ids[1]
    assert body["totalPlays"] == 3


def test_attempts_for_song_with_no_plays(make_player, builtin_id):
    client, _ = make_player()
    body = client.get(f"/api/scores/song/{builtin_id}").json()
    assert body == {"attempts": [], "best": None, "totalPlays": 0}


def test_attempts_for_uploaded_song(make_player, make_song, add_attempt):
    client, user = make_player()
    song_id = make_song(user["id"])
    add_attempt(user["id"], song_id=song_id, combined=10)

    body = client.get(f"/api/scores/song/{song_id.upper()}").json()
    assert body["totalPlays"] == 1
    assert body["attempts"][0]["uploadedSongId"] == song_id


def test_history_pagination(make_player, add_attempt, builtin_id):
    client, user = make_player()
    ids = [
        add_attempt(user["id"], builtin=builtin_id, combined=i, played_at=T0 + timedelta(minutes=i))
        for i in range(5)
    ]

    r = client.get("/api/scores", params={"builtinSongId": builtin_id, "limit": 2, "offset": 1})
    assert r.status_code == 200
    body = r.json()
    assert body["total"] == 5
    assert [s["id"] for s in body["scores"]] == [ids[3], ids[2]]
    assert "recording" not in body["scores"][0]


def test_history_out_of_range_paging(make_player, add_attempt, builtin_id):
    client, user = make_player()
    for i in range(3):
        add_attempt(user["id"], builtin=builtin_id, combined=i, played_at=T0 + timedelta(minutes=i))

    r = client.get("/api/scores", params={"builtinSongId": builtin_id, "offset": 2**70})
    assert r.status_code == 200
    assert r.json() == {"scores": [], "total": 3}

    # limit=0 falls back to the default page size
    r = client.get("/api/scores", params={"builtinSongId": builtin_id, "limit": 0})
    assert len(r.json()["scores"]) == 3


def test_delete_own_attempt(make_player, add_attempt, builtin_id):
    client, user = make_player()
    attempt_id = add_attempt(user["id"], builtin=builtin_id, combined=5)

    r = client.delete(f"/api/scores/{attempt_id}")
    assert r.status_code == 200
    assert r.json() == {"message": "Score deleted successfully"}

    with SessionLocal() as db:
        assert db.get(ScoreAttempt, attempt_id) is None

    r = client.delete(f"/api/scores/{attempt_id}")
    assert r.status_code == 404
    assert r.json() == {"error": "Score not found"}


def test_cannot_delete_someone_elses_attempt(make_player, add_attempt, builtin_id):
    _, owner = make_player()
    intruder, _ = make_player()
    attempt_id = add_attempt(owner["id"], builtin=builtin_id, combined=5)

    r = intruder.delete(f"/api/scores/{attempt_id}")
    assert r.status_code == 404
    assert r.json() == {"error": "Score not found"}

    with SessionLocal() as db:
        assert db.get(ScoreAttempt, attempt_id) is not None
