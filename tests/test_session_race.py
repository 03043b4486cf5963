import submission
from db import SessionLocal
from models import ScoreAttempt
from schemas.scores import ScoreSubmit


def test_concurrent_create_for_same_session_updates_instead_of_duplicating(
    make_player, builtin_id, monkeypatch
):
    _, user = make_player()
    uid = user["id"]

    # The other request already created the attempt for this session...
    with SessionLocal() as db:
        winner = ScoreAttempt(
            session_key="race-key",
            user_id=uid,
            builtin_song_id=builtin_id,
            perfect=1,
            good=1,
            missed=1,
            errors=1,
            accuracy=10,
            combined=10,
            max_streak=1,
            played_duration=1,
            total_duration=1,
        )
        db.add(winner)
        db.commit()
        winner_id = winner.id

    # ...but our lookup ran before it committed.
    real_find = submission.store.find_by_session
    calls = []

    def stale_find(db, session_key, user_id):
        calls.append(session_key)
        if len(calls) == 1:
            return None
        return real_find(db, session_key, user_id)

    monkeypatch.setattr(submission.store, "find_by_session", stale_find)

    data = ScoreSubmit.model_validate(
        {
            "sessionKey": "race-key",
            "builtinSongId": builtin_id,
            "perfect": 9,
            "good": 9,
            "missed": 0,
            "errors": 0,
            "accuracy": 99,
            "combined": 999,
            "maxStreak": 50,
            "playedDuration": 10,
            "totalDuration": 10,
        }
    )
    with SessionLocal() as db:
        attempt, created = submission.submit(db, uid, data)
        assert created is False
        assert attempt.id == winner_id
        assert attempt.combined == 999

    with SessionLocal() as db:
        rows = db.query(ScoreAttempt).filter(ScoreAttempt.user_id == uid).all()
        assert len(rows) == 1
        assert rows[0].combined == 999
    assert calls == ["race-key", "race-key"]
