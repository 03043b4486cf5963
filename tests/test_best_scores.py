import uuid
from datetime import UTC, datetime, timedelta

T0 = datetime(2026, 4, 2, 9, 0, tzinfo=UTC)


def test_best_scores_omits_songs_never_played(make_player, add_attempt, builtin_id):
    client, user = make_player()
    add_attempt(user["id"], builtin=builtin_id, combined=300, accuracy=70, max_streak=12)
    add_attempt(user["id"], builtin=builtin_id, combined=450, accuracy=88, max_streak=9)
    unplayed = builtin_id + "-unplayed"

    r = client.post("/api/scores/best-scores", json={"targets": [builtin_id, unplayed]})
    assert r.status_code == 200
    scores = r.json()["bestScores"]
    assert unplayed not in scores
    assert scores[builtin_id] == {"accuracy": 88, "combined": 450, "maxStreak": 9, "totalPlays": 2}


def test_best_scores_mixes_uploaded_and_builtin(make_player, make_song, add_attempt, builtin_id):
    client, user = make_player()
    song_id = make_song(user["id"])
    add_attempt(user["id"], song_id=song_id, combined=77)
    add_attempt(user["id"], builtin=builtin_id, combined=66)

    asked = song_id.upper()
    scores = client.post(
        "/api/scores/best-scores", json={"targets": [asked, builtin_id]}
    ).json()["bestScores"]
    # keyed the way the caller spelled it
    assert scores[asked]["combined"] == 77
    assert scores[builtin_id]["combined"] == 66


def test_best_scores_tie_uses_most_recent(make_player, add_attempt, builtin_id):
    client, user = make_player()
    add_attempt(user["id"], builtin=builtin_id, combined=500, accuracy=60, played_at=T0 + timedelta(days=1))
    add_attempt(user["id"], builtin=builtin_id, combined=500, accuracy=90, played_at=T0)

    scores = client.post("/api/scores/best-scores", json={"targets": [builtin_id]}).json()["bestScores"]
    assert scores[builtin_id]["accuracy"] == 60


def test_best_scores_only_counts_own_attempts(make_player, add_attempt, builtin_id):
    client, _ = make_player()
    _, other = make_player()
    add_attempt(other["id"], builtin=builtin_id, combined=1000)

    scores = client.post("/api/scores/best-scores", json={"targets": [builtin_id]}).json()["bestScores"]
    assert scores == {}


def test_best_scores_truncates_to_100_targets(make_player, add_attempt):
    client, user = make_player()
    targets = [f"bulk-{uuid.uuid4().hex[:8]}" for _ in range(101)]
    add_attempt(user["id"], builtin=targets[0], combined=1)
    add_attempt(user["id"], builtin=targets[100], combined=1)

    r = client.post("/api/scores/best-scores", json={"targets": targets})
    assert r.status_code == 200
    scores = r.json()["bestScores"]
    assert targets[0] in scores
    assert targets[100] not in scores


def test_best_scores_empty_request(make_player):
    client, _ = make_player()
    assert client.post("/api/scores/best-scores", json={"targets": []}).json() == {"bestScores": {}}
    assert client.post("/api/scores/best-scores", json={}).json() == {"bestScores": {}}
