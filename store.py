from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional

from sqlalchemy import delete, func, or_, select
from sqlalchemy.orm import Session

from identifiers import BuiltinTarget, Target, UploadedTarget
from models import ScoreAttempt, Song, User

# Columns a repeat submission for the same session may overwrite.
MUTABLE_FIELDS = (
    "perfect",
    "good",
    "missed",
    "errors",
    "accuracy",
    "combined",
    "max_streak",
    "played_duration",
    "total_duration",
    "bpm_modifier",
    "hand",
    "recording",
)


def _target_clause(target: Target):
    if isinstance(target, UploadedTarget):
        return ScoreAttempt.uploaded_song_id == target.song_id
    return ScoreAttempt.builtin_song_id == target.builtin_id


def _owned(user_id: str, target: Optional[Target] = None):
    clauses = [ScoreAttempt.user_id == user_id]
    if target is not None:
        clauses.append(_target_clause(target))
    return clauses


def find_by_session(db: Session, session_key: str, user_id: str) -> Optional[ScoreAttempt]:
    stmt = select(ScoreAttempt).where(
        ScoreAttempt.session_key == session_key, ScoreAttempt.user_id == user_id
    )
    return db.scalars(stmt).first()


def apply_metrics(attempt: ScoreAttempt, values: Mapping[str, Any]) -> ScoreAttempt:
    for field in MUTABLE_FIELDS:
        if field in values:
            setattr(attempt, field, values[field])
    return attempt


def attempts_for_user(db: Session, user_id: str, target: Optional[Target] = None) -> list[ScoreAttempt]:
    stmt = select(ScoreAttempt).where(*_owned(user_id, target))
    return list(db.scalars(stmt))


def recent_attempts(
    db: Session,
    user_id: str,
    target: Optional[Target] = None,
    limit: int = 50,
    offset: int = 0,
) -> list[ScoreAttempt]:
    stmt = (
        select(ScoreAttempt)
        .where(*_owned(user_id, target))
        .order_by(ScoreAttempt.played_at.desc(), ScoreAttempt.id.desc())
        .limit(limit)
        .offset(offset)
    )
    return list(db.scalars(stmt))


def count_attempts(db: Session, user_id: str, target: Optional[Target] = None) -> int:
    stmt = select(func.count()).select_from(ScoreAttempt).where(*_owned(user_id, target))
    return db.scalar(stmt) or 0


def attempts_for_targets(db: Session, user_id: str, targets: Iterable[Target]) -> list[ScoreAttempt]:
    targets = list(targets)
    uploaded = [t.song_id for t in targets if isinstance(t, UploadedTarget)]
    builtin = [t.builtin_id for t in targets if isinstance(t, BuiltinTarget)]

    clauses = []
    if uploaded:
        clauses.append(ScoreAttempt.uploaded_song_id.in_(uploaded))
    if builtin:
        clauses.append(ScoreAttempt.builtin_song_id.in_(builtin))
    if not clauses:
        return []

    stmt = select(ScoreAttempt).where(ScoreAttempt.user_id == user_id, or_(*clauses))
    return list(db.scalars(stmt))


def leaderboard_rows(db: Session, builtin_id: str) -> list[tuple[ScoreAttempt, str]]:
    stmt = (
        select(ScoreAttempt, User.display_name)
        .join(User, User.id == ScoreAttempt.user_id)
        .where(ScoreAttempt.builtin_song_id == builtin_id)
        .order_by(
            ScoreAttempt.combined.desc(),
            ScoreAttempt.played_at.desc(),
            ScoreAttempt.id.desc(),
        )
    )
    return [(attempt, name) for attempt, name in db.execute(stmt).all()]


def delete_owned(db: Session, user_id: str, attempt_id: str) -> bool:
    attempt = db.get(ScoreAttempt, attempt_id)
    if attempt is None or attempt.user_id != user_id:
        return False
    db.delete(attempt)
    db.commit()
    return True


# ---------- Songs ----------


def list_songs(db: Session, user_id: str) -> list[Song]:
    stmt = select(Song).where(Song.user_id == user_id).order_by(Song.uploaded_at.desc(), Song.id.desc())
    return list(db.scalars(stmt))


def owned_song(db: Session, user_id: str, song_id: str) -> Optional[Song]:
    song = db.get(Song, song_id)
    if song is None or song.user_id != user_id:
        return None
    return song


def delete_song(db: Session, song: Song) -> int:
    """Delete a song and every attempt recorded against it. Returns the attempt count."""
    # SQLite only honours ON DELETE CASCADE with foreign_keys enabled
    result = db.execute(delete(ScoreAttempt).where(ScoreAttempt.uploaded_song_id == song.id))
    db.delete(song)
    db.commit()
    return result.rowcount or 0
