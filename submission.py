from __future__ import annotations

import logging
import uuid

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

import store
from models import ScoreAttempt
from schemas.scores import ScoreSubmit
from targets import resolve_for_submission

logger = logging.getLogger("score-ledger.submission")


def submit(db: Session, user_id: str, data: ScoreSubmit) -> tuple[ScoreAttempt, bool]:
    """
    Record a score. Returns (attempt, created).

    A submission carrying a session key this user already used overwrites that
    attempt's metrics in place; its id, target and played_at never change.
    Anything else creates a new attempt. Lookups are scoped by user, so a key
    belonging to someone else simply starts a new attempt for this user.
    """
    target = data.target
    resolve_for_submission(db, user_id, target)
    values = data.metric_values()

    if data.session_key:
        existing = store.find_by_session(db, data.session_key, user_id)
        if existing is not None:
            store.apply_metrics(existing, values)
            db.commit()
            db.refresh(existing)
            logger.info("updated attempt %s (session %s)", existing.id, existing.session_key)
            return existing, False

    session_key = data.session_key or str(uuid.uuid4())
    attempt = ScoreAttempt(session_key=session_key, user_id=user_id, target=target, **values)
    try:
        db.add(attempt)
        db.commit()
    except IntegrityError:
        # A concurrent submission created this session first; the unique
        # (session_key, user_id) constraint kept us from duplicating it.
        db.rollback()
        existing = store.find_by_session(db, session_key, user_id)
        if existing is None:
            raise
        store.apply_metrics(existing, values)
        db.commit()
        db.refresh(existing)
        logger.info("session %s raced; updated attempt %s", session_key, existing.id)
        return existing, False

    db.refresh(attempt)
    logger.info("created attempt %s for %s (session %s)", attempt.id, target.identifier, session_key)
    return attempt, True
