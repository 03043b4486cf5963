from __future__ import annotations

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

import store
import submission
from aggregation import best_by_target, best_check, best_of, build_leaderboard, clamp_limit, compute_stats
from db import get_db
from deps.auth import require_user
from errors import NotFoundError
from models import User
from schemas.common import MessageResponse
from schemas.scores import (
    INT32_MAX,
    AttemptOut,
    BestScoresRequest,
    BestScoresResponse,
    LeaderboardResponse,
    ScoreSubmit,
    StatsResponse,
    SubmitResponse,
    TargetAttemptsResponse,
)
from targets import BuiltinTarget, classify, split_targets, target_from_query

logger = logging.getLogger("score-ledger.scores")

router = APIRouter(prefix="/api/scores", tags=["scores"])

DbSession = Annotated[Session, Depends(get_db)]
CurrentUser = Annotated[User, Depends(require_user)]

BATCH_MAX = 100
LEADERBOARD_BUILTIN_ONLY = "Leaderboards only available for builtin songs"


@router.get("")
def list_scores(
    db: DbSession,
    user: CurrentUser,
    song_id: Annotated[Optional[str], Query(alias="songId")] = None,
    builtin_song_id: Annotated[Optional[str], Query(alias="builtinSongId")] = None,
    limit: Optional[int] = None,
    offset: int = 0,
):
    target = target_from_query(song_id, builtin_song_id)
    limit = clamp_limit(limit, default=50)
    offset = min(max(0, offset), INT32_MAX)

    rows = store.recent_attempts(db, user.id, target, limit=limit, offset=offset)
    total = store.count_attempts(db, user.id, target)

    # Recordings can be large; keep them out of list views
    scores = [
        AttemptOut.model_validate(a).model_dump(by_alias=True, mode="json", exclude={"recording"})
        for a in rows
    ]
    return {"scores": scores, "total": total}


@router.post("", response_model=SubmitResponse, status_code=status.HTTP_201_CREATED)
def submit_score(data: ScoreSubmit, db: DbSession, user: CurrentUser):
    attempt, _created = submission.submit(db, user.id, data)

    check = best_check(store.attempts_for_user(db, user.id, attempt.target), attempt)
    return {
        "message": "Score submitted successfully",
        "attempt": attempt,
        "session_key": attempt.session_key,
        "is_new_best": check.is_new_best,
        "best": check.best,
        "total_plays": check.total_plays,
    }


@router.get("/stats", response_model=StatsResponse)
def get_stats(
    db: DbSession,
    user: CurrentUser,
    song_id: Annotated[Optional[str], Query(alias="songId")] = None,
    builtin_song_id: Annotated[Optional[str], Query(alias="builtinSongId")] = None,
):
    target = target_from_query(song_id, builtin_song_id)
    stats = compute_stats(store.attempts_for_user(db, user.id, target))
    return StatsResponse.model_validate(stats)


@router.post("/best-scores", response_model=BestScoresResponse)
def get_best_scores(req: BestScoresRequest, db: DbSession, user: CurrentUser):
    keys = split_targets(req.targets[:BATCH_MAX])
    if not keys:
        return {"best_scores": {}}

    attempts = store.attempts_for_targets(db, user.id, keys)
    return {"best_scores": best_by_target(attempts, keys)}


@router.get("/song/{identifier}", response_model=TargetAttemptsResponse)
def get_song_scores(identifier: str, db: DbSession, user: CurrentUser, limit: Optional[int] = None):
    target = classify(identifier)
    limit = clamp_limit(limit, default=20)

    everything = store.attempts_for_user(db, user.id, target)
    recent = store.recent_attempts(db, user.id, target, limit=limit)
    return {
        "attempts": recent,
        "best": best_of(everything),
        "total_plays": len(everything),
    }


@router.get("/leaderboard/{identifier}", response_model=LeaderboardResponse)
def get_leaderboard(identifier: str, db: DbSession, user: CurrentUser, limit: Optional[int] = None):
    target = classify(identifier)
    # Uploaded songs are private to their owner
    if not isinstance(target, BuiltinTarget):
        return {"leaderboard": [], "message": LEADERBOARD_BUILTIN_ONLY}

    rows = store.leaderboard_rows(db, target.builtin_id)
    return {"leaderboard": build_leaderboard(rows, user.id, clamp_limit(limit, default=10))}


@router.delete("/{attempt_id}", response_model=MessageResponse)
def delete_score(attempt_id: str, db: DbSession, user: CurrentUser):
    if not store.delete_owned(db, user.id, attempt_id):
        raise NotFoundError("Score not found")
    logger.info("user %s deleted attempt %s", user.id, attempt_id)
    return {"message": "Score deleted successfully"}
