from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

import store
from db import get_db
from deps.auth import require_user
from errors import NotFoundError
from identifiers import is_uploaded_id
from models import Song, User
from schemas.common import MessageResponse
from schemas.songs import SongListResponse, SongResponse, SongUpdate

logger = logging.getLogger("score-ledger.songs")

# Uploads and file storage belong to the upload pipeline; this router manages
# the metadata rows and their scores.
router = APIRouter(prefix="/api/songs", tags=["songs"])

DbSession = Annotated[Session, Depends(get_db)]
CurrentUser = Annotated[User, Depends(require_user)]


def _owned_or_404(db: Session, user: User, song_id: str) -> Song:
    song = None
    if is_uploaded_id(song_id):
        song = store.owned_song(db, user.id, song_id.lower())
    if song is None:
        raise NotFoundError("Song not found")
    return song


@router.get("", response_model=SongListResponse)
def list_songs(db: DbSession, user: CurrentUser):
    return {"songs": store.list_songs(db, user.id)}


@router.get("/{song_id}", response_model=SongResponse)
def get_song(song_id: str, db: DbSession, user: CurrentUser):
    return {"song": _owned_or_404(db, user, song_id)}


@router.put("/{song_id}", response_model=SongResponse)
def update_song(song_id: str, req: SongUpdate, db: DbSession, user: CurrentUser):
    song = _owned_or_404(db, user, song_id)
    if req.title is not None:
        song.title = req.title
        db.commit()
        db.refresh(song)
    return {"song": song}


@router.delete("/{song_id}", response_model=MessageResponse)
def delete_song(song_id: str, db: DbSession, user: CurrentUser):
    song = _owned_or_404(db, user, song_id)
    removed = store.delete_song(db, song)
    logger.info("user %s deleted song %s with %d attempts", user.id, song_id, removed)
    return {"message": "Song deleted successfully"}
