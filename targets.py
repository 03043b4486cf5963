"""
Song identification for incoming requests.

Identifiers are trimmed before they are classified, and submissions go
through the same `normalize_builtin_id` rule, so a score is always stored
under the key it will later be read back with.
"""

from __future__ import annotations

from typing import Iterable

from sqlalchemy.orm import Session

import store
from errors import InvalidTargetError, NotFoundError
from identifiers import BuiltinTarget, Target, UploadedTarget, is_uploaded_id

__all__ = [
    "BuiltinTarget",
    "Target",
    "UploadedTarget",
    "classify",
    "is_uploaded_id",
    "normalize_builtin_id",
    "resolve_for_submission",
    "split_targets",
    "target_from_query",
]


def normalize_builtin_id(value: str) -> str:
    """Trim a builtin key; blank or UUID-shaped keys are not builtin ids."""
    value = value.strip()
    if not value:
        raise ValueError("builtinSongId must not be blank")
    if is_uploaded_id(value):
        raise ValueError("builtinSongId must not be a UUID; use uploadedSongId for uploaded songs")
    return value


def classify(identifier: str) -> Target:
    if identifier is None or not identifier.strip():
        raise InvalidTargetError("Song identifier is required")
    identifier = identifier.strip()
    if is_uploaded_id(identifier):
        return UploadedTarget(identifier.lower())
    return BuiltinTarget(identifier)


def target_from_query(song_id: str | None, builtin_song_id: str | None) -> Target | None:
    """
    Build an optional filter from the legacy `songId` / `builtinSongId` query pair.
    Neither means "all songs"; both is ambiguous and rejected.
    """
    if song_id and builtin_song_id:
        raise InvalidTargetError("Provide either songId or builtinSongId, not both")
    if song_id:
        song_id = song_id.strip()
        if not is_uploaded_id(song_id):
            raise InvalidTargetError("songId must be a valid UUID")
        return UploadedTarget(song_id.lower())
    if builtin_song_id:
        try:
            return BuiltinTarget(normalize_builtin_id(builtin_song_id))
        except ValueError as e:
            raise InvalidTargetError(str(e)) from e
    return None


def split_targets(identifiers: Iterable[str]) -> dict[Target, str]:
    """
    Classify a batch of identifiers. Returns target -> identifier as the caller
    spelled it, so results can be keyed the way they were asked for.
    Blank entries are dropped; duplicates collapse onto the first spelling.
    """
    out: dict[Target, str] = {}
    for raw in identifiers:
        if not isinstance(raw, str) or not raw.strip():
            continue
        target = classify(raw)
        out.setdefault(target, raw)
    return out


def resolve_for_submission(db: Session, user_id: str, target: Target) -> None:
    # Another user's song and a missing song look the same to the caller.
    if isinstance(target, UploadedTarget):
        if store.owned_song(db, user_id, target.song_id) is None:
            raise NotFoundError("Song not found")
