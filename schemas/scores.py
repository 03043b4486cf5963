from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_core import PydanticCustomError

from schemas.common import CamelModel
from targets import BuiltinTarget, Target, UploadedTarget, is_uploaded_id, normalize_builtin_id

# Metric columns are 32-bit INTEGER in every supported database.
INT32_MIN = -2_147_483_648
INT32_MAX = 2_147_483_647

# ---------- Submit ----------


class ScoreSubmit(CamelModel):
    # Reuse the key from a previous response to keep updating the same attempt.
    session_key: Optional[str] = Field(default=None, min_length=1, max_length=64)

    # Exactly one of these identifies the song.
    uploaded_song_id: Optional[str] = None
    builtin_song_id: Optional[str] = Field(default=None, min_length=1, max_length=255)

    perfect: int = Field(ge=0, le=INT32_MAX)
    good: int = Field(ge=0, le=INT32_MAX)
    missed: int = Field(ge=0, le=INT32_MAX)
    errors: int = Field(ge=0, le=INT32_MAX)
    accuracy: int = Field(ge=0, le=100)
    combined: int = Field(ge=INT32_MIN, le=INT32_MAX)
    max_streak: int = Field(ge=0, le=INT32_MAX)

    played_duration: int = Field(ge=0, le=INT32_MAX)
    total_duration: int = Field(ge=0, le=INT32_MAX)
    bpm_modifier: float = Field(default=1.0, ge=0.1, le=10)
    hand: Literal["left", "right", "both"] = "both"

    recording: Optional[str] = None

    @field_validator("uploaded_song_id")
    @classmethod
    def _uploaded_is_uuid(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not is_uploaded_id(v):
            raise PydanticCustomError("uuid", "uploadedSongId must be a valid UUID")
        return v.lower() if v is not None else v

    @field_validator("builtin_song_id")
    @classmethod
    def _builtin_is_key(cls, v: Optional[str]) -> Optional[str]:
        # Stored exactly as reads will look it up
        if v is None:
            return v
        try:
            return normalize_builtin_id(v)
        except ValueError as e:
            raise PydanticCustomError("builtin_id", str(e)) from e

    @model_validator(mode="after")
    def _exactly_one_target(self) -> "ScoreSubmit":
        if self.uploaded_song_id is None and self.builtin_song_id is None:
            raise PydanticCustomError(
                "target", "Either uploadedSongId or builtinSongId must be provided"
            )
        if self.uploaded_song_id is not None and self.builtin_song_id is not None:
            raise PydanticCustomError(
                "target", "Provide only one of uploadedSongId or builtinSongId"
            )
        return self

    @property
    def target(self) -> Target:
        if self.uploaded_song_id is not None:
            return UploadedTarget(self.uploaded_song_id)
        return BuiltinTarget(self.builtin_song_id)

    def metric_values(self) -> Dict[str, Any]:
        return self.model_dump(exclude={"session_key", "uploaded_song_id", "builtin_song_id"})


# ---------- Attempts ----------


class AttemptSummary(CamelModel):
    id: str
    accuracy: int
    combined: int
    max_streak: int
    played_at: datetime


class AttemptOut(CamelModel):
    id: str
    session_key: str
    uploaded_song_id: Optional[str] = None
    builtin_song_id: Optional[str] = None
    perfect: int
    good: int
    missed: int
    errors: int
    accuracy: int
    combined: int
    max_streak: int
    played_duration: int
    total_duration: int
    bpm_modifier: float
    hand: str
    # can be large; left out of list views
    recording: Optional[str] = None
    played_at: datetime


class SubmitResponse(CamelModel):
    message: str
    attempt: AttemptOut
    session_key: str
    is_new_best: bool
    best: Optional[AttemptSummary] = None
    total_plays: int


class StatsResponse(CamelModel):
    total_plays: int
    current: Optional[AttemptSummary] = None
    best: Optional[AttemptSummary] = None
    average_accuracy: int
    average_score: int
    best_streak: int


class TargetAttemptsResponse(CamelModel):
    attempts: List[AttemptOut]
    best: Optional[AttemptSummary] = None
    total_plays: int


# ---------- Best scores batch ----------


class BestScoresRequest(CamelModel):
    targets: List[str] = Field(default_factory=list)


class BestScoreOut(CamelModel):
    accuracy: int
    combined: int
    max_streak: int
    total_plays: int


class BestScoresResponse(CamelModel):
    best_scores: Dict[str, BestScoreOut]


# ---------- Leaderboard ----------


class LeaderboardEntry(CamelModel):
    rank: int
    user_id: str
    display_name: str
    accuracy: int
    combined: int
    max_streak: int
    played_at: datetime
    is_current_user: bool


class LeaderboardResponse(CamelModel):
    leaderboard: List[LeaderboardEntry]
    message: Optional[str] = None
