from __future__ import annotations

import uuid
from datetime import UTC, datetime

import sqlalchemy as sa
from sqlalchemy import DateTime, Float, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from db import Base
from identifiers import BuiltinTarget, Target, UploadedTarget


def _uuid() -> str:
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(UTC)


class User(Base):
    __tablename__ = "users"
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    email: Mapped[str] = mapped_column(String(255), unique=True)
    password_hash: Mapped[str] = mapped_column(String(255))
    display_name: Mapped[str] = mapped_column(String(100))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now)


class Song(Base):
    # Uploaded MIDI songs; the upload pipeline writes these rows and stores the files.
    __tablename__ = "songs"
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), index=True
    )
    title: Mapped[str] = mapped_column(String(255))
    file_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    uploaded_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now)


class ScoreAttempt(Base):
    __tablename__ = "score_attempts"
    __table_args__ = (
        sa.UniqueConstraint("session_key", "user_id", name="uq_score_attempts_session_user"),
        sa.CheckConstraint(
            "(uploaded_song_id IS NULL) <> (builtin_song_id IS NULL)",
            name="one_target",
        ),
        Index("ix_score_attempts_user_uploaded", "user_id", "uploaded_song_id"),
        Index("ix_score_attempts_user_builtin", "user_id", "builtin_song_id"),
        Index("ix_score_attempts_builtin", "builtin_song_id"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    session_key: Mapped[str] = mapped_column(String(64))
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id", ondelete="CASCADE"))
    uploaded_song_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("songs.id", ondelete="CASCADE"), nullable=True
    )
    builtin_song_id: Mapped[str | None] = mapped_column(String(255), nullable=True)

    perfect: Mapped[int] = mapped_column(Integer)
    good: Mapped[int] = mapped_column(Integer)
    missed: Mapped[int] = mapped_column(Integer)
    errors: Mapped[int] = mapped_column(Integer)
    accuracy: Mapped[int] = mapped_column(Integer)
    combined: Mapped[int] = mapped_column(Integer)
    max_streak: Mapped[int] = mapped_column(Integer)

    played_duration: Mapped[int] = mapped_column(Integer)
    total_duration: Mapped[int] = mapped_column(Integer)
    bpm_modifier: Mapped[float] = mapped_column(Float, default=1.0)
    hand: Mapped[str] = mapped_column(String(8), default="both")
    recording: Mapped[str | None] = mapped_column(Text, nullable=True)  # base64 performance

    played_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now)

    @property
    def target(self) -> Target:
        if self.uploaded_song_id is not None:
            return UploadedTarget(self.uploaded_song_id)
        return BuiltinTarget(self.builtin_song_id)

    @target.setter
    def target(self, value: Target) -> None:
        if isinstance(value, UploadedTarget):
            self.uploaded_song_id, self.builtin_song_id = value.song_id, None
        else:
            self.uploaded_song_id, self.builtin_song_id = None, value.builtin_id
