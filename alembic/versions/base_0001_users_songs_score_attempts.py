"""users, songs and score attempts

Revision ID: base_0001
Revises:
Create Date: 2026-10-18 09:12:40.511204

"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "base_0001"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("display_name", sa.String(length=100), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )

    op.create_table(
        "songs",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("file_name", sa.String(length=255), nullable=True),
        sa.Column("uploaded_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ["user_id"], ["users.id"], name="fk_songs_user_id_users", ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("id", name="pk_songs"),
    )
    op.create_index("ix_songs_user_id", "songs", ["user_id"])

    op.create_table(
        "score_attempts",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("session_key", sa.String(length=64), nullable=False),
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("uploaded_song_id", sa.String(length=36), nullable=True),
        sa.Column("builtin_song_id", sa.String(length=255), nullable=True),
        sa.Column("perfect", sa.Integer(), nullable=False),
        sa.Column("good", sa.Integer(), nullable=False),
        sa.Column("missed", sa.Integer(), nullable=False),
        sa.Column("errors", sa.Integer(), nullable=False),
        sa.Column("accuracy", sa.Integer(), nullable=False),
        sa.Column("combined", sa.Integer(), nullable=False),
        sa.Column("max_streak", sa.Integer(), nullable=False),
        sa.Column("played_duration", sa.Integer(), nullable=False),
        sa.Column("total_duration", sa.Integer(), nullable=False),
        sa.Column("bpm_modifier", sa.Float(), nullable=False),
        sa.Column("hand", sa.String(length=8), nullable=False),
        sa.Column("recording", sa.Text(), nullable=True),
        sa.Column("played_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint(
            "(uploaded_song_id IS NULL) <> (builtin_song_id IS NULL)",
            name="ck_score_attempts_one_target",
        ),
        sa.ForeignKeyConstraint(
            ["user_id"], ["users.id"], name="fk_score_attempts_user_id_users", ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(
            ["uploaded_song_id"],
            ["songs.id"],
            name="fk_score_attempts_uploaded_song_id_songs",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_score_attempts"),
        sa.UniqueConstraint("session_key", "user_id", name="uq_score_attempts_session_user"),
    )
    op.create_index(
        "ix_score_attempts_user_uploaded", "score_attempts", ["user_id", "uploaded_song_id"]
    )
    op.create_index(
        "ix_score_attempts_user_builtin", "score_attempts", ["user_id", "builtin_song_id"]
    )
    op.create_index("ix_score_attempts_builtin", "score_attempts", ["builtin_song_id"])


def downgrade() -> None:
    op.drop_index("ix_score_attempts_builtin", table_name="score_attempts")
    op.drop_index("ix_score_attempts_user_builtin", table_name="score_attempts")
    op.drop_index("ix_score_attempts_user_uploaded", table_name="score_attempts")
    op.drop_table("score_attempts")
    op.drop_index("ix_songs_user_id", table_name="songs")
    op.drop_table("songs")
    op.drop_table("users")
