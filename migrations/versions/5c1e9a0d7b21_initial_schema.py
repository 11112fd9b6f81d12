"""initial schema

Revision ID: 5c1e9a0d7b21
Revises:
Create Date: 2026-10-19 09:12:41.503318

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "5c1e9a0d7b21"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create question, vote_entry and digest_subscription tables."""
    op.create_table(
        "question",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("author_name", sa.Text(), nullable=True),
        sa.Column("anonymous", sa.Boolean(), nullable=False),
        sa.Column("author_id", sa.Text(), nullable=False),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
        sa.Column("score", sa.Integer(), nullable=False, server_default="0"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_question_author_id", "question", ["author_id"])
    op.create_index("ix_question_timestamp", "question", ["timestamp"])

    op.create_table(
        "vote_entry",
        sa.Column("question_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Text(), nullable=False),
        sa.Column("vote", sa.String(length=8), nullable=False),
        sa.CheckConstraint("vote IN ('none', 'up', 'down')", name="ck_vote_entry_vote"),
        sa.ForeignKeyConstraint(["question_id"], ["question.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("question_id", "user_id"),
    )
    op.create_index("ix_vote_entry_question_id", "vote_entry", ["question_id"])

    op.create_table(
        "digest_subscription",
        sa.Column("user_id", sa.Text(), nullable=False),
        sa.Column("address", sa.Text(), nullable=False),
        sa.Column("enabled", sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint("user_id"),
    )


def downgrade() -> None:
    """Drop all Town Hall tables."""
    op.drop_table("digest_subscription")
    op.drop_index("ix_vote_entry_question_id", table_name="vote_entry")
    op.drop_table("vote_entry")
    op.drop_index("ix_question_timestamp", table_name="question")
    op.drop_index("ix_question_author_id", table_name="question")
    op.drop_table("question")
