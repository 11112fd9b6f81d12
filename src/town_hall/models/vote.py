"""Models capturing voting interactions on questions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, String, Text
from sqlalchemy.types import TypeDecorator
from sqlalchemy.orm import Mapped, mapped_column, relationship

from town_hall.db.session import Base
from town_hall.services.direction import VoteDirection

if TYPE_CHECKING:
    from .question import Question


class DirectionType(TypeDecorator[VoteDirection]):
    """Stores a :class:`VoteDirection` as its canonical token.

    Loading any other stored value raises ``InvalidDirection``.
    """

    impl = String(8)
    cache_ok = True

    def process_bind_param(self, value, dialect):  # type: ignore[no-untyped-def]
        if value is None:
            return None
        return VoteDirection.parse(value).value

    def process_result_value(self, value, dialect):  # type: ignore[no-untyped-def]
        if value is None:
            return None
        return VoteDirection.parse(value)


class VoteEntry(Base):
    """Per-user vote on a question.

    The composite primary key keeps at most one record per (question, user).
    A missing record means the user has not voted, which scores the same
    as an explicit ``none``.
    """

    __tablename__ = "vote_entry"
    __table_args__ = (
        CheckConstraint("vote IN ('none', 'up', 'down')", name="ck_vote_entry_vote"),
        Index("ix_vote_entry_question_id", "question_id"),
    )

    question_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("question.id", ondelete="CASCADE"),
        primary_key=True,
    )
    user_id: Mapped[str] = mapped_column(Text, primary_key=True)
    vote: Mapped[VoteDirection] = mapped_column(
        DirectionType(),
        nullable=False,
        default=VoteDirection.NONE,
    )

    question: Mapped[Question] = relationship("Question", back_populates="votes")
