"""SQLAlchemy models for submitted questions."""

from datetime import datetime

from sqlalchemy import DateTime, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from town_hall.db.session import Base
from town_hall.db.time import utcnow


class Question(Base):
    """A question submitted by a signed-in user.

    ``score`` is a cached aggregate of the question's vote entries. It is
    adjusted on every vote and overwritten by a full recount.
    """

    __tablename__ = "question"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    # Null when the author asked to stay anonymous.
    author_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    anonymous: Mapped[bool] = mapped_column(default=False, nullable=False)
    # Always stored so the author can delete their own anonymous questions.
    author_id: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        index=True,
    )
    score: Mapped[int] = mapped_column(default=0, nullable=False)

    votes: Mapped[list["VoteEntry"]] = relationship(  # noqa: F821
        "VoteEntry",
        back_populates="question",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
