"""Data access helpers for working with questions and their votes."""
from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import delete, insert, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from town_hall.models import DigestSubscription, Question, VoteEntry
from town_hall.services.direction import VoteDirection

__all__ = ["QuestionRepository"]

_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class QuestionRepository:
    """Thin wrapper around database access for question entities."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def get_by_id(self, question_id: int) -> Question | None:
        """Return a question by identifier."""
        return self.session.get(Question, question_id)

    def list_ranked(self) -> list[Question]:
        """Return all questions, highest score first."""
        result = self.session.execute(
            select(Question).order_by(Question.score.desc(), Question.id.asc())
        )
        return list(result.scalars())

    def list_since(self, cutoff: datetime) -> list[Question]:
        """Return questions posted at or after ``cutoff``, oldest first."""
        result = self.session.execute(
            select(Question)
            .where(Question.timestamp >= cutoff)
            .order_by(Question.timestamp.asc(), Question.id.asc())
        )
        return list(result.scalars())

    def create(
        self,
        *,
        content: str,
        author_id: str,
        author_name: str | None,
        anonymous: bool,
        timestamp: datetime,
    ) -> Question:
        """Insert a new question and return the persisted ORM instance."""
        question = Question(
            content=content,
            author_id=author_id,
            author_name=author_name,
            anonymous=anonymous,
            timestamp=timestamp,
            score=0,
        )
        self.session.add(question)
        self.session.flush()
        return question

    def delete_with_votes(self, question: Question) -> int:
        """Delete a question and every vote anchored to it.

        Votes are removed explicitly so no orphan survives on backends that
        do not enforce ``ON DELETE CASCADE``. Returns the number of votes removed.
        """
        result = self.session.execute(
            delete(VoteEntry).where(VoteEntry.question_id == question.id)
        )
        self.session.expire(question, ["votes"])
        self.session.delete(question)
        self.session.flush()
        return result.rowcount or 0

    # Votes

    def ensure_vote_row(self, question_id: int, user_id: str) -> None:
        """Insert a ``none`` vote record for the pair unless one already exists.

        A racing insert waits for the winner to commit and then does nothing,
        so the locked read that follows always finds a committed record.
        """
        values = {"question_id": question_id, "user_id": user_id, "vote": VoteDirection.NONE}
        dialect = self.session.get_bind().dialect.name
        if dialect in _UPSERT_INSERTS:
            statement = (
                _UPSERT_INSERTS[dialect](VoteEntry)
                .values(**values)
                .on_conflict_do_nothing(index_elements=["question_id", "user_id"])
            )
            self.session.execute(statement)
            return

        try:
            with self.session.begin_nested():
                self.session.execute(insert(VoteEntry).values(**values))
        except IntegrityError:
            # Another transaction recorded the pair first.
            return

    def get_vote_for_update(self, question_id: int, user_id: str) -> VoteEntry | None:
        """Return the vote record for the pair, locking it where supported."""
        result = self.session.execute(
            select(VoteEntry)
            .where(VoteEntry.question_id == question_id, VoteEntry.user_id == user_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return result.scalars().first()

    def votes_for_user(
        self, user_id: str, question_ids: Sequence[int]
    ) -> dict[int, VoteDirection]:
        """Return the recorded directions of ``user_id`` keyed by question id."""
        if not question_ids:
            return {}
        result = self.session.execute(
            select(VoteEntry.question_id, VoteEntry.vote).where(
                VoteEntry.user_id == user_id,
                VoteEntry.question_id.in_(list(question_ids)),
            )
        )
        return {question_id: vote for question_id, vote in result.all()}

    def adjust_score(self, question_id: int, delta: int) -> None:
        """Apply ``delta`` to the stored score as a single atomic increment."""
        if delta == 0:
            return
        self.session.execute(
            update(Question)
            .where(Question.id == question_id)
            .values(score=Question.score + delta)
            .execution_options(synchronize_session=False)
        )

    # Subscriptions

    def get_subscription(self, user_id: str) -> DigestSubscription | None:
        """Return the digest subscription for ``user_id``."""
        return self.session.get(DigestSubscription, user_id)

    def enabled_subscription_addresses(self) -> list[str]:
        """Return the addresses of every enabled subscription."""
        result = self.session.execute(
            select(DigestSubscription.address).where(DigestSubscription.enabled.is_(True))
        )
        return list(result.scalars())
