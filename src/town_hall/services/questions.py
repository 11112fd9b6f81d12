"""Service-level helpers for submitting, listing and deleting questions."""
from __future__ import annotations

import logging
from datetime import datetime, timedelta

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from town_hall.db.time import utcnow
from town_hall.models import Question
from town_hall.repositories.question_repo import QuestionRepository
from town_hall.services.errors import BackendFailure, Forbidden, NoSuchQuestion

logger = logging.getLogger(__name__)


def submit(
    session: Session,
    *,
    content: str,
    author_id: str,
    author_name: str | None,
    anonymous: bool,
    now: datetime | None = None,
) -> Question:
    """Store a new question with a zero score.

    The author's identifier is always kept; their display name is dropped
    when the question is anonymous.

    Raises:
        BackendFailure: If the question could not be persisted.
    """
    repo = QuestionRepository(session)
    try:
        question = repo.create(
            content=content,
            author_id=author_id,
            author_name=None if anonymous else author_name,
            anonymous=anonymous,
            timestamp=now or utcnow(),
        )
        session.commit()
    except SQLAlchemyError as err:
        session.rollback()
        raise BackendFailure("error putting question into the database") from err
    return question


def delete(session: Session, question_id: int, requesting_user_id: str) -> None:
    """Delete a question and all of its votes on behalf of its author.

    Raises:
        NoSuchQuestion: If the question does not exist.
        Forbidden: If ``requesting_user_id`` is not the question's author.
        BackendFailure: If the deletion could not be committed.
    """
    repo = QuestionRepository(session)
    try:
        question = repo.get_by_id(question_id)
        if question is None:
            raise NoSuchQuestion(f"question {question_id} does not exist")
        if question.author_id != requesting_user_id:
            logger.debug(
                "forbidden - %s tried to delete question %s",
                requesting_user_id,
                question_id,
            )
            raise Forbidden(f"user may not delete question {question_id}")
        removed = repo.delete_with_votes(question)
        session.commit()
    except SQLAlchemyError as err:
        session.rollback()
        raise BackendFailure("error deleting question from the database") from err

    logger.debug("Deleted question %s and %d votes", question_id, removed)


def list_ranked(session: Session) -> list[Question]:
    """Return every question, highest score first."""
    try:
        return QuestionRepository(session).list_ranked()
    except SQLAlchemyError as err:
        raise BackendFailure("error querying questions") from err


def list_recent(
    session: Session,
    window: timedelta,
    now: datetime | None = None,
) -> list[Question]:
    """Return questions posted within ``window`` of ``now``, oldest first."""
    cutoff = (now or utcnow()) - window
    try:
        return QuestionRepository(session).list_since(cutoff)
    except SQLAlchemyError as err:
        raise BackendFailure("error querying recent questions") from err
