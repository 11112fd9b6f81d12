"""Vote ledger: the per-(question, user) record of a user's current vote."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from town_hall.models import VoteEntry
from town_hall.repositories.question_repo import QuestionRepository
from town_hall.services.direction import VoteDirection
from town_hall.services.errors import BackendFailure, NoSuchQuestion
from town_hall.services.scoring import delta

logger = logging.getLogger(__name__)


def get_vote(session: Session, question_id: int, user_id: str) -> VoteDirection | None:
    """Return the recorded direction for the pair, or ``None`` if never voted."""
    entry = session.get(VoteEntry, (question_id, user_id))
    return entry.vote if entry is not None else None


def cast_vote(
    session: Session,
    question_id: int,
    user_id: str,
    direction: VoteDirection,
) -> None:
    """Record ``direction`` as the user's vote and adjust the question's score.

    The vote write and the score increment form one unit of work: they are
    committed together or rolled back together. A ``none`` record is inserted
    first if the pair has never voted, then read back with a row lock, so
    concurrent votes by the same user on the same question serialize (first
    votes included) and each delta is computed against committed state.

    Args:
        session: Database session owning the unit of work.
        question_id: Identifier of the question being voted on.
        user_id: Verified identity of the voter.
        direction: The new vote.

    Raises:
        NoSuchQuestion: If the question does not exist.
        BackendFailure: If the unit of work could not be committed.
    """
    repo = QuestionRepository(session)
    try:
        question = repo.get_by_id(question_id)
        if question is None:
            logger.debug("No such question with ID %s", question_id)
            raise NoSuchQuestion(f"question {question_id} does not exist")

        # A missing record reads as none, so start every pair from one.
        repo.ensure_vote_row(question_id, user_id)
        entry = repo.get_vote_for_update(question_id, user_id)
        if entry is None:
            raise BackendFailure(f"vote record for question {question_id} vanished")

        change = delta(entry.vote, direction)
        entry.vote = direction
        session.flush()
        repo.adjust_score(question_id, change)
        session.commit()
    except (NoSuchQuestion, BackendFailure):
        session.rollback()
        raise
    except SQLAlchemyError as err:
        session.rollback()
        raise BackendFailure("error storing question score/vote") from err

    # The score was changed with a SQL increment; reload it on next access.
    session.expire(question, ["score"])
    logger.debug(
        "User %s voted %s on question %s (delta %+d)",
        user_id,
        direction.value,
        question_id,
        change,
    )


def read_user_votes(
    session: Session,
    user_id: str | None,
    question_ids: Sequence[int],
) -> list[VoteDirection]:
    """Return the user's direction for each question, in input order.

    An anonymous caller (``user_id is None``) gets ``none`` for every slot.
    """
    if user_id is None:
        return [VoteDirection.NONE] * len(question_ids)

    try:
        recorded = QuestionRepository(session).votes_for_user(user_id, question_ids)
    except SQLAlchemyError as err:
        raise BackendFailure("error getting votes") from err
    return [recorded.get(question_id, VoteDirection.NONE) for question_id in question_ids]
