"""Score aggregation for questions.

Scores are maintained two ways: incrementally, by applying :func:`delta` on
every vote, and in batch, by :func:`recompute_all` which recounts the vote
ledger and overwrites every cached score.
"""

from __future__ import annotations

import logging

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from town_hall.models import Question, VoteEntry
from town_hall.services.direction import VoteDirection
from town_hall.services.errors import BackendFailure

logger = logging.getLogger(__name__)


def delta(old: VoteDirection, new: VoteDirection) -> int:
    """Return the score change for a vote moving from ``old`` to ``new``.

    ========  ====  ==  ====
    old\\new  none  up  down
    ========  ====  ==  ====
    none        0   +1   -1
    up         -1    0   -2
    down       +1   +2    0
    ========  ====  ==  ====
    """
    return new.credit - old.credit


def _count(direction: VoteDirection):  # type: ignore[no-untyped-def]
    return (
        select(func.count())
        .select_from(VoteEntry)
        .where(VoteEntry.question_id == Question.id, VoteEntry.vote == direction)
        .correlate(Question)
        .scalar_subquery()
    )


def recompute_all(session: Session) -> int:
    """Recount every question's score from its vote entries.

    Runs as one ``UPDATE`` with correlated counts, so it takes no lock on
    individual vote records. A vote committed while this runs is picked up
    either here or by the next recount; the vote record itself is never lost.

    Returns:
        The number of questions whose score was rewritten.

    Raises:
        BackendFailure: If the database rejects the update.
    """
    stmt = (
        update(Question)
        .values(score=_count(VoteDirection.UP) - _count(VoteDirection.DOWN))
        .execution_options(synchronize_session=False)
    )
    try:
        result = session.execute(stmt)
        session.commit()
    except SQLAlchemyError as err:
        session.rollback()
        raise BackendFailure("error recomputing question scores") from err

    recounted = result.rowcount or 0
    # Cached ORM state predates the update.
    session.expire_all()
    logger.debug("Recomputed scores for %d questions", recounted)
    return recounted
