"""Vote-related endpoints for the Town Hall API."""

import logging

from fastapi import APIRouter

from town_hall.api.v1.dependencies import CurrentUserDep, QuestionIdDep, SessionDep
from town_hall.schemas.vote import VoteCreate
from town_hall.services.direction import VoteDirection
from town_hall.services.errors import InvalidDirection, MalformedInput, NoSuchQuestion
from town_hall.services.votes import cast_vote

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/votes", tags=["votes"])


@router.put("/{question_id}")
async def put_vote(
    question_id: QuestionIdDep,
    vote_data: VoteCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> dict[str, str]:
    """Set the caller's vote on a question to up, down or none."""
    try:
        direction = VoteDirection.parse(vote_data.vote)
    except InvalidDirection:
        logger.debug("Got unexpected vote direction: %s", vote_data.vote)
        raise

    try:
        cast_vote(db, question_id, current_user.id, direction)
    except NoSuchQuestion as err:
        # Voting on an unknown question is a client error, not a missing resource.
        raise MalformedInput(f"cannot vote on question {question_id}") from err
    return {}
