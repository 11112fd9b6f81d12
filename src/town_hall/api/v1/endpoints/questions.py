"""Question-related endpoints for the Town Hall API."""

from fastapi import APIRouter, Depends, status

from town_hall.api.v1.dependencies import (
    CurrentUserDep,
    OptionalUserDep,
    QuestionIdDep,
    SessionDep,
)
from town_hall.core.settings import settings
from town_hall.db.time import as_utc
from town_hall.schemas.question import (
    ClientQuestion,
    QuestionCreate,
    QuestionList,
    SubmittedQuestion,
)
from town_hall.services import questions as question_service
from town_hall.services.errors import Forbidden, NotAuthenticated
from town_hall.services.votes import read_user_votes

router = APIRouter(tags=["questions"])


def require_submission_enabled() -> None:
    """Reject submissions while the feature flag is off."""
    if not settings.question_submission_enabled:
        raise Forbidden("question submission is disabled")


@router.post(
    "/submit",
    response_model=SubmittedQuestion,
    dependencies=[Depends(require_submission_enabled)],
)
async def submit_question(
    payload: QuestionCreate,
    db: SessionDep,
    user: OptionalUserDep,
) -> SubmittedQuestion:
    """Submit a new question as the signed-in user."""
    if user is None:
        raise NotAuthenticated("sign-in required")

    question = question_service.submit(
        db,
        content=payload.content,
        author_id=user.id,
        author_name=user.name,
        anonymous=payload.anonymous,
    )
    return SubmittedQuestion(
        id=question.id,
        content=question.content,
        anonymous=question.anonymous,
        author_name=question.author_name,
        timestamp=as_utc(question.timestamp),
        score=question.score,
    )


@router.get("/list", response_model=QuestionList)
async def list_questions(db: SessionDep, user: OptionalUserDep) -> QuestionList:
    """List every question, highest score first, with the caller's own votes."""
    questions = question_service.list_ranked(db)
    user_id = user.id if user is not None else None
    votes = read_user_votes(db, user_id, [question.id for question in questions])

    return QuestionList(
        questions=[
            ClientQuestion(
                id=question.id,
                anonymous=question.anonymous,
                content=question.content,
                author_name=None if question.anonymous else question.author_name,
                timestamp=as_utc(question.timestamp),
                score=question.score,
                my_vote=vote.value,
                my_question=user_id is not None and user_id == question.author_id,
            )
            for question, vote in zip(questions, votes, strict=True)
        ]
    )


@router.delete("/question/{question_id}", status_code=status.HTTP_200_OK)
async def delete_question(
    question_id: QuestionIdDep,
    db: SessionDep,
    current_user: CurrentUserDep,
) -> dict[str, str]:
    """Delete one of the caller's own questions along with its votes."""
    question_service.delete(db, question_id, current_user.id)
    return {}
