"""Session status and digest subscription endpoints."""

from fastapi import APIRouter

from town_hall.api.v1.dependencies import CurrentUserDep, OptionalUserDep, SessionDep
from town_hall.core.settings import settings
from town_hall.schemas.status import Status
from town_hall.services.digest import set_subscription
from town_hall.services.errors import MalformedInput

router = APIRouter(prefix="/status", tags=["status"])


@router.get("", response_model=Status)
async def get_status(user: OptionalUserDep) -> Status:
    """Describe the caller and the features currently available."""
    if user is None:
        return Status(
            login_url=settings.login_url,
            question_submission_enabled=settings.question_submission_enabled,
        )
    return Status(
        id=user.id,
        name=user.name,
        logout_url=settings.logout_url,
        question_submission_enabled=settings.question_submission_enabled,
    )


@router.put("/digest")
async def enable_digest(current_user: CurrentUserDep, db: SessionDep) -> dict[str, str]:
    """Subscribe the caller to the daily digest."""
    if not current_user.email:
        raise MalformedInput("identity has no email address")
    set_subscription(db, current_user.id, current_user.email, True)
    return {}


@router.delete("/digest")
async def disable_digest(current_user: CurrentUserDep, db: SessionDep) -> dict[str, str]:
    """Unsubscribe the caller from the daily digest."""
    set_subscription(db, current_user.id, current_user.email, False)
    return {}
