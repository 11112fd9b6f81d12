"""Internal maintenance endpoints, normally triggered by cron."""

from fastapi import APIRouter, Depends

from town_hall.api.v1.dependencies import MailTransportDep, SessionDep, require_admin
from town_hall.services.digest import send_digest
from town_hall.services.scoring import recompute_all

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


# Sync handlers run in the threadpool; SMTP and the recount both block.
@router.post("/recompute")
def recompute_scores(db: SessionDep) -> dict[str, int]:
    """Recount every question's score from the recorded votes."""
    return {"recomputed": recompute_all(db)}


@router.post("/digest")
def send_digests(db: SessionDep, transport: MailTransportDep) -> dict[str, bool]:
    """Email the digest of the last day's questions to subscribers."""
    return {"sent": send_digest(db, transport)}
