"""Shared API dependencies for authentication and common functionality."""

import logging
import re
import secrets
from typing import Annotated

from fastapi import Depends, Header, Path
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from town_hall.core.security import Principal, decode_access_token
from town_hall.core.settings import settings
from town_hall.db.session import get_db
from town_hall.services.errors import Forbidden, MalformedInput, NotAuthenticated
from town_hall.services.mail import MailTransport, get_mail_transport

logger = logging.getLogger(__name__)

# Missing credentials are reported as NotAuthenticated rather than by FastAPI.
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]

_QUESTION_ID = re.compile(r"-?[0-9]{1,18}")


def get_optional_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> Principal | None:
    """Return the signed-in caller, or None for anonymous requests.

    An invalid token is treated the same as no token.
    """
    if credentials is None:
        return None
    return decode_access_token(credentials.credentials)


def get_current_user(
    user: Annotated[Principal | None, Depends(get_optional_user)],
) -> Principal:
    """Return the signed-in caller.

    Raises:
        NotAuthenticated: If the request carries no valid bearer token.
    """
    if user is None:
        raise NotAuthenticated("sign-in required")
    return user


def get_question_id(question_id: Annotated[str, Path()]) -> int:
    """Decode the numeric question identifier from the URL path.

    Raises:
        MalformedInput: If the identifier is not an integer.
    """
    if _QUESTION_ID.fullmatch(question_id) is None:
        logger.debug("Got unexpected id: %s", question_id)
        raise MalformedInput(f"bad question id {question_id!r}")
    return int(question_id)


def require_admin(
    x_admin_token: Annotated[str | None, Header()] = None,
) -> None:
    """Allow the request only if it carries the configured admin token.

    When no ``ADMIN_TOKEN`` is configured the admin routes are expected to be
    reachable from trusted networks only and are left open.
    """
    expected = settings.admin_token
    if expected is None:
        return
    if x_admin_token is None or not secrets.compare_digest(x_admin_token, expected):
        raise Forbidden("admin token required")


def get_mail_transport_dep() -> MailTransport:
    """Return the shared mail transport."""
    return get_mail_transport()


OptionalUserDep = Annotated[Principal | None, Depends(get_optional_user)]
CurrentUserDep = Annotated[Principal, Depends(get_current_user)]
QuestionIdDep = Annotated[int, Depends(get_question_id)]
MailTransportDep = Annotated[MailTransport, Depends(get_mail_transport_dep)]
