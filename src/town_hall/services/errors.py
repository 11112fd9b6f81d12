"""Exception hierarchy shared by the service layer and the HTTP boundary.

Each error carries the HTTP status it maps to. Handlers in
:mod:`town_hall.main` render only the generic status phrase; details stay in
the log.
"""

from __future__ import annotations

from http import HTTPStatus


class TownHallError(RuntimeError):
    """Base exception for all domain failures."""

    status_code: int = HTTPStatus.INTERNAL_SERVER_ERROR


class NotAuthenticated(TownHallError):
    """Raised when a route requires a signed-in user and none is present."""

    status_code = HTTPStatus.UNAUTHORIZED


class Forbidden(TownHallError):
    """Raised on ownership violations or when a feature is switched off."""

    status_code = HTTPStatus.FORBIDDEN


class NoSuchQuestion(TownHallError):
    """Raised when a question identifier does not reference a stored question."""

    status_code = HTTPStatus.NOT_FOUND


class InvalidDirection(TownHallError):
    """Raised when a vote token is not one of ``none``, ``up`` or ``down``."""

    status_code = HTTPStatus.BAD_REQUEST


class MalformedInput(TownHallError):
    """Raised when an identifier or request body cannot be decoded."""

    status_code = HTTPStatus.BAD_REQUEST


class BackendFailure(TownHallError):
    """Raised when storage or mail transport is unavailable.

    The unit of work has been rolled back by the time this is raised.
    """
