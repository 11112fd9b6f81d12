"""Version 1 API endpoints."""

from .endpoints import (
    admin_router,
    questions_router,
    status_router,
    votes_router,
)

__all__ = [
    "admin_router",
    "questions_router",
    "status_router",
    "votes_router",
]
