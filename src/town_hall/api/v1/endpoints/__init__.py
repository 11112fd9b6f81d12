"""API endpoint modules for version 1."""

from .admin import router as admin_router
from .questions import router as questions_router
from .status import router as status_router
from .votes import router as votes_router

__all__ = [
    "admin_router",
    "questions_router",
    "status_router",
    "votes_router",
]
