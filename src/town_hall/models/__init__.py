"""SQLAlchemy models for the Town Hall application."""

from .digest import DigestSubscription
from .question import Question
from .vote import VoteEntry

__all__ = [
    "DigestSubscription",
    "Question",
    "VoteEntry",
]
