"""Business logic services for the Town Hall application."""

from .direction import VoteDirection
from .errors import (
    BackendFailure,
    Forbidden,
    InvalidDirection,
    MalformedInput,
    NoSuchQuestion,
    NotAuthenticated,
    TownHallError,
)

__all__ = [
    "VoteDirection",
    "TownHallError",
    "NotAuthenticated",
    "Forbidden",
    "NoSuchQuestion",
    "InvalidDirection",
    "MalformedInput",
    "BackendFailure",
]
