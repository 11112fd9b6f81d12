"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .question import ClientQuestion, QuestionCreate, QuestionList, SubmittedQuestion
from .status import Status
from .vote import VoteCreate

__all__ = [
    "ClientQuestion", "QuestionCreate", "QuestionList", "SubmittedQuestion",
    "Status",
    "VoteCreate",
]
