"""Data access layer."""

from .question_repo import QuestionRepository

__all__ = ["QuestionRepository"]
