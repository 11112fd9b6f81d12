"""Question-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class QuestionCreate(BaseModel):
    """Schema for submitting a new question."""

    content: str = Field(..., min_length=1, max_length=5000)
    anonymous: bool = False


class SubmittedQuestion(BaseModel):
    """Schema returned after a successful submission."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    content: str
    anonymous: bool
    author_name: str | None = Field(None, alias="authorName")
    timestamp: datetime
    score: int


class ClientQuestion(BaseModel):
    """A question as shown to a particular caller."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    anonymous: bool
    content: str
    author_name: str | None = Field(None, alias="authorName")
    timestamp: datetime
    score: int
    my_vote: str = Field(..., alias="myVote")
    my_question: bool = Field(..., alias="myQuestion")


class QuestionList(BaseModel):
    """Schema for the ranked question list."""

    questions: list[ClientQuestion]
