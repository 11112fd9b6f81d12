"""Vote-related Pydantic schemas."""

from pydantic import BaseModel, Field


class VoteCreate(BaseModel):
    """Schema for casting a vote.

    The token is validated by ``VoteDirection.parse`` so an unknown value is
    reported as an invalid direction rather than a schema error.
    """

    vote: str = Field(..., description='One of "up", "down" or "none"')
