"""Session status schema."""

from pydantic import BaseModel, ConfigDict, Field


class Status(BaseModel):
    """Who the caller is and which features are available to them."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = ""
    name: str = ""
    login_url: str = Field("", alias="loginUrl")
    logout_url: str = Field("", alias="logoutUrl")
    question_submission_enabled: bool = Field(
        False, alias="questionSubmissionEnabled"
    )
