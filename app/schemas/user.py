"""Request/response schemas for the user endpoints."""

from pydantic import BaseModel, ConfigDict, Field


class UserPayload(BaseModel):
    """
    JSON body for create and update.

    id is accepted but never trusted: on create the database assigns it, on
    update the id from the path wins.
    """

    model_config = ConfigDict(extra="ignore")

    id: int | None = Field(default=None, description="Ignored; see path or assigned id")
    name: str = Field(default="", max_length=255, description="Display name; empty when omitted")
    age: int | None = Field(default=None, description="Optional age")


class UserResponse(BaseModel):
    """A user as returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    age: int | None = None
