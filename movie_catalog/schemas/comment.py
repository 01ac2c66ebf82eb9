from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

COMMENT_MIN_LENGTH = 10


class CommentPayload(BaseModel):
    """Body accepted when creating or replacing a comment.

    ``movie_id`` is optional on create because the route already names the
    movie; replacement requests must repeat it.
    """

    id: int | None = Field(None, description="Required when replacing an existing comment")
    text: str = Field(..., min_length=COMMENT_MIN_LENGTH, max_length=4000)
    important: bool = False
    movie_id: int | None = Field(None, description="Movie the comment belongs to")


class CommentView(BaseModel):
    """Comment as returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    text: str
    important: bool
    movie_id: int
