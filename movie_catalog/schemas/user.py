from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class UserView(BaseModel):
    """Public projection of a catalog user."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str | None = None
