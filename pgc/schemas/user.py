from datetime import datetime, timezone

from pydantic import BaseModel, Field


class UserRecord(BaseModel):
    """MongoDB document for a signed-up user awaiting or past email verification."""

    email: str
    verification_code: str | None = None
    verified: bool = False
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
