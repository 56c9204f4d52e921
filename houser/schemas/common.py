"""Response envelope shared by every JSON endpoint."""

from pydantic import BaseModel, Field


class Envelope(BaseModel):
    """Base response body: error flag plus a human-readable message."""

    error: bool = Field(default=False, description="True when the request failed")
    msg: str | None = Field(default=None, description="Failure message, null on success")
