"""Recipient model for notification mentions."""

from pydantic import BaseModel, Field


class Recipient(BaseModel):
    """Person to ping in a notification."""

    name: str = Field(..., description="Display name used in the mention")
    identifier: str = Field(..., description="User identifier (email, case sensitive)")
