"""
Per-user chat index models.

The index is a denormalized listing of a user's chats so that listing does
not have to load full histories.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class ChatSummary(BaseModel):
    """Listing entry for a chat."""

    id: str = Field(..., description="Chat ID")
    title: str = Field("", max_length=200)
    created_at: datetime

