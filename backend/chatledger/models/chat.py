"""
Chat and message models.

A chat owns an append-only history; messages are immutable once stored.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from chatledger.models.enums import MessageRole


class MessagePart(BaseModel):
    """A single content part of a message."""

    text: str = Field("", max_length=100000)


class MessageCreate(BaseModel):
    """Schema for a message about to be appended."""

    role: MessageRole
    parts: list[MessagePart] = Field(..., min_length=1)
    img: Optional[str] = Field(None, max_length=2000, description="Uploaded image reference")

    @classmethod
    def from_text(cls, role: MessageRole, text: str, img: Optional[str] = None) -> "MessageCreate":
        return cls(role=role, parts=[MessagePart(text=text)], img=img or None)


class Message(MessageCreate):
    """Stored chat message."""

    created_at: datetime


class Chat(BaseModel):
    """A conversation owned by a single user."""

    id: str
    user_id: str = Field(..., description="Owner user ID")
    history: list[Message]
    created_at: datetime
    updated_at: datetime


# ===========================================
# API payloads
# ===========================================


class StartChatRequest(BaseModel):
    """Body of POST /api/chats."""

    text: Optional[str] = Field(None, max_length=100000)


class AppendTurnRequest(BaseModel):
    """Body of PUT /api/chats/{id}."""

    question: Optional[str] = Field(None, max_length=100000)
    answer: Optional[str] = Field(None, max_length=100000)
    img: Optional[str] = Field(None, max_length=2000)


class AppendTurnResult(BaseModel):
    """Acknowledgement returned after a turn was appended."""

    id: str
    appended: int


class UnindexedChat(BaseModel):
    """A chat that has no entry in its owner's chat index."""

    id: str
    user_id: str
    first_text: str = ""
    created_at: datetime
