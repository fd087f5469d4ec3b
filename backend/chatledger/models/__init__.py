"""Pydantic models (schemas) for the application."""

from chatledger.models.chat import (
    AppendTurnRequest,
    AppendTurnResult,
    Chat,
    Message,
    MessageCreate,
    MessagePart,
    StartChatRequest,
    UnindexedChat,
)
from chatledger.models.enums import MessageRole
from chatledger.models.upload import UploadCredential
from chatledger.models.user_chats import ChatSummary

__all__ = [
    # Enums
    "MessageRole",
    # Chat
    "Chat",
    "Message",
    "MessageCreate",
    "MessagePart",
    "StartChatRequest",
    "UnindexedChat",
    "AppendTurnRequest",
    "AppendTurnResult",
    # Index
    "ChatSummary",
    # Upload
    "UploadCredential",
]
