"""
Chat service.

Coordinates the chat store and the per-user chat index. Creating a chat is two
independent writes (chat first, then index entry); there is no cross-store
transaction, so a failure between them leaves an unlisted chat that the
IndexReconciler repairs later.
"""

from __future__ import annotations

from typing import Optional

from chatledger.core.exceptions import StorageError, ValidationError
from chatledger.core.logger import setup_logger
from chatledger.interfaces.chat_repository import IChatRepository
from chatledger.interfaces.user_chat_index_repository import IUserChatIndexRepository
from chatledger.models.chat import Chat, MessageCreate
from chatledger.models.enums import MessageRole
from chatledger.models.user_chats import ChatSummary

logger = setup_logger(__name__)

DEFAULT_TITLE_LENGTH = 40


def make_title(text: str, max_length: int = DEFAULT_TITLE_LENGTH) -> str:
    """Derive a chat title from the first user message."""
    return text[:max_length]


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


class ChatService:
    """Chat operations scoped to a verified owner."""

    def __init__(
        self,
        chat_repo: IChatRepository,
        index_repo: IUserChatIndexRepository,
        title_length: int = DEFAULT_TITLE_LENGTH,
    ):
        self._chat_repo = chat_repo
        self._index_repo = index_repo
        self._title_length = title_length

    async def start_chat(self, user_id: str, text: Optional[str]) -> str:
        """
        Create a chat from its first user message and list it for the owner.

        Args:
            user_id: Verified owner ID
            text: First user message

        Returns:
            New chat ID

        Raises:
            ValidationError: text is missing or blank
            StorageError: either write failed
        """
        if _is_blank(text):
            raise ValidationError("text is required")

        chat = await self._chat_repo.create(
            user_id,
            MessageCreate.from_text(MessageRole.USER, text),
        )
        try:
            await self._index_repo.add_summary(user_id, chat.id, make_title(text, self._title_length))
        except StorageError:
            logger.error(f"Chat {chat.id} created but not indexed for user {user_id}; left for reconciliation")
            raise

        logger.info(f"Started chat {chat.id} for user {user_id}")
        return chat.id

    async def get_chat(self, user_id: str, chat_id: str) -> Chat:
        """Get a chat owned by the user (NotFoundError otherwise)."""
        return await self._chat_repo.get(user_id, chat_id)

    async def list_chats(self, user_id: str) -> list[ChatSummary]:
        """List the user's chats in creation order; empty when there are none."""
        return await self._index_repo.list_summaries(user_id)

    async def append_turn(
        self,
        user_id: str,
        chat_id: str,
        answer: Optional[str],
        question: Optional[str] = None,
        img: Optional[str] = None,
    ) -> int:
        """
        Append one turn: an optional user question, then exactly one model answer.

        The image reference is only attached to the user question; it is
        dropped when no question is supplied.

        Returns:
            Number of messages appended (1 or 2)

        Raises:
            ValidationError: answer is missing or blank
            NotFoundError: chat does not exist or belongs to another user
            StorageError: the append failed (not retried)
        """
        if _is_blank(answer):
            raise ValidationError("answer is required")

        messages: list[MessageCreate] = []
        if not _is_blank(question):
            messages.append(MessageCreate.from_text(MessageRole.USER, question, img=img))
        elif img:
            logger.warning(f"Image supplied without a question for chat {chat_id}; ignoring it")
        messages.append(MessageCreate.from_text(MessageRole.MODEL, answer))

        return await self._chat_repo.append_turn(user_id, chat_id, messages)
