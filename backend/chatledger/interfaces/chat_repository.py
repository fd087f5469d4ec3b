"""
Chat repository interface.

Defines the contract for chat document persistence.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional, Sequence

from chatledger.models.chat import Chat, MessageCreate, UnindexedChat


class IChatRepository(ABC):
    """Abstract interface for chat persistence."""

    @abstractmethod
    async def create(self, user_id: str, initial_message: MessageCreate) -> Chat:
        """
        Create a chat holding a single initial message.

        Args:
            user_id: Owner user ID
            initial_message: First message of the history

        Returns:
            Created chat (with a freshly generated, unique ID)

        Raises:
            StorageError: Persistence failed
        """
        pass

    @abstractmethod
    async def get(self, user_id: str, chat_id: str) -> Chat:
        """
        Get a chat owned by the user.

        Args:
            user_id: Owner user ID
            chat_id: Chat ID

        Returns:
            Chat with its full history in conversation order

        Raises:
            NotFoundError: Chat does not exist or belongs to another user
        """
        pass

    @abstractmethod
    async def append_turn(
        self,
        user_id: str,
        chat_id: str,
        messages: Sequence[MessageCreate],
    ) -> int:
        """
        Atomically append messages, in order, to the end of a chat's history.

        Existing history is never read back, rewritten or reordered.

        Args:
            user_id: Owner user ID
            chat_id: Chat ID
            messages: Messages to append

        Returns:
            Number of messages appended

        Raises:
            NotFoundError: Chat does not exist or belongs to another user
            StorageError: Persistence failed
        """
        pass

    @abstractmethod
    async def list_unindexed(
        self,
        limit: int = 200,
        created_before: Optional[datetime] = None,
    ) -> list[UnindexedChat]:
        """
        List chats that have no summary in their owner's chat index.

        Args:
            limit: Max chats
            created_before: Only consider chats created before this instant

        Returns:
            Orphaned chats, oldest first
        """
        pass
