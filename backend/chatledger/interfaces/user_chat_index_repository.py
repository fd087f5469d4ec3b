"""
User chat index repository interface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from chatledger.models.user_chats import ChatSummary


class IUserChatIndexRepository(ABC):
    """Abstract interface for per-user chat index persistence."""

    @abstractmethod
    async def add_summary(self, user_id: str, chat_id: str, title: str) -> ChatSummary:
        """
        Append a chat summary to the user's index, creating the index lazily.

        Adding a summary for an already indexed chat is a no-op that returns
        the existing summary.

        Raises:
            StorageError: Persistence failed
        """
        pass

    @abstractmethod
    async def list_summaries(self, user_id: str) -> list[ChatSummary]:
        """
        List the user's chat summaries in creation order.

        Returns an empty list when the user has no index yet.
        """
        pass
