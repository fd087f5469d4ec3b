"""
Repairs chats that were created but never added to their owner's index.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from chatledger.core.exceptions import StorageError
from chatledger.core.logger import setup_logger
from chatledger.interfaces.chat_repository import IChatRepository
from chatledger.interfaces.user_chat_index_repository import IUserChatIndexRepository
from chatledger.services.chat_service import DEFAULT_TITLE_LENGTH, make_title
from chatledger.utils.datetime_utils import minutes_ago

logger = setup_logger(__name__)

# Chats younger than this may still be inside a normal create
DEFAULT_GRACE_MINUTES = 1


class IndexReconciler:
    """Adds missing summaries for orphaned chats."""

    def __init__(
        self,
        chat_repo: IChatRepository,
        index_repo: IUserChatIndexRepository,
        title_length: int = DEFAULT_TITLE_LENGTH,
        grace_minutes: int = DEFAULT_GRACE_MINUTES,
    ):
        self._chat_repo = chat_repo
        self._index_repo = index_repo
        self._title_length = title_length
        self._grace_minutes = grace_minutes

    async def reconcile(self, limit: int = 200, now: Optional[datetime] = None) -> int:
        """
        Run one repair pass.

        Args:
            limit: Max chats repaired in this pass
            now: Reference time for the grace window

        Returns:
            Number of chats added to an index
        """
        orphans = await self._chat_repo.list_unindexed(
            limit=limit,
            created_before=minutes_ago(self._grace_minutes, now),
        )
        repaired = 0
        for orphan in orphans:
            try:
                await self._index_repo.add_summary(
                    orphan.user_id,
                    orphan.id,
                    make_title(orphan.first_text, self._title_length),
                )
            except StorageError as e:
                logger.warning(f"Could not index orphaned chat {orphan.id}: {e}")
                continue
            repaired += 1
            logger.info(f"Indexed orphaned chat {orphan.id} for user {orphan.user_id}")

        if orphans:
            logger.info(f"Index reconciliation repaired {repaired}/{len(orphans)} chats")
        return repaired
