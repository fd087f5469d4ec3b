"""
SQL implementation of User chat index repository.
"""

from __future__ import annotations

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError

from chatledger.core.exceptions import StorageError
from chatledger.core.logger import setup_logger
from chatledger.infrastructure.local.database import (
    ChatSummaryORM,
    UserChatIndexORM,
    get_session_factory,
    insert_ignoring_conflicts,
)
from chatledger.interfaces.user_chat_index_repository import IUserChatIndexRepository
from chatledger.models.user_chats import ChatSummary
from chatledger.utils.datetime_utils import as_utc, now_utc

logger = setup_logger(__name__)


class SqlUserChatIndexRepository(IUserChatIndexRepository):
    """SQL implementation of user chat index repository."""

    def __init__(self, session_factory=None):
        self._session_factory = session_factory or get_session_factory()

    def _summary_orm_to_model(self, orm: ChatSummaryORM) -> ChatSummary:
        """Convert summary ORM object to Pydantic model."""
        return ChatSummary(
            id=orm.chat_id,
            title=orm.title or "",
            created_at=as_utc(orm.created_at),
        )

    async def add_summary(self, user_id: str, chat_id: str, title: str) -> ChatSummary:
        """Append a chat summary to the user's index, creating the index lazily."""
        now = now_utc()
        try:
            async with self._session_factory() as session:
                # Lazily create the index; a concurrent creator wins silently
                await session.execute(
                    insert_ignoring_conflicts(
                        session,
                        UserChatIndexORM,
                        ["user_id"],
                        user_id=user_id,
                        created_at=now,
                        updated_at=now,
                    )
                )
                await session.execute(
                    update(UserChatIndexORM)
                    .where(UserChatIndexORM.user_id == user_id)
                    .values(updated_at=now)
                )
                # At most one summary per chat, ever
                await session.execute(
                    insert_ignoring_conflicts(
                        session,
                        ChatSummaryORM,
                        ["chat_id"],
                        user_id=user_id,
                        chat_id=chat_id,
                        title=title,
                        created_at=now,
                    )
                )
                await session.commit()

                result = await session.execute(
                    select(ChatSummaryORM).where(ChatSummaryORM.chat_id == chat_id)
                )
                return self._summary_orm_to_model(result.scalar_one())
        except SQLAlchemyError as e:
            logger.exception(f"Failed to index chat {chat_id} for user {user_id}")
            raise StorageError("Failed to update chat index") from e

    async def list_summaries(self, user_id: str) -> list[ChatSummary]:
        """List the user's chat summaries in creation order."""
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(ChatSummaryORM)
                    .where(ChatSummaryORM.user_id == user_id)
                    .order_by(ChatSummaryORM.seq.asc())
                )
                return [self._summary_orm_to_model(orm) for orm in result.scalars().all()]
        except SQLAlchemyError as e:
            logger.exception(f"Failed to list chat index for user {user_id}")
            raise StorageError("Failed to list chats") from e
