"""
SQL implementation of Chat repository.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence
from uuid import uuid4

from sqlalchemy import and_, select, update
from sqlalchemy.exc import SQLAlchemyError

from chatledger.core.exceptions import NotFoundError, StorageError
from chatledger.core.logger import setup_logger
from chatledger.infrastructure.local.database import (
    ChatMessageORM,
    ChatORM,
    ChatSummaryORM,
    get_session_factory,
)
from chatledger.interfaces.chat_repository import IChatRepository
from chatledger.models.chat import Chat, Message, MessageCreate, MessagePart, UnindexedChat
from chatledger.models.enums import MessageRole
from chatledger.utils.datetime_utils import as_utc, now_utc

logger = setup_logger(__name__)


class SqlChatRepository(IChatRepository):
    """SQL implementation of chat repository."""

    def __init__(self, session_factory=None):
        self._session_factory = session_factory or get_session_factory()

    def _message_to_orm(self, chat_id: str, message: MessageCreate, created_at: datetime) -> ChatMessageORM:
        return ChatMessageORM(
            chat_id=chat_id,
            role=message.role.value,
            parts=[part.model_dump() for part in message.parts],
            img=message.img,
            created_at=created_at,
        )

    def _message_orm_to_model(self, orm: ChatMessageORM) -> Message:
        """Convert message ORM object to Pydantic model."""
        return Message(
            role=MessageRole(orm.role),
            parts=[MessagePart(**part) for part in (orm.parts or [])],
            img=orm.img,
            created_at=as_utc(orm.created_at),
        )

    def _chat_orm_to_model(self, orm: ChatORM, messages: Sequence[ChatMessageORM]) -> Chat:
        """Convert chat ORM object and its rows to Pydantic model."""
        return Chat(
            id=orm.id,
            user_id=orm.user_id,
            history=[self._message_orm_to_model(m) for m in messages],
            created_at=as_utc(orm.created_at),
            updated_at=as_utc(orm.updated_at),
        )

    async def create(self, user_id: str, initial_message: MessageCreate) -> Chat:
        """Create a chat holding a single initial message."""
        now = now_utc()
        chat_orm = ChatORM(id=str(uuid4()), user_id=user_id, created_at=now, updated_at=now)
        message_orm = self._message_to_orm(chat_orm.id, initial_message, now)
        try:
            async with self._session_factory() as session:
                session.add(chat_orm)
                await session.flush()
                session.add(message_orm)
                await session.commit()
        except SQLAlchemyError as e:
            logger.exception(f"Failed to create chat for user {user_id}")
            raise StorageError("Failed to create chat") from e
        return self._chat_orm_to_model(chat_orm, [message_orm])

    async def get(self, user_id: str, chat_id: str) -> Chat:
        """Get a chat owned by the user."""
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(ChatORM).where(
                        and_(
                            ChatORM.id == chat_id,
                            ChatORM.user_id == user_id,
                        )
                    )
                )
                chat_orm = result.scalar_one_or_none()
                if not chat_orm:
                    raise NotFoundError(f"Chat {chat_id} not found")

                result = await session.execute(
                    select(ChatMessageORM)
                    .where(ChatMessageORM.chat_id == chat_id)
                    .order_by(ChatMessageORM.seq.asc())
                )
                return self._chat_orm_to_model(chat_orm, result.scalars().all())
        except SQLAlchemyError as e:
            logger.exception(f"Failed to load chat {chat_id}")
            raise StorageError("Failed to load chat") from e

    async def append_turn(
        self,
        user_id: str,
        chat_id: str,
        messages: Sequence[MessageCreate],
    ) -> int:
        """Atomically append messages to the end of a chat's history."""
        if not messages:
            return 0
        now = now_utc()
        try:
            async with self._session_factory() as session:
                # Owner-scoped write first: takes the row lock and proves ownership
                result = await session.execute(
                    update(ChatORM)
                    .where(
                        and_(
                            ChatORM.id == chat_id,
                            ChatORM.user_id == user_id,
                        )
                    )
                    .values(updated_at=now)
                )
                if result.rowcount == 0:
                    await session.rollback()
                    raise NotFoundError(f"Chat {chat_id} not found")

                session.add_all([self._message_to_orm(chat_id, m, now) for m in messages])
                await session.commit()
        except SQLAlchemyError as e:
            logger.exception(f"Failed to append turn to chat {chat_id}")
            raise StorageError("Failed to append turn") from e
        return len(messages)

    async def list_unindexed(
        self,
        limit: int = 200,
        created_before: Optional[datetime] = None,
    ) -> list[UnindexedChat]:
        """List chats that have no summary in their owner's chat index."""
        try:
            async with self._session_factory() as session:
                query = (
                    select(ChatORM)
                    .outerjoin(ChatSummaryORM, ChatSummaryORM.chat_id == ChatORM.id)
                    .where(ChatSummaryORM.seq.is_(None))
                    .order_by(ChatORM.created_at.asc())
                    .limit(limit)
                )
                if created_before is not None:
                    query = query.where(ChatORM.created_at < created_before)
                result = await session.execute(query)
                chats = result.scalars().all()

                orphans = []
                for chat_orm in chats:
                    first = await session.execute(
                        select(ChatMessageORM)
                        .where(ChatMessageORM.chat_id == chat_orm.id)
                        .order_by(ChatMessageORM.seq.asc())
                        .limit(1)
                    )
                    first_orm = first.scalar_one_or_none()
                    first_text = ""
                    if first_orm and first_orm.parts:
                        first_text = first_orm.parts[0].get("text", "")
                    orphans.append(
                        UnindexedChat(
                            id=chat_orm.id,
                            user_id=chat_orm.user_id,
                            first_text=first_text,
                            created_at=as_utc(chat_orm.created_at),
                        )
                    )
                return orphans
        except SQLAlchemyError as e:
            logger.exception("Failed to scan for unindexed chats")
            raise StorageError("Failed to scan for unindexed chats") from e
