"""
Database configuration and ORM models.

Chats and user chat indexes are two independent aggregates. Each one is a
parent row plus append-only child rows whose autoincrement key defines order.
"""

from functools import lru_cache
from uuid import uuid4

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from chatledger.core.config import get_settings
from chatledger.utils.datetime_utils import now_utc


class Base(DeclarativeBase):
    """SQLAlchemy declarative base."""

    pass


# ===========================================
# ORM Models
# ===========================================


class ChatORM(Base):
    """Chat ORM model."""

    __tablename__ = "chats"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    user_id = Column(String(255), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=now_utc, index=True)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)


class ChatMessageORM(Base):
    """Chat message ORM model (one row per history entry)."""

    __tablename__ = "chat_messages"

    # Insertion sequence; defines conversation order
    seq = Column(Integer, primary_key=True, autoincrement=True)
    chat_id = Column(String(36), ForeignKey("chats.id"), nullable=False, index=True)
    role = Column(String(10), nullable=False)
    parts = Column(JSON, nullable=False, default=list)
    img = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_utc)


class UserChatIndexORM(Base):
    """Per-user chat index ORM model."""

    __tablename__ = "user_chat_indexes"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    user_id = Column(String(255), nullable=False, unique=True)
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)


class ChatSummaryORM(Base):
    """Chat summary ORM model (one row per indexed chat)."""

    __tablename__ = "chat_summaries"

    # Insertion sequence; defines listing order
    seq = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        String(255),
        ForeignKey("user_chat_indexes.user_id"),
        nullable=False,
        index=True,
    )
    chat_id = Column(String(36), nullable=False, unique=True)
    title = Column(String(200), nullable=False, default="")
    created_at = Column(DateTime(timezone=True), default=now_utc)


# ===========================================
# Database Initialization
# ===========================================


@lru_cache()
def get_engine() -> AsyncEngine:
    """Get async engine instance."""
    settings = get_settings()
    return create_async_engine(settings.DATABASE_URL, echo=settings.DEBUG, pool_pre_ping=True)


def get_session_factory(engine: AsyncEngine | None = None):
    """Get async session factory."""
    return sessionmaker(engine or get_engine(), class_=AsyncSession, expire_on_commit=False)


def insert_ignoring_conflicts(session: AsyncSession, model, index_elements: list[str], **values):
    """
    Build an INSERT ... ON CONFLICT DO NOTHING for the session's dialect.

    Lets concurrent writers race on a unique key without a read-then-write.
    """
    dialect = postgresql if session.bind.dialect.name == "postgresql" else sqlite
    return (
        dialect.insert(model)
        .values(**values)
        .on_conflict_do_nothing(index_elements=index_elements)
    )


async def init_db(engine: AsyncEngine | None = None):
    """Initialize database tables."""
    engine = engine or get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine():
    """Close pooled connections."""
    if get_engine.cache_info().currsize:
        await get_engine().dispose()
        get_engine.cache_clear()
