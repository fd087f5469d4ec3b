"""
Unit tests for IndexReconciler against the SQL repositories.
"""

from datetime import timedelta
from unittest.mock import AsyncMock

import pytest

from chatledger.core.exceptions import StorageError
from chatledger.infrastructure.local.chat_repository import SqlChatRepository
from chatledger.infrastructure.local.user_chat_index_repository import SqlUserChatIndexRepository
from chatledger.models.chat import MessageCreate
from chatledger.models.enums import MessageRole
from chatledger.services.chat_service import ChatService
from chatledger.services.index_reconciler import IndexReconciler
from chatledger.utils.datetime_utils import now_utc


def _later():
    return now_utc() + timedelta(minutes=10)


@pytest.mark.asyncio
async def test_reconcile_indexes_orphaned_chat(session_factory, test_user_id):
    chat_repo = SqlChatRepository(session_factory=session_factory)
    index_repo = SqlUserChatIndexRepository(session_factory=session_factory)
    text = "Explain recursion in programming with an example"
    orphan = await chat_repo.create(test_user_id, MessageCreate.from_text(MessageRole.USER, text))

    reconciler = IndexReconciler(chat_repo, index_repo)
    repaired = await reconciler.reconcile(now=_later())

    assert repaired == 1
    summaries = await index_repo.list_summaries(test_user_id)
    assert [(s.id, s.title) for s in summaries] == [(orphan.id, text[:40])]

    # Second pass has nothing left to do
    assert await reconciler.reconcile(now=_later()) == 0


@pytest.mark.asyncio
async def test_reconcile_ignores_indexed_chats(session_factory, test_user_id):
    chat_repo = SqlChatRepository(session_factory=session_factory)
    index_repo = SqlUserChatIndexRepository(session_factory=session_factory)
    service = ChatService(chat_repo, index_repo)
    await service.start_chat(test_user_id, "already listed")

    repaired = await IndexReconciler(chat_repo, index_repo).reconcile(now=_later())

    assert repaired == 0
    assert len(await index_repo.list_summaries(test_user_id)) == 1


@pytest.mark.asyncio
async def test_reconcile_leaves_chats_inside_grace_window(session_factory, test_user_id):
    chat_repo = SqlChatRepository(session_factory=session_factory)
    index_repo = SqlUserChatIndexRepository(session_factory=session_factory)
    await chat_repo.create(test_user_id, MessageCreate.from_text(MessageRole.USER, "in flight"))

    repaired = await IndexReconciler(chat_repo, index_repo, grace_minutes=5).reconcile()

    assert repaired == 0
    assert await index_repo.list_summaries(test_user_id) == []


@pytest.mark.asyncio
async def test_reconcile_continues_after_failed_repair(session_factory, test_user_id):
    chat_repo = SqlChatRepository(session_factory=session_factory)
    for text in ("first", "second"):
        await chat_repo.create(test_user_id, MessageCreate.from_text(MessageRole.USER, text))
    index_repo = AsyncMock()
    index_repo.add_summary.side_effect = [StorageError("db down"), None]

    repaired = await IndexReconciler(chat_repo, index_repo).reconcile(now=_later())

    assert repaired == 1
    assert index_repo.add_summary.await_count == 2
