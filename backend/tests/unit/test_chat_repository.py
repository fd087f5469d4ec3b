"""
Unit tests for Chat repository.
"""

import asyncio
from datetime import timedelta

import pytest

from chatledger.core.exceptions import NotFoundError
from chatledger.infrastructure.local.chat_repository import SqlChatRepository
from chatledger.models.chat import MessageCreate
from chatledger.models.enums import MessageRole
from chatledger.utils.datetime_utils import minutes_ago


def _user(text: str, img: str | None = None) -> MessageCreate:
    return MessageCreate.from_text(MessageRole.USER, text, img=img)


def _model(text: str) -> MessageCreate:
    return MessageCreate.from_text(MessageRole.MODEL, text)


@pytest.mark.asyncio
async def test_create_chat(session_factory, test_user_id):
    """Test creating a chat with its first message."""
    repo = SqlChatRepository(session_factory=session_factory)

    chat = await repo.create(test_user_id, _user("Hello there"))

    assert chat.id
    assert chat.user_id == test_user_id
    assert len(chat.history) == 1
    assert chat.history[0].role == MessageRole.USER
    assert chat.history[0].parts[0].text == "Hello there"


@pytest.mark.asyncio
async def test_create_chat_ids_are_unique(session_factory, test_user_id):
    repo = SqlChatRepository(session_factory=session_factory)

    chats = [await repo.create(test_user_id, _user(f"chat {i}")) for i in range(5)]

    assert len({chat.id for chat in chats}) == 5


@pytest.mark.asyncio
async def test_get_chat(session_factory, test_user_id):
    """Test getting a chat by ID."""
    repo = SqlChatRepository(session_factory=session_factory)
    created = await repo.create(test_user_id, _user("What is a monad?"))

    retrieved = await repo.get(test_user_id, created.id)

    assert retrieved.id == created.id
    assert [m.parts[0].text for m in retrieved.history] == ["What is a monad?"]


@pytest.mark.asyncio
async def test_get_chat_returns_utc_timestamps(session_factory, test_user_id):
    repo = SqlChatRepository(session_factory=session_factory)
    created = await repo.create(test_user_id, _user("when?"))

    retrieved = await repo.get(test_user_id, created.id)

    assert retrieved.created_at.utcoffset() == timedelta(0)
    assert retrieved.updated_at.utcoffset() == timedelta(0)
    assert retrieved.history[0].created_at.utcoffset() == timedelta(0)


@pytest.mark.asyncio
async def test_get_chat_of_another_user_is_not_found(session_factory, test_user_id, other_user_id):
    """Ownership mismatch looks exactly like a missing chat."""
    repo = SqlChatRepository(session_factory=session_factory)
    created = await repo.create(test_user_id, _user("private"))

    with pytest.raises(NotFoundError):
        await repo.get(other_user_id, created.id)
    with pytest.raises(NotFoundError):
        await repo.get(test_user_id, "does-not-exist")


@pytest.mark.asyncio
async def test_append_turn_preserves_order(session_factory, test_user_id):
    repo = SqlChatRepository(session_factory=session_factory)
    chat = await repo.create(test_user_id, _user("q1"))

    appended = await repo.append_turn(test_user_id, chat.id, [_model("a1")])
    assert appended == 1
    appended = await repo.append_turn(
        test_user_id,
        chat.id,
        [_user("q2", img="https://ik.imagekit.io/demo/cat.png"), _model("a2")],
    )
    assert appended == 2

    history = (await repo.get(test_user_id, chat.id)).history
    assert [(m.role, m.parts[0].text) for m in history] == [
        (MessageRole.USER, "q1"),
        (MessageRole.MODEL, "a1"),
        (MessageRole.USER, "q2"),
        (MessageRole.MODEL, "a2"),
    ]
    assert history[2].img == "https://ik.imagekit.io/demo/cat.png"
    assert history[3].img is None


@pytest.mark.asyncio
async def test_append_turn_to_missing_chat(session_factory, test_user_id):
    repo = SqlChatRepository(session_factory=session_factory)

    with pytest.raises(NotFoundError):
        await repo.append_turn(test_user_id, "missing", [_model("answer")])


@pytest.mark.asyncio
async def test_append_turn_to_another_users_chat(session_factory, test_user_id, other_user_id):
    repo = SqlChatRepository(session_factory=session_factory)
    chat = await repo.create(test_user_id, _user("mine"))

    with pytest.raises(NotFoundError):
        await repo.append_turn(other_user_id, chat.id, [_model("sneaky")])

    history = (await repo.get(test_user_id, chat.id)).history
    assert len(history) == 1


@pytest.mark.asyncio
async def test_concurrent_appends_lose_nothing(session_factory, test_user_id):
    """Concurrent turns on one chat must all land exactly once."""
    repo = SqlChatRepository(session_factory=session_factory)
    chat = await repo.create(test_user_id, _user("start"))
    turns = 12

    results = await asyncio.gather(
        *[
            repo.append_turn(test_user_id, chat.id, [_user(f"q{i}"), _model(f"a{i}")])
            for i in range(turns)
        ]
    )

    assert sum(results) == turns * 2
    history = (await repo.get(test_user_id, chat.id)).history
    assert len(history) == 1 + turns * 2
    texts = [m.parts[0].text for m in history[1:]]
    assert sorted(texts) == sorted([f"q{i}" for i in range(turns)] + [f"a{i}" for i in range(turns)])
    # Each turn's pair stays adjacent and ordered
    for user_msg, model_msg in zip(history[1::2], history[2::2]):
        assert user_msg.role == MessageRole.USER
        assert model_msg.role == MessageRole.MODEL
        assert user_msg.parts[0].text[1:] == model_msg.parts[0].text[1:]


@pytest.mark.asyncio
async def test_list_unindexed_returns_first_text(session_factory, test_user_id):
    repo = SqlChatRepository(session_factory=session_factory)
    chat = await repo.create(test_user_id, _user("orphan question"))
    await repo.append_turn(test_user_id, chat.id, [_model("answer")])

    orphans = await repo.list_unindexed()

    assert [(o.id, o.user_id, o.first_text) for o in orphans] == [
        (chat.id, test_user_id, "orphan question")
    ]


@pytest.mark.asyncio
async def test_list_unindexed_skips_recent_chats(session_factory, test_user_id):
    repo = SqlChatRepository(session_factory=session_factory)
    await repo.create(test_user_id, _user("just created"))

    orphans = await repo.list_unindexed(created_before=minutes_ago(5))

    assert orphans == []
