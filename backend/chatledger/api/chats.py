"""
Chat API endpoints.

Every route resolves the caller through CurrentUser; the owner is never
taken from the request body.
"""

from fastapi import APIRouter, HTTPException, status

from chatledger.api.deps import ChatSvc, CurrentUser
from chatledger.core.exceptions import NotFoundError, StorageError, ValidationError
from chatledger.models.chat import AppendTurnRequest, AppendTurnResult, Chat, StartChatRequest
from chatledger.models.user_chats import ChatSummary

router = APIRouter()


def _server_error(message: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=message)


@router.get("/userchats", response_model=list[ChatSummary])
async def list_user_chats(user: CurrentUser, service: ChatSvc):
    """List the caller's chats (empty list when there are none)."""
    try:
        return await service.list_chats(user.id)
    except StorageError:
        raise _server_error("Error fetching userchats!")


@router.get("/chats/{chat_id}", response_model=Chat)
async def get_chat(chat_id: str, user: CurrentUser, service: ChatSvc):
    """Get a chat with its full history."""
    try:
        return await service.get_chat(user.id, chat_id)
    except NotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Chat not found",
        )
    except StorageError:
        raise _server_error("Error fetching chat!")


@router.post("/chats", response_model=str, status_code=status.HTTP_201_CREATED)
async def create_chat(request: StartChatRequest, user: CurrentUser, service: ChatSvc):
    """Start a chat from its first message; returns the new chat ID."""
    try:
        return await service.start_chat(user.id, request.text)
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message,
        )
    except StorageError:
        raise _server_error("Error creating chat!")


@router.put("/chats/{chat_id}", response_model=AppendTurnResult)
async def append_turn(
    chat_id: str,
    request: AppendTurnRequest,
    user: CurrentUser,
    service: ChatSvc,
):
    """Append a question/answer turn to a chat."""
    try:
        appended = await service.append_turn(
            user.id,
            chat_id,
            answer=request.answer,
            question=request.question,
            img=request.img,
        )
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message,
        )
    except NotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Chat not found",
        )
    except StorageError:
        raise _server_error("Error adding conversation!")
    return AppendTurnResult(id=chat_id, appended=appended)
