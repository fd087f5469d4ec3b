"""
Dependency injection for API endpoints.

This module provides FastAPI dependencies that inject the correct
infrastructure implementations based on environment configuration.
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Header, HTTPException, status

from chatledger.core.config import get_settings
from chatledger.core.exceptions import AuthenticationError
from chatledger.core.logger import setup_logger
from chatledger.interfaces.auth_provider import IAuthProvider, User
from chatledger.interfaces.chat_repository import IChatRepository
from chatledger.interfaces.upload_credential_provider import IUploadCredentialProvider
from chatledger.interfaces.user_chat_index_repository import IUserChatIndexRepository
from chatledger.services.chat_service import ChatService
from chatledger.services.index_reconciler import IndexReconciler

logger = setup_logger(__name__)


# ===========================================
# Repository Dependencies
# ===========================================


@lru_cache()
def get_chat_repository() -> IChatRepository:
    """Get chat repository instance."""
    from chatledger.infrastructure.local.chat_repository import SqlChatRepository
    return SqlChatRepository()


@lru_cache()
def get_user_chat_index_repository() -> IUserChatIndexRepository:
    """Get user chat index repository instance."""
    from chatledger.infrastructure.local.user_chat_index_repository import SqlUserChatIndexRepository
    return SqlUserChatIndexRepository()


# ===========================================
# Service Dependencies
# ===========================================


def get_chat_service(
    chat_repo: IChatRepository = Depends(get_chat_repository),
    index_repo: IUserChatIndexRepository = Depends(get_user_chat_index_repository),
) -> ChatService:
    """Get chat service bound to the configured repositories."""
    settings = get_settings()
    return ChatService(chat_repo, index_repo, title_length=settings.TITLE_MAX_LENGTH)


def get_index_reconciler() -> IndexReconciler:
    """Get index reconciler bound to the configured repositories."""
    settings = get_settings()
    return IndexReconciler(
        get_chat_repository(),
        get_user_chat_index_repository(),
        title_length=settings.TITLE_MAX_LENGTH,
    )


# ===========================================
# Provider Dependencies
# ===========================================


@lru_cache()
def get_auth_provider() -> IAuthProvider:
    """Get auth provider instance."""
    settings = get_settings()
    if settings.AUTH_PROVIDER == "clerk":
        from chatledger.infrastructure.auth.clerk_auth import ClerkAuthProvider

        return ClerkAuthProvider(settings)

    from chatledger.infrastructure.local.mock_auth import MockAuthProvider
    return MockAuthProvider()


@lru_cache()
def get_upload_credential_provider() -> IUploadCredentialProvider:
    """Get upload credential provider instance."""
    from chatledger.infrastructure.imagekit.credential_provider import ImageKitCredentialProvider
    try:
        return ImageKitCredentialProvider(get_settings())
    except ValueError as e:
        logger.error(f"Upload signing is not configured: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Upload service unavailable",
        )


# ===========================================
# User Authentication
# ===========================================


def _unauthenticated() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Unauthenticated",
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    authorization: Annotated[str | None, Header()] = None,
    auth_provider: IAuthProvider = Depends(get_auth_provider),
) -> User:
    """
    Get current authenticated user.

    The reason for a rejection is logged server-side only; clients always
    get the same opaque 401.
    """
    if not authorization:
        logger.warning("Rejected request: missing Authorization header")
        raise _unauthenticated()

    # Extract token from "Bearer <token>"
    try:
        scheme, token = authorization.split()
        if scheme.lower() != "bearer":
            raise ValueError("Invalid scheme")
    except ValueError:
        logger.warning("Rejected request: malformed Authorization header")
        raise _unauthenticated()

    try:
        return await auth_provider.verify_token(token)
    except AuthenticationError as e:
        logger.warning(f"Rejected request: {e.message}")
        raise _unauthenticated()


# ===========================================
# Type Aliases for Dependency Injection
# ===========================================

ChatSvc = Annotated[ChatService, Depends(get_chat_service)]
UploadCredentialProvider = Annotated[IUploadCredentialProvider, Depends(get_upload_credential_provider)]
CurrentUser = Annotated[User, Depends(get_current_user)]
