"""Abstract interfaces for infrastructure abstraction."""

from chatledger.interfaces.auth_provider import IAuthProvider, User
from chatledger.interfaces.chat_repository import IChatRepository
from chatledger.interfaces.upload_credential_provider import IUploadCredentialProvider
from chatledger.interfaces.user_chat_index_repository import IUserChatIndexRepository

__all__ = [
    "IAuthProvider",
    "User",
    "IChatRepository",
    "IUserChatIndexRepository",
    "IUploadCredentialProvider",
]
