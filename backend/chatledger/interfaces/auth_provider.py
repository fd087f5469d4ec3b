"""
Authentication provider interface.
"""

from abc import ABC, abstractmethod
from typing import Optional

from pydantic import BaseModel


class User(BaseModel):
    """Verified caller identity."""

    id: str
    email: Optional[str] = None
    display_name: Optional[str] = None


class IAuthProvider(ABC):
    """Verifies bearer credentials and resolves them to a user."""

    @abstractmethod
    async def verify_token(self, token: str) -> User:
        """
        Verify a bearer token.

        Args:
            token: Raw bearer token

        Returns:
            Verified user

        Raises:
            AuthenticationError: Token is missing, malformed or invalid
        """
        pass
