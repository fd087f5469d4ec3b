"""
Mock authentication provider for local development.
"""

from chatledger.core.exceptions import AuthenticationError
from chatledger.interfaces.auth_provider import IAuthProvider, User


class MockAuthProvider(IAuthProvider):
    """Mock auth provider that treats the bearer token as the user ID."""

    async def verify_token(self, token: str) -> User:
        """
        Verify token (mock implementation).

        Any non-blank token is accepted and treated as user_id.
        """
        user_id = (token or "").strip()
        if not user_id:
            raise AuthenticationError("Empty token")
        return User(id=user_id, email=f"{user_id}@example.com", display_name=user_id)
