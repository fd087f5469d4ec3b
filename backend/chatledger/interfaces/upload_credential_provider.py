"""
Upload credential provider interface.
"""

from abc import ABC, abstractmethod

from chatledger.models.upload import UploadCredential


class IUploadCredentialProvider(ABC):
    """Issues short-lived credentials for direct client uploads."""

    @abstractmethod
    def issue(self) -> UploadCredential:
        """Issue a fresh upload credential."""
        pass
