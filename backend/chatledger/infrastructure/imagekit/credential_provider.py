"""
ImageKit client-upload credential provider.
"""

from __future__ import annotations

import time
from typing import Callable
from uuid import uuid4

from chatledger.core.config import Settings
from chatledger.core.security import sign_upload_token
from chatledger.interfaces.upload_credential_provider import IUploadCredentialProvider
from chatledger.models.upload import UploadCredential


class ImageKitCredentialProvider(IUploadCredentialProvider):
    """
    Issues the token/expire/signature triple ImageKit's upload API checks.

    The private key never leaves the server; clients receive only the
    signature and the public key.
    """

    def __init__(self, settings: Settings, clock: Callable[[], float] = time.time):
        if not settings.IMAGE_KIT_PRIVATE_KEY:
            raise ValueError("IMAGE_KIT_PRIVATE_KEY must be set for upload signing")
        self._private_key = settings.IMAGE_KIT_PRIVATE_KEY
        self._public_key = settings.IMAGE_KIT_PUBLIC_KEY
        self._url_endpoint = settings.IMAGE_KIT_ENDPOINT
        self._ttl_seconds = settings.UPLOAD_TOKEN_TTL_SECONDS
        self._clock = clock

    def issue(self) -> UploadCredential:
        token = str(uuid4())
        expire = int(self._clock()) + self._ttl_seconds
        return UploadCredential(
            token=token,
            expire=expire,
            signature=sign_upload_token(self._private_key, token, expire),
            public_key=self._public_key,
            url_endpoint=self._url_endpoint,
        )
