"""
Signing helpers for client-side upload credentials.
"""

from __future__ import annotations

import hashlib
import hmac


def sign_upload_token(private_key: str, token: str, expire: int) -> str:
    """Return the hex HMAC-SHA1 signature ImageKit expects for token + expire."""
    message = f"{token}{expire}".encode("utf-8")
    return hmac.new(private_key.encode("utf-8"), message, hashlib.sha1).hexdigest()
