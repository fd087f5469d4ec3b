"""
Unit tests for the ImageKit upload credential provider.
"""

import pytest

from chatledger.core.config import Settings
from chatledger.core.security import sign_upload_token
from chatledger.infrastructure.imagekit.credential_provider import ImageKitCredentialProvider


def _settings(**overrides) -> Settings:
    values = {
        "IMAGE_KIT_ENDPOINT": "https://ik.imagekit.io/demo",
        "IMAGE_KIT_PUBLIC_KEY": "public_test",
        "IMAGE_KIT_PRIVATE_KEY": "private_test",
        "UPLOAD_TOKEN_TTL_SECONDS": 600,
    }
    values.update(overrides)
    return Settings(**values)


def test_sign_upload_token_is_hmac_sha1_hex():
    signature = sign_upload_token("private_test", "token", 1700000000)

    assert len(signature) == 40
    assert int(signature, 16) >= 0
    assert signature == sign_upload_token("private_test", "token", 1700000000)
    assert signature != sign_upload_token("other_key", "token", 1700000000)


def test_issue_credential():
    provider = ImageKitCredentialProvider(_settings(), clock=lambda: 1700000000.5)

    credential = provider.issue()

    assert credential.expire == 1700000600
    assert credential.public_key == "public_test"
    assert credential.url_endpoint == "https://ik.imagekit.io/demo"
    assert credential.signature == sign_upload_token("private_test", credential.token, credential.expire)


def test_issue_uses_fresh_tokens():
    provider = ImageKitCredentialProvider(_settings())

    assert provider.issue().token != provider.issue().token


def test_private_key_required():
    with pytest.raises(ValueError):
        ImageKitCredentialProvider(_settings(IMAGE_KIT_PRIVATE_KEY=""))
