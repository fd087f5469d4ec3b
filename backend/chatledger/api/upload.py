"""
Upload credential endpoint.
"""

from fastapi import APIRouter

from chatledger.api.deps import UploadCredentialProvider
from chatledger.models.upload import UploadCredential

router = APIRouter()


@router.get("/upload", response_model=UploadCredential)
async def get_upload_credential(provider: UploadCredentialProvider):
    """Issue short-lived parameters for a direct image upload."""
    return provider.issue()
