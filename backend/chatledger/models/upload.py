"""
Upload credential model.
"""

from pydantic import BaseModel


class UploadCredential(BaseModel):
    """Short-lived parameters a client uses to upload an image directly."""

    token: str
    expire: int
    signature: str
    public_key: str = ""
    url_endpoint: str = ""
