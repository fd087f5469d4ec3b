"""
Enum definitions for the application.
"""

from enum import Enum


class MessageRole(str, Enum):
    """Author of a chat message."""

    USER = "user"
    MODEL = "model"
