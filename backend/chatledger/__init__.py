"""Chat history backend: chats, per-user chat indexes and their REST surface."""

__version__ = "0.1.0"
