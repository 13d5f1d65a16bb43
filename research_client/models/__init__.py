"""Pydantic models shared by the store, the classifier and the transport.

Models:
    - Message: One immutable transcript entry
    - Session: A chat conversation with its transcript
    - RemoteSession / QueryReply / UploadResult: Backend responses
    - UploadFile: A file queued for upload
"""

from research_client.models.schemas import (
    Message,
    QueryReply,
    RemoteSession,
    Session,
    Speaker,
    ToastLevel,
    UploadFile,
    UploadResult,
)

__all__ = [
    "Message",
    "QueryReply",
    "RemoteSession",
    "Session",
    "Speaker",
    "ToastLevel",
    "UploadFile",
    "UploadResult",
]
