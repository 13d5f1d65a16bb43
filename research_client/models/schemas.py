from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


def utcnow() -> datetime:
    """Return the current time as a timezone-aware UTC datetime."""
    return datetime.now(UTC)


class Speaker(str, Enum):
    """Who authored a transcript entry."""

    HUMAN = "human"
    ASSISTANT = "assistant"


class ToastLevel(str, Enum):
    """Severity of a transient notification."""

    SUCCESS = "success"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class Message(BaseModel):
    """A single transcript entry.

    Messages are immutable once created. A session's transcript only grows.

    Attributes:
        speaker: Author of the message.
        text: Message body (markdown for assistant replies).
        timestamp: When the message was created.
        is_error: Whether the message records a failed request.
        is_pending: Marks a transient "working" placeholder. Never stored.
    """

    model_config = ConfigDict(frozen=True)

    speaker: Speaker
    text: str
    timestamp: datetime = Field(default_factory=utcnow)
    is_error: bool = False
    is_pending: bool = False

    @classmethod
    def human(cls, text: str) -> "Message":
        return cls(speaker=Speaker.HUMAN, text=text)

    @classmethod
    def assistant(cls, text: str, *, is_error: bool = False) -> "Message":
        return cls(speaker=Speaker.ASSISTANT, text=text, is_error=is_error)

    @classmethod
    def pending(cls, text: str = "Working...") -> "Message":
        """Build a display-only placeholder for an in-flight request."""
        return cls(speaker=Speaker.ASSISTANT, text=text, is_pending=True)


class Session(BaseModel):
    """A chat conversation.

    Attributes:
        session_id: Stable identifier, assigned once by the backend or locally.
        name: Display name shown in the session list.
        created_at: Creation timestamp, defaulting to now when a saved record
            lacks one.
        messages: Ordered transcript, oldest first.
    """

    model_config = ConfigDict(frozen=True)

    session_id: str = Field(..., min_length=1)
    name: str = ""
    created_at: datetime = Field(default_factory=utcnow)
    messages: tuple[Message, ...] = ()

    def with_message(self, message: Message) -> "Session":
        """Return a copy of this session with ``message`` appended."""
        return self.model_copy(update={"messages": (*self.messages, message)})


class RemoteSession(BaseModel):
    """Backend response to session creation."""

    session_id: str = Field(..., min_length=1)
    message: str | None = None


class QueryReply(BaseModel):
    """Backend response to a research query.

    Attributes:
        reply_text: The assistant's answer.
        session_id: Session the backend answered in, when echoed.
    """

    reply_text: str
    session_id: str | None = None


class UploadResult(BaseModel):
    """Backend response to a document upload.

    ``filenames`` and ``extracted_texts`` are positionally paired.
    """

    filenames: list[str] = Field(default_factory=list)
    extracted_texts: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_pairing(self) -> "UploadResult":
        """Reject responses whose filename and text lists differ in length."""
        if len(self.filenames) != len(self.extracted_texts):
            raise ValueError("filenames and extracted_texts must have the same length")
        return self


class UploadFile(BaseModel):
    """A file selected by the user for upload.

    Attributes:
        filename: Original file name, including extension.
        content: Raw file bytes.
        content_type: MIME type reported by the browser.
    """

    filename: str = Field(..., min_length=1)
    content: bytes
    content_type: str = "application/octet-stream"

    @property
    def size(self) -> int:
        return len(self.content)
