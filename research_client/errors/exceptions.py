"""Exceptions raised by the research client."""

from research_client.errors.categories import ErrorCategory


class ResearchClientError(Exception):
    """Base exception for client-side failures.

    Subclasses that map onto a fixed failure category set ``category`` so the
    classifier can report them without inspecting the message.
    """

    category: ErrorCategory | None = None


class SessionRequiredError(ResearchClientError):
    """Raised when an action needs an active session and none is selected."""

    category = ErrorCategory.SESSION_REQUIRED

    def __init__(self, message: str = "An active chat session is required") -> None:
        super().__init__(message)


class DuplicateSessionError(ResearchClientError):
    """Raised when a session id is already present in the store."""

    category = ErrorCategory.SESSION

    def __init__(self, session_id: str) -> None:
        super().__init__(f"Session {session_id} already exists")
        self.session_id = session_id


class UploadValidationError(ResearchClientError):
    """Raised when a file fails client-side checks before upload."""

    def __init__(
        self,
        message: str,
        filename: str | None = None,
        category: ErrorCategory | None = None,
    ) -> None:
        super().__init__(message)
        self.filename = filename
        self.category = category


class UnexpectedResponseError(ResearchClientError):
    """Raised when the backend answers with a body we cannot interpret."""
