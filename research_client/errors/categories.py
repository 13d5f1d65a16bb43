"""Closed set of failure categories and their user-facing text."""

from enum import Enum
from typing import NamedTuple

from pydantic import BaseModel, ConfigDict

from research_client.models.schemas import ToastLevel


class ErrorCategory(str, Enum):
    """User-facing failure categories."""

    CONNECTIVITY = "connectivity"
    INVALID_REQUEST = "invalid_request"
    AUTH = "auth"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    UNPROCESSABLE = "unprocessable"
    RATE_LIMITED = "rate_limited"
    SERVER = "server"
    UNAVAILABLE = "unavailable"
    AI_PROCESSING = "ai_processing"
    TIMEOUT = "timeout"
    SESSION = "session"
    SESSION_REQUIRED = "session_required"
    GENERIC = "generic"
    UNKNOWN_PROCESSING = "unknown_processing"
    UNKNOWN = "unknown"
    UNEXPECTED = "unexpected"
    FILE_TOO_LARGE = "file_too_large"
    UNSUPPORTED_TYPE = "unsupported_type"
    UPLOAD_FAILED = "upload_failed"


class ClassifiedError(BaseModel):
    """A failure reduced to display-safe text.

    Attributes:
        category: Failure category.
        title: Short heading for toasts.
        message: Text safe to show to the user.
        level: Toast severity.
        detail: Sanitized backend message, kept for diagnostics.
    """

    model_config = ConfigDict(frozen=True)

    category: ErrorCategory
    title: str
    message: str
    level: ToastLevel = ToastLevel.ERROR
    detail: str | None = None


class CannedText(NamedTuple):
    title: str
    message: str
    level: ToastLevel


_E = ToastLevel.ERROR
_W = ToastLevel.WARNING

# GENERIC carries the upstream text instead of this placeholder message.
CANNED_TEXT: dict[ErrorCategory, CannedText] = {
    ErrorCategory.CONNECTIVITY: CannedText(
        "Connection Error",
        "Unable to connect to the research assistant. "
        "Please check your internet connection and try again.",
        _E,
    ),
    ErrorCategory.INVALID_REQUEST: CannedText(
        "Invalid Request",
        "The request format was incorrect. "
        "Please try rephrasing your query or check your inputs.",
        _E,
    ),
    ErrorCategory.AUTH: CannedText(
        "Authentication Error",
        "Authentication failed. The API key might be invalid or expired.",
        _E,
    ),
    ErrorCategory.FORBIDDEN: CannedText(
        "Access Denied",
        "You don't have permission to perform this action.",
        _W,
    ),
    ErrorCategory.NOT_FOUND: CannedText(
        "Not Found",
        "The requested resource could not be found.",
        _E,
    ),
    ErrorCategory.UNPROCESSABLE: CannedText(
        "Processing Error",
        "There was an issue processing your request. "
        "Please try simplifying your query or try again.",
        _E,
    ),
    ErrorCategory.RATE_LIMITED: CannedText(
        "Rate Limited",
        "Too many requests. Please wait a moment before trying again.",
        _W,
    ),
    ErrorCategory.SERVER: CannedText(
        "Server Error",
        "The research assistant is experiencing technical difficulties. "
        "Please try again in a few minutes.",
        _E,
    ),
    ErrorCategory.UNAVAILABLE: CannedText(
        "Service Unavailable",
        "The research assistant is temporarily unavailable. Please try again later.",
        _E,
    ),
    ErrorCategory.AI_PROCESSING: CannedText(
        "AI Processing Error",
        "The AI assistant encountered an issue while processing your request. "
        "Please try rephrasing your query or try again.",
        _E,
    ),
    ErrorCategory.TIMEOUT: CannedText(
        "Request Timeout",
        "Your request took too long to process. Please try again with a simpler query.",
        _W,
    ),
    ErrorCategory.SESSION: CannedText(
        "Session Error",
        "There was an issue with your chat session. Please try creating a new chat.",
        _W,
    ),
    ErrorCategory.SESSION_REQUIRED: CannedText(
        "Session Required",
        "Please create or select a chat session first to upload files.",
        _W,
    ),
    ErrorCategory.GENERIC: CannedText("Request Failed", "", _E),
    ErrorCategory.UNKNOWN_PROCESSING: CannedText(
        "Processing Error",
        "An unexpected error occurred while processing your request. Please try again.",
        _E,
    ),
    ErrorCategory.UNKNOWN: CannedText(
        "Unknown Error",
        "An unknown error occurred.",
        _E,
    ),
    ErrorCategory.UNEXPECTED: CannedText(
        "Something Went Wrong",
        "An unexpected error occurred. Please try again, and if the problem "
        "persists, please refresh the page.",
        _E,
    ),
    ErrorCategory.FILE_TOO_LARGE: CannedText(
        "File Too Large",
        "One or more files are too large. Please select files smaller than 10MB.",
        _W,
    ),
    ErrorCategory.UNSUPPORTED_TYPE: CannedText(
        "Unsupported File Type",
        "Please upload only supported file types (PDF, DOC, DOCX, TXT, PNG, JPG).",
        _W,
    ),
    ErrorCategory.UPLOAD_FAILED: CannedText(
        "Upload Failed",
        "Unable to upload your file(s) at this time. "
        "Please check the file(s) and try again.",
        _E,
    ),
}


def build_error(
    category: ErrorCategory,
    message: str | None = None,
    detail: str | None = None,
) -> ClassifiedError:
    """Build a ClassifiedError from the canned text for ``category``.

    Args:
        category: Failure category.
        message: Verbatim user-safe text, only honoured for GENERIC.
        detail: Sanitized backend message to attach for diagnostics.

    Returns:
        The classified error.
    """
    canned = CANNED_TEXT[category]
    text = message if category is ErrorCategory.GENERIC and message else canned.message
    return ClassifiedError(
        category=category,
        title=canned.title,
        message=text,
        level=canned.level,
        detail=detail,
    )
