"""Error classification for user-facing failure reporting.

Failures reach the client in several shapes: HTTPX status errors carrying a
backend body, network errors with no response, exceptions with only a
message, plain strings, or something else entirely. Classification runs in
two steps:

1. ``detect_shape`` reduces the failure to one of a small set of variants.
2. Shape-specific rules, driven by the token tables below, pick a category.

The resulting ClassifiedError never carries stack traces, library names or
validator diagnostics. Backend-supplied text is only kept (in ``detail``)
after passing the same deny-list.
"""

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from research_client.errors.categories import ClassifiedError, ErrorCategory, build_error
from research_client.errors.exceptions import ResearchClientError

logger = logging.getLogger(__name__)

MAX_BACKEND_MESSAGE_LENGTH = 300
MAX_SAFE_MESSAGE_LENGTH = 150
MAX_SAFE_UPLOAD_MESSAGE_LENGTH = 200

# Backend messages containing any of these are replaced by canned text.
BACKEND_DENY_TOKENS = (
    "traceback",
    "exception",
    "chatprompttemplate",
    "langchain",
    "variables",
    "expected:",
    "received:",
    "troubleshooting",
)

# Prompt-template and orchestration-library leakage.
PROMPT_TOKENS = ("chatprompttemplate", "langchain", "variables", "expected:", "received:")

STACK_MARKERS = ("traceback", "exception:", "error:", "failed to synthesize")
UPLOAD_STACK_MARKERS = ("traceback", "exception:")

SIZE_TOKENS = ("size", "large")
FORMAT_TOKENS = ("format", "type", "unsupported")

STATUS_CATEGORIES: dict[int, ErrorCategory] = {
    400: ErrorCategory.INVALID_REQUEST,
    401: ErrorCategory.AUTH,
    403: ErrorCategory.FORBIDDEN,
    404: ErrorCategory.NOT_FOUND,
    422: ErrorCategory.UNPROCESSABLE,
    429: ErrorCategory.RATE_LIMITED,
    500: ErrorCategory.SERVER,
    502: ErrorCategory.UNAVAILABLE,
    503: ErrorCategory.UNAVAILABLE,
    504: ErrorCategory.UNAVAILABLE,
}

UPLOAD_STATUS_CATEGORIES: dict[int, ErrorCategory] = {
    413: ErrorCategory.FILE_TOO_LARGE,
    415: ErrorCategory.UNSUPPORTED_TYPE,
}

# Categories that say nothing specific about an upload failure.
NON_SPECIFIC = frozenset(
    {ErrorCategory.UNKNOWN_PROCESSING, ErrorCategory.UNKNOWN, ErrorCategory.UNEXPECTED}
)


@dataclass(frozen=True)
class _Rule:
    """Matches when every ``requires`` token and any ``any_of`` token occur."""

    category: ErrorCategory
    any_of: tuple[str, ...]
    requires: tuple[str, ...] = ()

    def matches(self, text: str) -> bool:
        return all(t in text for t in self.requires) and any(t in text for t in self.any_of)


# Evaluated in order against lowercased exception messages. A match on the
# UPLOAD_FAILED rule hands over to the upload classifier.
MESSAGE_RULES = (
    _Rule(ErrorCategory.AI_PROCESSING, PROMPT_TOKENS),
    _Rule(ErrorCategory.AUTH, ("api key", "authentication failed")),
    _Rule(ErrorCategory.TIMEOUT, ("timeout", "exceeded deadline")),
    _Rule(ErrorCategory.UPLOAD_FAILED, ("upload", "process"), requires=("file",)),
    _Rule(ErrorCategory.SESSION, ("session",)),
)


@dataclass(frozen=True)
class StatusFailure:
    """The backend answered with an error status."""

    status_code: int
    body: Any = None


@dataclass(frozen=True)
class ConnectivityFailure:
    """No response was received."""

    reason: str = ""


@dataclass(frozen=True)
class CategorizedFailure:
    """A client error that already names its category."""

    category: ErrorCategory


@dataclass(frozen=True)
class MessageFailure:
    """An exception known only by its message."""

    message: str


@dataclass(frozen=True)
class TextFailure:
    """A bare string."""

    text: str


@dataclass(frozen=True)
class UnknownFailure:
    """Anything else."""

    type_name: str


FailureShape = (
    StatusFailure
    | ConnectivityFailure
    | CategorizedFailure
    | MessageFailure
    | TextFailure
    | UnknownFailure
)


def _read_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text
    except httpx.ResponseNotRead:
        return None


def detect_shape(failure: object) -> FailureShape:
    """Reduce an arbitrary failure value to a FailureShape variant."""
    if isinstance(failure, httpx.HTTPStatusError):
        return StatusFailure(failure.response.status_code, _read_body(failure.response))
    if isinstance(failure, httpx.RequestError):
        return ConnectivityFailure(str(failure))
    if isinstance(failure, ResearchClientError) and failure.category is not None:
        return CategorizedFailure(failure.category)

    status_code = getattr(failure, "status_code", None)
    if isinstance(status_code, int) and not isinstance(status_code, bool):
        body = getattr(failure, "body", None)
        if body is None and hasattr(failure, "detail"):
            body = {"detail": failure.detail}
        return StatusFailure(status_code, body)

    if isinstance(failure, BaseException):
        return MessageFailure(str(failure))
    if isinstance(failure, str):
        return TextFailure(failure)
    return UnknownFailure(type(failure).__name__)


def extract_backend_message(body: Any) -> str | None:
    """Pull a human message from a backend error body.

    Checks, in order, a ``detail`` field, a ``message`` field and a raw string
    body. The result is not yet sanitized.
    """
    if isinstance(body, dict):
        for key in ("detail", "message"):
            value = body.get(key)
            if isinstance(value, str):
                return value
        return None
    if isinstance(body, str):
        return body
    return None


def sanitize_backend_message(message: str | None) -> str | None:
    """Return ``message`` if it is fit for display, otherwise None.

    Empty, overlong or internal-looking messages are rejected.
    """
    if message is None:
        return None
    message = message.strip()
    if not message or len(message) > MAX_BACKEND_MESSAGE_LENGTH:
        return None
    lowered = message.lower()
    if any(token in lowered for token in BACKEND_DENY_TOKENS):
        return None
    return message


def _is_user_safe(message: str, max_length: int, markers: tuple[str, ...]) -> bool:
    lowered = message.lower()
    return 0 < len(message) < max_length and not any(m in lowered for m in markers)


def _classify_status(shape: StatusFailure) -> ClassifiedError:
    category = STATUS_CATEGORIES.get(shape.status_code, ErrorCategory.SERVER)
    detail = sanitize_backend_message(extract_backend_message(shape.body))
    return build_error(category, detail=detail)


def _classify_message(shape: MessageFailure, allow_upload: bool) -> ClassifiedError:
    message = shape.message.strip()
    lowered = message.lower()
    for rule in MESSAGE_RULES:
        if not rule.matches(lowered):
            continue
        if rule.category is ErrorCategory.UPLOAD_FAILED:
            if allow_upload:
                return _classify_upload_shape(shape)
            continue
        return build_error(rule.category)

    if _is_user_safe(message, MAX_SAFE_MESSAGE_LENGTH, STACK_MARKERS):
        return build_error(ErrorCategory.GENERIC, message=message)
    return build_error(ErrorCategory.UNKNOWN_PROCESSING)


def _classify_text(shape: TextFailure) -> ClassifiedError:
    text = shape.text.strip()
    lowered = text.lower()
    if any(token in lowered for token in PROMPT_TOKENS):
        return build_error(ErrorCategory.AI_PROCESSING)
    if _is_user_safe(text, MAX_SAFE_MESSAGE_LENGTH, STACK_MARKERS):
        return build_error(ErrorCategory.GENERIC, message=text)
    return build_error(ErrorCategory.UNKNOWN)


def _classify_shape(shape: FailureShape, allow_upload: bool = True) -> ClassifiedError:
    match shape:
        case StatusFailure():
            return _classify_status(shape)
        case ConnectivityFailure():
            return build_error(ErrorCategory.CONNECTIVITY)
        case CategorizedFailure(category=category):
            return build_error(category)
        case MessageFailure():
            return _classify_message(shape, allow_upload)
        case TextFailure():
            return _classify_text(shape)
        case _:
            return build_error(ErrorCategory.UNEXPECTED)


def _upload_category_for(text: str) -> ErrorCategory | None:
    lowered = text.lower()
    if any(token in lowered for token in SIZE_TOKENS):
        return ErrorCategory.FILE_TOO_LARGE
    if any(token in lowered for token in FORMAT_TOKENS):
        return ErrorCategory.UNSUPPORTED_TYPE
    return None


def _classify_upload_shape(shape: FailureShape) -> ClassifiedError:
    if isinstance(shape, StatusFailure):
        category = UPLOAD_STATUS_CATEGORIES.get(shape.status_code)
        detail = sanitize_backend_message(extract_backend_message(shape.body))
        if category is None and detail:
            category = _upload_category_for(detail)
        if category is not None:
            return build_error(category, detail=detail)

    if isinstance(shape, (MessageFailure, TextFailure)):
        text = (shape.message if isinstance(shape, MessageFailure) else shape.text).strip()
        category = _upload_category_for(text)
        if category is not None:
            return build_error(category)
        if _is_user_safe(text, MAX_SAFE_UPLOAD_MESSAGE_LENGTH, UPLOAD_STACK_MARKERS):
            return build_error(ErrorCategory.GENERIC, message=text)

    result = _classify_shape(shape, allow_upload=False)
    if result.category in NON_SPECIFIC:
        return build_error(ErrorCategory.UPLOAD_FAILED, detail=result.detail)
    return result


def classify(failure: object) -> ClassifiedError:
    """Classify any failure value into a user-safe error.

    Never raises. The same input always produces the same category and
    message.

    Args:
        failure: The caught exception, string or other value.

    Returns:
        ClassifiedError with display-safe title and message.
    """
    try:
        result = _classify_shape(detect_shape(failure))
        logger.warning(f"Classified failure as {result.category.value}: {failure!r}")
    except Exception:
        logger.exception("Error classifier failed, reporting failure as unexpected")
        return build_error(ErrorCategory.UNEXPECTED)
    return result


def classify_upload(failure: object) -> ClassifiedError:
    """Classify a failure raised while uploading files.

    Recognizes size and file-type problems before falling back to
    ``classify``. Failures that remain unspecific become UPLOAD_FAILED.
    """
    try:
        result = _classify_upload_shape(detect_shape(failure))
        logger.warning(f"Classified upload failure as {result.category.value}: {failure!r}")
    except Exception:
        logger.exception("Upload error classifier failed, reporting upload as failed")
        return build_error(ErrorCategory.UPLOAD_FAILED)
    return result
