"""Failure taxonomy and classification.

Turns any failure value (HTTP errors, network errors, exceptions, plain
strings) into a ClassifiedError whose text is safe to show to users.
"""

from research_client.errors.categories import ClassifiedError, ErrorCategory
from research_client.errors.classifier import classify, classify_upload
from research_client.errors.exceptions import (
    DuplicateSessionError,
    ResearchClientError,
    SessionRequiredError,
    UnexpectedResponseError,
    UploadValidationError,
)

__all__ = [
    "ClassifiedError",
    "DuplicateSessionError",
    "ErrorCategory",
    "ResearchClientError",
    "SessionRequiredError",
    "UnexpectedResponseError",
    "UploadValidationError",
    "classify",
    "classify_upload",
]
