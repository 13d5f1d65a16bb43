"""Unit tests for upload failure classification."""

import pytest
import pytest_check as check

from research_client.errors import ErrorCategory, SessionRequiredError, classify_upload
from research_client.errors.categories import CANNED_TEXT
from research_client.errors.exceptions import UploadValidationError
from tests.doubles import connect_error, http_status_error


class TestUploadStatusFailures:
    """Tests for upload failures carrying an HTTP status."""

    def test_payload_too_large_status(self) -> None:
        result = classify_upload(http_status_error(413))

        check.equal(result.category, ErrorCategory.FILE_TOO_LARGE)
        check.equal(result.title, "File Too Large")

    def test_unsupported_media_type_status(self) -> None:
        result = classify_upload(http_status_error(415))

        check.equal(result.category, ErrorCategory.UNSUPPORTED_TYPE)
        check.equal(result.title, "Unsupported File Type")

    def test_size_mentioned_in_backend_detail(self) -> None:
        """A 400 whose detail mentions size is reported as too large."""
        result = classify_upload(http_status_error(400, {"detail": "File size exceeds limit"}))

        check.equal(result.category, ErrorCategory.FILE_TOO_LARGE)
        check.equal(result.detail, "File size exceeds limit")

    def test_format_mentioned_in_backend_detail(self) -> None:
        result = classify_upload(
            http_status_error(400, {"detail": "Unsupported document format"})
        )

        assert result.category is ErrorCategory.UNSUPPORTED_TYPE

    def test_leaked_traceback_falls_back_to_status_table(self) -> None:
        """An unsafe detail is discarded and the status decides the category."""
        result = classify_upload(
            http_status_error(500, {"detail": "Traceback: file type check exploded"})
        )

        check.equal(result.category, ErrorCategory.SERVER)
        check.is_none(result.detail)

    def test_other_status_uses_general_table(self) -> None:
        assert classify_upload(http_status_error(404)).category is ErrorCategory.NOT_FOUND


class TestUploadMessageFailures:
    """Tests for upload failures known only by a message or string."""

    @pytest.mark.parametrize(
        ("message", "category"),
        [
            ("File is too large", ErrorCategory.FILE_TOO_LARGE),
            ("Maximum size reached", ErrorCategory.FILE_TOO_LARGE),
            ("Unsupported file", ErrorCategory.UNSUPPORTED_TYPE),
            ("Bad format", ErrorCategory.UNSUPPORTED_TYPE),
            ("Wrong MIME type", ErrorCategory.UNSUPPORTED_TYPE),
        ],
    )
    def test_size_and_format_tokens(self, message: str, category: ErrorCategory) -> None:
        assert classify_upload(RuntimeError(message)).category is category

    def test_size_wins_over_format(self) -> None:
        """Size tokens are checked before format tokens."""
        result = classify_upload("Unsupported: file too large")

        assert result.category is ErrorCategory.FILE_TOO_LARGE

    def test_safe_message_is_shown_verbatim(self) -> None:
        result = classify_upload(RuntimeError("The document is password protected"))

        check.equal(result.category, ErrorCategory.GENERIC)
        check.equal(result.message, "The document is password protected")

    def test_client_validation_message_is_shown(self) -> None:
        """Messages from local pre-upload checks reach the user as written."""
        error = UploadValidationError("No files were selected for upload.")

        assert classify_upload(error).message == "No files were selected for upload."

    def test_long_message_is_upload_failed(self) -> None:
        result = classify_upload(RuntimeError("q" * 200))

        check.equal(result.category, ErrorCategory.UPLOAD_FAILED)
        check.equal(result.message, CANNED_TEXT[ErrorCategory.UPLOAD_FAILED].message)

    def test_stack_trace_is_upload_failed(self) -> None:
        assert classify_upload(RuntimeError("Traceback (most recent call last)")).category is (
            ErrorCategory.UPLOAD_FAILED
        )

    def test_message_allowed_for_upload_but_not_general(self) -> None:
        """Upload messages may be up to 199 characters."""
        message = "m" * 180

        check.equal(classify_upload(RuntimeError(message)).category, ErrorCategory.GENERIC)
        check.equal(classify_upload(RuntimeError(message)).message, message)


class TestUploadFallbacks:
    """Tests for failures the upload rules do not recognize."""

    def test_connectivity_stays_connectivity(self) -> None:
        assert classify_upload(connect_error()).category is ErrorCategory.CONNECTIVITY

    def test_session_required_keeps_category(self) -> None:
        assert classify_upload(SessionRequiredError()).category is (
            ErrorCategory.SESSION_REQUIRED
        )

    @pytest.mark.parametrize("value", [None, 7, object()])
    def test_unrecognized_values_become_upload_failed(self, value: object) -> None:
        result = classify_upload(value)

        check.equal(result.category, ErrorCategory.UPLOAD_FAILED)
        check.equal(result.title, "Upload Failed")

    def test_never_raises_on_hostile_values(self) -> None:
        class Hostile(Exception):
            def __str__(self) -> str:
                raise RuntimeError("no str")

        assert classify_upload(Hostile()).category is ErrorCategory.UPLOAD_FAILED
