"""Query and upload submission flow.

The orchestrator ties a user action to a backend call and records the
outcome in the session transcript:

    open session -> begin submission -> transport call -> complete submission

``complete_submission`` is the only place results and failures reach the
transcript. A completion whose handle is unknown (already completed) or
whose session was deleted meanwhile is discarded and reported as such.
Every failure is classified before it is shown; raw exceptions never reach
the UI.
"""

import logging
import uuid
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Protocol

from research_client.config import MODEL_OPTIONS, ClientConfig
from research_client.errors.categories import ClassifiedError
from research_client.errors.classifier import classify, classify_upload
from research_client.errors.exceptions import SessionRequiredError
from research_client.models.schemas import (
    Message,
    QueryReply,
    RemoteSession,
    Session,
    ToastLevel,
    UploadFile,
    UploadResult,
    utcnow,
)
from research_client.sessions.store import SessionStore

logger = logging.getLogger(__name__)

NO_TEXT_PREVIEW = "Could not extract text from this file, or the file was empty."
NO_FILES_PROCESSED = (
    "File upload submitted, but no files were processed by the backend. "
    "This might happen if files were empty or of unsupported types."
)
BUSY_TITLE = "Please Wait"
BUSY_MESSAGE = "Another request is still in progress."


class ResearchTransport(Protocol):
    """Backend calls the orchestrator depends on."""

    async def create_remote_session(self, session_id: str | None = None) -> RemoteSession: ...

    async def submit_remote_query(
        self, text: str, session_id: str, provider: str, model: str
    ) -> QueryReply: ...

    async def upload_remote_files(
        self, session_id: str, provider: str, files: Sequence[UploadFile]
    ) -> UploadResult: ...

    async def check_health(self) -> dict: ...


class Notifier(Protocol):
    """Transient toast notifications."""

    def notify(self, level: ToastLevel, title: str, message: str) -> None: ...


class SubmissionKind(str, Enum):
    QUERY = "query"
    UPLOAD = "upload"


@dataclass(frozen=True)
class Submission:
    """Handle for one in-flight backend call."""

    session_id: str
    kind: SubmissionKind
    submission_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    started_at: datetime = field(default_factory=utcnow)


def preview_text(text: str | None, limit: int) -> str:
    """Quote the first ``limit`` characters of extracted text."""
    if not text or not text.strip():
        return NO_TEXT_PREVIEW
    suffix = "..." if len(text) > limit else ""
    return f'"{text[:limit]}{suffix}"'


class InteractionOrchestrator:
    """Coordinates queries and uploads for one client.

    Only one submission may be in flight at a time; ``busy`` is True while
    one is pending.

    Args:
        store: Session store to read and append to.
        transport: Backend client.
        notifier: Toast sink.
        config: Client configuration (provider, model, preview length).
    """

    def __init__(
        self,
        store: SessionStore,
        transport: ResearchTransport,
        notifier: Notifier,
        config: ClientConfig,
    ) -> None:
        self._store = store
        self._transport = transport
        self._notifier = notifier
        self._config = config
        self._provider = config.llm_provider
        self._model = config.llm_model or MODEL_OPTIONS[config.llm_provider][0]
        self._pending: dict[str, Submission] = {}
        self._creating_session = False
        self._listeners: list[Callable[[], None]] = []

    @property
    def busy(self) -> bool:
        return self._creating_session or bool(self._pending)

    @property
    def provider(self) -> str:
        return self._provider

    @property
    def model(self) -> str:
        return self._model

    def select_provider(self, provider: str) -> None:
        """Switch provider and reset the model to the provider's default.

        Raises:
            ValueError: If the provider is unknown.
        """
        if provider not in MODEL_OPTIONS:
            raise ValueError(f"Unknown provider: {provider}")
        self._provider = provider
        self._model = MODEL_OPTIONS[provider][0]

    def select_model(self, model: str) -> None:
        """Switch model within the current provider.

        Raises:
            ValueError: If the current provider does not offer the model.
        """
        if model not in MODEL_OPTIONS[self._provider]:
            raise ValueError(f"Model {model} is not offered by {self._provider}")
        self._model = model

    def add_listener(self, listener: Callable[[], None]) -> None:
        """Call ``listener`` whenever busy state or a transcript changes."""
        self._listeners.append(listener)

    def remove_listener(self, listener: Callable[[], None]) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _changed(self) -> None:
        for listener in list(self._listeners):
            try:
                listener()
            except Exception:
                logger.exception("State change listener failed")

    def _surface(self, error: ClassifiedError) -> ClassifiedError:
        self._notifier.notify(error.level, error.title, error.message)
        return error

    async def check_health(self) -> bool:
        """Check backend reachability and report it with a toast."""
        try:
            await self._transport.check_health()
        except Exception as e:
            error = classify(e)
            self._notifier.notify(
                ToastLevel.ERROR,
                "Connection Failed",
                "Unable to connect to the research assistant. "
                "Some features may not work properly.",
            )
            logger.warning(f"Health check failed ({error.category.value})")
            return False
        self._notifier.notify(
            ToastLevel.SUCCESS, "Connected", "Successfully connected to research assistant"
        )
        return True

    def _reject_busy(self, action: str) -> None:
        logger.info(f"Rejected {action} while another submission is in flight")
        self._notifier.notify(ToastLevel.WARNING, BUSY_TITLE, BUSY_MESSAGE)

    async def _open_session(self) -> Session | ClassifiedError:
        """Return the current session, creating one on the backend if needed.

        A creation failure is classified, shown, and returned instead.
        """
        current = self._store.current
        if current is not None:
            return current

        self._creating_session = True
        self._changed()
        try:
            remote = await self._transport.create_remote_session()
            session = self._store.create_session(
                f"Chat {datetime.now():%H:%M}",
                session_id=remote.session_id,
                make_current=True,
            )
        except Exception as e:
            return self._surface(classify(e))
        finally:
            self._creating_session = False
            self._changed()

        self._notifier.notify(
            ToastLevel.SUCCESS, "New Session", f'Session "{session.name}" created.'
        )
        return session

    def begin_submission(self, session_id: str, kind: SubmissionKind) -> Submission:
        """Register an in-flight call for ``session_id``.

        Raises:
            RuntimeError: If another submission is already in flight.
        """
        if self._pending:
            raise RuntimeError("A submission is already in flight")
        submission = Submission(session_id=session_id, kind=kind)
        self._pending[submission.submission_id] = submission
        self._changed()
        return submission

    def complete_submission(
        self,
        submission: Submission,
        result: QueryReply | UploadResult | None = None,
        error: BaseException | None = None,
    ) -> bool:
        """Record the outcome of an in-flight call in its session.

        Failures are classified and shown as a toast even when the outcome
        cannot be recorded.

        Returns:
            True if the outcome was appended, False if it was discarded
            because the handle was stale or the session no longer exists.
        """
        recorded, _ = self._complete(submission, result, error)
        return recorded

    def _complete(
        self,
        submission: Submission,
        result: QueryReply | UploadResult | None,
        error: BaseException | None,
    ) -> tuple[bool, ClassifiedError | None]:
        if error is None and not isinstance(result, (QueryReply, UploadResult)):
            raise TypeError(f"Unsupported submission result: {type(result).__name__}")
        if self._pending.pop(submission.submission_id, None) is None:
            logger.warning(f"Discarding stale completion {submission.submission_id}")
            return False, None
        try:
            return self._record_outcome(submission, result, error)
        finally:
            self._changed()

    def _record_outcome(
        self,
        submission: Submission,
        result: QueryReply | UploadResult | None,
        error: BaseException | None,
    ) -> tuple[bool, ClassifiedError | None]:
        classified: ClassifiedError | None = None
        if error is not None:
            if submission.kind is SubmissionKind.UPLOAD:
                classified = classify_upload(error)
            else:
                classified = classify(error)
            self._surface(classified)

        if submission.session_id not in self._store:
            logger.info(
                f"Session {submission.session_id} was removed, "
                f"discarding {submission.kind.value} result"
            )
            return False, classified

        if classified is not None:
            self._store.append_message(
                submission.session_id, Message.assistant(classified.message, is_error=True)
            )
        elif isinstance(result, QueryReply):
            self._store.append_message(submission.session_id, Message.assistant(result.reply_text))
        else:
            self._record_upload(submission.session_id, result)
        return True, classified

    def _record_upload(self, session_id: str, result: UploadResult) -> None:
        if not result.filenames:
            self._notifier.notify(
                ToastLevel.WARNING,
                "Upload Info",
                "No files appear to have been processed successfully by the backend.",
            )
            self._store.append_message(
                session_id, Message.assistant(NO_FILES_PROCESSED, is_error=True)
            )
            return

        count = len(result.filenames)
        self._notifier.notify(
            ToastLevel.SUCCESS, "Files Processed", f"{count} document(s) are ready for querying."
        )
        self._store.append_message(
            session_id,
            Message.assistant(
                f"Successfully processed {count} file(s): {', '.join(result.filenames)}. "
                "Snippets of extracted content (if any) are shown below."
            ),
        )
        for filename, text in zip(result.filenames, result.extracted_texts, strict=True):
            snippet = preview_text(text, self._config.preview_length)
            self._store.append_message(
                session_id, Message.assistant(f"📄 **{filename}**: {snippet}")
            )

    async def submit_query(self, text: str) -> ClassifiedError | None:
        """Send a query in the current session, creating one if needed.

        Blank text is ignored. A call while another submission is in flight
        is rejected with a warning toast.

        Returns:
            The classified failure, or None if nothing failed.
        """
        text = text.strip()
        if not text:
            return None
        if self.busy:
            self._reject_busy("query")
            return None

        session = await self._open_session()
        if not isinstance(session, Session):
            return session

        self._store.append_message(session.session_id, Message.human(text))
        submission = self.begin_submission(session.session_id, SubmissionKind.QUERY)
        try:
            reply = await self._transport.submit_remote_query(
                text, session.session_id, self._provider, self._model
            )
        except Exception as e:
            return self._complete(submission, None, e)[1]
        return self._complete(submission, reply, None)[1]

    async def submit_upload(self, files: Sequence[UploadFile]) -> ClassifiedError | None:
        """Upload files into the current session.

        Never creates a session: without a current session the upload fails
        with SESSION_REQUIRED before anything is sent.

        Returns:
            The classified failure, or None if nothing failed.
        """
        session = self._store.current
        if session is None:
            return self._surface(classify_upload(SessionRequiredError()))
        if self.busy:
            self._reject_busy("upload")
            return None

        submission = self.begin_submission(session.session_id, SubmissionKind.UPLOAD)
        try:
            result = await self._transport.upload_remote_files(
                session.session_id, self._config.embedding_provider, files
            )
        except Exception as e:
            return self._complete(submission, None, e)[1]
        return self._complete(submission, result, None)[1]
