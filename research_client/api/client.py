"""HTTPX client for the research assistant backend.

Errors are not translated here: non-2xx responses raise
``httpx.HTTPStatusError``, network failures raise ``httpx.RequestError``,
and both go to the error classifier unchanged.
"""

import logging
from collections.abc import Sequence
from pathlib import PurePath
from typing import Any

import httpx
from pydantic import ValidationError

from research_client.config import ClientConfig
from research_client.errors.categories import ErrorCategory
from research_client.errors.exceptions import UnexpectedResponseError, UploadValidationError
from research_client.models.schemas import QueryReply, RemoteSession, UploadFile, UploadResult

logger = logging.getLogger(__name__)

MAX_UPLOAD_SIZE = 10 * 1024 * 1024  # 10MB
ALLOWED_EXTENSIONS = (".pdf", ".doc", ".docx", ".txt", ".png", ".jpg", ".jpeg")

SESSIONS_PATH = "/api/v1/sessions"
QUERY_PATH = "/api/v1/query"
UPLOAD_PATH = "/api/v1/documents/upload"


def validate_upload_files(files: Sequence[UploadFile]) -> None:
    """Check files against the upload size and extension limits.

    Args:
        files: Files selected for upload.

    Raises:
        UploadValidationError: On the first file that is empty, too large or
            of an unsupported type.
    """
    if not files:
        raise UploadValidationError("No files were selected for upload.")
    for file in files:
        if file.size > MAX_UPLOAD_SIZE:
            raise UploadValidationError(
                f'File "{file.filename}" is too large (max 10MB).',
                file.filename,
                ErrorCategory.FILE_TOO_LARGE,
            )
        extension = PurePath(file.filename).suffix.lower()
        if extension not in ALLOWED_EXTENSIONS:
            raise UploadValidationError(
                f'File "{file.filename}" format not supported. '
                f"Allowed: {', '.join(ALLOWED_EXTENSIONS)}.",
                file.filename,
                ErrorCategory.UNSUPPORTED_TYPE,
            )


class ResearchApiClient:
    """Async client for the research assistant HTTP API.

    Use as an async context manager, or call ``aclose()`` when done.

    Args:
        config: Client configuration (base URL and timeouts).
        transport: Optional HTTPX transport, e.g. ``httpx.ASGITransport``
            for in-process testing.
    """

    def __init__(
        self,
        config: ClientConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config
        self._client = httpx.AsyncClient(
            base_url=config.api_base_url,
            timeout=config.request_timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "ResearchApiClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _post_json(self, path: str, **kwargs: Any) -> Any:
        response = await self._client.post(path, **kwargs)
        response.raise_for_status()
        try:
            return response.json()
        except ValueError as e:
            raise UnexpectedResponseError(
                "The research assistant returned an unreadable response."
            ) from e

    async def check_health(self) -> dict[str, Any]:
        """Check that the backend is reachable.

        Returns:
            The backend's health payload.
        """
        response = await self._client.get("/")
        response.raise_for_status()
        try:
            return response.json()
        except ValueError:
            return {"status": response.text}

    async def create_remote_session(self, session_id: str | None = None) -> RemoteSession:
        """Create a research session on the backend.

        Args:
            session_id: Optional id to suggest for the new session.

        Returns:
            RemoteSession with the id assigned by the backend.
        """
        payload = {"session_id": session_id} if session_id else {}
        data = await self._post_json(SESSIONS_PATH, json=payload)
        try:
            session = RemoteSession.model_validate(data)
        except ValidationError as e:
            raise UnexpectedResponseError(
                "The research assistant did not return a session."
            ) from e
        logger.info(f"Backend created session {session.session_id}")
        return session

    async def submit_remote_query(
        self,
        text: str,
        session_id: str,
        provider: str,
        model: str,
    ) -> QueryReply:
        """Submit a research query.

        Args:
            text: The user's query.
            session_id: Session the query belongs to.
            provider: LLM provider to answer with.
            model: LLM model to answer with.

        Returns:
            QueryReply with the assistant's answer.
        """
        data = await self._post_json(
            QUERY_PATH,
            json={
                "query": text,
                "session_id": session_id,
                "llm_provider": provider,
                "llm_model": model,
            },
        )
        if not isinstance(data, dict) or not isinstance(data.get("response"), str):
            raise UnexpectedResponseError("The research assistant returned no answer.")
        return QueryReply(reply_text=data["response"], session_id=data.get("session_id"))

    async def upload_remote_files(
        self,
        session_id: str,
        provider: str,
        files: Sequence[UploadFile],
    ) -> UploadResult:
        """Upload documents for processing in a session.

        Files are validated locally before anything is sent.

        Args:
            session_id: Session the documents belong to.
            provider: Embedding provider for the backend to use.
            files: Files to upload.

        Returns:
            UploadResult pairing processed filenames with extracted text.

        Raises:
            UploadValidationError: If a file fails local checks.
        """
        validate_upload_files(files)
        data = await self._post_json(
            UPLOAD_PATH,
            data={"session_id": session_id, "embedding_provider": provider},
            files=[("files", (f.filename, f.content, f.content_type)) for f in files],
            timeout=self._config.upload_timeout,
        )
        try:
            result = UploadResult.model_validate(data)
        except ValidationError as e:
            raise UnexpectedResponseError(
                "The server returned an unexpected upload response."
            ) from e
        logger.info(f"Uploaded {len(result.filenames)} file(s) to session {session_id}")
        return result
