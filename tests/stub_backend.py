"""In-process stand-in for the research assistant backend.

Mirrors the endpoints the client calls. Query text can script failures:
    - "status:<code>": respond with that status, detail "scripted failure"
    - "traceback": respond 500 with a leaked stack trace in the detail
    - "malformed": respond 200 without a "response" field
Uploading a file named "broken.pdf" makes the upload fail with a 500.
"""

import uuid
from typing import Annotated, Any

from fastapi import Body, FastAPI, File, Form, HTTPException, UploadFile, status
from pydantic import BaseModel

LEAKED_TRACEBACK = (
    "Traceback (most recent call last): ... ChatPromptTemplate "
    "expected: {input} received: {}"
)


class QueryRequest(BaseModel):
    query: str
    session_id: str
    llm_provider: str
    llm_model: str


def create_stub_backend() -> FastAPI:
    """Create a backend app with its own session registry.

    The registry is exposed as ``app.state.sessions``, mapping session ids to
    the queries received in that session.
    """
    app = FastAPI(title="Stub Research Assistant")
    app.state.sessions = {}

    @app.get("/")
    async def health() -> dict[str, str]:
        return {"status": "healthy"}

    @app.post("/api/v1/sessions")
    async def create_session(
        payload: Annotated[dict[str, Any] | None, Body()] = None,
    ) -> dict[str, str]:
        session_id = (payload or {}).get("session_id") or f"srv-{uuid.uuid4().hex[:8]}"
        app.state.sessions[session_id] = []
        return {"session_id": session_id, "message": "Session created"}

    @app.post("/api/v1/query")
    async def query(request: QueryRequest) -> dict[str, Any]:
        if request.session_id not in app.state.sessions:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not found")
        if request.query.startswith("status:"):
            raise HTTPException(
                status_code=int(request.query.removeprefix("status:")),
                detail="scripted failure",
            )
        if request.query == "traceback":
            raise HTTPException(status_code=500, detail=LEAKED_TRACEBACK)
        if request.query == "malformed":
            return {"answer": "wrong field"}

        app.state.sessions[request.session_id].append(request.query)
        return {
            "session_id": request.session_id,
            "query": request.query,
            "response": f"[{request.llm_provider}/{request.llm_model}] Answer to: {request.query}",
        }

    @app.post("/api/v1/documents/upload")
    async def upload(
        session_id: Annotated[str, Form()],
        embedding_provider: Annotated[str, Form()],
        files: Annotated[list[UploadFile], File()],
    ) -> dict[str, list[str]]:
        if session_id not in app.state.sessions:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not found")

        filenames: list[str] = []
        extracted_texts: list[str] = []
        for file in files:
            if file.filename == "broken.pdf":
                raise HTTPException(status_code=500, detail=LEAKED_TRACEBACK)
            content = await file.read()
            filenames.append(file.filename or "")
            extracted_texts.append(content.decode("utf-8", errors="ignore"))
        return {"filenames": filenames, "extracted_texts": extracted_texts}

    return app
