"""HTTP transport for the research assistant backend.

Endpoints used:
    - GET /: Backend health
    - POST /api/v1/sessions: Create a research session
    - POST /api/v1/query: Submit a query
    - POST /api/v1/documents/upload: Upload documents (multipart)
"""

from research_client.api.client import (
    ALLOWED_EXTENSIONS,
    MAX_UPLOAD_SIZE,
    ResearchApiClient,
    validate_upload_files,
)

__all__ = ["ALLOWED_EXTENSIONS", "MAX_UPLOAD_SIZE", "ResearchApiClient", "validate_upload_files"]
