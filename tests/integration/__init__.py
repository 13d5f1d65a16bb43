"""Integration tests for components working together as a system.

No mocks for core functionality: the real HTTPX client talks to an
in-process FastAPI backend through ASGITransport, and sessions are written
to real JSON files under tmp_path.

Coverage:
    - API client requests, responses and failure classification
    - Full workflow from query or upload to a persisted transcript
"""
