"""Test package for the research assistant client.

Unit tests cover isolated logic and integration tests cover workflows.

Structure:
    - unit/: Classifier, storage, session store, config and orchestrator
    - integration/: HTTP client and full query flow against the stub backend
    - stub_backend.py: In-process FastAPI stand-in for the research backend
    - doubles.py: Fake transport, recording notifier and error builders

Leverages pytest with pytest-asyncio and pytest-check for soft assertions.
"""
