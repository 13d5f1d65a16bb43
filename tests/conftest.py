"""Pytest fixtures and shared test configuration.

Provides reusable fixtures for unit and integration tests.

Fixtures:
    - client_config: ClientConfig with fixed, environment-independent values
    - memory_storage / store: In-memory slot and an initialized SessionStore
    - transport: Scriptable fake backend for orchestrator tests
    - notifier: Records toasts instead of showing them
    - orchestrator: InteractionOrchestrator wired to the fakes above
    - stub_backend / api_client: In-process FastAPI backend and a real
      ResearchApiClient talking to it through ASGITransport
"""

from collections.abc import AsyncGenerator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport

from research_client.api.client import ResearchApiClient
from research_client.config import ClientConfig
from research_client.interaction.orchestrator import InteractionOrchestrator
from research_client.persistence.storage import MemoryStorage
from research_client.sessions.store import SessionStore
from tests.doubles import FakeTransport, RecordingNotifier
from tests.stub_backend import create_stub_backend


@pytest.fixture
def client_config() -> ClientConfig:
    """Return configuration that does not depend on the environment."""
    return ClientConfig(
        api_base_url="http://test",
        request_timeout=5,
        upload_timeout=10,
        session_store_path="",
        max_sessions=10,
        llm_provider="openai",
        llm_model="gpt-4o",
        embedding_provider="google",
        preview_length=250,
    )


@pytest.fixture
def memory_storage() -> MemoryStorage:
    """Return an empty in-memory durable slot."""
    return MemoryStorage()


@pytest.fixture
def store(memory_storage: MemoryStorage) -> SessionStore:
    """Return an initialized, empty session store."""
    session_store = SessionStore(memory_storage)
    session_store.initialize()
    return session_store


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def orchestrator(
    store: SessionStore,
    transport: FakeTransport,
    notifier: RecordingNotifier,
    client_config: ClientConfig,
) -> InteractionOrchestrator:
    """Return an orchestrator wired to the fake transport and notifier."""
    return InteractionOrchestrator(store, transport, notifier, client_config)


@pytest.fixture
def stub_backend() -> FastAPI:
    """Return a fresh in-process research assistant backend."""
    return create_stub_backend()


@pytest.fixture
async def api_client(
    stub_backend: FastAPI, client_config: ClientConfig
) -> AsyncGenerator[ResearchApiClient, None]:
    """Create a ResearchApiClient bound to the stub backend.

    Yields:
        Client that sends requests to the stub backend in-process.
    """
    async with ResearchApiClient(
        client_config, transport=ASGITransport(app=stub_backend)
    ) as client:
        yield client
