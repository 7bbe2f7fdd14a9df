"""Pytest configuration and shared fixtures."""

from collections.abc import Callable, Generator
from pathlib import Path

import pytest
from dotenv import load_dotenv
from fastapi.testclient import TestClient

from topic_feedback_service.main import app
from topic_feedback_service.routers.expansion import get_search_client, get_topic_store

from .fakes import InMemoryTopicStore, build_scenario_store

# Load .env.test before any fixture runs so test settings win over .env
env_test_path = Path(__file__).parent.parent / ".env.test"
if env_test_path.exists():
    load_dotenv(env_test_path, override=True)


# ============================================================================
# Topic Model Fixtures
# ============================================================================


@pytest.fixture
def scenario_store() -> InMemoryTopicStore:
    """Topic model with seed documents "A" and "B" (see build_scenario_store)."""
    return build_scenario_store()


@pytest.fixture
def make_store() -> Callable[..., InMemoryTopicStore]:
    """Factory for small ad hoc topic models."""
    return InMemoryTopicStore


# ============================================================================
# HTTP Client Fixtures
# ============================================================================


@pytest.fixture
def client() -> TestClient:
    """Synchronous test client for FastAPI app.

    No dependency overrides: endpoints talk to the configured database.
    """
    return TestClient(app)


@pytest.fixture
def expansion_client(
    scenario_store: InMemoryTopicStore,
) -> Generator[TestClient, None, None]:
    """Test client whose topic store is the in-memory scenario store."""
    app.dependency_overrides[get_topic_store] = lambda: scenario_store

    try:
        yield TestClient(app)
    finally:
        # Remove only this override; other fixtures may have their own
        app.dependency_overrides.pop(get_topic_store, None)
        app.dependency_overrides.pop(get_search_client, None)
