"""Shared pytest fixtures for Text Statistics Engine tests."""

import pytest
import os
import sys
import time

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from kv_store import InMemoryKeyValueStore  # noqa: E402


# ============================================================================
# Text Fixtures
# ============================================================================

@pytest.fixture
def sample_text():
    """Two paragraphs, four sentences, one trailing fragment."""
    return (
        "The quick brown fox jumps. The lazy dog sleeps!\n"
        "\n"
        "Does the fox care? No. The end is near"
    )


@pytest.fixture
def mixed_case_text():
    return "Cat cat CAT dog Dog"


# ============================================================================
# Store / Session Fixtures
# ============================================================================

@pytest.fixture
def memory_store():
    """Empty in-memory key-value store."""
    return InMemoryKeyValueStore()


@pytest.fixture
def session(memory_store):
    """Document session backed by an in-memory store."""
    from core.document_session import DocumentSession
    return DocumentSession(store=memory_store)


class FailingStore:
    """Store whose reads and writes always fail."""

    persistent = True

    def get(self, key):
        from kv_store import StorageUnavailableError
        raise StorageUnavailableError("store offline")

    def set(self, key, value):
        return False


@pytest.fixture
def failing_store():
    return FailingStore()


class SlowStore(InMemoryKeyValueStore):
    """Persistent-looking store whose writes block for a while."""

    persistent = True

    def __init__(self, delay=0.3):
        super().__init__()
        self.delay = delay
        self.writes = []

    def set(self, key, value):
        time.sleep(self.delay)
        self.writes.append((key, value))
        return super().set(key, value)


@pytest.fixture
def slow_store():
    return SlowStore()


# ============================================================================
# API Test Fixtures
# ============================================================================

@pytest.fixture
def test_client(session):
    """FastAPI test client bound to an in-memory session."""
    from fastapi.testclient import TestClient
    from main import app

    app.state.session = session
    with TestClient(app) as client:
        yield client
    app.state.session = None
