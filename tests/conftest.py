import pytest
from fastapi.testclient import TestClient

from smgview.api import create_app
from smgview.graph_store.memory_store import InMemoryGraphStore
from smgview.session import GraphSession
from tests.fakes import sample_graph_document


@pytest.fixture
def sample_graph() -> dict:
    return sample_graph_document()


@pytest.fixture
def store(sample_graph: dict) -> InMemoryGraphStore:
    """Create a store with the sample graph loaded."""
    return InMemoryGraphStore.from_document(sample_graph)


@pytest.fixture
def session(store: InMemoryGraphStore) -> GraphSession:
    return GraphSession(store)


@pytest.fixture
def test_client(session: GraphSession) -> TestClient:
    """Create test client around a session with the sample graph loaded."""
    app = create_app(session=session)
    return TestClient(app)
