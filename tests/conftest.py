"""
Shared fixtures: a temporary SQLite store, the hash embedder and the mock generator.
"""

import pytest

from ragmemory.agents.mock_generator import MockGenerator
from ragmemory.core.service import MemoryService
from ragmemory.core.short_term import ShortTermMemory
from ragmemory.vector.embeddings import DeterministicHashEmbedding
from ragmemory.vector.store import SQLiteVectorStore

TEST_DIMENSION = 256


@pytest.fixture
def db_path(tmp_path):
    """Path to a fresh SQLite file per test."""
    return str(tmp_path / "rag.db")


@pytest.fixture
def store(db_path):
    return SQLiteVectorStore(db_path)


@pytest.fixture
def embedder():
    return DeterministicHashEmbedding(dimension=TEST_DIMENSION)


@pytest.fixture
def generator():
    return MockGenerator()


@pytest.fixture
def memory(store, embedder, generator):
    """Memory service wired to the temporary store and offline collaborators."""
    service = MemoryService(
        store=store,
        embedder_factory=lambda: embedder,
        generator_factory=lambda: generator,
        short_term=ShortTermMemory(max_items=20),
    )
    yield service
    service.close()
