"""Pytest configuration and shared fixtures."""

import pytest

from src.config import Settings
from tests.fakes import InMemoryVectorStore


@pytest.fixture
def settings() -> Settings:
    """Default settings, independent of any local .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def memory_store() -> InMemoryVectorStore:
    """Reachable, empty in-memory vector store."""
    return InMemoryVectorStore()
