"""Backend selection."""

from src.config import Backend, Settings, get_settings
from src.exceptions import ConfigurationError
from src.vectorstore.milvus import MilvusVectorStore
from src.vectorstore.qdrant import QdrantVectorStore
from src.vectorstore.service import VectorStore


def create_vector_store(settings: Settings | None = None) -> VectorStore:
    """Create an unconnected vector store for the configured backend.

    Args:
        settings: Application settings (default from environment).

    Returns:
        VectorStore for ``settings.vector_backend``.

    Raises:
        ConfigurationError: If the backend is unknown.
    """
    settings = settings or get_settings()

    if settings.vector_backend == Backend.MILVUS:
        return MilvusVectorStore(settings=settings.milvus)
    if settings.vector_backend == Backend.QDRANT:
        return QdrantVectorStore(settings=settings.qdrant, metric=settings.index.metric)

    raise ConfigurationError(
        f"Unknown vector backend: {settings.vector_backend}",
        details={"backend": str(settings.vector_backend)},
    )
