"""Vector store interface."""

import time
from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from src.config import MetricType
from src.exceptions import VectorStoreError
from src.observability.metrics import track_vectorstore_operation
from src.vectorstore.models import (
    CollectionSpec,
    CollectionStats,
    IndexSpec,
    SearchHit,
    VectorRecord,
)


class VectorStore(ABC):
    """Abstract base class for vector stores.

    Defines the service contract the workflow drives. Implementations
    wrap backend failures in the matching VectorStoreError subclass.
    """

    backend: str = "unknown"

    @abstractmethod
    def connect(self) -> None:
        """Open a session with the service.

        Raises:
            VectorStoreConnectionError: If the service is unreachable or
                rejects the credentials.
        """
        ...

    @abstractmethod
    def close(self) -> None:
        """Release the session."""
        ...

    @abstractmethod
    def has_collection(self, name: str) -> bool:
        """Check if a collection exists.

        Args:
            name: Collection name.

        Returns:
            True if collection exists.

        Raises:
            SchemaError: If the check fails.
        """
        ...

    @abstractmethod
    def create_collection(self, spec: CollectionSpec) -> None:
        """Create a collection.

        Args:
            spec: Collection schema.

        Raises:
            SchemaError: If creation fails.
        """
        ...

    @abstractmethod
    def drop_collection(self, name: str) -> None:
        """Drop a collection.

        Args:
            name: Collection name.

        Raises:
            SchemaError: If the drop fails.
        """
        ...

    @abstractmethod
    def get_collection_stats(self, name: str) -> CollectionStats:
        """Read collection statistics.

        Args:
            name: Collection name.

        Returns:
            Statistics including at least the row count.

        Raises:
            StatisticsError: If statistics cannot be read.
        """
        ...

    @abstractmethod
    def insert(
        self,
        spec: CollectionSpec,
        records: list[VectorRecord],
    ) -> int:
        """Insert records.

        Args:
            spec: Schema of the target collection.
            records: Records to insert.

        Returns:
            Number of records inserted.

        Raises:
            InsertError: If insertion fails.
        """
        ...

    @abstractmethod
    def has_index(self, collection: str, field_name: str) -> bool:
        """Check if a vector field has an index.

        Raises:
            IndexCreationError: If the check fails.
        """
        ...

    @abstractmethod
    def create_index(self, collection: str, spec: IndexSpec) -> None:
        """Create an index on a vector field.

        Args:
            collection: Collection name.
            spec: Index definition.

        Raises:
            IndexCreationError: If creation fails or the index type is
                not supported by the backend.
        """
        ...

    @abstractmethod
    def load_collection(self, name: str) -> None:
        """Load a collection into query-serving memory.

        Raises:
            LoadError: If loading fails.
        """
        ...

    @abstractmethod
    def search(
        self,
        collection: str,
        field_name: str,
        vector: list[float],
        limit: int,
        metric_type: MetricType = MetricType.L2,
        params: dict[str, Any] | None = None,
        output_fields: list[str] | None = None,
    ) -> list[SearchHit]:
        """Search for the nearest neighbours of one query vector.

        Args:
            collection: Collection name.
            field_name: Vector field to search.
            vector: Query vector.
            limit: Maximum results to return.
            metric_type: Distance metric.
            params: Algorithm-specific search parameters.
            output_fields: Fields to return with each hit.

        Returns:
            Hits in ranked order, best first.

        Raises:
            SearchError: If search fails.
        """
        ...

    @contextmanager
    def _operation(
        self,
        operation: str,
        error_cls: type[VectorStoreError],
        message: str,
        details: dict[str, Any] | None = None,
    ) -> Iterator[None]:
        """Time a backend call and wrap its failures in ``error_cls``."""
        start = time.perf_counter()
        try:
            yield
        except VectorStoreError:
            track_vectorstore_operation(
                self.backend, operation, time.perf_counter() - start, success=False
            )
            raise
        except Exception as e:
            track_vectorstore_operation(
                self.backend, operation, time.perf_counter() - start, success=False
            )
            raise error_cls(
                f"{message}: {e}",
                details={**(details or {}), "error": str(e)},
            ) from e
        track_vectorstore_operation(self.backend, operation, time.perf_counter() - start)
