"""Qdrant vector store implementation.

Qdrant differs from the Milvus model in a few places:
- the distance metric is fixed when the collection is created
- every vector is served from an HNSW graph, so an "index" here is an
  explicit HNSW configuration on the named vector
- collections are always served, so loading is a no-op
"""

from typing import Any

from qdrant_client import QdrantClient
from qdrant_client.models import (
    Distance,
    HnswConfigDiff,
    PointStruct,
    SearchParams,
    VectorParams,
    VectorParamsDiff,
)

from src.config import MetricType, QdrantSettings, get_settings
from src.exceptions import (
    ErrorCode,
    IndexCreationError,
    InsertError,
    SchemaError,
    SearchError,
    StatisticsError,
    VectorStoreConnectionError,
)
from src.logging_config import get_logger
from src.vectorstore.models import (
    CollectionSpec,
    CollectionStats,
    IndexSpec,
    SearchHit,
    VectorRecord,
)
from src.vectorstore.service import VectorStore

logger = get_logger(__name__)

DISTANCES = {
    MetricType.L2: Distance.EUCLID,
    MetricType.IP: Distance.DOT,
    MetricType.COSINE: Distance.COSINE,
}

SUPPORTED_INDEX_TYPES = {"HNSW"}
SEARCH_PARAM_KEYS = {"hnsw_ef", "exact"}


class QdrantVectorStore(VectorStore):
    """Qdrant vector store implementation."""

    backend = "qdrant"

    def __init__(
        self,
        settings: QdrantSettings | None = None,
        metric: MetricType = MetricType.L2,
        client: QdrantClient | None = None,
    ) -> None:
        """Initialize Qdrant vector store.

        Args:
            settings: Qdrant configuration.
            metric: Distance metric for collections created by this store.
            client: Existing client (for testing).
        """
        self._settings = settings or get_settings().qdrant
        self._metric = metric
        self._client = client
        self._owns_client = client is None

    @property
    def client(self) -> QdrantClient:
        """The connected client."""
        if self._client is None:
            raise VectorStoreConnectionError(
                "Qdrant client is not connected",
                details={"url": self._settings.url},
            )
        return self._client

    def connect(self) -> None:
        """Create the client and verify the server answers."""
        if self._client is not None:
            return

        api_key = None
        if self._settings.api_key:
            api_key = self._settings.api_key.get_secret_value()

        with self._operation(
            "connect",
            VectorStoreConnectionError,
            "Failed to connect to Qdrant",
            {"url": self._settings.url},
        ):
            client = QdrantClient(
                url=self._settings.url,
                api_key=api_key,
                timeout=self._settings.timeout,
            )
            # The client connects lazily
            client.get_collections()
            self._client = client
        logger.info("Connection established with Qdrant", extra={"url": self._settings.url})

    def close(self) -> None:
        """Close the Qdrant client."""
        if self._owns_client and self._client is not None:
            self._client.close()
            self._client = None

    def has_collection(self, name: str) -> bool:
        """Check if collection exists."""
        with self._operation(
            "has_collection",
            SchemaError,
            "Failed to check collection",
            {"collection": name},
        ):
            return bool(self.client.collection_exists(collection_name=name))

    def create_collection(self, spec: CollectionSpec) -> None:
        """Create a Qdrant collection with one named vector."""
        vector_field = spec.vector_field
        with self._operation(
            "create_collection",
            SchemaError,
            "Failed to create collection",
            {"collection": spec.name},
        ):
            self.client.create_collection(
                collection_name=spec.name,
                vectors_config={
                    vector_field.name: VectorParams(
                        size=vector_field.dimension,
                        distance=DISTANCES[self._metric],
                    ),
                },
                shard_number=spec.shards,
            )
        logger.info(
            f"Created collection: {spec.name}",
            extra={"shards": spec.shards, "dimension": vector_field.dimension},
        )

    def drop_collection(self, name: str) -> None:
        """Delete a Qdrant collection."""
        with self._operation(
            "drop_collection",
            SchemaError,
            "Failed to drop collection",
            {"collection": name},
        ):
            self.client.delete_collection(collection_name=name)
        logger.info(f"Dropped collection: {name}")

    def get_collection_stats(self, name: str) -> CollectionStats:
        """Report the exact point count as ``row_count``."""
        with self._operation(
            "get_collection_stats",
            StatisticsError,
            "Unable to get collection statistics",
            {"collection": name},
        ):
            result = self.client.count(collection_name=name, exact=True)
        return CollectionStats(stats={"row_count": result.count})

    def insert(
        self,
        spec: CollectionSpec,
        records: list[VectorRecord],
    ) -> int:
        """Upsert records as points keyed by their primary key."""
        if not records:
            return 0

        vector_field = spec.vector_field.name
        with self._operation(
            "insert",
            InsertError,
            "Insertion failed",
            {"collection": spec.name},
        ):
            points = [
                PointStruct(id=record.id, vector={vector_field: record.vector})
                for record in records
            ]
            self.client.upsert(
                collection_name=spec.name,
                points=points,
                wait=True,
            )

        logger.debug(
            f"Inserted {len(points)} records",
            extra={"collection": spec.name},
        )
        return len(points)

    def has_index(self, collection: str, field_name: str) -> bool:
        """Check for an explicit HNSW configuration on the named vector."""
        with self._operation(
            "has_index",
            IndexCreationError,
            "Failed to read collection info",
            {"collection": collection, "field": field_name},
        ):
            info = self.client.get_collection(collection_name=collection)

        vectors = info.config.params.vectors
        if not isinstance(vectors, dict):
            return False
        params = vectors.get(field_name)
        return params is not None and params.hnsw_config is not None

    def create_index(self, collection: str, spec: IndexSpec) -> None:
        """Apply the index parameters as the vector's HNSW configuration."""
        details = {"collection": collection, "index": spec.index_name}
        if spec.index_type.upper() not in SUPPORTED_INDEX_TYPES:
            raise IndexCreationError(
                f"Index type {spec.index_type} is not supported by Qdrant",
                code=ErrorCode.UNSUPPORTED_INDEX,
                details={**details, "supported": sorted(SUPPORTED_INDEX_TYPES)},
            )
        if spec.metric_type != self._metric:
            raise IndexCreationError(
                f"Metric {spec.metric_type.value} differs from collection metric "
                f"{self._metric.value}",
                code=ErrorCode.UNSUPPORTED_INDEX,
                details=details,
            )

        hnsw_params = {
            k: v for k, v in spec.params.items() if k in HnswConfigDiff.model_fields
        }
        ignored = sorted(set(spec.params) - set(hnsw_params))
        if ignored:
            logger.warning(
                f"Ignoring index params not understood by Qdrant: {ignored}",
                extra=details,
            )

        with self._operation(
            "create_index",
            IndexCreationError,
            "Index creation failed",
            details,
        ):
            self.client.update_collection(
                collection_name=collection,
                vectors_config={
                    spec.field_name: VectorParamsDiff(
                        hnsw_config=HnswConfigDiff(**hnsw_params),
                    ),
                },
            )
        logger.info(
            f"Created index: {spec.index_name}",
            extra={"type": spec.index_type, "metric": spec.metric_type.value},
        )

    def load_collection(self, name: str) -> None:
        """Qdrant serves collections without an explicit load."""
        logger.debug(f"Load is a no-op for Qdrant: {name}")

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
        """Search for similar vectors.

        ``metric_type`` must match the collection metric; Qdrant has no
        per-query metric. Only ``hnsw_ef`` and ``exact`` are taken from
        ``params``. ``output_fields`` is ignored since hits carry only ids.
        """
        if metric_type != self._metric:
            raise SearchError(
                f"Metric {metric_type.value} differs from collection metric "
                f"{self._metric.value}",
                details={"collection": collection},
            )

        search_params = None
        if params:
            known = {k: v for k, v in params.items() if k in SEARCH_PARAM_KEYS}
            if known:
                search_params = SearchParams(**known)

        with self._operation(
            "search",
            SearchError,
            "Search failed",
            {"collection": collection},
        ):
            results = self.client.query_points(
                collection_name=collection,
                query=vector,
                using=field_name,
                limit=limit,
                search_params=search_params,
                with_payload=False,
            )

            return [
                SearchHit(
                    id=int(point.id),
                    distance=point.score if point.score is not None else 0.0,
                )
                for point in results.points
            ]
