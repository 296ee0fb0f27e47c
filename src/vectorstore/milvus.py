"""Milvus vector store implementation."""

from typing import Any

from pymilvus import DataType, MilvusClient

from src.config import MetricType, MilvusSettings, get_settings
from src.exceptions import (
    IndexCreationError,
    InsertError,
    LoadError,
    SchemaError,
    SearchError,
    StatisticsError,
    VectorStoreConnectionError,
)
from src.logging_config import get_logger
from src.vectorstore.models import (
    CollectionSpec,
    CollectionStats,
    FieldType,
    IndexSpec,
    SearchHit,
    VectorRecord,
)
from src.vectorstore.service import VectorStore

logger = get_logger(__name__)


class MilvusVectorStore(VectorStore):
    """Milvus vector store backed by ``pymilvus.MilvusClient``."""

    backend = "milvus"

    def __init__(
        self,
        settings: MilvusSettings | None = None,
        client: MilvusClient | None = None,
    ) -> None:
        """Initialize Milvus vector store.

        Args:
            settings: Milvus configuration.
            client: Existing client (for testing).
        """
        self._settings = settings or get_settings().milvus
        self._client = client
        self._owns_client = client is None

    @property
    def client(self) -> MilvusClient:
        """The connected client."""
        if self._client is None:
            raise VectorStoreConnectionError(
                "Milvus client is not connected",
                details={"uri": self._settings.uri},
            )
        return self._client

    def connect(self) -> None:
        """Open a session with the Milvus server."""
        if self._client is not None:
            return

        uri = self._settings.uri
        with self._operation(
            "connect",
            VectorStoreConnectionError,
            "Failed to connect to Milvus",
            {"uri": uri},
        ):
            password = self._settings.password.get_secret_value()
            self._client = MilvusClient(
                uri=uri,
                token=f"{self._settings.user}:{password}",
                db_name=self._settings.db_name,
                timeout=self._settings.timeout,
            )
        logger.info("Connection established with Milvus", extra={"uri": uri})

    def close(self) -> None:
        """Close the Milvus client."""
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
            return bool(self.client.has_collection(collection_name=name))

    def create_collection(self, spec: CollectionSpec) -> None:
        """Create a Milvus collection from the schema."""
        with self._operation(
            "create_collection",
            SchemaError,
            "Failed to create collection",
            {"collection": spec.name},
        ):
            schema = self.client.create_schema(
                auto_id=spec.primary_field.auto_id,
                enable_dynamic_field=False,
                description=spec.description,
            )
            for field in spec.fields:
                if field.data_type == FieldType.FLOAT_VECTOR:
                    schema.add_field(
                        field_name=field.name,
                        datatype=DataType.FLOAT_VECTOR,
                        dim=field.dimension,
                        description=field.description,
                    )
                else:
                    schema.add_field(
                        field_name=field.name,
                        datatype=DataType.INT64,
                        is_primary=field.is_primary,
                        description=field.description,
                    )

            self.client.create_collection(
                collection_name=spec.name,
                schema=schema,
                num_shards=spec.shards,
                timeout=self._settings.timeout,
            )
        logger.info(
            f"Created collection: {spec.name}",
            extra={"shards": spec.shards, "dimension": spec.vector_field.dimension},
        )

    def drop_collection(self, name: str) -> None:
        """Drop a Milvus collection."""
        with self._operation(
            "drop_collection",
            SchemaError,
            "Failed to drop collection",
            {"collection": name},
        ):
            self.client.drop_collection(collection_name=name)
        logger.info(f"Dropped collection: {name}")

    def get_collection_stats(self, name: str) -> CollectionStats:
        """Read collection statistics."""
        with self._operation(
            "get_collection_stats",
            StatisticsError,
            "Unable to get collection statistics",
            {"collection": name},
        ):
            stats = self.client.get_collection_stats(collection_name=name)
        return CollectionStats(stats=dict(stats))

    def insert(
        self,
        spec: CollectionSpec,
        records: list[VectorRecord],
    ) -> int:
        """Insert records into the collection."""
        if not records:
            return 0

        id_field = spec.primary_field.name
        vector_field = spec.vector_field.name

        with self._operation(
            "insert",
            InsertError,
            "Insertion failed",
            {"collection": spec.name},
        ):
            result = self.client.insert(
                collection_name=spec.name,
                data=[
                    {id_field: record.id, vector_field: record.vector}
                    for record in records
                ],
            )
            inserted = int(result["insert_count"])
            # Row counts in collection statistics only cover flushed segments
            self.client.flush(collection_name=spec.name)

        logger.debug(
            f"Inserted {inserted} records",
            extra={"collection": spec.name},
        )
        return inserted

    def has_index(self, collection: str, field_name: str) -> bool:
        """Check if the field has an index."""
        with self._operation(
            "has_index",
            IndexCreationError,
            "Failed to list indexes",
            {"collection": collection, "field": field_name},
        ):
            indexes = self.client.list_indexes(
                collection_name=collection,
                field_name=field_name,
            )
        return len(indexes) > 0

    def create_index(self, collection: str, spec: IndexSpec) -> None:
        """Create an index on the vector field."""
        with self._operation(
            "create_index",
            IndexCreationError,
            "Index creation failed",
            {"collection": collection, "index": spec.index_name},
        ):
            index_params = self.client.prepare_index_params()
            index_params.add_index(
                field_name=spec.field_name,
                index_type=spec.index_type,
                index_name=spec.index_name,
                metric_type=spec.metric_type.value,
                params=spec.params,
            )

            # Without _async the client blocks until the build finishes
            kwargs: dict[str, Any] = {} if spec.sync else {"_async": True}
            self.client.create_index(
                collection_name=collection,
                index_params=index_params,
                **kwargs,
            )
        logger.info(
            f"Created index: {spec.index_name}",
            extra={"type": spec.index_type, "metric": spec.metric_type.value},
        )

    def load_collection(self, name: str) -> None:
        """Load the collection into query-serving memory."""
        with self._operation(
            "load_collection",
            LoadError,
            "Failed to load collection",
            {"collection": name},
        ):
            self.client.load_collection(
                collection_name=name,
                timeout=self._settings.timeout,
            )

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
        """Search for similar vectors."""
        with self._operation(
            "search",
            SearchError,
            "Search failed",
            {"collection": collection},
        ):
            results = self.client.search(
                collection_name=collection,
                data=[vector],
                anns_field=field_name,
                limit=limit,
                output_fields=output_fields or [],
                search_params={
                    "metric_type": metric_type.value,
                    "params": params or {},
                },
                timeout=self._settings.timeout,
            )

            hits = results[0] if results else []
            return [
                SearchHit(id=int(hit["id"]), distance=float(hit["distance"]))
                for hit in hits
            ]
