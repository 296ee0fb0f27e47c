"""Vector store data models."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from src.config import CollectionSettings, IndexSettings, MetricType


class FieldType(str, Enum):
    """Field data types used by the workflow schema."""

    INT64 = "INT64"
    FLOAT_VECTOR = "FLOAT_VECTOR"


class FieldSpec(BaseModel):
    """A single field of a collection schema.

    Attributes:
        name: Field name.
        data_type: Field data type.
        is_primary: Whether the field is the primary key.
        auto_id: Whether the service generates primary keys.
        dimension: Vector dimension (vector fields only).
        description: Field description.
    """

    name: str = Field(description="Field name")
    data_type: FieldType = Field(description="Field data type")
    is_primary: bool = Field(default=False, description="Primary key flag")
    auto_id: bool = Field(default=False, description="Service-generated ids")
    dimension: int | None = Field(default=None, description="Vector dimension")
    description: str = Field(default="", description="Field description")


class CollectionSpec(BaseModel):
    """Schema of a collection: an INT64 primary key and one vector field.

    Attributes:
        name: Collection name.
        description: Collection description.
        shards: Number of shards.
        fields: Field definitions.
    """

    name: str = Field(description="Collection name")
    description: str = Field(default="", description="Collection description")
    shards: int = Field(default=1, gt=0, description="Number of shards")
    fields: list[FieldSpec] = Field(description="Field definitions")

    @property
    def primary_field(self) -> FieldSpec:
        """The primary key field."""
        return next(f for f in self.fields if f.is_primary)

    @property
    def vector_field(self) -> FieldSpec:
        """The float vector field."""
        return next(f for f in self.fields if f.data_type == FieldType.FLOAT_VECTOR)

    @classmethod
    def from_settings(cls, settings: CollectionSettings) -> "CollectionSpec":
        """Build the workflow schema from configuration."""
        return cls(
            name=settings.name,
            description=settings.description,
            shards=settings.shards,
            fields=[
                FieldSpec(
                    name=settings.id_field,
                    data_type=FieldType.INT64,
                    is_primary=True,
                    auto_id=False,
                ),
                FieldSpec(
                    name=settings.vector_field,
                    data_type=FieldType.FLOAT_VECTOR,
                    dimension=settings.dimension,
                    description="Vector field",
                ),
            ],
        )


class VectorRecord(BaseModel):
    """A record to store in the vector database.

    Attributes:
        id: Primary key.
        vector: The embedding vector.
    """

    id: int = Field(description="Primary key")
    vector: list[float] = Field(description="Embedding vector")


class IndexSpec(BaseModel):
    """Index definition for a vector field.

    Attributes:
        field_name: Indexed vector field.
        index_name: Index name.
        index_type: Index algorithm tag.
        metric_type: Distance metric.
        params: Algorithm-specific build parameters.
        sync: Wait for the build to finish.
    """

    field_name: str = Field(description="Indexed field")
    index_name: str = Field(description="Index name")
    index_type: str = Field(description="Index algorithm")
    metric_type: MetricType = Field(default=MetricType.L2, description="Distance metric")
    params: dict[str, Any] = Field(default_factory=dict, description="Build parameters")
    sync: bool = Field(default=True, description="Synchronous build")

    @classmethod
    def from_settings(cls, settings: IndexSettings, field_name: str) -> "IndexSpec":
        """Build the index definition from configuration."""
        return cls(
            field_name=field_name,
            index_name=settings.name,
            index_type=settings.type,
            metric_type=settings.metric,
            params=dict(settings.params),
            sync=settings.sync,
        )


class CollectionStats(BaseModel):
    """Statistics reported by the service for a collection.

    Attributes:
        stats: Raw stat-key to stat-value mapping.
    """

    stats: dict[str, Any] = Field(default_factory=dict, description="Raw statistics")

    @property
    def row_count(self) -> int:
        """Number of rows; a missing key counts as zero."""
        return int(self.stats.get("row_count", 0))


class SearchHit(BaseModel):
    """A ranked search result.

    Attributes:
        id: Record primary key.
        distance: Distance to the query vector (smaller is closer for L2).
    """

    id: int = Field(description="Record primary key")
    distance: float = Field(description="Distance to query")
