"""Application configuration using Pydantic Settings.

All configuration is loaded from environment variables.
No secrets are hardcoded.
"""

from enum import Enum
from functools import lru_cache
from typing import Any

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Application environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class Backend(str, Enum):
    """Supported vector database backends."""

    MILVUS = "milvus"
    QDRANT = "qdrant"


class ErrorPolicy(str, Enum):
    """How the workflow reacts to a failing step.

    Connection and statistics failures abort the run under either policy.
    """

    FAIL_FAST = "fail_fast"
    CONTINUE = "continue"


class MetricType(str, Enum):
    """Distance metric used to rank search candidates."""

    L2 = "L2"
    IP = "IP"
    COSINE = "COSINE"


class MilvusSettings(BaseSettings):
    """Milvus connection configuration."""

    model_config = SettingsConfigDict(env_prefix="MILVUS_")

    host: str = Field(
        default="localhost",
        description="Milvus server host",
    )
    port: int = Field(
        default=19530,
        description="Milvus gRPC port",
    )
    user: str = Field(
        default="root",
        description="Milvus user name",
    )
    password: SecretStr = Field(
        default=SecretStr("Milvus"),
        description="Milvus password",
    )
    db_name: str = Field(
        default="default",
        description="Milvus database name",
    )
    timeout: float = Field(
        default=10.0,
        description="Connection and request timeout in seconds",
    )

    @property
    def uri(self) -> str:
        """Server URI in the form the client expects."""
        return f"http://{self.host}:{self.port}"


class QdrantSettings(BaseSettings):
    """Qdrant vector database configuration."""

    model_config = SettingsConfigDict(env_prefix="QDRANT_")

    url: str = Field(
        default="http://localhost:6333",
        description="Qdrant server URL",
    )
    api_key: SecretStr | None = Field(
        default=None,
        description="Qdrant API key (optional for local)",
    )
    timeout: int = Field(
        default=10,
        description="Request timeout in seconds",
    )


class CollectionSettings(BaseSettings):
    """Schema of the collection the workflow provisions."""

    model_config = SettingsConfigDict(env_prefix="COLLECTION_")

    name: str = Field(
        default="my_collection",
        description="Collection name",
    )
    description: str = Field(
        default="A sample vector collection",
        description="Collection description",
    )
    shards: int = Field(
        default=2,
        gt=0,
        description="Number of shards",
    )
    id_field: str = Field(
        default="id",
        description="Name of the INT64 primary key field",
    )
    vector_field: str = Field(
        default="embedding",
        description="Name of the float vector field",
    )
    dimension: int = Field(
        default=4,
        gt=0,
        description="Vector dimension",
    )


class IndexSettings(BaseSettings):
    """Index built on the vector field."""

    model_config = SettingsConfigDict(env_prefix="INDEX_")

    name: str = Field(
        default="embedding_index",
        description="Index name",
    )
    type: str = Field(
        default="IVF_FLAT",
        description="Index algorithm",
    )
    metric: MetricType = Field(
        default=MetricType.L2,
        description="Distance metric",
    )
    params: dict[str, Any] = Field(
        default_factory=lambda: {"nlist": 128},
        description="Algorithm-specific build parameters",
    )
    sync: bool = Field(
        default=True,
        description="Wait for the index build to finish",
    )
    skip_if_exists: bool = Field(
        default=True,
        description="Skip creation when the vector field already has an index",
    )

    def for_backend(self, backend: Backend) -> "IndexSettings":
        """Fill type and params the environment left unset with backend defaults.

        Qdrant serves every vector from an HNSW graph, so the IVF defaults
        above only apply to Milvus.
        """
        defaults = BACKEND_INDEX_DEFAULTS.get(backend, {})
        update = {
            key: value
            for key, value in defaults.items()
            if key not in self.model_fields_set
        }
        if not update:
            return self
        return self.model_copy(update=update, deep=True)


# Index type and build params per backend, used when INDEX_TYPE/INDEX_PARAMS are unset
BACKEND_INDEX_DEFAULTS: dict[Backend, dict[str, Any]] = {
    Backend.QDRANT: {"type": "HNSW", "params": {"m": 16, "ef_construct": 100}},
}


class SearchSettings(BaseSettings):
    """Similarity search issued at the end of the workflow."""

    model_config = SettingsConfigDict(env_prefix="SEARCH_")

    query_vector: list[float] = Field(
        default_factory=lambda: [0.1, 0.2, 0.3, 0.4],
        description="Query vector",
    )
    top_k: int = Field(
        default=5,
        gt=0,
        description="Maximum number of results",
    )
    params: dict[str, Any] = Field(
        default_factory=lambda: {"nprobe": 10},
        description="Algorithm-specific search parameters",
    )


class SampleDataSettings(BaseSettings):
    """Records inserted into an empty collection."""

    model_config = SettingsConfigDict(env_prefix="SAMPLE_")

    ids: list[int] = Field(
        default_factory=lambda: [1, 2, 3],
        description="Primary keys of the sample records",
    )
    vectors: list[list[float]] = Field(
        default_factory=lambda: [
            [0.1, 0.2, 0.3, 0.4],
            [0.5, 0.6, 0.7, 0.8],
            [0.9, 1.0, 1.1, 1.2],
        ],
        description="Vectors of the sample records",
    )

    @model_validator(mode="after")
    def _check_lengths(self) -> "SampleDataSettings":
        if len(self.ids) != len(self.vectors):
            raise ValueError(
                f"sample ids ({len(self.ids)}) and vectors ({len(self.vectors)}) "
                "must have the same length"
            )
        return self


class Settings(BaseSettings):
    """Main application settings.

    Aggregates all configuration sections.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application settings
    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    vector_backend: Backend = Field(
        default=Backend.MILVUS,
        description="Vector database backend",
    )
    error_policy: ErrorPolicy = Field(
        default=ErrorPolicy.FAIL_FAST,
        description="Reaction to a failing workflow step",
    )

    # Nested settings
    milvus: MilvusSettings = Field(default_factory=MilvusSettings)
    qdrant: QdrantSettings = Field(default_factory=QdrantSettings)
    collection: CollectionSettings = Field(default_factory=CollectionSettings)
    index: IndexSettings = Field(default_factory=IndexSettings)
    search: SearchSettings = Field(default_factory=SearchSettings)
    sample: SampleDataSettings = Field(default_factory=SampleDataSettings)


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Returns:
        Settings instance loaded from environment.
    """
    return Settings()
