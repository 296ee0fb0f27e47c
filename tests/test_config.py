"""Tests for application configuration."""

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from src.config import (
    Backend,
    CollectionSettings,
    Environment,
    ErrorPolicy,
    IndexSettings,
    MetricType,
    MilvusSettings,
    QdrantSettings,
    SampleDataSettings,
    SearchSettings,
    Settings,
    get_settings,
)


class TestMilvusSettings:
    """Tests for Milvus configuration."""

    def test_default_values(self) -> None:
        """Default values point to a local Milvus."""
        settings = MilvusSettings()
        assert settings.host == "localhost"
        assert settings.port == 19530
        assert settings.user == "root"
        assert settings.db_name == "default"
        assert settings.timeout == 10.0

    def test_uri(self) -> None:
        """URI combines host and port."""
        settings = MilvusSettings(host="milvus", port=19531)
        assert settings.uri == "http://milvus:19531"

    def test_password_is_secret(self) -> None:
        """Password should be masked when printed."""
        settings = MilvusSettings()
        assert "Milvus" not in str(settings.password)
        assert settings.password.get_secret_value() == "Milvus"

    def test_env_override(self) -> None:
        """Environment variables override defaults."""
        with patch.dict(os.environ, {"MILVUS_HOST": "db.internal", "MILVUS_PORT": "29530"}):
            settings = MilvusSettings()
            assert settings.host == "db.internal"
            assert settings.port == 29530


class TestQdrantSettings:
    """Tests for Qdrant configuration."""

    def test_default_values(self) -> None:
        """Default values for Qdrant."""
        settings = QdrantSettings()
        assert settings.url == "http://localhost:6333"
        assert settings.api_key is None
        assert settings.timeout == 10

    def test_api_key_is_secret_when_set(self) -> None:
        """API key should be masked when set."""
        with patch.dict(os.environ, {"QDRANT_API_KEY": "secret-key"}):
            settings = QdrantSettings()
            assert settings.api_key is not None
            assert "secret-key" not in str(settings.api_key)
            assert settings.api_key.get_secret_value() == "secret-key"


class TestCollectionSettings:
    """Tests for collection schema configuration."""

    def test_default_values(self) -> None:
        """Defaults describe the sample collection."""
        settings = CollectionSettings()
        assert settings.name == "my_collection"
        assert settings.description == "A sample vector collection"
        assert settings.shards == 2
        assert settings.id_field == "id"
        assert settings.vector_field == "embedding"
        assert settings.dimension == 4

    def test_dimension_must_be_positive(self) -> None:
        """Zero dimension is rejected."""
        with pytest.raises(ValidationError):
            CollectionSettings(dimension=0)


class TestIndexSettings:
    """Tests for index configuration."""

    def test_default_values(self) -> None:
        """Defaults build an IVF_FLAT index under L2."""
        settings = IndexSettings()
        assert settings.name == "embedding_index"
        assert settings.type == "IVF_FLAT"
        assert settings.metric == MetricType.L2
        assert settings.params == {"nlist": 128}
        assert settings.sync is True
        assert settings.skip_if_exists is True

    def test_params_from_json_env(self) -> None:
        """Params are parsed from a JSON environment value."""
        with patch.dict(
            os.environ,
            {"INDEX_TYPE": "HNSW", "INDEX_PARAMS": '{"m": 16, "ef_construct": 100}'},
        ):
            settings = IndexSettings()
            assert settings.type == "HNSW"
            assert settings.params == {"m": 16, "ef_construct": 100}

    def test_unknown_metric_rejected(self) -> None:
        """Metric must be one of the known names."""
        with pytest.raises(ValidationError):
            IndexSettings(metric="HAMMING")

    def test_qdrant_defaults(self) -> None:
        """Unset type and params fall back to HNSW for Qdrant."""
        settings = IndexSettings().for_backend(Backend.QDRANT)
        assert settings.type == "HNSW"
        assert settings.params == {"m": 16, "ef_construct": 100}
        assert settings.name == "embedding_index"

    def test_milvus_keeps_defaults(self) -> None:
        """Milvus uses the IVF defaults unchanged."""
        settings = IndexSettings()
        assert settings.for_backend(Backend.MILVUS) is settings

    def test_explicit_values_kept_for_qdrant(self) -> None:
        """Values set in the environment are not replaced."""
        with patch.dict(os.environ, {"INDEX_PARAMS": '{"m": 32}'}):
            settings = IndexSettings().for_backend(Backend.QDRANT)
        assert settings.type == "HNSW"
        assert settings.params == {"m": 32}


class TestSearchSettings:
    """Tests for search configuration."""

    def test_default_values(self) -> None:
        """Default query equals the first sample vector."""
        settings = SearchSettings()
        assert settings.query_vector == [0.1, 0.2, 0.3, 0.4]
        assert settings.top_k == 5

    def test_top_k_must_be_positive(self) -> None:
        """Zero top-k is rejected."""
        with pytest.raises(ValidationError):
            SearchSettings(top_k=0)


class TestSampleDataSettings:
    """Tests for sample data configuration."""

    def test_default_values(self) -> None:
        """Three sample records by default."""
        settings = SampleDataSettings()
        assert settings.ids == [1, 2, 3]
        assert len(settings.vectors) == 3
        assert settings.vectors[1] == [0.5, 0.6, 0.7, 0.8]

    def test_mismatched_lengths_rejected(self) -> None:
        """Ids and vectors must pair up."""
        with pytest.raises(ValidationError):
            SampleDataSettings(ids=[1, 2], vectors=[[0.1, 0.2, 0.3, 0.4]])

    def test_env_override(self) -> None:
        """Sample data can come from JSON environment values."""
        with patch.dict(
            os.environ,
            {"SAMPLE_IDS": "[7]", "SAMPLE_VECTORS": "[[1.0, 2.0, 3.0, 4.0]]"},
        ):
            settings = SampleDataSettings()
            assert settings.ids == [7]
            assert settings.vectors == [[1.0, 2.0, 3.0, 4.0]]


class TestSettings:
    """Tests for main application settings."""

    def test_default_environment(self) -> None:
        """Default environment is development."""
        settings = Settings(_env_file=None)
        assert settings.environment == Environment.DEVELOPMENT

    def test_default_backend_and_policy(self) -> None:
        """Milvus and fail-fast are the defaults."""
        settings = Settings(_env_file=None)
        assert settings.vector_backend == Backend.MILVUS
        assert settings.error_policy == ErrorPolicy.FAIL_FAST

    def test_nested_settings_loaded(self) -> None:
        """Nested settings are initialized."""
        settings = Settings(_env_file=None)
        assert isinstance(settings.milvus, MilvusSettings)
        assert isinstance(settings.qdrant, QdrantSettings)
        assert isinstance(settings.collection, CollectionSettings)
        assert isinstance(settings.index, IndexSettings)
        assert isinstance(settings.search, SearchSettings)
        assert isinstance(settings.sample, SampleDataSettings)

    def test_enums_from_env(self) -> None:
        """Backend and policy can be set via strings."""
        with patch.dict(
            os.environ,
            {"VECTOR_BACKEND": "qdrant", "ERROR_POLICY": "continue"},
        ):
            settings = Settings(_env_file=None)
            assert settings.vector_backend == Backend.QDRANT
            assert settings.error_policy == ErrorPolicy.CONTINUE


class TestGetSettings:
    """Tests for settings singleton."""

    def test_returns_settings_instance(self) -> None:
        """get_settings returns a Settings instance."""
        get_settings.cache_clear()
        settings = get_settings()
        assert isinstance(settings, Settings)

    def test_caching(self) -> None:
        """Settings are cached."""
        get_settings.cache_clear()
        settings1 = get_settings()
        settings2 = get_settings()
        assert settings1 is settings2
