"""Vector store module."""

from src.vectorstore.factory import create_vector_store
from src.vectorstore.milvus import MilvusVectorStore
from src.vectorstore.models import (
    CollectionSpec,
    CollectionStats,
    FieldSpec,
    FieldType,
    IndexSpec,
    SearchHit,
    VectorRecord,
)
from src.vectorstore.qdrant import QdrantVectorStore
from src.vectorstore.service import VectorStore

__all__ = [
    "CollectionSpec",
    "CollectionStats",
    "FieldSpec",
    "FieldType",
    "IndexSpec",
    "MilvusVectorStore",
    "QdrantVectorStore",
    "SearchHit",
    "VectorRecord",
    "VectorStore",
    "create_vector_store",
]
