"""Observability module for metrics and monitoring."""

from src.observability.metrics import (
    get_metrics,
    track_search_results,
    track_vectorstore_operation,
    track_workflow_step,
    write_metrics,
)

__all__ = [
    "get_metrics",
    "track_search_results",
    "track_vectorstore_operation",
    "track_workflow_step",
    "write_metrics",
]
