"""Prometheus metrics for the vector workflow.

Provides metrics instrumentation for:
- Workflow step latency and outcomes
- Vector store operation latency per backend
- Search result counts and top distances
"""

from pathlib import Path

from prometheus_client import Counter, Histogram, generate_latest

from src.logging_config import get_logger

logger = get_logger(__name__)

# Workflow Step Metrics
WORKFLOW_STEP_DURATION = Histogram(
    "workflow_step_duration_seconds",
    "Workflow step duration in seconds",
    ["step", "status"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
)

WORKFLOW_STEP_TOTAL = Counter(
    "workflow_steps_total",
    "Total workflow steps by outcome",
    ["step", "status"],
)

# Vector Store Metrics
VECTORSTORE_OPERATION_DURATION = Histogram(
    "vectorstore_operation_duration_seconds",
    "Vector store operation duration",
    ["backend", "operation", "status"],
    buckets=[0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0],
)

# Search Metrics
SEARCH_RESULTS_RETURNED = Histogram(
    "search_results_returned",
    "Number of hits returned per search",
    buckets=[0, 1, 2, 3, 5, 10, 20, 50, 100],
)

SEARCH_TOP_DISTANCE = Histogram(
    "search_top_distance",
    "Distance of the best hit per search",
    buckets=[0.0, 0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0],
)


def get_metrics() -> bytes:
    """Generate Prometheus metrics output."""
    return generate_latest()


def write_metrics(path: Path) -> None:
    """Write the metrics registry to a file in text exposition format.

    Suitable for the node exporter textfile collector.

    Args:
        path: Destination file.
    """
    # Atomic replace for the textfile collector
    tmp_path = path.with_name(f"{path.name}.tmp")
    tmp_path.write_bytes(get_metrics())
    tmp_path.replace(path)
    logger.debug(f"Metrics written to {path}")


def track_workflow_step(
    step: str,
    duration: float,
    status: str,
) -> None:
    """Track a workflow step outcome.

    Args:
        step: Step name.
        duration: Step duration in seconds.
        status: Step status (completed, skipped, failed).
    """
    WORKFLOW_STEP_DURATION.labels(step=step, status=status).observe(duration)
    WORKFLOW_STEP_TOTAL.labels(step=step, status=status).inc()


def track_vectorstore_operation(
    backend: str,
    operation: str,
    duration: float,
    success: bool = True,
) -> None:
    """Track a vector store call.

    Args:
        backend: Backend name.
        operation: Operation name.
        duration: Call duration in seconds.
        success: Whether the call succeeded.
    """
    status = "success" if success else "error"
    VECTORSTORE_OPERATION_DURATION.labels(
        backend=backend,
        operation=operation,
        status=status,
    ).observe(duration)


def track_search_results(
    hits_returned: int,
    top_distance: float | None,
) -> None:
    """Track search result metrics.

    Args:
        hits_returned: Number of hits returned.
        top_distance: Distance of the best hit, if any.
    """
    SEARCH_RESULTS_RETURNED.observe(hits_returned)
    if top_distance is not None:
        SEARCH_TOP_DISTANCE.observe(top_distance)
