#!/usr/bin/env python
"""Provision a vector collection, populate it, index it and search it.

Usage:
    python -m scripts.run_workflow --backend milvus --top-k 5

Connection details, schema, sample data and search parameters come from
environment variables (see src/config.py). Exits non-zero when a step fails.
"""

import argparse
import sys
from pathlib import Path

from pydantic import ValidationError as SettingsValidationError

from src.config import Backend, ErrorPolicy, Settings, get_settings
from src.exceptions import ConfigurationError, WorkflowError
from src.logging_config import get_logger, setup_logging
from src.observability.metrics import write_metrics
from src.vectorstore.factory import create_vector_store
from src.vectorstore.service import VectorStore
from src.workflow.models import StepStatus, WorkflowReport
from src.workflow.runner import VectorWorkflow

logger = get_logger(__name__)


def load_settings() -> Settings:
    """Load settings from the environment.

    Raises:
        ConfigurationError: If an environment variable fails validation.
    """
    try:
        return get_settings()
    except SettingsValidationError as e:
        raise ConfigurationError(
            f"Invalid configuration ({e.error_count()} error(s))",
            details={
                "errors": [
                    {
                        "field": ".".join(str(part) for part in error["loc"]) or e.title,
                        "message": error["msg"],
                    }
                    for error in e.errors()
                ]
            },
        ) from e


def apply_overrides(
    settings: Settings,
    backend: Backend | None = None,
    collection: str | None = None,
    top_k: int | None = None,
    error_policy: ErrorPolicy | None = None,
) -> Settings:
    """Return a copy of the settings with command line overrides applied."""
    update: dict[str, object] = {}
    if backend is not None:
        update["vector_backend"] = backend
    if error_policy is not None:
        update["error_policy"] = error_policy
    if collection is not None:
        update["collection"] = settings.collection.model_copy(update={"name": collection})
    if top_k is not None:
        update["search"] = settings.search.model_copy(update={"top_k": top_k})
    return settings.model_copy(update=update)


def print_report(report: WorkflowReport) -> None:
    """Print the step summary and ranked hits."""
    print("\n" + "=" * 60)
    print("WORKFLOW SUMMARY")
    print("=" * 60)
    print(f"Backend: {report.backend}")
    print(f"Collection: {report.collection}")
    for step in report.steps:
        print(f"  {step.step:<20} {step.status.value:<10} {step.message}")
    if report.inserted_count:
        print(f"Inserted: {report.inserted_count}")

    search_step = report.step("search")
    if search_step is not None and search_step.status == StepStatus.COMPLETED:
        print("\nSearch results:")
        for hit in report.hits:
            print(f"ID: {hit.id}, Distance: {hit.distance:.4f}")
    print("=" * 60)

    if report.succeeded:
        print("\nRESULT: SUCCEEDED")
    else:
        print("\nRESULT: FAILED", file=sys.stderr)


def run_workflow(
    settings: Settings,
    drop_existing: bool = False,
    metrics_file: Path | None = None,
    store: VectorStore | None = None,
) -> bool:
    """Run the workflow and return whether every step succeeded.

    Args:
        settings: Effective settings.
        drop_existing: Drop the collection before provisioning.
        metrics_file: Optional path to write Prometheus metrics to.
        store: Vector store to use (default built from settings).

    Returns:
        True if no step failed, False otherwise.
    """
    try:
        store = store or create_vector_store(settings)
        workflow = VectorWorkflow(store=store, settings=settings)
        report = workflow.run(drop_existing=drop_existing)
    except WorkflowError as e:
        logger.error(f"Workflow could not start: {e.message}", extra={"code": e.code.value})
        return False
    finally:
        if metrics_file:
            write_metrics(metrics_file)

    print_report(report)
    return report.succeeded


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Provision, populate, index and search a vector collection",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--backend",
        type=Backend,
        choices=list(Backend),
        default=None,
        help="Vector database backend (default from VECTOR_BACKEND)",
    )
    parser.add_argument(
        "--collection",
        default=None,
        help="Collection name (default from COLLECTION_NAME)",
    )
    parser.add_argument(
        "--top-k",
        type=int,
        default=None,
        help="Number of search results (default from SEARCH_TOP_K)",
    )
    parser.add_argument(
        "--error-policy",
        type=ErrorPolicy,
        choices=list(ErrorPolicy),
        default=None,
        help="Reaction to a failing step (default from ERROR_POLICY)",
    )
    parser.add_argument(
        "--drop",
        action="store_true",
        help="Drop the collection before running",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level (default from LOG_LEVEL)",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Force JSON log output",
    )
    parser.add_argument(
        "--metrics-file",
        type=Path,
        default=None,
        help="Write Prometheus metrics to this file",
    )

    args = parser.parse_args()

    try:
        settings = load_settings()
    except ConfigurationError as e:
        print(f"Configuration error [{e.code.value}]: {e.message}", file=sys.stderr)
        for error in e.details["errors"]:
            print(f"  {error['field']}: {error['message']}", file=sys.stderr)
        sys.exit(1)

    setup_logging(level=args.log_level, json_output=True if args.json_logs else None)

    settings = apply_overrides(
        settings,
        backend=args.backend,
        collection=args.collection,
        top_k=args.top_k,
        error_policy=args.error_policy,
    )

    passed = run_workflow(
        settings,
        drop_existing=args.drop,
        metrics_file=args.metrics_file,
    )

    sys.exit(0 if passed else 1)


if __name__ == "__main__":
    main()
