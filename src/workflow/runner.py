"""Workflow orchestrator.

Runs the fixed sequence connect, provision, populate, index, search
against one vector store session.
"""

import time
from collections.abc import Callable

from src.config import ErrorPolicy, Settings, get_settings
from src.exceptions import (
    StatisticsError,
    ValidationError,
    VectorStoreConnectionError,
    WorkflowError,
)
from src.logging_config import get_logger
from src.observability.metrics import track_search_results, track_workflow_step
from src.vectorstore.models import CollectionSpec, IndexSpec, SearchHit, VectorRecord
from src.vectorstore.service import VectorStore
from src.workflow.models import StepResult, StepStatus, WorkflowReport

logger = get_logger(__name__)

# Failures of these errors abort the run under every policy
FATAL_ERRORS: tuple[type[WorkflowError], ...] = (
    VectorStoreConnectionError,
    StatisticsError,
)

StepOutcome = tuple[StepStatus, str]


class VectorWorkflow:
    """Drives one pass of the collection workflow.

    Usage:
        workflow = VectorWorkflow(store=create_vector_store(settings), settings=settings)
        report = workflow.run()
    """

    def __init__(
        self,
        store: VectorStore,
        settings: Settings | None = None,
        error_policy: ErrorPolicy | None = None,
    ) -> None:
        """Initialize the workflow.

        Args:
            store: Vector store to drive. Connected by ``run``.
            settings: Application settings (default from environment).
            error_policy: Override of ``settings.error_policy``.
        """
        settings = settings or get_settings()
        self._store = store
        self._error_policy = error_policy or settings.error_policy
        self._collection = CollectionSpec.from_settings(settings.collection)
        self._index = IndexSpec.from_settings(
            settings.index.for_backend(settings.vector_backend),
            field_name=settings.collection.vector_field,
        )
        self._skip_existing_index = settings.index.skip_if_exists
        self._records = [
            VectorRecord(id=record_id, vector=vector)
            for record_id, vector in zip(
                settings.sample.ids, settings.sample.vectors, strict=True
            )
        ]
        self._query_vector = list(settings.search.query_vector)
        self._top_k = settings.search.top_k
        self._search_params = dict(settings.search.params)

    @property
    def collection(self) -> CollectionSpec:
        """Schema of the managed collection."""
        return self._collection

    def validate(self) -> None:
        """Check sample data and query vector against the schema dimension.

        Raises:
            ValidationError: If a vector has the wrong dimension.
        """
        dimension = self._collection.vector_field.dimension
        for record in self._records:
            if len(record.vector) != dimension:
                raise ValidationError(
                    f"Sample record {record.id} has dimension {len(record.vector)}, "
                    f"expected {dimension}",
                    details={"id": record.id, "dimension": dimension},
                )
        if len(self._query_vector) != dimension:
            raise ValidationError(
                f"Query vector has dimension {len(self._query_vector)}, "
                f"expected {dimension}",
                details={"dimension": dimension},
            )

    def run(self, drop_existing: bool = False) -> WorkflowReport:
        """Run the workflow once.

        Args:
            drop_existing: Drop the collection before provisioning.

        Returns:
            WorkflowReport describing every step that ran.

        Raises:
            ValidationError: If the configured vectors do not match the schema.
        """
        self.validate()

        report = WorkflowReport(
            backend=self._store.backend,
            collection=self._collection.name,
        )
        steps: list[tuple[str, Callable[[WorkflowReport], StepOutcome]]] = [
            ("connect", self._connect_step),
        ]
        if drop_existing:
            steps.append(("drop_collection", self._drop_step))
        steps += [
            ("ensure_collection", self._collection_step),
            ("ensure_sample_data", self._sample_data_step),
            ("ensure_index", self._index_step),
            ("search", self._search_step),
        ]

        logger.info(
            f"Starting workflow on collection {self._collection.name}",
            extra={
                "backend": self._store.backend,
                "error_policy": self._error_policy.value,
            },
        )

        try:
            for name, step in steps:
                result, abort = self._run_step(name, step, report)
                report.steps.append(result)
                if abort:
                    report.aborted = True
                    logger.error(f"Workflow aborted at step {name}")
                    break
        finally:
            self._store.close()

        logger.info(
            "Workflow finished",
            extra={"succeeded": report.succeeded, "steps": len(report.steps)},
        )
        return report

    def connect(self) -> None:
        """Open the store session."""
        self._store.connect()

    def ensure_collection(self) -> bool:
        """Create the collection if it does not exist.

        Returns:
            True if the collection was created.
        """
        name = self._collection.name
        if self._store.has_collection(name):
            logger.info("Collection already exists. Skipping creation.")
            return False

        logger.info("Collection not found. Creating...")
        self._store.create_collection(self._collection)
        logger.info("Collection created successfully.")
        return True

    def is_collection_empty(self) -> bool:
        """Check the row count reported by collection statistics.

        Raises:
            StatisticsError: If statistics cannot be read.
        """
        stats = self._store.get_collection_stats(self._collection.name)
        return stats.row_count == 0

    def ensure_sample_data(self) -> int | None:
        """Insert the sample records into an empty collection.

        Returns:
            Number of records inserted, or None when the collection already
            contained data and no insert was attempted.
        """
        if not self.is_collection_empty():
            logger.info("Collection already contains data. Skipping insert.")
            return None

        logger.info("Inserting sample vectors...")
        inserted = self._store.insert(self._collection, self._records)
        logger.info(f"Inserted {inserted} vectors.")
        return inserted

    def ensure_index(self) -> bool:
        """Create the vector index.

        With ``skip_if_exists`` disabled the create request is always sent
        and idempotence is left to the service.

        Returns:
            True if a create request was issued.
        """
        name = self._collection.name
        if self._skip_existing_index and self._store.has_index(
            name, self._index.field_name
        ):
            logger.info("Index already exists. Skipping creation.")
            return False

        self._store.create_index(name, self._index)
        logger.info("Index created successfully.")
        return True

    def search(
        self,
        vector: list[float] | None = None,
        top_k: int | None = None,
    ) -> list[SearchHit]:
        """Load the collection and search for the nearest neighbours.

        The collection is loaded on every call.

        Args:
            vector: Query vector (default from settings).
            top_k: Result limit (default from settings).

        Returns:
            Hits in ranked order.
        """
        name = self._collection.name
        self._store.load_collection(name)

        hits = self._store.search(
            collection=name,
            field_name=self._index.field_name,
            vector=vector if vector is not None else self._query_vector,
            limit=top_k or self._top_k,
            metric_type=self._index.metric_type,
            params=self._search_params,
            output_fields=[self._collection.primary_field.name],
        )

        track_search_results(len(hits), hits[0].distance if hits else None)
        logger.info("Search results:")
        for hit in hits:
            logger.info(f"ID: {hit.id}, Distance: {hit.distance:.4f}")
        return hits

    def _run_step(
        self,
        name: str,
        step: Callable[[WorkflowReport], StepOutcome],
        report: WorkflowReport,
    ) -> tuple[StepResult, bool]:
        """Run one step and report whether its failure must abort the run."""
        start = time.perf_counter()
        abort = False
        try:
            status, message = step(report)
            error = None
        except WorkflowError as e:
            status, message, error = StepStatus.FAILED, e.message, e.to_dict()["error"]
            abort = (
                self._error_policy == ErrorPolicy.FAIL_FAST
                or name == "connect"
                or isinstance(e, FATAL_ERRORS)
            )
            logger.error(f"Step {name} failed: {e.message}", extra={"code": e.code.value})
        duration = time.perf_counter() - start

        track_workflow_step(name, duration, status.value)
        result = StepResult(
            step=name,
            status=status,
            message=message,
            duration_seconds=duration,
            error=error,
        )
        return result, abort

    def _connect_step(self, report: WorkflowReport) -> StepOutcome:
        self.connect()
        return StepStatus.COMPLETED, f"Connected to {self._store.backend}"

    def _drop_step(self, report: WorkflowReport) -> StepOutcome:
        name = self._collection.name
        if not self._store.has_collection(name):
            return StepStatus.SKIPPED, "Collection did not exist"
        self._store.drop_collection(name)
        return StepStatus.COMPLETED, f"Dropped collection {name}"

    def _collection_step(self, report: WorkflowReport) -> StepOutcome:
        if self.ensure_collection():
            return StepStatus.COMPLETED, "Collection created"
        return StepStatus.SKIPPED, "Collection already exists"

    def _sample_data_step(self, report: WorkflowReport) -> StepOutcome:
        inserted = self.ensure_sample_data()
        if inserted is not None:
            report.inserted_count = inserted
            return StepStatus.COMPLETED, f"Inserted {inserted} records"
        return StepStatus.SKIPPED, "Collection already contains data"

    def _index_step(self, report: WorkflowReport) -> StepOutcome:
        if self.ensure_index():
            return StepStatus.COMPLETED, f"Index {self._index.index_name} created"
        return StepStatus.SKIPPED, "Index already exists"

    def _search_step(self, report: WorkflowReport) -> StepOutcome:
        report.hits = self.search()
        return StepStatus.COMPLETED, f"{len(report.hits)} hits"
