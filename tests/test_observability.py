"""Tests for observability module."""

from pathlib import Path

from src.observability.metrics import (
    get_metrics,
    track_search_results,
    track_vectorstore_operation,
    track_workflow_step,
    write_metrics,
)


class TestMetricsFunctions:
    """Tests for metrics tracking functions."""

    def test_get_metrics_returns_bytes(self) -> None:
        """get_metrics returns bytes."""
        assert isinstance(get_metrics(), bytes)

    def test_track_workflow_step(self) -> None:
        """track_workflow_step records duration and outcome."""
        track_workflow_step("ensure_collection", 0.2, "skipped")

        metrics = get_metrics().decode()
        assert "workflow_step_duration_seconds" in metrics
        assert "workflow_steps_total{" in metrics
        assert 'step="ensure_collection"' in metrics

    def test_track_vectorstore_operation_failure(self) -> None:
        """Failed calls are labelled as errors."""
        track_vectorstore_operation("milvus", "insert", 0.1, success=False)

        metrics = get_metrics().decode()
        assert "vectorstore_operation_duration_seconds" in metrics
        assert 'operation="insert"' in metrics
        assert 'status="error"' in metrics

    def test_track_search_results(self) -> None:
        """Search metrics record hit count and best distance."""
        track_search_results(hits_returned=3, top_distance=0.0)

        metrics = get_metrics().decode()
        assert "search_results_returned" in metrics
        assert "search_top_distance" in metrics

    def test_track_search_results_without_hits(self) -> None:
        """An empty result does not need a distance."""
        track_search_results(hits_returned=0, top_distance=None)


class TestWriteMetrics:
    """Tests for metrics file output."""

    def test_writes_text_exposition(self, tmp_path: Path) -> None:
        """Metrics file contains the registry in text format."""
        track_workflow_step("search", 0.05, "completed")
        path = tmp_path / "workflow.prom"

        write_metrics(path)

        content = path.read_text()
        assert "# HELP workflow_step_duration_seconds" in content
        assert not (tmp_path / "workflow.prom.tmp").exists()
