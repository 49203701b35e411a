"""
Unit tests for utils.metrics

Tests sync run metrics and publishing to a Pushgateway or textfile.
"""

from pathlib import Path
from unittest.mock import patch

from prometheus_client import CollectorRegistry

from csv_sync.executor import BatchResult, WriteFailure
from utils.metrics import MetricsPublisher, SyncMetrics


def _sample(metrics: SyncMetrics, name: str, **labels) -> float | None:
    return metrics.registry.get_sample_value(name, labels)


class TestSyncMetrics:
    """Test SyncMetrics class"""

    def test_own_registry_by_default(self):
        """Test each instance gets a fresh registry"""
        # Arrange & Act
        first = SyncMetrics()
        second = SyncMetrics()

        # Assert
        assert first.registry is not second.registry

    def test_custom_registry(self):
        """Test a registry can be supplied"""
        registry = CollectorRegistry()

        assert SyncMetrics(registry=registry).registry is registry

    def test_record_successful_run(self):
        """Test counters for a run without failures"""
        # Arrange
        metrics = SyncMetrics()
        batch = BatchResult(upserted=3, matched=10, modified=4, deleted=2)

        # Act
        metrics.record_sync_run("locations", batch, duration=1.5)

        # Assert
        assert _sample(metrics, "csv_sync_runs_total", collection="locations", status="success") == 1.0
        assert _sample(metrics, "csv_sync_documents_total",
                       collection="locations", operation="upserted") == 3.0
        assert _sample(metrics, "csv_sync_documents_total",
                       collection="locations", operation="matched") == 10.0
        assert _sample(metrics, "csv_sync_documents_total",
                       collection="locations", operation="modified") == 4.0
        assert _sample(metrics, "csv_sync_documents_total",
                       collection="locations", operation="deleted") == 2.0
        assert _sample(metrics, "csv_sync_duration_seconds_sum", collection="locations") == 1.5
        assert _sample(metrics, "csv_sync_write_errors_total", collection="locations") is None
        assert _sample(metrics, "csv_sync_last_run_timestamp", collection="locations") > 0

    def test_record_partial_run(self):
        """Test write failures mark the run partial"""
        metrics = SyncMetrics()
        batch = BatchResult(upserted=1, failures=[
            WriteFailure(0, 11000, "dup"),
            WriteFailure(1, 11000, "dup"),
        ])

        metrics.record_sync_run("locations", batch, duration=0.2)

        assert _sample(metrics, "csv_sync_runs_total", collection="locations", status="partial") == 1.0
        assert _sample(metrics, "csv_sync_write_errors_total", collection="locations") == 2.0

    def test_record_source_rows(self):
        """Test valid and skipped rows are counted separately"""
        metrics = SyncMetrics()

        metrics.record_source_rows("locations", valid=8, skipped=2)

        assert _sample(metrics, "csv_sync_source_rows_total", collection="locations", status="valid") == 8.0
        assert _sample(metrics, "csv_sync_source_rows_total", collection="locations", status="skipped") == 2.0

    def test_record_failed_run(self):
        """Test aborted runs are counted"""
        metrics = SyncMetrics()

        metrics.record_failed_run("locations")

        assert _sample(metrics, "csv_sync_runs_total", collection="locations", status="failed") == 1.0


class TestMetricsPublisher:
    """Test MetricsPublisher class"""

    def test_disabled_without_targets(self):
        """Test publishing is off by default"""
        publisher = MetricsPublisher(CollectorRegistry())

        assert publisher.enabled is False

    @patch("utils.metrics.publisher.write_to_textfile")
    @patch("utils.metrics.publisher.push_to_gateway")
    def test_publish_without_targets_does_nothing(self, mock_push, mock_write):
        MetricsPublisher(CollectorRegistry()).publish()

        mock_push.assert_not_called()
        mock_write.assert_not_called()

    @patch("utils.metrics.publisher.push_to_gateway")
    def test_push_to_gateway(self, mock_push):
        """Test the registry is pushed under the job name"""
        # Arrange
        registry = CollectorRegistry()
        publisher = MetricsPublisher(registry, pushgateway="localhost:9091")

        # Act
        publisher.publish()

        # Assert
        assert publisher.enabled is True
        mock_push.assert_called_once_with("localhost:9091", job="csv_sync", registry=registry)

    @patch("utils.metrics.publisher.push_to_gateway")
    def test_push_failure_is_logged(self, mock_push, caplog):
        """Test an unreachable gateway does not raise"""
        mock_push.side_effect = OSError("connection refused")

        MetricsPublisher(CollectorRegistry(), pushgateway="localhost:9091").publish()

        assert "Failed to push metrics" in caplog.text

    def test_write_textfile(self, tmp_path: Path):
        """Test the registry is written in exposition format"""
        # Arrange
        metrics = SyncMetrics()
        metrics.record_failed_run("locations")
        path = tmp_path / "csv_sync.prom"

        # Act
        MetricsPublisher(metrics.registry, textfile=str(path)).publish()

        # Assert
        assert 'csv_sync_runs_total{collection="locations",status="failed"} 1.0' in path.read_text()

    def test_textfile_failure_is_logged(self, tmp_path: Path, caplog):
        """Test an unwritable path does not raise"""
        path = tmp_path / "missing" / "csv_sync.prom"

        MetricsPublisher(CollectorRegistry(), textfile=str(path)).publish()

        assert "Failed to write metrics" in caplog.text
