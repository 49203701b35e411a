"""
Metrics for sync runs.

Tracks runs, durations, document counts and write failures so a failing or
shrinking sync shows up on dashboards.
"""

import logging
import time
from typing import Any, Optional

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram

logger = logging.getLogger(__name__)


class SyncMetrics:
    """
    Metrics for CSV to MongoDB sync runs

    Each instance owns its registry by default, a batch job pushes that
    registry once when it finishes.
    """

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        """
        Initialize sync metrics

        Args:
            registry: Prometheus registry (default: a fresh CollectorRegistry)
        """
        self.registry = registry or CollectorRegistry()

        self.sync_runs_total = Counter(
            "csv_sync_runs_total",
            "Total number of sync runs",
            ["collection", "status"],
            registry=self.registry,
        )

        self.sync_duration_seconds = Histogram(
            "csv_sync_duration_seconds",
            "Duration of sync runs in seconds",
            ["collection"],
            buckets=(0.5, 1, 5, 10, 30, 60, 120, 300, 600),
            registry=self.registry,
        )

        self.sync_last_run_timestamp = Gauge(
            "csv_sync_last_run_timestamp",
            "Timestamp of the last sync run",
            ["collection"],
            registry=self.registry,
        )

        self.documents_total = Counter(
            "csv_sync_documents_total",
            "Documents affected by sync runs",
            ["collection", "operation"],
            registry=self.registry,
        )

        self.write_errors_total = Counter(
            "csv_sync_write_errors_total",
            "Write operations rejected by the server",
            ["collection"],
            registry=self.registry,
        )

        self.source_rows_total = Counter(
            "csv_sync_source_rows_total",
            "Source rows read, by outcome",
            ["collection", "status"],
            registry=self.registry,
        )

    def record_sync_run(self, collection: str, batch: Any, duration: float) -> None:
        """
        Record a finished sync run

        Args:
            collection: Name of the synced collection
            batch: BatchResult of the run
            duration: Duration in seconds
        """
        status = "partial" if batch.failures else "success"

        self.sync_runs_total.labels(collection=collection, status=status).inc()
        self.sync_duration_seconds.labels(collection=collection).observe(duration)
        self.sync_last_run_timestamp.labels(collection=collection).set(time.time())

        for operation in ("upserted", "matched", "modified", "deleted"):
            self.documents_total.labels(
                collection=collection,
                operation=operation,
            ).inc(getattr(batch, operation))

        if batch.failures:
            self.write_errors_total.labels(collection=collection).inc(len(batch.failures))

        logger.debug(
            f"Recorded sync run: collection={collection}, status={status}, "
            f"duration={duration:.2f}s"
        )

    def record_source_rows(self, collection: str, valid: int, skipped: int) -> None:
        """Record how many source rows were used and skipped."""
        self.source_rows_total.labels(collection=collection, status="valid").inc(valid)
        self.source_rows_total.labels(collection=collection, status="skipped").inc(skipped)

    def record_failed_run(self, collection: str) -> None:
        """Record a run that aborted before the batch completed."""
        self.sync_runs_total.labels(collection=collection, status="failed").inc()
        self.sync_last_run_timestamp.labels(collection=collection).set(time.time())
