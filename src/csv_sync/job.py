"""
CSV to MongoDB sync job.

Wires the pieces of one run together: normalize the source rows into a
change set, add deletes for orphaned documents when delete mode is on, and
apply everything as one unordered batch.
"""

import time
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from utils.logging import ContextLogger
from utils.metrics import SyncMetrics
from utils.tracing import add_span_event, trace_operation

from .changeset import ChangeSet, build_change_set
from .config import SyncConfig
from .executor import BatchExecutor, BatchResult
from .orphans import OrphanDetector


@dataclass
class SyncResult:
    """Outcome of one sync run."""

    batch: BatchResult
    upserts_planned: int
    deletes_planned: int
    delete_mode: bool
    dry_run: bool = False
    skipped: dict[str, int] = field(default_factory=dict)
    duration_seconds: float = 0.0
    timestamp: str = field(default_factory=lambda: datetime.now(UTC).isoformat())

    def to_dict(self) -> dict[str, Any]:
        return {
            **self.batch.to_dict(),
            "upserts_planned": self.upserts_planned,
            "deletes_planned": self.deletes_planned,
            "delete_mode": self.delete_mode,
            "dry_run": self.dry_run,
            "skipped": dict(self.skipped),
            "duration_seconds": self.duration_seconds,
            "timestamp": self.timestamp,
        }


class SyncJob:
    """Mirrors a CSV source into one MongoDB collection."""

    def __init__(
        self,
        config: SyncConfig,
        collection: Any,
        metrics: SyncMetrics | None = None,
    ):
        """
        Initialize sync job

        Args:
            config: Run configuration
            collection: pymongo Collection to sync into
            metrics: Optional metrics recorder
        """
        self.config = config
        self.collection = collection
        self.metrics = metrics
        self.logger = ContextLogger(
            __name__,
            database=config.database_name,
            collection=config.collection_name,
        )

    def plan(self, header: list[str], rows: list[list[str]]) -> ChangeSet:
        """
        Build the full change set: upserts from the source, deletes for orphans.

        The orphan aggregation only runs in delete mode.
        """
        change_set = build_change_set(header, rows)

        if self.config.delete_mode:
            detector = OrphanDetector(self.collection)
            for key in detector.find_orphans(change_set.source_keys):
                change_set.add_delete(key)
        else:
            self.logger.info("Delete mode off, skipping orphan detection")

        return change_set

    def run(self, header: list[str], rows: list[list[str]], dry_run: bool = False) -> SyncResult:
        """
        Execute one sync run.

        Args:
            header: Field names from the first CSV row
            rows: Remaining CSV records
            dry_run: Plan the change set without writing

        Returns:
            SyncResult with the batch counts and failures
        """
        start_time = time.time()

        with trace_operation(
            "sync_collection",
            collection=self.config.collection_name,
            delete_mode=self.config.delete_mode,
            dry_run=dry_run,
        ):
            self.logger.info(f"Starting sync of {len(rows)} source row(s)")
            change_set = self.plan(header, rows)
            add_span_event(
                "change_set_built",
                upserts=len(change_set.upserts),
                deletes=len(change_set.deletes),
                skipped=len(change_set.skipped),
            )

            if dry_run:
                self.logger.info(f"Dry run: {len(change_set)} operation(s) not executed")
                batch = BatchResult()
            else:
                batch = BatchExecutor(self.collection).execute(change_set.to_write_models())

        duration = time.time() - start_time
        result = SyncResult(
            batch=batch,
            upserts_planned=len(change_set.upserts),
            deletes_planned=len(change_set.deletes),
            delete_mode=self.config.delete_mode,
            dry_run=dry_run,
            skipped=change_set.skip_summary(),
            duration_seconds=duration,
        )

        if self.metrics is not None:
            self.metrics.record_source_rows(
                self.config.collection_name,
                valid=len(change_set.upserts),
                skipped=len(change_set.skipped),
            )
            self.metrics.record_sync_run(self.config.collection_name, batch, duration)

        if batch.has_failures:
            self.logger.warning(
                f"Sync finished with {len(batch.failures)} failed operation(s)",
                failures=len(batch.failures),
            )
        else:
            self.logger.info(f"Sync finished in {duration:.2f}s")

        return result
