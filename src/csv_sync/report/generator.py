"""
Report generation for sync results.
"""

from typing import Any

from ..config import SyncConfig
from ..job import SyncResult


class ReportStatus:
    """Constants for report status values."""

    SUCCESS = "SUCCESS"
    PARTIAL = "PARTIAL"
    DRY_RUN = "DRY_RUN"


def generate_report(result: SyncResult, config: SyncConfig) -> dict[str, Any]:
    """
    Generate a sync report

    Args:
        result: Outcome of the sync run
        config: Configuration the run used

    Returns:
        Dictionary containing:
        - status: SUCCESS, PARTIAL (some writes failed) or DRY_RUN
        - upserted, modified, matched, deleted: document counts
        - failures: per-operation write failures
        - skipped: number of source rows discarded, per reason
        - source, database, collection, delete_mode: run settings
        - timestamp, duration_seconds
    """
    if result.dry_run:
        status = ReportStatus.DRY_RUN
    elif result.batch.has_failures:
        status = ReportStatus.PARTIAL
    else:
        status = ReportStatus.SUCCESS

    return {
        "status": status,
        "upserted": result.batch.upserted,
        "modified": result.batch.modified,
        "matched": result.batch.matched,
        "deleted": result.batch.deleted,
        "failures": [failure.to_dict() for failure in result.batch.failures],
        "upserts_planned": result.upserts_planned,
        "deletes_planned": result.deletes_planned,
        "skipped": dict(result.skipped),
        "source": config.source_location,
        "database": config.database_name,
        "collection": config.collection_name,
        "delete_mode": result.delete_mode,
        "timestamp": result.timestamp,
        "duration_seconds": round(result.duration_seconds, 3),
    }
