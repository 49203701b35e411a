"""
CSV to MongoDB collection sync

Mirrors a CSV source into a MongoDB collection: rows are upserted by their
normalized (city, address) key, fields emptied in the source are unset, and
documents no longer in the source are deleted.

Components:
- normalize: Row normalization and matching keys
- changeset: Upsert/delete change set accumulation
- orphans: Store-side detection of documents missing from the source
- executor: Unordered bulk write with partial failure reporting
- job: The sync run tying them together

Usage:
    from csv_sync.config import SyncConfig
    from csv_sync.job import SyncJob

    result = SyncJob(SyncConfig(), collection).run(header, rows)
"""

__version__ = "1.0.0"
__all__ = ["normalize", "changeset", "orphans", "executor", "job"]
