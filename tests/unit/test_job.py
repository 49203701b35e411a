"""
Unit tests for the sync job.

Runs the job against a mock collection and checks the planned operations,
delete mode handling, dry runs and recorded metrics.
"""

from unittest.mock import MagicMock, Mock

from pymongo import DeleteOne, UpdateOne
from pymongo.errors import BulkWriteError

from csv_sync.config import SyncConfig
from csv_sync.job import SyncJob, SyncResult
from csv_sync.orphans import ORPHANS_FIELD
from utils.metrics import SyncMetrics


def _bulk_result(upserted=0, matched=0, modified=0, deleted=0) -> Mock:
    result = Mock()
    result.upserted_count = upserted
    result.matched_count = matched
    result.modified_count = modified
    result.deleted_count = deleted
    return result


def _config(**overrides) -> SyncConfig:
    settings = {"database_name": "library", "collection_name": "locations"}
    settings.update(overrides)
    return SyncConfig(**settings)


class TestPlan:
    """Test change set planning."""

    def test_upserts_for_valid_rows(self, mock_collection, header, sample_rows):
        change_set = SyncJob(_config(), mock_collection).plan(header, sample_rows)

        assert [op.filter for op in change_set.upserts] == [
            {"city": "enschede", "address": "oude markt 1"},
            {"city": "hengelo", "address": "parkweg 12"},
        ]
        assert len(change_set.skipped) == 2

    def test_empty_fields_are_unset(self, mock_collection, header, sample_rows):
        change_set = SyncJob(_config(), mock_collection).plan(header, sample_rows)

        assert change_set.upserts[1].unset_fields == {"phone": ""}
        assert "phone" not in change_set.upserts[1].set_fields

    def test_orphans_become_deletes(self, mock_collection, header, sample_rows):
        mock_collection.aggregate.return_value = iter([{ORPHANS_FIELD: ["almelo#markt 9"]}])

        change_set = SyncJob(_config(), mock_collection).plan(header, sample_rows)

        assert [op.filter for op in change_set.deletes] == [
            {"city": "almelo", "address": "markt 9"},
        ]

    def test_delete_mode_off_skips_orphan_detection(self, mock_collection, header, sample_rows):
        mock_collection.aggregate.return_value = iter([{ORPHANS_FIELD: ["almelo#markt 9"]}])

        change_set = SyncJob(_config(delete_mode=False), mock_collection).plan(header, sample_rows)

        mock_collection.aggregate.assert_not_called()
        assert change_set.deletes == []

    def test_header_only_source_deletes_everything(self, mock_collection, header):
        mock_collection.aggregate.return_value = iter([{ORPHANS_FIELD: ["a#1", "b#2"]}])

        change_set = SyncJob(_config(), mock_collection).plan(header, [])

        assert change_set.upserts == []
        assert len(change_set.deletes) == 2

    def test_duplicate_keys_kept_in_source_order(self, mock_collection, header):
        rows = [
            ["First", "Markt 1", "Delft", "1", ""],
            ["Second", "MARKT  1", "delft", "2", ""],
        ]

        change_set = SyncJob(_config(), mock_collection).plan(header, rows)

        assert [op.set_fields["name"] for op in change_set.upserts] == ["First", "Second"]
        assert change_set.source_keys == {"delft#markt 1"}


class TestRun:
    """Test full runs."""

    def test_writes_one_unordered_batch(self, mock_collection, header, sample_rows):
        mock_collection.aggregate.return_value = iter([{ORPHANS_FIELD: ["almelo#markt 9"]}])
        mock_collection.bulk_write.return_value = _bulk_result(upserted=2, deleted=1)

        result = SyncJob(_config(), mock_collection).run(header, sample_rows)

        mock_collection.bulk_write.assert_called_once()
        operations = mock_collection.bulk_write.call_args[0][0]
        assert mock_collection.bulk_write.call_args[1] == {"ordered": False}
        assert operations[0] == UpdateOne(
            {"city": "enschede", "address": "oude markt 1"},
            {"$set": {
                "name": "Central Library",
                "address": "oude markt 1",
                "city": "enschede",
                "phone": "053-123",
                "opening_hours": "9-17",
            }},
            upsert=True,
        )
        assert operations[-1] == DeleteOne({"city": "almelo", "address": "markt 9"})
        assert isinstance(result, SyncResult)
        assert result.batch.upserted == 2
        assert result.batch.deleted == 1
        assert result.upserts_planned == 2
        assert result.deletes_planned == 1

    def test_dry_run_does_not_write(self, mock_collection, header, sample_rows):
        result = SyncJob(_config(), mock_collection).run(header, sample_rows, dry_run=True)

        mock_collection.bulk_write.assert_not_called()
        assert result.dry_run is True
        assert result.upserts_planned == 2
        assert result.batch.upserted == 0

    def test_partial_failure_is_returned(self, mock_collection, header, sample_rows):
        mock_collection.bulk_write.side_effect = BulkWriteError({
            "nUpserted": 1,
            "writeErrors": [{"index": 1, "code": 11000, "errmsg": "E11000 duplicate key"}],
        })

        result = SyncJob(_config(), mock_collection).run(header, sample_rows)

        assert result.batch.upserted == 1
        assert result.batch.has_failures is True

    def test_empty_plan_skips_bulk_write(self, mock_collection, header):
        result = SyncJob(_config(), mock_collection).run(header, [])

        mock_collection.bulk_write.assert_not_called()
        assert result.batch.upserted == 0

    def test_records_metrics(self, mock_collection, header, sample_rows):
        mock_collection.bulk_write.return_value = _bulk_result(upserted=2)
        metrics = SyncMetrics()

        SyncJob(_config(), mock_collection, metrics=metrics).run(header, sample_rows)

        registry = metrics.registry
        assert registry.get_sample_value(
            "csv_sync_runs_total", {"collection": "locations", "status": "success"}
        ) == 1.0
        assert registry.get_sample_value(
            "csv_sync_documents_total", {"collection": "locations", "operation": "upserted"}
        ) == 2.0
        assert registry.get_sample_value(
            "csv_sync_source_rows_total", {"collection": "locations", "status": "skipped"}
        ) == 2.0

    def test_skip_reasons_in_result(self, mock_collection, header, sample_rows):
        result = SyncJob(_config(), mock_collection).run(header, sample_rows, dry_run=True)

        assert result.skipped == {"MISSING_NAME": 1, "MISSING_CITY": 1}
        assert result.to_dict()["skipped"] == {"MISSING_NAME": 1, "MISSING_CITY": 1}

    def test_result_to_dict(self, mock_collection: MagicMock, header, sample_rows):
        mock_collection.bulk_write.return_value = _bulk_result(upserted=2)

        data = SyncJob(_config(), mock_collection).run(header, sample_rows).to_dict()

        assert data["upserted"] == 2
        assert data["delete_mode"] is True
        assert data["dry_run"] is False
        assert "timestamp" in data
