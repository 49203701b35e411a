"""
Orphan detection.

Finds the documents stored in the collection whose matching key no longer
appears in the source. The difference is computed server-side with a single
aggregation so the store contents are never pulled into memory.
"""

import logging
from typing import Any, Iterable

from opentelemetry import trace

from utils.tracing import add_span_attributes, trace_operation

from .normalize import KEY_SEPARATOR, MatchingKey

logger = logging.getLogger(__name__)

STORE_KEYS_FIELD = "store_keys"
ORPHANS_FIELD = "orphans"


def build_orphan_pipeline(source_keys: Iterable[str]) -> list[dict[str, Any]]:
    """
    Build the aggregation pipeline returning store keys missing from the source.

    The store key set is the left operand of $setDifference. Swapping the
    operands returns the rows that are new in the source instead, and
    deleting those would wipe documents that should be kept.

    Args:
        source_keys: Serialized ``city#address`` keys found in the source

    Returns:
        Aggregation pipeline
    """
    group = {
        "$group": {
            "_id": None,
            STORE_KEYS_FIELD: {
                "$addToSet": {"$concat": ["$city", KEY_SEPARATOR, "$address"]}
            },
        }
    }
    project = {
        "$project": {
            "_id": 0,
            ORPHANS_FIELD: {
                "$setDifference": [f"${STORE_KEYS_FIELD}", sorted(set(source_keys))]
            },
        }
    }
    return [group, project]


def parse_orphan_result(documents: Iterable[dict[str, Any]]) -> list[MatchingKey]:
    """
    Turn the aggregation output into matching keys.

    An empty collection produces no group at all, which means no orphans.
    Documents missing city or address concatenate to null and are ignored.
    """
    serialized: set[str] = set()
    for document in documents:
        for value in document.get(ORPHANS_FIELD) or []:
            if isinstance(value, str) and KEY_SEPARATOR in value:
                serialized.add(value)
    return [MatchingKey.parse(value) for value in sorted(serialized)]


class OrphanDetector:
    """Computes store keys minus source keys for one collection."""

    def __init__(self, collection: Any):
        """
        Initialize orphan detector

        Args:
            collection: pymongo Collection to inspect
        """
        self.collection = collection

    def find_orphans(self, source_keys: Iterable[str]) -> list[MatchingKey]:
        """
        Return the keys present in the collection but absent from the source.

        Args:
            source_keys: Serialized keys of all valid source rows

        Returns:
            Sorted list of orphaned matching keys
        """
        source_keys = set(source_keys)
        with trace_operation(
            "detect_orphans",
            kind=trace.SpanKind.CLIENT,
            collection=self.collection.name,
            source_keys=len(source_keys),
        ):
            pipeline = build_orphan_pipeline(source_keys)
            documents = list(self.collection.aggregate(pipeline))
            orphans = parse_orphan_result(documents)
            add_span_attributes(orphans=len(orphans))

        logger.info(
            f"Orphan detection complete: {len(orphans)} document(s) in "
            f"{self.collection.name} are no longer in the source"
        )
        return orphans
