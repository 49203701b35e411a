"""
MongoDB connection and collection setup.

The sync relies on the collection having a case, diacritic, whitespace and
punctuation insensitive default collation, and a unique compound index on
(address, city) using it. ``ensure_collection`` creates both; the sync job
itself only assumes they exist.
"""

import logging
from typing import Any

from pymongo import ASCENDING, MongoClient
from pymongo.collation import Collation, CollationAlternate, CollationMaxVariable, CollationStrength
from pymongo.errors import CollectionInvalid

from .config import SyncConfig

logger = logging.getLogger(__name__)

KEY_INDEX_NAME = "address_city_unique"

# strength 1 compares base letters only, ignoring case and diacritics.
# "shifted" with maxVariable "punct" ignores whitespace and punctuation.
KEY_COLLATION = Collation(
    locale="en",
    strength=CollationStrength.PRIMARY,
    alternate=CollationAlternate.SHIFTED,
    maxVariable=CollationMaxVariable.PUNCT,
)


def create_client(config: SyncConfig) -> MongoClient:
    """Create a MongoClient for the configured store."""
    options: dict[str, Any] = {}
    if config.timeout_ms is not None:
        options["serverSelectionTimeoutMS"] = config.timeout_ms
        options["socketTimeoutMS"] = config.timeout_ms
    return MongoClient(config.store_connection_string, **options)


def get_collection(client: MongoClient, config: SyncConfig) -> Any:
    return client[config.database_name][config.collection_name]


def ensure_collection(database: Any, collection_name: str) -> Any:
    """
    Create the collection with the key collation and its unique index.

    An existing collection keeps its current options; only the index is
    ensured. The index inherits the collection default collation, so a
    collection created elsewhere without it will not match case-insensitively.

    Args:
        database: pymongo Database
        collection_name: Name of the collection to prepare

    Returns:
        The pymongo Collection
    """
    try:
        collection = database.create_collection(collection_name, collation=KEY_COLLATION)
        logger.info(f"Created collection {collection_name} with key collation")
    except CollectionInvalid:
        collection = database[collection_name]
        logger.warning(
            f"Collection {collection_name} already exists, leaving its collation unchanged"
        )

    collection.create_index(
        [("address", ASCENDING), ("city", ASCENDING)],
        unique=True,
        name=KEY_INDEX_NAME,
    )
    logger.info(f"Ensured unique index {KEY_INDEX_NAME} on {collection_name}")
    return collection
