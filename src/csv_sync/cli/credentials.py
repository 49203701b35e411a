"""
Configuration resolution for the CLI.

Each setting comes from its command-line flag, then its environment
variable, then the built-in default. With --use-vault the connection string
is read from HashiCorp Vault instead.
"""

import argparse
import logging
import os

from utils.vault_client import VaultClient

from ..config import (
    DEFAULT_COLLECTION,
    DEFAULT_CONNECTION_STRING,
    DEFAULT_DATABASE,
    DEFAULT_SOURCE_LOCATION,
    SyncConfig,
    parse_bool,
)

logger = logging.getLogger(__name__)


def get_connection_string(args: argparse.Namespace) -> str:
    """
    Resolve the MongoDB connection string

    Args:
        args: Parsed command-line arguments

    Returns:
        Connection string from Vault, the flag, MONGODB_URL or the default
    """
    if args.use_vault:
        vault_client = VaultClient()
        return vault_client.get_store_connection_string(args.vault_secret_path)

    return args.connection_string or os.getenv("MONGODB_URL", DEFAULT_CONNECTION_STRING)


def _timeout_ms(args: argparse.Namespace) -> int | None:
    if args.timeout_ms is not None:
        return args.timeout_ms
    env_value = os.getenv("SYNC_TIMEOUT_MS")
    return int(env_value) if env_value else None


def build_config(args: argparse.Namespace) -> SyncConfig:
    """
    Build the sync configuration from arguments and environment

    Raises:
        ValueError: If a value is invalid
    """
    delete_mode = getattr(args, "delete_mode", None)
    if delete_mode is None:
        delete_mode = parse_bool(os.getenv("SYNC_DELETE_MODE", "true"))

    return SyncConfig(
        store_connection_string=get_connection_string(args),
        source_location=(
            getattr(args, "source", None) or os.getenv("SYNC_SOURCE", DEFAULT_SOURCE_LOCATION)
        ),
        database_name=args.database or os.getenv("MONGODB_DATABASE", DEFAULT_DATABASE),
        collection_name=args.collection or os.getenv("MONGODB_COLLECTION", DEFAULT_COLLECTION),
        delete_mode=delete_mode,
        timeout_ms=_timeout_ms(args),
        delimiter=getattr(args, "delimiter", None) or ",",
        encoding=getattr(args, "encoding", None) or "utf-8-sig",
    )
