"""
CLI command implementations.

- run: one sync of the source into the collection
- init-collection: create the collection collation and key index
- report: print a previously saved JSON report
"""

import argparse
import json
import logging
import os
import sys

from utils.metrics import MetricsPublisher, SyncMetrics
from utils.tracing import initialize_tracing, shutdown_tracing

from ..job import SyncJob
from ..report import export_report_json, format_report_console, generate_report, load_report
from ..source import read_source
from ..store import create_client, ensure_collection, get_collection
from .credentials import build_config

logger = logging.getLogger(__name__)

EXIT_WRITE_ERRORS = 2


def tracing_requested(args: argparse.Namespace) -> bool:
    """True when --otlp-endpoint, OTLP_ENDPOINT or TRACE_CONSOLE=true asks for spans."""
    return bool(
        args.otlp_endpoint
        or os.getenv("OTLP_ENDPOINT")
        or os.getenv("TRACE_CONSOLE", "").lower() == "true"
    )


def cmd_run(args: argparse.Namespace) -> None:
    """
    Run one sync

    Exits 0 even when some writes failed, unless --fail-on-write-errors is
    set. Fatal errors (unreadable source, store unreachable) exit 1.

    Args:
        args: Parsed command-line arguments
    """
    try:
        config = build_config(args)
    except Exception as e:
        logger.error(f"Invalid configuration: {e}")
        sys.exit(1)

    if tracing_requested(args):
        initialize_tracing(otlp_endpoint=args.otlp_endpoint)

    metrics = SyncMetrics()
    publisher = MetricsPublisher(
        metrics.registry,
        pushgateway=args.pushgateway,
        textfile=args.metrics_file,
    )

    logger.info(
        f"Syncing {config.source_location} into "
        f"{config.database_name}.{config.collection_name} "
        f"(delete mode {'on' if config.delete_mode else 'off'})"
    )

    client = None
    try:
        header, rows = read_source(
            config.source_location,
            delimiter=config.delimiter,
            encoding=config.encoding,
        )
        client = create_client(config)
        job = SyncJob(config, get_collection(client, config), metrics=metrics)
        result = job.run(header, rows, dry_run=args.dry_run)
    except Exception as e:
        logger.error(f"Sync failed: {e}")
        metrics.record_failed_run(config.collection_name)
        if publisher.enabled:
            publisher.publish()
        sys.exit(1)
    finally:
        if client is not None:
            client.close()
        shutdown_tracing()

    report = generate_report(result, config)

    if args.format == "json":
        print(json.dumps(report, indent=2))
    else:
        print(format_report_console(report))

    if args.output:
        export_report_json(report, args.output)
        logger.info(f"Report saved to {args.output}")

    if publisher.enabled:
        publisher.publish()

    if args.fail_on_write_errors and result.batch.has_failures:
        logger.warning(f"{len(result.batch.failures)} write operation(s) failed")
        sys.exit(EXIT_WRITE_ERRORS)


def cmd_init_collection(args: argparse.Namespace) -> None:
    """
    Create the collection with the key collation and unique index

    Args:
        args: Parsed command-line arguments
    """
    client = None
    try:
        config = build_config(args)
        client = create_client(config)
        ensure_collection(client[config.database_name], config.collection_name)
    except Exception as e:
        logger.error(f"Failed to prepare collection: {e}")
        sys.exit(1)
    finally:
        if client is not None:
            client.close()

    print(f"Collection {config.database_name}.{config.collection_name} is ready")


def cmd_report(args: argparse.Namespace) -> None:
    """
    Print a report saved with ``run --output``

    Args:
        args: Parsed command-line arguments
    """
    try:
        report = load_report(args.input)
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Failed to load report {args.input}: {e}")
        sys.exit(1)

    print(format_report_console(report))
