"""
Command-line argument parser configuration.

Defines the ``csv-sync`` commands and their options. Options left unset
fall back to environment variables, then to built-in defaults.
"""

import argparse


def _add_store_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        '--connection-string',
        help='MongoDB connection string (env: MONGODB_URL)'
    )
    parser.add_argument(
        '--database',
        help='Database name (env: MONGODB_DATABASE)'
    )
    parser.add_argument(
        '--collection',
        help='Collection name (env: MONGODB_COLLECTION)'
    )
    parser.add_argument(
        '--timeout-ms',
        type=int,
        help='Server selection and socket timeout in milliseconds (env: SYNC_TIMEOUT_MS)'
    )
    parser.add_argument(
        '--use-vault',
        action='store_true',
        help='Fetch the connection string from HashiCorp Vault'
    )
    parser.add_argument(
        '--vault-secret-path',
        default='secret/database/mongodb',
        help='Vault KV v2 path holding connection_string (default: secret/database/mongodb)'
    )


def create_parser() -> argparse.ArgumentParser:
    """
    Create and configure the argument parser for the CLI.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog='csv-sync',
        description="Mirror a CSV source into a MongoDB collection",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Prepare the collection (collation + unique address/city index)
  csv-sync init-collection --database mydatabase --collection locations

  # Sync a local file
  csv-sync run --source library_locations.csv --collection locations

  # Sync a published spreadsheet, never delete documents
  csv-sync run --source "https://docs.google.com/.../pub?output=csv" --no-delete-mode

  # See what would change without writing
  csv-sync run --source library_locations.csv --dry-run

  # Keep a JSON report and push metrics
  csv-sync run --output report.json --pushgateway localhost:9091

  # Print a saved report
  csv-sync report --input report.json
        """
    )

    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='Logging level (env: LOG_LEVEL, default: INFO)'
    )
    parser.add_argument(
        '--log-file',
        help='Also log to this rotating file (env: LOG_FILE)'
    )
    parser.add_argument(
        '--log-json',
        action='store_true',
        default=None,
        help='Emit structured JSON logs (env: LOG_JSON)'
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # ========== Run command ==========
    run_parser = subparsers.add_parser('run', help='Sync the source into the collection')
    run_parser.add_argument(
        '--source',
        help='CSV file path or http(s) URL (env: SYNC_SOURCE)'
    )
    _add_store_arguments(run_parser)
    run_parser.add_argument(
        '--delete-mode',
        action=argparse.BooleanOptionalAction,
        default=None,
        help='Delete documents no longer in the source (env: SYNC_DELETE_MODE, default: on)'
    )
    run_parser.add_argument(
        '--delimiter',
        default=',',
        help='CSV field delimiter (default: ,)'
    )
    run_parser.add_argument(
        '--encoding',
        default='utf-8-sig',
        help='Source text encoding (default: utf-8-sig)'
    )
    run_parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Plan the changes without writing to the collection'
    )
    run_parser.add_argument(
        '--format',
        choices=['console', 'json'],
        default='console',
        help=(
            'Output format (default: console). json prints one report document, '
            'write errors are listed in its failures array instead of one per line'
        )
    )
    run_parser.add_argument(
        '--output',
        help='Also write the JSON report to this file'
    )
    run_parser.add_argument(
        '--fail-on-write-errors',
        action='store_true',
        help='Exit with code 2 when any write operation failed'
    )
    run_parser.add_argument(
        '--pushgateway',
        help='Prometheus Pushgateway address to push run metrics to'
    )
    run_parser.add_argument(
        '--metrics-file',
        help='Write run metrics to this node-exporter textfile'
    )
    run_parser.add_argument(
        '--otlp-endpoint',
        help='OTLP collector endpoint for traces (env: OTLP_ENDPOINT)'
    )

    # ========== Init-collection command ==========
    init_parser = subparsers.add_parser(
        'init-collection',
        help='Create the collection with its collation and unique key index'
    )
    _add_store_arguments(init_parser)

    # ========== Report command ==========
    report_parser = subparsers.add_parser('report', help='Print a saved JSON report')
    report_parser.add_argument(
        '--input',
        required=True,
        help='Input JSON report file'
    )

    return parser
