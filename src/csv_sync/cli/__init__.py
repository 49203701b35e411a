"""
Command-line interface for the CSV to MongoDB sync.

Available commands:
- run: Sync the source into the collection
- init-collection: Prepare the collection collation and unique index
- report: Print a saved JSON report
"""

import sys

from utils.logging import configure_from_env, shutdown_logging

from .commands import cmd_init_collection, cmd_report, cmd_run
from .credentials import build_config, get_connection_string
from .parser import create_parser


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the csv-sync CLI"""
    parser = create_parser()
    args = parser.parse_args(argv)

    # Flags win over LOG_LEVEL, LOG_FILE and LOG_JSON
    configure_from_env(level=args.log_level, log_file=args.log_file, json_format=args.log_json)

    try:
        if args.command == 'run':
            cmd_run(args)
        elif args.command == 'init-collection':
            cmd_init_collection(args)
        elif args.command == 'report':
            cmd_report(args)
        else:
            parser.print_help()
            sys.exit(1)
    finally:
        shutdown_logging()


__all__ = [
    'main',
    'build_config',
    'get_connection_string',
    'cmd_run',
    'cmd_init_collection',
    'cmd_report',
    'create_parser',
]


if __name__ == '__main__':
    main()
