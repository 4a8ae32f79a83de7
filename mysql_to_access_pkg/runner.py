"""CLI runner: dump all MySQL tables into a new Access database file."""
import argparse
import json
import logging
import sys

from mysql_to_access_pkg.access_writer import (
    DEFAULT_ACCESS_FILE,
    AccessWriter,
    DestinationDeleteError,
    DestinationExistsError,
    check_destination,
    resolve_access_path,
)
from mysql_to_access_pkg.config import DEFAULT_CONFIG_FILE, ConfigError, load_config
from mysql_to_access_pkg.mysql_access_mapping import UnmappedTypeError
from mysql_to_access_pkg.mysql_fetcher import MySQLFetcher
from mysql_to_access_pkg.mysql_to_access_manager import MigrationResult, MySQLtoAccessMigrationManager

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_CONFIG_ERROR = 1
EXIT_DELETE_FAILED = 2
EXIT_FILE_EXISTS = 3
EXIT_UNMAPPED_TYPE = 4
EXIT_MIGRATION_FAILED = 5


def exit_code_for(result: MigrationResult) -> int:
    if result.succeeded:
        return EXIT_OK
    if isinstance(result.fatal_error, UnmappedTypeError):
        return EXIT_UNMAPPED_TYPE
    return EXIT_MIGRATION_FAILED


def build_parser():
    parser = argparse.ArgumentParser(description="Copy a MySQL database into a new Access database file")
    parser.add_argument("access_file", nargs="?", default=DEFAULT_ACCESS_FILE,
                        help=f"Output .mdb/.accdb file (default: {DEFAULT_ACCESS_FILE})")
    parser.add_argument("--config", default=DEFAULT_CONFIG_FILE,
                        help=f"Properties file with connection settings (default: {DEFAULT_CONFIG_FILE})")
    parser.add_argument("--dry-run", action="store_true",
                        help="Don't connect to DB; just print the resolved output file")
    parser.add_argument("--config-preview", action="store_true", help="Print resolved config and exit")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        config = load_config(args.config)
    except ConfigError as e:
        logger.error(str(e))
        return EXIT_CONFIG_ERROR

    if args.config_preview:
        print(json.dumps(config.preview(), indent=2))
        return EXIT_OK

    access_file, file_format = resolve_access_path(args.access_file, config.file_format)

    if args.dry_run:
        print(f"DRY RUN: would write {access_file} ({file_format.name})")
        return EXIT_OK

    # Only refuse here; an existing file is deleted once MySQL is reachable.
    try:
        check_destination(access_file, overwrite=config.overwrite_existing_file)
    except DestinationExistsError as e:
        logger.error(str(e))
        logger.error(f"(To overwrite, use 'overwriteExistingFile=true' in {args.config}.)")
        return EXIT_FILE_EXISTS

    manager = MySQLtoAccessMigrationManager(
        MySQLFetcher(config.mysql_config),
        AccessWriter(access_file, file_format, odbc_driver=config.odbc_driver,
                     overwrite=config.overwrite_existing_file),
        batch_size=config.batch_size,
    )
    try:
        with manager:
            result = manager.run()
    except DestinationDeleteError as e:
        logger.error(str(e))
        return EXIT_DELETE_FAILED
    except Exception as e:
        logger.exception(f"Migration failed: {e}")
        return EXIT_MIGRATION_FAILED

    logger.info(
        f"Tables created: {result.tables_created}, rows written: {result.rows_written}, "
        f"rows with conversion errors: {result.rows_with_errors}"
    )
    return exit_code_for(result)


if __name__ == "__main__":
    sys.exit(main())
