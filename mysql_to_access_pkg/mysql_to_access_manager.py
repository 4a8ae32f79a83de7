import logging
from contextlib import closing
from dataclasses import dataclass
from typing import Iterator, Optional

import pandas as pd

from mysql_to_access_pkg.base import DataFetcher, DataWriter, MigrationManager
from mysql_to_access_pkg.mysql_access_mapping import (
    TableSpec,
    UnmappedTypeError,
    map_mysql_to_access_type,
    transform_data_types,
)

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 1000


@dataclass
class RowTransferStats:
    rows_written: int = 0
    rows_with_errors: int = 0


@dataclass
class MigrationResult:
    tables_created: int = 0
    rows_written: int = 0
    rows_with_errors: int = 0
    fatal_error: Optional[Exception] = None

    @property
    def succeeded(self) -> bool:
        return self.fatal_error is None


class SchemaTranslator:
    """Turns MySQL table metadata into Access tables."""

    def __init__(self, fetcher: DataFetcher, writer: DataWriter):
        self.fetcher = fetcher
        self.writer = writer

    def build_table_spec(self, table_name: str) -> TableSpec:
        """Map every column of a table; nothing is created if any column fails."""
        columns = self.fetcher.get_table_structure(table_name)
        return TableSpec(
            name=table_name,
            columns=tuple(map_mysql_to_access_type(col, table_name) for col in columns),
        )

    def translate(self) -> Iterator[TableSpec]:
        """Create each destination table and yield its spec.

        Lazy: the next table is introspected only after the caller is done
        with the previous one.
        """
        tables = self.fetcher.get_table_list()
        logger.info(f"Found {len(tables)} tables to migrate")
        for table in tables:
            table_spec = self.build_table_spec(table)
            logger.info(f"Creating table: {table}")
            self.writer.create_table(table_spec)
            yield table_spec


class RowTransferEngine:
    """Streams rows from a MySQL table into an already created Access table."""

    def __init__(self, fetcher: DataFetcher, writer: DataWriter, batch_size: int = DEFAULT_BATCH_SIZE):
        self.fetcher = fetcher
        self.writer = writer
        self.batch_size = batch_size

    def copy_rows(self, table_spec: TableSpec) -> RowTransferStats:
        """Copy every row of a table.

        Cells that fail conversion are written as NULL; insert errors are
        not caught.
        """
        stats = RowTransferStats()
        column_names = table_spec.column_names
        logger.info(f"Migrating rows from {table_spec.name}")

        with closing(self.fetcher.iter_batches(table_spec.name, column_names, self.batch_size)) as batches:
            for rows in batches:
                df = pd.DataFrame(rows, columns=column_names, dtype=object)
                df, failed = transform_data_types(df, table_spec, first_row_number=stats.rows_written + 1)
                self.writer.insert_rows(table_spec, list(df.itertuples(index=False, name=None)))

                stats.rows_written += len(df)
                stats.rows_with_errors += failed
                logger.info(f"Progress: {stats.rows_written} rows for {table_spec.name}")

        return stats


class MySQLtoAccessMigrationManager(MigrationManager):
    """Copies every MySQL base table into a new Access database.

    Use as a context manager so both connections are released on every
    exit path:

        with MySQLtoAccessMigrationManager(fetcher, writer) as manager:
            result = manager.run()
    """

    def __init__(self, fetcher: DataFetcher, writer: DataWriter, batch_size: int = DEFAULT_BATCH_SIZE):
        self.fetcher = fetcher
        self.writer = writer
        self.translator = SchemaTranslator(fetcher, writer)
        self.engine = RowTransferEngine(fetcher, writer, batch_size=batch_size)
        self.result = MigrationResult()

    def create_connections(self):
        """Connect to MySQL first; only then replace and open the Access file."""
        self.fetcher.connect()
        try:
            self.writer.connect()
        except Exception:
            self.fetcher.close()
            raise

    def close_connections(self):
        """Close the Access database, then the MySQL connection."""
        try:
            self.writer.close()
        finally:
            self.fetcher.close()

    def run(self) -> MigrationResult:
        """Migrate all tables, stopping at the first fatal error.

        Tables and rows written before the error stay in the Access file.
        """
        self.result = MigrationResult()
        logger.info("Starting MySQL to Access migration...")

        try:
            for table_spec in self.translator.translate():
                self.result.tables_created += 1
                stats = self.engine.copy_rows(table_spec)
                self.result.rows_written += stats.rows_written
                self.result.rows_with_errors += stats.rows_with_errors
                logger.info(
                    f"Table {table_spec.name}: {stats.rows_written} rows written, "
                    f"{stats.rows_with_errors} with conversion errors"
                )
        except Exception as e:
            self.result.fatal_error = e
            logger.error(f"Migration aborted: {e}", exc_info=not isinstance(e, UnmappedTypeError))
            return self.result

        logger.info("=== Migration completed successfully! ===")
        return self.result
