import os
import logging
from enum import Enum
from typing import Any, Optional, Sequence, Tuple

import msaccessdb

from mysql_to_access_pkg.base import DataWriter
from mysql_to_access_pkg.mysql_access_mapping import TableSpec, to_access_ddl

logger = logging.getLogger(__name__)

DEFAULT_ACCESS_FILE = "untitled.mdb"
DEFAULT_ODBC_DRIVER = "Microsoft Access Driver (*.mdb, *.accdb)"
ACCESS_EXTENSIONS = ("mdb", "accdb")


class FileFormat(Enum):
    """Access container versions msaccessdb has templates for."""
    V2003 = ".mdb"
    V2010 = ".accdb"

    @property
    def extension(self) -> str:
        return self.value


class DestinationExistsError(Exception):
    """The Access file already exists and overwriting is not allowed."""


class DestinationDeleteError(Exception):
    """The existing Access file could not be deleted."""


def resolve_access_path(access_file: Optional[str],
                        file_format: Optional[FileFormat] = None) -> Tuple[str, FileFormat]:
    """Apply the file naming rules and pick the container format.

    An unrecognized extension is replaced with .mdb. A configured format
    forces its own extension. Without one, .accdb means V2010 and anything
    else V2003.
    """
    path = access_file or DEFAULT_ACCESS_FILE
    root, ext = os.path.splitext(path)
    if ext.lstrip(".").lower() not in ACCESS_EXTENSIONS:
        path = root + ".mdb"
        ext = ".mdb"

    if file_format is None:
        file_format = FileFormat.V2010 if ext.lower() == ".accdb" else FileFormat.V2003
    else:
        path = os.path.splitext(path)[0] + file_format.extension

    return path, file_format


def check_destination(path: str, overwrite: bool = False) -> None:
    """Refuse an existing `path` unless overwriting is allowed. Never deletes."""
    if os.path.exists(path) and not overwrite:
        raise DestinationExistsError(f'Output file "{path}" already exists.')


def prepare_destination(path: str, overwrite: bool = False) -> None:
    """Make sure nothing is in the way of creating `path`."""
    check_destination(path, overwrite)
    if not os.path.exists(path):
        return
    try:
        os.remove(path)
    except OSError as e:
        raise DestinationDeleteError(f"Failed to delete existing Access database file: {e}") from e
    logger.info(f"Deleted existing Access database file {path}")


def quote_identifier(name: str) -> str:
    return f"[{name}]"


class AccessWriter(DataWriter):
    def __init__(self, path: str, file_format: FileFormat = FileFormat.V2003,
                 odbc_driver: str = DEFAULT_ODBC_DRIVER, overwrite: bool = False):
        self.path = path
        self.file_format = file_format
        self.odbc_driver = odbc_driver
        self.overwrite = overwrite
        self.conn: Optional[Any] = None

    @property
    def connection_string(self) -> str:
        return (
            f"DRIVER={{{self.odbc_driver}}};"
            f"DBQ={os.path.abspath(self.path)};"
            "ExtendedAnsiSQL=1;"
        )

    def connect(self):
        """Replace any old file, create the empty Access file and open it.

        msaccessdb picks its template from the extension, so the path must
        carry the extension of `file_format`.
        """
        import pyodbc

        if os.path.splitext(self.path)[1].lower() != self.file_format.extension:
            raise ValueError(
                f"{self.path} does not match file format {self.file_format.name} "
                f"(expected a {self.file_format.extension} file)"
            )
        prepare_destination(self.path, self.overwrite)

        logger.info(f"Creating Access database {self.path} ({self.file_format.name})")
        msaccessdb.create(os.path.abspath(self.path))
        self.conn = pyodbc.connect(self.connection_string)
        return self.conn

    def close(self):
        if self.conn:
            self.conn.close()
            self.conn = None

    def create_table(self, table_spec: TableSpec) -> None:
        """Create an Access table with the columns of `table_spec`, in order."""
        col_definitions = [
            f"{quote_identifier(col.name)} {to_access_ddl(col)}" for col in table_spec.columns
        ]
        create_table_sql = (
            f"CREATE TABLE {quote_identifier(table_spec.name)} ({', '.join(col_definitions)})"
        )

        if not self.conn:
            raise RuntimeError("Access connection not established")

        try:
            with self.conn.cursor() as cursor:
                cursor.execute(create_table_sql)
            self.conn.commit()
            logger.info(f"Successfully created table: {table_spec.name}")
        except Exception as e:
            if self.conn:
                self.conn.rollback()
            logger.error(f"Error creating table {table_spec.name}: {e}")
            logger.error(f"SQL was: {create_table_sql}")
            raise

    def insert_rows(self, table_spec: TableSpec, rows: Sequence[Tuple[Any, ...]]) -> None:
        """Append rows to an Access table. Errors propagate to the caller.

        When a batch fails it is rolled back and replayed one row at a time,
        so every row ahead of the failing one is kept.
        """
        if not rows:
            return

        if not self.conn:
            raise RuntimeError("Access connection not established")

        columns = ", ".join(quote_identifier(name) for name in table_spec.column_names)
        placeholders = ", ".join("?" for _ in table_spec.columns)
        insert_query = (
            f"INSERT INTO {quote_identifier(table_spec.name)} ({columns}) VALUES ({placeholders})"
        )
        params = [tuple(row) for row in rows]

        try:
            with self.conn.cursor() as cursor:
                cursor.executemany(insert_query, params)
            self.conn.commit()
            logger.debug(f"Inserted {len(rows)} rows into {table_spec.name}")
        except Exception as e:
            self.conn.rollback()
            logger.warning(f"Batch insert into {table_spec.name} failed ({e}); retrying row by row")
            self._insert_one_by_one(table_spec, insert_query, params)

    def _insert_one_by_one(self, table_spec, insert_query, params):
        for position, row in enumerate(params, start=1):
            try:
                with self.conn.cursor() as cursor:
                    cursor.execute(insert_query, row)
                self.conn.commit()
            except Exception as e:
                self.conn.rollback()
                logger.error(f"Error inserting row {position} of batch into {table_spec.name}: {e}")
                raise
