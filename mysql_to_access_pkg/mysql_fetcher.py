import logging
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

import pymysql
import pymysql.cursors
from pymysql.connections import Connection

from mysql_to_access_pkg.base import DataFetcher
from mysql_to_access_pkg.mysql_access_mapping import SourceColumnMeta

logger = logging.getLogger(__name__)

TABLES_QUERY = """
    SELECT TABLE_NAME
    FROM information_schema.TABLES
    WHERE TABLE_SCHEMA = DATABASE() AND TABLE_TYPE = 'BASE TABLE'
    ORDER BY TABLE_NAME
"""

COLUMNS_QUERY = """
    SELECT COLUMN_NAME,
           DATA_TYPE,
           COLUMN_TYPE,
           COALESCE(CHARACTER_MAXIMUM_LENGTH, NUMERIC_PRECISION, 0),
           COALESCE(NUMERIC_SCALE, 0)
    FROM information_schema.COLUMNS
    WHERE TABLE_SCHEMA = DATABASE() AND TABLE_NAME = %s
    ORDER BY ORDINAL_POSITION
"""


def quote_identifier(name: str) -> str:
    return "`" + name.replace("`", "``") + "`"


def _text(value) -> str:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8")
    return str(value)


def to_column_meta(row: Tuple[Any, ...]) -> SourceColumnMeta:
    """Build column metadata from one information_schema.COLUMNS row.

    The type name follows the JDBC convention: the bare type keyword,
    upper-cased, with " UNSIGNED" appended for unsigned numerics.
    """
    name, data_type, column_type, size, scale = row
    type_name = _text(data_type).upper()
    if "unsigned" in _text(column_type).lower():
        type_name += " UNSIGNED"
    return SourceColumnMeta(
        name=_text(name),
        sql_type_name=type_name,
        size=int(size or 0),
        decimal_digits=int(scale or 0),
    )


# MySQL Data Fetcher Implementation
class MySQLFetcher(DataFetcher):

    def __init__(self, mysql_config: Optional[Dict[str, Any]] = None):
        self.mysql_config = mysql_config or {}
        self.conn: Optional[Connection] = None

    def connect(self):
        """Create and return a MySQL connection."""
        self.conn = pymysql.connect(**self.mysql_config)
        return self.conn

    def close(self):
        if self.conn:
            self.conn.close()
            self.conn = None

    def get_table_list(self) -> List[str]:
        """Fetch the names of all base tables in the current database."""
        assert self.conn is not None, "Connection not established. Call connect() first."
        with self.conn.cursor() as cursor:
            cursor.execute(TABLES_QUERY)
            return [_text(row[0]) for row in cursor.fetchall()]

    def get_table_structure(self, table_name: str) -> List[SourceColumnMeta]:
        """Get column metadata for a table in ordinal order."""
        assert self.conn is not None, "Connection not established. Call connect() first."
        with self.conn.cursor() as cursor:
            cursor.execute(COLUMNS_QUERY, (table_name,))
            return [to_column_meta(row) for row in cursor.fetchall()]

    def iter_batches(self, table_name: str, column_names: Sequence[str],
                     batch_size: int) -> Iterator[List[Tuple[Any, ...]]]:
        """Stream every row of a table, `batch_size` rows at a time.

        Columns are selected by name so the row layout always matches
        `column_names`. The unbuffered cursor keeps memory flat for large
        tables; the connection cannot run other queries until the
        iterator is exhausted or closed.
        """
        assert self.conn is not None, "Connection not established. Call connect() first."
        columns = ", ".join(quote_identifier(name) for name in column_names)
        query = f"SELECT {columns} FROM {quote_identifier(table_name)}"
        logger.debug(f"Scanning {table_name}: {query}")

        with self.conn.cursor(pymysql.cursors.SSCursor) as cursor:
            cursor.execute(query)
            while True:
                rows = cursor.fetchmany(batch_size)
                if not rows:
                    break
                yield list(rows)
