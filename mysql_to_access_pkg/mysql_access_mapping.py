import re
import logging
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional, Tuple

import pandas as pd

logger = logging.getLogger(__name__)

ZERO_DATETIME = re.compile(r"^0000-00-00(?: 00:00:00(?:\.0+)?)?$")


class DataType(Enum):
    LONG_INTEGER = "LONG_INTEGER"
    DOUBLE = "DOUBLE"
    FIXED_POINT = "FIXED_POINT"
    SHORT_TEXT = "SHORT_TEXT"
    LONG_TEXT = "LONG_TEXT"
    BINARY_OBJECT = "BINARY_OBJECT"
    BOOLEAN = "BOOLEAN"
    DATETIME = "DATETIME"


@dataclass(frozen=True)
class SourceColumnMeta:
    """Column metadata as reported by MySQL introspection."""
    name: str
    sql_type_name: str
    size: int = 0
    decimal_digits: int = 0


@dataclass(frozen=True)
class DestColumnDef:
    """Access column definition built from a SourceColumnMeta."""
    name: str
    data_type: DataType
    precision: Optional[int] = None
    scale: Optional[int] = None
    max_length: Optional[int] = None
    compressed_unicode: bool = False


@dataclass(frozen=True)
class TableSpec:
    name: str
    columns: Tuple[DestColumnDef, ...]

    @property
    def column_names(self):
        return [col.name for col in self.columns]


class UnmappedTypeError(Exception):
    """Raised when a MySQL column type has no Access counterpart."""

    def __init__(self, sql_type_name, table_name, column_name):
        self.sql_type_name = sql_type_name
        self.table_name = table_name
        self.column_name = column_name
        super().__init__(
            f"Unknown MySQL column type {sql_type_name} for `{table_name}`.`{column_name}`"
        )


class ZeroDateTimeError(ValueError):
    """A zero-valued MySQL datetime that has no datetime representation."""


# Closed allow-list: anything not listed here stops the migration.
TYPE_MAP = {
    "INT": DataType.LONG_INTEGER,
    "DOUBLE": DataType.DOUBLE,
    "DECIMAL": DataType.FIXED_POINT,
    "VARCHAR": DataType.SHORT_TEXT,
    "TEXT": DataType.LONG_TEXT,
    "LONGBLOB": DataType.BINARY_OBJECT,
    "BIT": DataType.BOOLEAN,
    "DATETIME": DataType.DATETIME,
    "TIMESTAMP": DataType.DATETIME,
}


def map_mysql_to_access_type(column: SourceColumnMeta, table_name: str) -> DestColumnDef:
    """Map a MySQL column to an Access column definition.

    Raises UnmappedTypeError for any type outside TYPE_MAP.
    """
    data_type = TYPE_MAP.get((column.sql_type_name or "").strip().upper())
    if data_type is None:
        raise UnmappedTypeError(column.sql_type_name, table_name, column.name)

    if data_type == DataType.FIXED_POINT:
        return DestColumnDef(column.name, data_type,
                             precision=column.size, scale=column.decimal_digits)
    if data_type == DataType.SHORT_TEXT:
        return DestColumnDef(column.name, data_type,
                             max_length=column.size, compressed_unicode=True)
    if data_type == DataType.LONG_TEXT:
        return DestColumnDef(column.name, data_type, compressed_unicode=True)
    return DestColumnDef(column.name, data_type)


def to_access_ddl(column: DestColumnDef) -> str:
    """Render the Access SQL type clause for a column."""
    direct_map = {
        DataType.LONG_INTEGER: "LONG",
        DataType.DOUBLE: "DOUBLE",
        DataType.LONG_TEXT: "MEMO",
        DataType.BINARY_OBJECT: "LONGBINARY",
        DataType.BOOLEAN: "YESNO",
        DataType.DATETIME: "DATETIME",
    }

    if column.data_type == DataType.FIXED_POINT:
        ddl = f"DECIMAL({column.precision},{column.scale})"
    elif column.data_type == DataType.SHORT_TEXT:
        ddl = f"TEXT({column.max_length})"
    else:
        ddl = direct_map[column.data_type]

    if column.compressed_unicode:
        ddl += " WITH COMPRESSION"
    return ddl


def _to_text(value):
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8")
    return str(value)


def _to_boolean(value):
    # pymysql hands BIT columns back as big-endian bytes
    if isinstance(value, (bytes, bytearray)):
        return int.from_bytes(value, "big") != 0
    return bool(int(value))


def _to_datetime(value):
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, (bytes, bytearray)):
        value = bytes(value).decode("ascii")
    if isinstance(value, str) and ZERO_DATETIME.match(value.strip()):
        raise ZeroDateTimeError(f"Value '{value}' can not be represented as a datetime")
    return pd.Timestamp(value).to_pydatetime()


def _to_decimal(value):
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(repr(value))
    return Decimal(value)


def _to_bytes(value):
    if isinstance(value, str):
        raise TypeError(f"expected binary data, got text: {value[:20]!r}")
    return bytes(value)


CONVERTERS = {
    DataType.LONG_INTEGER: int,
    DataType.DOUBLE: float,
    DataType.FIXED_POINT: _to_decimal,
    DataType.SHORT_TEXT: _to_text,
    DataType.LONG_TEXT: _to_text,
    DataType.BINARY_OBJECT: _to_bytes,
    DataType.BOOLEAN: _to_boolean,
    DataType.DATETIME: _to_datetime,
}


def convert_value(value: Any, data_type: DataType) -> Any:
    """Convert one source value to the native type for an Access column.

    None passes through. Raises ZeroDateTimeError for the zero datetime
    sentinel, and ValueError/TypeError/ArithmeticError for anything else
    that cannot be converted.
    """
    if value is None:
        return None
    return CONVERTERS[data_type](value)


def transform_data_types(data: pd.DataFrame, table_spec: TableSpec, first_row_number: int = 1):
    """Convert every cell of a batch to its Access column type.

    A cell that fails conversion becomes None and the rest of the row is
    kept. Returns the converted frame and the number of rows that had at
    least one reported conversion error.
    """
    failed_rows = set()

    for column in table_spec.columns:
        converted = []
        for position, value in enumerate(data[column.name]):
            row_number = first_row_number + position
            try:
                converted.append(convert_value(value, column.data_type))
            except ZeroDateTimeError:
                converted.append(None)
            except (ValueError, TypeError, ArithmeticError) as e:
                logger.error(
                    f"Error processing row {row_number} in `{table_spec.name}` "
                    f"(column `{column.name}`): {e}"
                )
                failed_rows.add(row_number)
                converted.append(None)
        data[column.name] = pd.Series(converted, index=data.index, dtype=object)

    return data, len(failed_rows)
