"""Tests for the MySQL to Access type mapping and value conversion."""
import logging
from datetime import datetime
from decimal import Decimal

import pandas as pd
import pytest

from mysql_to_access_pkg.mysql_access_mapping import (
    TYPE_MAP,
    DataType,
    DestColumnDef,
    SourceColumnMeta,
    TableSpec,
    UnmappedTypeError,
    ZeroDateTimeError,
    convert_value,
    map_mysql_to_access_type,
    to_access_ddl,
    transform_data_types,
)


@pytest.mark.parametrize("type_name, expected", [
    ("INT", DataType.LONG_INTEGER),
    ("DOUBLE", DataType.DOUBLE),
    ("DECIMAL", DataType.FIXED_POINT),
    ("VARCHAR", DataType.SHORT_TEXT),
    ("TEXT", DataType.LONG_TEXT),
    ("LONGBLOB", DataType.BINARY_OBJECT),
    ("BIT", DataType.BOOLEAN),
    ("DATETIME", DataType.DATETIME),
    ("TIMESTAMP", DataType.DATETIME),
])
def test_allow_listed_types(type_name, expected):
    col = map_mysql_to_access_type(SourceColumnMeta("c", type_name, 10, 2), "t")
    assert col.name == "c"
    assert col.data_type == expected


def test_allow_list_is_exactly_the_documented_types():
    assert set(TYPE_MAP) == {
        "INT", "DOUBLE", "DECIMAL", "VARCHAR", "TEXT", "LONGBLOB", "BIT", "DATETIME", "TIMESTAMP",
    }


def test_lookup_is_case_insensitive():
    col = map_mysql_to_access_type(SourceColumnMeta("c", "varchar", 20), "t")
    assert col.data_type == DataType.SHORT_TEXT
    assert col.max_length == 20


def test_decimal_carries_precision_and_scale():
    col = map_mysql_to_access_type(SourceColumnMeta("price", "DECIMAL", 12, 4), "t")
    assert (col.precision, col.scale) == (12, 4)


def test_text_columns_use_unicode_compression():
    short = map_mysql_to_access_type(SourceColumnMeta("s", "VARCHAR", 50), "t")
    long = map_mysql_to_access_type(SourceColumnMeta("m", "TEXT", 65535), "t")
    assert short.compressed_unicode and long.compressed_unicode
    assert short.max_length == 50
    assert long.max_length is None


@pytest.mark.parametrize("type_name", ["FLOAT", "BIGINT", "INT UNSIGNED", "DATE", "ENUM", "JSON", "CHAR", ""])
def test_unmapped_types_fail_loudly(type_name):
    with pytest.raises(UnmappedTypeError) as excinfo:
        map_mysql_to_access_type(SourceColumnMeta("col", type_name), "orders")
    err = excinfo.value
    assert (err.sql_type_name, err.table_name, err.column_name) == (type_name, "orders", "col")
    assert "`orders`.`col`" in str(err)


@pytest.mark.parametrize("column, ddl", [
    (DestColumnDef("a", DataType.LONG_INTEGER), "LONG"),
    (DestColumnDef("a", DataType.DOUBLE), "DOUBLE"),
    (DestColumnDef("a", DataType.FIXED_POINT, precision=10, scale=2), "DECIMAL(10,2)"),
    (DestColumnDef("a", DataType.SHORT_TEXT, max_length=50, compressed_unicode=True),
     "TEXT(50) WITH COMPRESSION"),
    (DestColumnDef("a", DataType.LONG_TEXT, compressed_unicode=True), "MEMO WITH COMPRESSION"),
    (DestColumnDef("a", DataType.BINARY_OBJECT), "LONGBINARY"),
    (DestColumnDef("a", DataType.BOOLEAN), "YESNO"),
    (DestColumnDef("a", DataType.DATETIME), "DATETIME"),
])
def test_access_ddl(column, ddl):
    assert to_access_ddl(column) == ddl


class TestConvertValue:

    def test_none_passes_through(self):
        for data_type in DataType:
            assert convert_value(None, data_type) is None

    def test_bit_bytes_become_booleans(self):
        assert convert_value(b"\x01", DataType.BOOLEAN) is True
        assert convert_value(b"\x00", DataType.BOOLEAN) is False
        assert convert_value(1, DataType.BOOLEAN) is True

    def test_text_bytes_are_decoded(self):
        assert convert_value("Zoë".encode("utf-8"), DataType.SHORT_TEXT) == "Zoë"
        assert convert_value(42, DataType.LONG_TEXT) == "42"

    def test_numbers(self):
        assert convert_value("7", DataType.LONG_INTEGER) == 7
        assert convert_value(Decimal("1.5"), DataType.DOUBLE) == 1.5
        assert convert_value(Decimal("3.14"), DataType.FIXED_POINT) == Decimal("3.14")
        assert convert_value(0.1, DataType.FIXED_POINT) == Decimal("0.1")

    def test_datetimes(self):
        dt = datetime(2020, 5, 17, 8, 30)
        assert convert_value(dt, DataType.DATETIME) is dt
        assert convert_value("2020-05-17 08:30:00", DataType.DATETIME) == dt

    @pytest.mark.parametrize("value", ["0000-00-00 00:00:00", "0000-00-00", "0000-00-00 00:00:00.000000"])
    def test_zero_datetime_sentinel(self, value):
        with pytest.raises(ZeroDateTimeError):
            convert_value(value, DataType.DATETIME)

    def test_bad_values_raise(self):
        with pytest.raises(ValueError):
            convert_value("abc", DataType.LONG_INTEGER)
        with pytest.raises(ValueError):
            convert_value("2020-13-45 99:00:00", DataType.DATETIME)
        with pytest.raises(TypeError):
            convert_value("text", DataType.BINARY_OBJECT)
        with pytest.raises(ArithmeticError):
            convert_value("x1", DataType.FIXED_POINT)


def _spec():
    return TableSpec("people", (
        DestColumnDef("id", DataType.LONG_INTEGER),
        DestColumnDef("born", DataType.DATETIME),
        DestColumnDef("name", DataType.SHORT_TEXT, max_length=20, compressed_unicode=True),
    ))


def _frame(rows):
    return pd.DataFrame(rows, columns=["id", "born", "name"], dtype=object)


def test_transform_nulls_only_the_failing_cell(caplog):
    df = _frame([(1, "not a date", "Ann"), (2, datetime(2001, 1, 1), "Bo")])

    with caplog.at_level(logging.ERROR):
        df, failed = transform_data_types(df, _spec(), first_row_number=11)

    rows = list(df.itertuples(index=False, name=None))
    assert rows == [(1, None, "Ann"), (2, datetime(2001, 1, 1), "Bo")]
    assert failed == 1
    assert "Error processing row 11 in `people`" in caplog.text


def test_transform_zero_datetime_is_silent(caplog):
    df = _frame([(1, "0000-00-00 00:00:00", "Ann")])

    with caplog.at_level(logging.DEBUG):
        df, failed = transform_data_types(df, _spec())

    assert list(df.itertuples(index=False, name=None)) == [(1, None, "Ann")]
    assert failed == 0
    assert not [r for r in caplog.records if r.levelno >= logging.ERROR]


def test_transform_keeps_python_ints_with_nulls():
    df = _frame([(None, None, None), (3, None, "x")])
    df, _ = transform_data_types(df, _spec())
    rows = list(df.itertuples(index=False, name=None))
    assert rows[0] == (None, None, None)
    assert rows[1][0] == 3 and isinstance(rows[1][0], int)
