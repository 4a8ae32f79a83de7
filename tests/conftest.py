"""In-memory stand-ins for the MySQL source and the Access destination."""
import pytest

from mysql_to_access_pkg.base import DataFetcher, DataWriter
from mysql_to_access_pkg.mysql_access_mapping import SourceColumnMeta


class FakeFetcher(DataFetcher):
    """Serves tables from a dict of name -> (columns, rows)."""

    def __init__(self, tables):
        self.tables = tables
        self.connected = False
        self.close_calls = 0
        self.scanned = []

    def connect(self):
        self.connected = True
        return self

    def close(self):
        self.connected = False
        self.close_calls += 1

    def get_table_list(self):
        return list(self.tables)

    def get_table_structure(self, table_name):
        columns, _ = self.tables[table_name]
        return [SourceColumnMeta(*col) for col in columns]

    def iter_batches(self, table_name, column_names, batch_size):
        self.scanned.append((table_name, list(column_names)))
        _, rows = self.tables[table_name]
        for start in range(0, len(rows), batch_size):
            yield [tuple(row) for row in rows[start:start + batch_size]]


class FakeWriter(DataWriter):
    """Records created tables and inserted rows."""

    def __init__(self, fail_insert_on=None, fail_connect=False):
        self.fail_insert_on = fail_insert_on
        self.fail_connect = fail_connect
        self.tables = {}
        self.rows = {}
        self.events = []
        self.connected = False
        self.close_calls = 0

    def connect(self):
        if self.fail_connect:
            raise RuntimeError("cannot create Access file")
        self.connected = True
        return self

    def close(self):
        self.connected = False
        self.close_calls += 1

    def create_table(self, table_spec):
        self.events.append(("create", table_spec.name))
        self.tables[table_spec.name] = table_spec
        self.rows[table_spec.name] = []

    def insert_rows(self, table_spec, rows):
        assert table_spec.name in self.tables, "insert before create"
        if table_spec.name == self.fail_insert_on:
            raise RuntimeError(f"integrity violation in {table_spec.name}")
        self.events.append(("insert", table_spec.name))
        self.rows[table_spec.name].extend(rows)


@pytest.fixture
def make_fetcher():
    return FakeFetcher


@pytest.fixture
def make_writer():
    return FakeWriter


@pytest.fixture
def example_tables():
    return {
        "t": (
            [("id", "INT", 10, 0), ("name", "VARCHAR", 50, 0), ("note", "TEXT", 65535, 0)],
            [(1, "Ann", None), (2, "Bo", "hi")],
        ),
    }
