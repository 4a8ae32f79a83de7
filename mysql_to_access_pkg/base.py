from abc import ABC, abstractmethod
from typing import Any, Iterator, List, Sequence, Tuple


class MigrationManager(ABC):
    """Abstract base class for migrations that own a source and a target for one run."""

    @abstractmethod
    def create_connections(self) -> None:
        """Create connections to source and target."""
        pass

    @abstractmethod
    def close_connections(self) -> None:
        """Close all connections."""
        pass

    def __enter__(self):
        """Enter context manager - establish connections."""
        self.create_connections()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Exit context manager - close all connections."""
        self.close_connections()
        return False

    @abstractmethod
    def run(self) -> Any:
        """Migrate all tables."""
        pass


class DataFetcher(ABC):
    """Abstract base for data sources."""

    @abstractmethod
    def connect(self) -> Any:
        """Connect to data source and return connection object."""
        ...

    @abstractmethod
    def close(self) -> None:
        """Close connection to data source."""
        ...

    @abstractmethod
    def get_table_list(self) -> List[str]:
        """Get list of all base tables (views excluded)."""
        ...

    @abstractmethod
    def get_table_structure(self, table_name: str) -> List[Any]:
        """Get column metadata in engine-reported order."""
        ...

    @abstractmethod
    def iter_batches(self, table_name: str, column_names: Sequence[str],
                     batch_size: int) -> Iterator[List[Tuple[Any, ...]]]:
        """Stream all rows of a table in batches."""
        ...


class DataWriter(ABC):
    """Abstract base for data targets."""

    @abstractmethod
    def connect(self) -> Any:
        """Connect to data target and return connection object."""
        ...

    @abstractmethod
    def close(self) -> None:
        """Close connection to data target."""
        ...

    @abstractmethod
    def create_table(self, table_spec: Any) -> None:
        """Create table in target using the translated table definition."""
        ...

    @abstractmethod
    def insert_rows(self, table_spec: Any, rows: Sequence[Tuple[Any, ...]]) -> None:
        """Append rows to target table."""
        ...
