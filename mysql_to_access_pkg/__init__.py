"""MySQL to Access migration package.

This package copies the tables of a MySQL database into a newly created
Microsoft Access (.mdb/.accdb) database file.
"""

from mysql_to_access_pkg.base import MigrationManager, DataFetcher, DataWriter
from mysql_to_access_pkg.config import MigrationConfig, ConfigError, load_config
from mysql_to_access_pkg.mysql_fetcher import MySQLFetcher
from mysql_to_access_pkg.access_writer import (
    AccessWriter,
    FileFormat,
    DestinationExistsError,
    DestinationDeleteError,
    resolve_access_path,
    check_destination,
    prepare_destination,
)
from mysql_to_access_pkg.mysql_to_access_manager import (
    SchemaTranslator,
    RowTransferEngine,
    RowTransferStats,
    MigrationResult,
    MySQLtoAccessMigrationManager,
)
from mysql_to_access_pkg.mysql_access_mapping import (
    DataType,
    SourceColumnMeta,
    DestColumnDef,
    TableSpec,
    UnmappedTypeError,
    map_mysql_to_access_type,
    to_access_ddl,
    convert_value,
    transform_data_types,
)

__all__ = [
    # Base classes
    "MigrationManager",
    "DataFetcher",
    "DataWriter",
    # Config
    "MigrationConfig",
    "ConfigError",
    "load_config",
    # Fetcher and Writer
    "MySQLFetcher",
    "AccessWriter",
    "FileFormat",
    "DestinationExistsError",
    "DestinationDeleteError",
    "resolve_access_path",
    "check_destination",
    "prepare_destination",
    # Migration
    "SchemaTranslator",
    "RowTransferEngine",
    "RowTransferStats",
    "MigrationResult",
    "MySQLtoAccessMigrationManager",
    # Mapping
    "DataType",
    "SourceColumnMeta",
    "DestColumnDef",
    "TableSpec",
    "UnmappedTypeError",
    "map_mysql_to_access_type",
    "to_access_ddl",
    "convert_value",
    "transform_data_types",
]

__version__ = "0.1.0"
