"""Load run configuration from a properties file with environment overrides."""
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from dotenv import dotenv_values

from mysql_to_access_pkg.access_writer import DEFAULT_ODBC_DRIVER, FileFormat
from mysql_to_access_pkg.mysql_to_access_manager import DEFAULT_BATCH_SIZE

DEFAULT_CONFIG_FILE = "mysql_to_access.properties"

# property key -> environment variable that overrides it
ENV_OVERRIDES = {
    "host": "MYSQL_HOST",
    "port": "MYSQL_PORT",
    "user": "MYSQL_USER",
    "password": "MYSQL_PASSWORD",
    "database": "MYSQL_DATABASE",
    "fileFormat": "ACCESS_FILE_FORMAT",
    "overwriteExistingFile": "ACCESS_OVERWRITE_EXISTING_FILE",
}


class ConfigError(Exception):
    """Configuration file missing, unreadable or invalid."""


@dataclass
class MigrationConfig:
    mysql_config: Dict[str, Any] = field(default_factory=dict)
    file_format: Optional[FileFormat] = None
    overwrite_existing_file: bool = False
    odbc_driver: str = DEFAULT_ODBC_DRIVER
    batch_size: int = DEFAULT_BATCH_SIZE

    def preview(self) -> Dict[str, Any]:
        """Resolved settings with the password masked."""
        mysql_config = dict(self.mysql_config)
        if mysql_config.get("password"):
            mysql_config["password"] = "****"
        return {
            "mysql": mysql_config,
            "fileFormat": self.file_format.name if self.file_format else None,
            "overwriteExistingFile": self.overwrite_existing_file,
            "odbcDriver": self.odbc_driver,
            "batchSize": self.batch_size,
        }


def _clean(config):
    """Remove None values to keep connection calls happy."""
    return {k: v for k, v in config.items() if v is not None and v != ""}


def _is_true(value) -> bool:
    return str(value or "").strip().lower() == "true"


def _to_int(props, key, default):
    raw = props.get(key)
    if raw is None or str(raw).strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"Property '{key}' must be an integer, got '{raw}'")


def to_pymysql_charset(character_encoding: str) -> str:
    """Translate a Java-style encoding name into a MySQL charset name."""
    name = (character_encoding or "").strip().lower().replace("-", "")
    if name in ("utf8", "utf8mb4"):
        return "utf8mb4"
    return name


def read_properties(path: str) -> Dict[str, Optional[str]]:
    """Parse a key=value properties file."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            return dict(dotenv_values(stream=fh, interpolate=False))
    except OSError as e:
        raise ConfigError(f"Cannot read configuration file '{path}': {e}") from e


def load_config(path: str = DEFAULT_CONFIG_FILE, environ=None) -> MigrationConfig:
    """Build a MigrationConfig from the properties file at `path`."""
    environ = os.environ if environ is None else environ
    props = read_properties(path)

    for key, env_name in ENV_OVERRIDES.items():
        if environ.get(env_name) is not None:
            props[key] = environ[env_name]

    mysql_config = {
        "host": props.get("host") or "localhost",
        "port": _to_int(props, "port", 3306),
        "user": props.get("user") or "root",
        "password": props.get("password") or "",
        "database": props.get("database") or "mysql",
    }
    if _is_true(props.get("useUnicode") or "true"):
        mysql_config["charset"] = to_pymysql_charset(props.get("characterEncoding") or "UTF-8")

    file_format = None
    if props.get("fileFormat"):
        try:
            file_format = FileFormat[props["fileFormat"].strip().upper()]
        except KeyError:
            valid = ", ".join(f.name for f in FileFormat)
            raise ConfigError(f"Unknown fileFormat '{props['fileFormat']}' (expected one of {valid})")

    batch_size = _to_int(props, "batchSize", DEFAULT_BATCH_SIZE)
    if batch_size < 1:
        raise ConfigError(f"Property 'batchSize' must be positive, got {batch_size}")

    return MigrationConfig(
        mysql_config=_clean(mysql_config),
        file_format=file_format,
        overwrite_existing_file=_is_true(props.get("overwriteExistingFile")),
        odbc_driver=props.get("odbcDriver") or DEFAULT_ODBC_DRIVER,
        batch_size=batch_size,
    )
